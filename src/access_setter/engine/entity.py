"""Entity access model consumed by the application engine.

The class file reader/writer is an external collaborator. It only has to
expose records matching the protocols below: mutable integer ``access``
flags plus read-only names and descriptors. The dataclasses in this module
are a plain in-memory implementation of the protocols, used by tests and by
callers that build their own class model.
"""

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import Protocol


class MemberRecord(Protocol):
    """A method or field of a class."""

    access: int

    @property
    def name(self) -> str: ...

    @property
    def desc(self) -> str: ...


class InnerClassRecord(Protocol):
    """Entry of a class's inner class table, mirroring another class's flags."""

    access: int

    @property
    def name(self) -> str: ...


class ClassRecord(Protocol):
    """A class together with its members and inner class table."""

    access: int

    @property
    def name(self) -> str: ...

    @property
    def methods(self) -> Sequence[MemberRecord]: ...

    @property
    def fields(self) -> Sequence[MemberRecord]: ...

    @property
    def inner_classes(self) -> Sequence[InnerClassRecord]: ...


@dataclass
class MethodNode:
    name: str
    desc: str
    access: int = 0


@dataclass
class FieldNode:
    name: str
    desc: str
    access: int = 0


@dataclass
class InnerClassNode:
    name: str
    access: int = 0
    outer_name: str | None = None
    inner_name: str | None = None


@dataclass
class ClassNode:
    """In-memory class record.

    Example:
        node = ClassNode(
            "com/example/Foo",
            access=0x0001,
            methods=[MethodNode("run", "()V", access=0x0002)],
        )
    """

    name: str
    access: int = 0
    methods: list[MethodNode] = field(default_factory=list)
    fields: list[FieldNode] = field(default_factory=list)
    inner_classes: list[InnerClassNode] = field(default_factory=list)

    def find_method(self, name: str, desc: str) -> MethodNode | None:
        return next((m for m in self.methods if m.name == name and m.desc == desc), None)

    def find_field(self, name: str, desc: str) -> FieldNode | None:
        return next((f for f in self.fields if f.name == name and f.desc == desc), None)


__all__ = [
    "ClassNode",
    "ClassRecord",
    "FieldNode",
    "InnerClassNode",
    "InnerClassRecord",
    "MemberRecord",
    "MethodNode",
]
