"""Access transform model: fail policies, scopes and the transform record itself."""

import threading
from dataclasses import dataclass, field
from enum import Enum, IntEnum

from .access_flags import EntityKind, Modifier, stringify


class FailPolicy(IntEnum):
    """
    Severity of a transform that cannot be applied.

    Ordered so that policies can be escalated with ``max()``.
    """

    SOFT = 0
    """``@`` prefix: apply best-effort, never report."""

    WARN = 1
    """Whitespace prefix: apply best-effort, log on mismatch."""

    HARD = 2
    """``!`` prefix: abort the whole entity on mismatch."""

    @classmethod
    def from_prefix(cls, prefix: str) -> "FailPolicy | None":
        """Get the policy selected by a line prefix, or None if the prefix is unknown."""
        if prefix.isspace():
            return cls.WARN
        if prefix == "@":
            return cls.SOFT
        if prefix == "!":
            return cls.HARD
        return None


class Scope(str, Enum):
    """When a transform is active."""

    ALL = "all"
    """The transform always occurs."""

    BUILD = "build"
    """Only at build/compile time and in development environments."""

    RUNTIME = "runtime"
    """Only at runtime."""

    DIALECT = "dialect"
    """A dialect-defined scope; recognised but never active here."""


STANDARD_SCOPE_NAMES: dict[str, Scope] = {
    "a": Scope.ALL,
    "all": Scope.ALL,
    "b": Scope.BUILD,
    "build": Scope.BUILD,
    "r": Scope.RUNTIME,
    "runtime": Scope.RUNTIME,
}


@dataclass(unsafe_hash=True)
class AccessTransform:
    """
    A single validated access transform.

    Identity is ``(origin, target, kind)``. ``policy`` and ``sources`` are
    metadata that only ever grow through :meth:`merge`.

    Attributes:
        origin: Modifier that must be present beforehand (NEGATE for none)
        target: Modifier that is present afterwards (NEGATE for none)
        kind: Most specific entity kind of the two modifiers
        policy: Effective fail policy
        sources: Namespaces that contributed this transform, in load order
    """

    origin: Modifier
    target: Modifier
    kind: EntityKind
    policy: FailPolicy = field(default=FailPolicy.WARN, compare=False)
    sources: list[str] = field(default_factory=list, compare=False)
    _lock: threading.Lock = field(default_factory=threading.Lock, compare=False, repr=False)

    @property
    def identity(self) -> tuple[Modifier, Modifier, EntityKind]:
        return (self.origin, self.target, self.kind)

    @property
    def is_assertion(self) -> bool:
        """True for ``X X`` transforms, which only verify that a modifier is present."""
        return not self.origin.is_negate and self.origin == self.target

    def merge(self, policy: FailPolicy, source: str) -> None:
        """Raise the policy to ``policy`` if higher and record ``source``."""
        with self._lock:
            if policy > self.policy:
                self.policy = policy
            if source not in self.sources:
                self.sources.append(source)

    def describe(self, kind: EntityKind | None = None) -> str:
        """Render the transform as ``origin -> target`` for diagnostics."""
        render_kind = kind or self.kind
        return f"{stringify(self.origin.bit, render_kind)} -> {stringify(self.target.bit, render_kind)}"

    def __str__(self) -> str:
        return self.describe()


__all__ = ["AccessTransform", "FailPolicy", "STANDARD_SCOPE_NAMES", "Scope"]
