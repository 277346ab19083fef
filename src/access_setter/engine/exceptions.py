"""Exceptions raised while parsing and applying reversible access setters.

Exception Hierarchy:
    AccessSetterError (base)
    ├── ParseError (fatal to the load call, nothing from the file is registered)
    │   ├── MalformedHeaderError
    │   ├── UnsupportedVersionError
    │   ├── UnsupportedDialectError
    │   ├── MalformedLineError
    │   │   └── InvalidPrefixError
    │   ├── UnknownScopeError
    │   ├── UnknownModifierError
    │   ├── KindMismatchError
    │   ├── ModuleNotSupportedError
    │   └── IncompatibleAccessesError
    ├── OriginMismatchError (apply time, severity decided by the fail policy)
    └── TransformFailure (a hard transform could not be applied)

Example:
    >>> try:
    ...     registry.load("mymod", text)
    ... except ParseError as e:
    ...     print(f"{e.namespace}:{e.line_number}: {e.reason}")
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .access_flags import Modifier


class AccessSetterError(Exception):
    """Base exception for all reversible access setter errors."""

    pass


class ParseError(AccessSetterError):
    """
    A reversible access setter could not be parsed.

    Attributes:
        reason: Human-readable description of the problem
        namespace: Namespace of the file being parsed (None if not yet known)
        line_number: 1-based line number of the offending line (None if unknown)
    """

    def __init__(
        self,
        reason: str,
        namespace: str | None = None,
        line_number: int | None = None,
    ) -> None:
        self.reason = reason
        self.namespace = namespace
        self.line_number = line_number

        location = ""
        if line_number is not None:
            location += f" in line {line_number}"
        if namespace is not None:
            location += f" of namespace \"{namespace}\""

        super().__init__(f"Malformed reversible access setter{location}: {reason}")

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(reason={self.reason!r}, "
            f"namespace={self.namespace!r}, line={self.line_number})"
        )


class MalformedHeaderError(ParseError):
    """The ``RAS <version> <dialect>`` header is missing or malformed."""

    pass


class UnsupportedVersionError(ParseError):
    """The header requests a format version this implementation cannot read."""

    def __init__(
        self,
        version: str,
        supported: Iterable[str],
        namespace: str | None = None,
        line_number: int | None = None,
    ) -> None:
        self.version = version
        self.supported = sorted(supported)
        super().__init__(
            f"Format version '{version}' is not supported, expected one of {self.supported}",
            namespace,
            line_number,
        )


class UnsupportedDialectError(ParseError):
    """The header requests a dialect this implementation does not know."""

    def __init__(
        self,
        dialect: str,
        supported: Iterable[str],
        namespace: str | None = None,
        line_number: int | None = None,
    ) -> None:
        self.dialect = dialect
        self.supported = sorted(supported)
        super().__init__(
            f"Format dialect '{dialect}' is not supported, expected one of {self.supported}",
            namespace,
            line_number,
        )


class MalformedLineError(ParseError):
    """A transform line has the wrong length or number of parts."""

    pass


class InvalidPrefixError(MalformedLineError):
    """A transform line starts with an unknown special prefix."""

    pass


class UnknownScopeError(ParseError):
    """A transform line names a scope unknown to the active dialect."""

    pass


class UnknownModifierError(ParseError):
    """
    A token does not name any known access modifier.

    Attributes:
        token: The unresolvable token
    """

    def __init__(
        self,
        token: str,
        namespace: str | None = None,
        line_number: int | None = None,
    ) -> None:
        self.token = token
        super().__init__(f"Unknown access modifier '{token}'", namespace, line_number)


class KindMismatchError(ParseError):
    """A modifier cannot be applied to the kind of entity the line targets."""

    pass


class ModuleNotSupportedError(ParseError):
    """A modifier only applies to module-info entries, which cannot be transformed."""

    pass


class IncompatibleAccessesError(ParseError):
    """Origin and target name two different modifiers."""

    pass


class OriginMismatchError(AccessSetterError):
    """
    The current flags of an entity do not satisfy a transform's precondition.

    Attributes:
        expected: Modifier the transform expects to be present
        actual: Access flags the entity actually has
        actual_text: The actual flags rendered as modifier tokens
    """

    def __init__(self, expected: Modifier, actual: int, actual_text: str) -> None:
        self.expected = expected
        self.actual = actual
        self.actual_text = actual_text
        super().__init__(f"Expected access '{expected.token}', but got '{actual_text}'")

    def __repr__(self) -> str:
        return f"OriginMismatchError(expected={self.expected.token!r}, actual={self.actual:#x})"


class TransformFailure(AccessSetterError):  # noqa: N818
    """
    A transform marked as failing hard (``!`` prefix) could not be applied.

    Attributes:
        transform: Rendered form of the offending transform
        sources: Every namespace that contributed the transform
        target: Description of the entity the transform failed on
        cause: The underlying origin mismatch
    """

    def __init__(
        self,
        transform: str,
        sources: list[str],
        target: str,
        cause: OriginMismatchError,
    ) -> None:
        self.transform = transform
        self.sources = list(sources)
        self.target = target
        self.cause = cause
        super().__init__(
            f"Access transform \"{transform}\" from namespaces {self.sources} "
            f"failed for {target}: {cause}"
        )

    def __repr__(self) -> str:
        return (
            f"TransformFailure(transform={self.transform!r}, "
            f"sources={self.sources!r}, target={self.target!r})"
        )


__all__ = [
    "AccessSetterError",
    "IncompatibleAccessesError",
    "InvalidPrefixError",
    "KindMismatchError",
    "MalformedHeaderError",
    "MalformedLineError",
    "ModuleNotSupportedError",
    "OriginMismatchError",
    "ParseError",
    "TransformFailure",
    "UnknownModifierError",
    "UnknownScopeError",
    "UnsupportedDialectError",
    "UnsupportedVersionError",
]
