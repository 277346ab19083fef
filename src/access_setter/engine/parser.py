"""
Parser for the reversible access setter (RAS) text format.

Format:
    # comments and blank lines may appear anywhere, including before the header
    RAS <version> <dialect>
    <prefix><scope> <origin> <target> <class>
    <prefix><scope> <origin> <target> <class> <member> <descriptor>

The prefix selects the fail policy (`` `` warn, ``@`` soft, ``!`` hard).
A missing prefix is tolerated when the line starts directly with one of the
standard scope names; the line is then normalised to the warn prefix and a
warning is emitted.

The parser only validates and tokenizes. Scope filtering, reversal-aware
registration and merging happen in the RuleRegistry; the RewriteEmitter
reuses the parser to re-serialize lines.

Example:
    parser = TransformParser("mymod")
    for parsed in parser.parse(text):
        print(parsed.class_name, parsed.origin, parsed.target)
"""

import logging
import re
from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

from .access_flags import EntityKind, Modifier, narrow_kinds, parse_token
from .diagnostics import DiagnosticCode, DiagnosticLog, Severity, report
from .exceptions import (
    IncompatibleAccessesError,
    InvalidPrefixError,
    KindMismatchError,
    MalformedHeaderError,
    MalformedLineError,
    ModuleNotSupportedError,
    UnknownModifierError,
    UnknownScopeError,
    UnsupportedDialectError,
    UnsupportedVersionError,
)
from .transform import STANDARD_SCOPE_NAMES, AccessTransform, FailPolicy, Scope

logger = logging.getLogger(__name__)

HEADER_MAGIC = "RAS"
MIN_LINE_LENGTH = 9
SUPPORTED_VERSIONS = frozenset({"1", "v1", "1.0", "v1.0"})
FORWARD_COMPATIBLE_VERSIONS = frozenset({"1.1", "v1.1"})

# Stands in for a whitespace prefix so that split() keeps the scope in parts[0]
_PREFIX_PLACEHOLDER = "0"
_LENIENT_SCOPE = re.compile(r"^(?:a|b|r|all|build|runtime)\s")
_DIALECT_SCOPE = re.compile(r"^[A-Za-z]+$")


@dataclass(frozen=True)
class Dialect:
    """
    A RAS dialect.

    Dialects may define additional scope names (ASCII letters only). Lines
    using them are valid but never active in this implementation.
    """

    name: str
    extra_scopes: frozenset[str] = field(default_factory=frozenset)

    def __post_init__(self) -> None:
        for scope in self.extra_scopes:
            if not _DIALECT_SCOPE.match(scope):
                raise ValueError(
                    f"Dialect '{self.name}' scope '{scope}' must consist of ASCII letters only"
                )
            if scope in STANDARD_SCOPE_NAMES:
                raise ValueError(
                    f"Dialect '{self.name}' scope '{scope}' shadows a standard scope name"
                )


STANDARD_DIALECTS: dict[str, Dialect] = {
    "std": Dialect("std"),
    "starrian": Dialect("starrian"),
}


@dataclass(frozen=True)
class Header:
    """Parsed ``RAS <version> <dialect>`` header."""

    version: str
    dialect: Dialect
    line_number: int


@dataclass(frozen=True)
class ParsedLine:
    """
    A validated transform line.

    ``origin``/``target`` are already swapped when the line was parsed in
    reversed mode; ``origin_token``/``target_token`` are always the tokens
    as written.
    """

    line_number: int
    prefix: str
    scope_token: str
    scope: Scope
    policy: FailPolicy
    origin_token: str
    target_token: str
    origin: Modifier
    target: Modifier
    kind: EntityKind
    entity_kind: EntityKind
    class_name: str
    member_name: str | None = None
    member_desc: str | None = None

    @property
    def is_member(self) -> bool:
        return self.member_name is not None

    @property
    def member_key(self) -> tuple[str, str] | None:
        if self.member_name is None or self.member_desc is None:
            return None
        return (self.member_name, self.member_desc)

    def to_transform(self, source: str, policy: FailPolicy | None = None) -> AccessTransform:
        """Create the registry transform for this line."""
        return AccessTransform(
            origin=self.origin,
            target=self.target,
            kind=self.kind,
            policy=self.policy if policy is None else policy,
            sources=[source],
        )


def is_ignorable(line: str) -> bool:
    """Blank lines and ``#`` comments carry no transform."""
    return not line.strip() or line[0] == "#"


def split_lines(text: str) -> Iterator[tuple[int, str]]:
    """Yield ``(line_number, line)`` pairs, 1-based, without line terminators."""
    for index, line in enumerate(text.splitlines(), start=1):
        yield index, line


class TransformParser:
    """
    Tokenizer and validator for one RAS namespace.

    Attributes:
        namespace: Label used in diagnostics and errors
        dialect: Dialect selected by the header (None until parsed)
    """

    def __init__(
        self,
        namespace: str,
        dialects: dict[str, Dialect] | None = None,
        extra_versions: Iterable[str] = (),
        diagnostics: DiagnosticLog | None = None,
    ) -> None:
        self.namespace = namespace
        self.dialects = STANDARD_DIALECTS if dialects is None else dialects
        self.versions = SUPPORTED_VERSIONS | FORWARD_COMPATIBLE_VERSIONS | set(extra_versions)
        self.diagnostics = diagnostics
        self.dialect: Dialect | None = None

    # ------------------------------------------------------------------
    # Header
    # ------------------------------------------------------------------

    def parse_header(self, line: str, line_number: int) -> Header:
        """
        Parse and validate the ``RAS <version> <dialect>`` header.

        Raises:
            MalformedHeaderError: If the line is not a RAS header
            UnsupportedVersionError: If the version is unknown
            UnsupportedDialectError: If the dialect is unknown
        """
        if not line.startswith(HEADER_MAGIC):
            raise MalformedHeaderError(
                f"Header should begin with \"{HEADER_MAGIC}\"", self.namespace, line_number
            )

        parts = line.split()
        if len(parts) != 3:
            raise MalformedHeaderError(
                "Expected format \"RAS <format-version> <format-dialect>\"",
                self.namespace,
                line_number,
            )

        _, version, dialect_name = parts
        if parts[0] != HEADER_MAGIC:
            raise MalformedHeaderError(
                f"Header should begin with \"{HEADER_MAGIC}\"", self.namespace, line_number
            )
        if version not in self.versions:
            raise UnsupportedVersionError(version, self.versions, self.namespace, line_number)

        dialect = self.dialects.get(dialect_name)
        if dialect is None:
            raise UnsupportedDialectError(
                dialect_name, self.dialects.keys(), self.namespace, line_number
            )

        self.dialect = dialect
        return Header(version=version, dialect=dialect, line_number=line_number)

    # ------------------------------------------------------------------
    # Transform lines
    # ------------------------------------------------------------------

    def _canonical_prefix(self, line: str) -> FailPolicy | None:
        return FailPolicy.from_prefix(line[0])

    def _normalize_prefix(self, line: str, line_number: int) -> str:
        """Inject the warn prefix into a line that starts directly with a scope."""
        if not _LENIENT_SCOPE.match(line):
            raise InvalidPrefixError(
                f"Invalid prefix {line[0]!r}", self.namespace, line_number
            )

        report(
            logger,
            self.diagnostics,
            Severity.WARNING,
            DiagnosticCode.LENIENT_PREFIX,
            f"Malformed reversible access setter transform in line {line_number} of namespace "
            f"\"{self.namespace}\": Special prefixes are not optional. Consider adding one to "
            f"prevent failures in other implementations.",
            namespace=self.namespace,
            line_number=line_number,
        )
        return " " + line

    def _parse_scope(self, token: str, line_number: int) -> Scope:
        if not token:
            raise UnknownScopeError("Empty scope", self.namespace, line_number)

        scope = STANDARD_SCOPE_NAMES.get(token)
        if scope is not None:
            return scope

        if self.dialect is not None and token in self.dialect.extra_scopes:
            return Scope.DIALECT

        raise UnknownScopeError(
            f"Unknown scope \"{token}\". Make sure you use the right dialect!",
            self.namespace,
            line_number,
        )

    def _parse_modifier(self, token: str, line_number: int) -> Modifier:
        try:
            modifier, _ = parse_token(token)
        except UnknownModifierError as e:
            raise UnknownModifierError(e.token, self.namespace, line_number) from e
        return modifier

    def parse_line(self, line: str, line_number: int, reversed: bool = False) -> ParsedLine:
        """
        Tokenize and validate a single transform line.

        The line must already be known to be neither blank nor a comment.

        Args:
            line: Raw line text
            line_number: 1-based line number for diagnostics
            reversed: Swap origin and target to derive the inverse transform

        Returns:
            The validated line

        Raises:
            ParseError: Any subclass describing the first problem found
        """
        if len(line) < MIN_LINE_LENGTH:
            raise MalformedLineError(
                f"The smallest possible line length is {MIN_LINE_LENGTH} characters, "
                f"but got {len(line)} chars instead",
                self.namespace,
                line_number,
            )

        policy = self._canonical_prefix(line)
        if policy is None:
            line = self._normalize_prefix(line, line_number)
            policy = self._canonical_prefix(line)
            assert policy is not None

        prefix = line[0]
        body = line[1:].rstrip()
        parts = (_PREFIX_PLACEHOLDER + body).split()

        scope_token = parts[0][1:]
        scope = self._parse_scope(scope_token, line_number)

        if len(parts) not in (4, 6):
            raise MalformedLineError(
                "Expected format \"<prefix><scope> <origin> <target> <class>\" or "
                "\"<prefix><scope> <origin> <target> <class> <member> <descriptor>\" "
                f"(consists of {len(parts)} parts, but expected 4 or 6 parts)",
                self.namespace,
                line_number,
            )

        origin_token, target_token = parts[1], parts[2]
        origin = self._parse_modifier(origin_token, line_number)
        target = self._parse_modifier(target_token, line_number)
        if reversed:
            origin, target = target, origin

        if not origin.is_negate and not target.is_negate and origin != target:
            raise IncompatibleAccessesError(
                f"Incompatible accesses '{origin.token}' and '{target.token}'",
                self.namespace,
                line_number,
            )

        if EntityKind.MODULE in (origin.kind, target.kind):
            raise ModuleNotSupportedError(
                "This access can only be applied on module-info entries, which cannot be changed",
                self.namespace,
                line_number,
            )

        member_name: str | None = None
        member_desc: str | None = None
        if len(parts) == 4:
            entity_kind = EntityKind.CLASS
        else:
            member_name, member_desc = parts[4], parts[5]
            entity_kind = EntityKind.METHOD if member_desc.startswith("(") else EntityKind.FIELD

        if not origin.kind.accepts(entity_kind) or not target.kind.accepts(entity_kind):
            raise KindMismatchError(
                f"This access cannot be applied to a {entity_kind.value}",
                self.namespace,
                line_number,
            )

        return ParsedLine(
            line_number=line_number,
            prefix=prefix,
            scope_token=scope_token,
            scope=scope,
            policy=policy,
            origin_token=origin_token,
            target_token=target_token,
            origin=origin,
            target=target,
            kind=narrow_kinds(origin.kind, target.kind),
            entity_kind=entity_kind,
            class_name=parts[3],
            member_name=member_name,
            member_desc=member_desc,
        )

    def parse(self, text: str, reversed: bool = False) -> Iterator[ParsedLine]:
        """
        Parse a complete RAS document.

        Raises:
            ParseError: On the first invalid header or line
        """
        lines = split_lines(text)
        header_seen = False
        for line_number, line in lines:
            if is_ignorable(line):
                continue
            if not header_seen:
                self.parse_header(line, line_number)
                header_seen = True
                continue
            yield self.parse_line(line, line_number, reversed)

        if not header_seen:
            raise MalformedHeaderError(
                "Input exhausted before reaching the RAS header", self.namespace
            )


__all__ = [
    "Dialect",
    "FORWARD_COMPATIBLE_VERSIONS",
    "Header",
    "MIN_LINE_LENGTH",
    "ParsedLine",
    "STANDARD_DIALECTS",
    "SUPPORTED_VERSIONS",
    "TransformParser",
    "is_ignorable",
    "split_lines",
]
