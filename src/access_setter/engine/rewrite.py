"""
Rewriting of access setter documents after the target entities were renamed.

The emitter reparses a document with the regular TransformParser and
re-serializes it with every class name, member name and descriptor passed
through a NameResolver. Prefixes, scopes and access tokens are kept exactly
as written; comments, blank lines and the header are echoed verbatim.

Rewriting is advisory: a line that fails validation is logged and dropped,
the rest of the document is still emitted. Only a missing or malformed
header aborts the rewrite, since the input is then not an access setter.

Example:
    resolver = MappingResolver(classes={"a/B": "com/example/Foo"})
    remapped = rewrite(text, resolver, namespace="mymod.ras")
"""

import logging
import re
from collections.abc import Iterator, Mapping
from pathlib import Path
from typing import Protocol

from .access_flags import EntityKind
from .diagnostics import DiagnosticCode, DiagnosticLog, Severity, report
from .exceptions import MalformedHeaderError, ParseError
from .parser import Dialect, ParsedLine, TransformParser, is_ignorable, split_lines

logger = logging.getLogger(__name__)

_CLASS_REFERENCE = re.compile(r"L([^;<>]+);")


class NameResolver(Protocol):
    """Maps old entity names to new ones."""

    def map_class_name(self, name: str) -> str: ...

    def map_method_name(self, owner: str, name: str, desc: str) -> str: ...

    def map_method_descriptor(self, desc: str) -> str: ...

    def map_field_name(self, owner: str, name: str, desc: str) -> str: ...

    def map_field_descriptor(self, desc: str) -> str: ...


class IdentityResolver:
    """Resolver that keeps every name unchanged."""

    def map_class_name(self, name: str) -> str:
        return name

    def map_method_name(self, owner: str, name: str, desc: str) -> str:
        return name

    def map_method_descriptor(self, desc: str) -> str:
        return desc

    def map_field_name(self, owner: str, name: str, desc: str) -> str:
        return name

    def map_field_descriptor(self, desc: str) -> str:
        return desc


class MappingResolver:
    """
    Table driven resolver.

    Members are keyed by ``(owner, name, descriptor)`` using the names
    before remapping. Descriptors are remapped by substituting every
    ``L<class>;`` reference through the class table. Unmapped names are
    returned unchanged.
    """

    def __init__(
        self,
        classes: Mapping[str, str] | None = None,
        methods: Mapping[tuple[str, str, str], str] | None = None,
        fields: Mapping[tuple[str, str, str], str] | None = None,
    ) -> None:
        self.classes = dict(classes or {})
        self.methods = dict(methods or {})
        self.fields = dict(fields or {})

    def map_class_name(self, name: str) -> str:
        return self.classes.get(name, name)

    def _map_descriptor(self, desc: str) -> str:
        return _CLASS_REFERENCE.sub(lambda m: f"L{self.map_class_name(m.group(1))};", desc)

    def map_method_name(self, owner: str, name: str, desc: str) -> str:
        return self.methods.get((owner, name, desc), name)

    def map_method_descriptor(self, desc: str) -> str:
        return self._map_descriptor(desc)

    def map_field_name(self, owner: str, name: str, desc: str) -> str:
        return self.fields.get((owner, name, desc), name)

    def map_field_descriptor(self, desc: str) -> str:
        return self._map_descriptor(desc)


class RewriteEmitter:
    """
    Re-serializes access setter documents through a NameResolver.

    Attributes:
        resolver: Name resolver used for every identifier
        namespace: Label of the document in diagnostics
    """

    def __init__(
        self,
        resolver: NameResolver,
        namespace: str = "<string>",
        dialects: dict[str, Dialect] | None = None,
        extra_versions: tuple[str, ...] = (),
        diagnostics: DiagnosticLog | None = None,
    ) -> None:
        self.resolver = resolver
        self.namespace = namespace
        self.diagnostics = diagnostics
        self._parser = TransformParser(
            namespace,
            dialects=dialects,
            extra_versions=extra_versions,
            diagnostics=diagnostics,
        )

    def emit(self, parsed: ParsedLine) -> str:
        """Serialize a parsed line with its identifiers remapped."""
        owner = parsed.class_name
        tokens = [
            f"{parsed.prefix}{parsed.scope_token}",
            parsed.origin_token,
            parsed.target_token,
            self.resolver.map_class_name(owner),
        ]

        if parsed.member_name is not None and parsed.member_desc is not None:
            name, desc = parsed.member_name, parsed.member_desc
            if parsed.entity_kind == EntityKind.METHOD:
                tokens.append(self.resolver.map_method_name(owner, name, desc))
                tokens.append(self.resolver.map_method_descriptor(desc))
            else:
                tokens.append(self.resolver.map_field_name(owner, name, desc))
                tokens.append(self.resolver.map_field_descriptor(desc))

        return " ".join(tokens)

    def rewrite_lines(self, text: str) -> Iterator[str]:
        """
        Yield the rewritten document line by line.

        Raises:
            MalformedHeaderError: If the header is missing
            ParseError: If the header is malformed or unsupported
        """
        header_seen = False
        for line_number, line in split_lines(text):
            if is_ignorable(line):
                yield line
                continue

            if not header_seen:
                self._parser.parse_header(line, line_number)
                header_seen = True
                yield line
                continue

            try:
                parsed = self._parser.parse_line(line, line_number)
            except ParseError as e:
                report(
                    logger,
                    self.diagnostics,
                    Severity.ERROR,
                    DiagnosticCode.LINE_DROPPED,
                    f"Dropping line {line_number} of namespace \"{self.namespace}\": {e.reason}",
                    namespace=self.namespace,
                    line_number=line_number,
                )
                continue

            yield self.emit(parsed)

        if not header_seen:
            raise MalformedHeaderError(
                "Input exhausted before reaching the RAS header", self.namespace
            )

    def rewrite(self, text: str) -> str:
        """Rewrite a complete document. Every emitted line ends with ``\\n``."""
        return "".join(f"{line}\n" for line in self.rewrite_lines(text))


def rewrite(
    text: str,
    resolver: NameResolver,
    namespace: str = "<string>",
    diagnostics: DiagnosticLog | None = None,
) -> str:
    """Rewrite ``text`` through ``resolver``. See RewriteEmitter."""
    return RewriteEmitter(resolver, namespace, diagnostics=diagnostics).rewrite(text)


def rewrite_file(
    source: str | Path,
    destination: str | Path,
    resolver: NameResolver,
    namespace: str | None = None,
    diagnostics: DiagnosticLog | None = None,
) -> Path:
    """
    Rewrite the access setter at ``source`` into ``destination``.

    Parent directories of ``destination`` are created as needed.

    Args:
        source: Path of the document to rewrite
        destination: Path to write the rewritten document to
        resolver: Name resolver
        namespace: Label for diagnostics (defaults to the source file name)
        diagnostics: Optional structured diagnostic sink

    Returns:
        The destination path

    Raises:
        ParseError: If the header is missing or malformed
        OSError: If reading or writing fails
    """
    source_path = Path(source)
    destination_path = Path(destination)

    with open(source_path, encoding="utf-8") as f:
        text = f.read()

    rewritten = rewrite(text, resolver, namespace or source_path.name, diagnostics)

    destination_path.parent.mkdir(parents=True, exist_ok=True)
    with open(destination_path, "w", encoding="utf-8", newline="\n") as f:
        f.write(rewritten)

    logger.info(f"Rewrote access setter {source_path} -> {destination_path}")
    return destination_path


__all__ = [
    "IdentityResolver",
    "MappingResolver",
    "NameResolver",
    "RewriteEmitter",
    "rewrite",
    "rewrite_file",
]
