"""
Access flag codec for the reversible access setter grammar.

Maps modifier tokens to JVM access flag bits and back. Every modifier
belongs to exactly one entity kind category; modifiers valid on more than
one kind of entity (e.g. ``public`` or ``final``) are classified as ANY.

Bit values follow the class file format (``ACC_*`` constants). ``record``
and ``deprecated`` use the pseudo flags that ASM exposes above the 16 bit
range of the class file.

Example:
    modifier, bit = parse_token("public")
    # (Modifier.PUBLIC, 0x0001)

    stringify(0x0009, EntityKind.METHOD)
    # "public static"
"""

from enum import Enum

from .exceptions import UnknownModifierError


class EntityKind(str, Enum):
    """Kinds of entities a modifier can target."""

    CLASS = "class"
    METHOD = "method"
    FIELD = "field"
    MODULE = "module"
    ANY = "any"  # No restriction, inferred from context

    def accepts(self, kind: "EntityKind") -> bool:
        """Check whether a modifier of this kind may be applied to ``kind``."""
        return self == EntityKind.ANY or self == kind


class Modifier(Enum):
    """
    Known access modifiers.

    Each value is a ``(token, bit, kind, alias)`` tuple. The alias is the
    canonical symbolic name of the flag (its ``ACC_*`` constant).
    """

    NEGATE = ("0", 0x0000, EntityKind.ANY, "0")

    PUBLIC = ("public", 0x0001, EntityKind.ANY, "ACC_PUBLIC")
    PRIVATE = ("private", 0x0002, EntityKind.ANY, "ACC_PRIVATE")
    PROTECTED = ("protected", 0x0004, EntityKind.ANY, "ACC_PROTECTED")
    STATIC = ("static", 0x0008, EntityKind.ANY, "ACC_STATIC")
    FINAL = ("final", 0x0010, EntityKind.ANY, "ACC_FINAL")
    SUPER = ("super", 0x0020, EntityKind.CLASS, "ACC_SUPER")
    SYNCHRONIZED = ("synchronized", 0x0020, EntityKind.METHOD, "ACC_SYNCHRONIZED")
    VOLATILE = ("volatile", 0x0040, EntityKind.FIELD, "ACC_VOLATILE")
    TRANSIENT = ("transient", 0x0080, EntityKind.FIELD, "ACC_TRANSIENT")
    VARARGS = ("varargs", 0x0080, EntityKind.METHOD, "ACC_VARARGS")
    NATIVE = ("native", 0x0100, EntityKind.METHOD, "ACC_NATIVE")
    INTERFACE = ("interface", 0x0200, EntityKind.CLASS, "ACC_INTERFACE")
    ABSTRACT = ("abstract", 0x0400, EntityKind.ANY, "ACC_ABSTRACT")
    STRICTFP = ("strictfp", 0x0800, EntityKind.METHOD, "ACC_STRICT")
    SYNTHETIC = ("synthetic", 0x1000, EntityKind.ANY, "ACC_SYNTHETIC")
    ANNOTATION = ("annotation", 0x2000, EntityKind.CLASS, "ACC_ANNOTATION")
    ENUM = ("enum", 0x4000, EntityKind.ANY, "ACC_ENUM")
    RECORD = ("record", 0x10000, EntityKind.CLASS, "ACC_RECORD")
    DEPRECATED = ("deprecated", 0x20000, EntityKind.ANY, "ACC_DEPRECATED")

    # Only meaningful inside module-info; always rejected by the parser
    OPEN = ("open", 0x0020, EntityKind.MODULE, "ACC_OPEN")
    TRANSITIVE = ("transitive", 0x0020, EntityKind.MODULE, "ACC_TRANSITIVE")
    STATIC_PHASE = ("static_phase", 0x0040, EntityKind.MODULE, "ACC_STATIC_PHASE")
    MANDATED = ("mandated", 0x8000, EntityKind.MODULE, "ACC_MANDATED")
    MODULE = ("module", 0x8000, EntityKind.MODULE, "ACC_MODULE")

    def __init__(self, token: str, bit: int, kind: EntityKind, alias: str) -> None:
        self.token = token
        self.bit = bit
        self.kind = kind
        self.alias = alias

    @property
    def is_negate(self) -> bool:
        return self is Modifier.NEGATE

    def __str__(self) -> str:
        return self.token


VISIBILITY_MODIFIERS = frozenset({Modifier.PUBLIC, Modifier.PRIVATE, Modifier.PROTECTED})
VISIBILITY_MASK = Modifier.PUBLIC.bit | Modifier.PRIVATE.bit | Modifier.PROTECTED.bit

_TOKEN_LOOKUP: dict[str, Modifier] = {}
for _modifier in Modifier:
    _TOKEN_LOOKUP[_modifier.token.lower()] = _modifier
    _TOKEN_LOOKUP[_modifier.alias.lower()] = _modifier
del _modifier


def parse_token(text: str) -> tuple[Modifier, int]:
    """
    Resolve a modifier token.

    Matching is case-insensitive against the modifier name and its
    symbolic alias. ``"0"`` resolves to ``Modifier.NEGATE`` with bit 0.

    Args:
        text: Token as written in the transform line

    Returns:
        Tuple of the resolved modifier and its bit value

    Raises:
        UnknownModifierError: If the token names no known modifier
    """
    modifier = _TOKEN_LOOKUP.get(text.lower())
    if modifier is None:
        raise UnknownModifierError(text)
    return modifier, modifier.bit


def kind_of(modifier: Modifier) -> EntityKind:
    """Get the entity kind category of a modifier."""
    return modifier.kind


def is_visibility(modifier: Modifier) -> bool:
    """Check whether the modifier is one of private, protected or public."""
    return modifier in VISIBILITY_MODIFIERS


def narrow_kinds(left: EntityKind, right: EntityKind) -> EntityKind:
    """
    Combine the kinds of two tokens into the most specific one.

    ANY yields to the other kind. Callers are expected to have checked the
    kinds for compatibility beforehand.
    """
    if left == EntityKind.ANY:
        return right
    return left


def stringify(bits: int, kind: EntityKind = EntityKind.ANY) -> str:
    """
    Render a set of access flags as modifier tokens.

    Bits shared between kinds (``super``/``synchronized``,
    ``transient``/``varargs``) are resolved through ``kind``. When ``kind``
    is ANY the first declared modifier claiming a bit is used.

    Args:
        bits: Access flags to render
        kind: Kind of the entity the flags belong to

    Returns:
        Space separated tokens, ``"0"`` for no flags. Bits that no modifier
        claims are appended as a hex literal.
    """
    if bits == 0:
        return Modifier.NEGATE.token

    tokens: list[str] = []
    remaining = bits
    for modifier in Modifier:
        if modifier.is_negate or modifier.kind == EntityKind.MODULE:
            continue
        if not remaining & modifier.bit:
            continue
        if kind == EntityKind.ANY or modifier.kind.accepts(kind):
            tokens.append(modifier.token)
            remaining &= ~modifier.bit

    if remaining:
        tokens.append(hex(remaining))

    return " ".join(tokens)


__all__ = [
    "EntityKind",
    "Modifier",
    "VISIBILITY_MASK",
    "VISIBILITY_MODIFIERS",
    "is_visibility",
    "kind_of",
    "narrow_kinds",
    "parse_token",
    "stringify",
]
