"""Unit tests for the access flag codec."""

import pytest

from access_setter.engine.access_flags import (
    VISIBILITY_MASK,
    EntityKind,
    Modifier,
    is_visibility,
    kind_of,
    narrow_kinds,
    parse_token,
    stringify,
)
from access_setter.engine.exceptions import ParseError, UnknownModifierError


class TestParseToken:
    """Tests for modifier token resolution."""

    def test_modifier_name(self) -> None:
        assert parse_token("public") == (Modifier.PUBLIC, 0x0001)
        assert parse_token("synchronized") == (Modifier.SYNCHRONIZED, 0x0020)
        assert parse_token("deprecated") == (Modifier.DEPRECATED, 0x20000)

    def test_case_insensitive(self) -> None:
        assert parse_token("PUBLIC") == (Modifier.PUBLIC, 0x0001)
        assert parse_token("Final") == (Modifier.FINAL, 0x0010)

    def test_symbolic_alias(self) -> None:
        """The ACC_* constant names are accepted as aliases."""
        assert parse_token("ACC_STRICT") == (Modifier.STRICTFP, 0x0800)
        assert parse_token("acc_varargs") == (Modifier.VARARGS, 0x0080)
        assert parse_token("ACC_PUBLIC") == (Modifier.PUBLIC, 0x0001)

    def test_negate(self) -> None:
        assert parse_token("0") == (Modifier.NEGATE, 0)
        assert Modifier.NEGATE.is_negate

    def test_unknown_modifier(self) -> None:
        with pytest.raises(UnknownModifierError) as exc_info:
            parse_token("friendly")
        assert exc_info.value.token == "friendly"
        assert isinstance(exc_info.value, ParseError)

    def test_every_modifier_resolves_to_itself(self) -> None:
        for modifier in Modifier:
            assert parse_token(modifier.token) == (modifier, modifier.bit)
            assert parse_token(modifier.alias) == (modifier, modifier.bit)


class TestKinds:
    """Tests for modifier kind classification."""

    @pytest.mark.parametrize(
        ("modifier", "kind"),
        [
            (Modifier.NEGATE, EntityKind.ANY),
            (Modifier.PUBLIC, EntityKind.ANY),
            (Modifier.FINAL, EntityKind.ANY),
            (Modifier.SYNCHRONIZED, EntityKind.METHOD),
            (Modifier.NATIVE, EntityKind.METHOD),
            (Modifier.VOLATILE, EntityKind.FIELD),
            (Modifier.TRANSIENT, EntityKind.FIELD),
            (Modifier.INTERFACE, EntityKind.CLASS),
            (Modifier.RECORD, EntityKind.CLASS),
            (Modifier.OPEN, EntityKind.MODULE),
        ],
    )
    def test_kind_of(self, modifier: Modifier, kind: EntityKind) -> None:
        assert kind_of(modifier) == kind

    def test_any_accepts_everything(self) -> None:
        assert EntityKind.ANY.accepts(EntityKind.CLASS)
        assert EntityKind.ANY.accepts(EntityKind.FIELD)
        assert EntityKind.METHOD.accepts(EntityKind.METHOD)
        assert not EntityKind.METHOD.accepts(EntityKind.FIELD)

    def test_narrow_kinds(self) -> None:
        assert narrow_kinds(EntityKind.ANY, EntityKind.METHOD) == EntityKind.METHOD
        assert narrow_kinds(EntityKind.FIELD, EntityKind.ANY) == EntityKind.FIELD
        assert narrow_kinds(EntityKind.ANY, EntityKind.ANY) == EntityKind.ANY

    def test_visibility_group(self) -> None:
        assert is_visibility(Modifier.PUBLIC)
        assert is_visibility(Modifier.PROTECTED)
        assert is_visibility(Modifier.PRIVATE)
        assert not is_visibility(Modifier.STATIC)
        assert not is_visibility(Modifier.NEGATE)
        assert VISIBILITY_MASK == 0x0007


class TestStringify:
    """Tests for rendering flags back to tokens."""

    def test_no_flags(self) -> None:
        assert stringify(0) == "0"

    def test_multiple_flags(self) -> None:
        assert stringify(0x0009, EntityKind.METHOD) == "public static"

    def test_shared_bits_resolved_by_kind(self) -> None:
        assert stringify(0x0020, EntityKind.CLASS) == "super"
        assert stringify(0x0020, EntityKind.METHOD) == "synchronized"
        assert stringify(0x0080, EntityKind.FIELD) == "transient"
        assert stringify(0x0080, EntityKind.METHOD) == "varargs"

    def test_unknown_bits_rendered_as_hex(self) -> None:
        assert stringify(0x40000) == "0x40000"
        assert stringify(0x40001) == "public 0x40000"
