"""Tests for the named entity lookup table."""

import pytest

from entity_encoder.entities import (
    ENTITY_NAMES,
    ENTITY_TABLE,
    RESERVED_DELIMITERS,
    EntityEntry,
    codepoint_for,
    iter_entities,
    lookup,
    lookup_codepoint,
)


class TestTableContents:
    """The table holds the HTML 4.0 entity set plus &apos;."""

    def test_entry_count(self):
        assert len(ENTITY_TABLE) == 253

    def test_xml_predefined_entities(self):
        assert ENTITY_TABLE[0x22] == "quot"
        assert ENTITY_TABLE[0x26] == "amp"
        assert ENTITY_TABLE[0x27] == "apos"
        assert ENTITY_TABLE[0x3C] == "lt"
        assert ENTITY_TABLE[0x3E] == "gt"

    def test_latin1_supplement_is_complete(self):
        """Every code point from U+00A0 to U+00FF has a name."""
        for codepoint in range(0xA0, 0x100):
            assert codepoint in ENTITY_TABLE, f"U+{codepoint:04X} missing"
        assert ENTITY_TABLE[0xA0] == "nbsp"
        assert ENTITY_TABLE[0xFF] == "yuml"

    def test_code_point_range(self):
        assert min(ENTITY_TABLE) == 0x22
        assert max(ENTITY_TABLE) == 0x2666
        assert ENTITY_TABLE[0x2666] == "diams"

    def test_names_are_unique(self):
        assert len(ENTITY_NAMES) == len(ENTITY_TABLE)

    def test_case_sensitive_names(self):
        assert ENTITY_TABLE[0x391] == "Alpha"
        assert ENTITY_TABLE[0x3B1] == "alpha"
        assert ENTITY_TABLE[0x2020] == "dagger"
        assert ENTITY_TABLE[0x2021] == "Dagger"

    def test_table_is_read_only(self):
        with pytest.raises(TypeError):
            ENTITY_TABLE[0x41] = "A"


class TestLookup:
    """lookup() and lookup_codepoint() behaviour."""

    @pytest.mark.parametrize("char,name", [
        ("Δ", "Delta"),
        ("¢", "cent"),
        ("<", "lt"),
        ('"', "quot"),
        ("€", "euro"),
        ("—", "mdash"),
        ("♦", "diams"),
    ])
    def test_known_characters(self, char, name):
        assert lookup(char) == name

    def test_unknown_character_returns_none(self):
        assert lookup("a") is None
        assert lookup("★") is None
        assert lookup("\U0001F600") is None

    @pytest.mark.parametrize("char", [";", "&", "#"])
    def test_reserved_delimiters_never_resolve(self, char):
        """& is in the table as 'amp' but lookup must not return it."""
        assert lookup(char) is None
        assert lookup_codepoint(ord(char)) is None

    def test_reserved_set(self):
        assert RESERVED_DELIMITERS == {";", "&", "#"}

    def test_multi_character_string_returns_none(self):
        assert lookup("ab") is None
        assert lookup("") is None

    def test_lookup_codepoint(self):
        assert lookup_codepoint(0x394) == "Delta"
        assert lookup_codepoint(162) == "cent"
        assert lookup_codepoint(0x41) is None

    def test_lookup_codepoint_out_of_range(self):
        assert lookup_codepoint(0x110000) is None
        assert lookup_codepoint(-1) is None


class TestReverseLookup:

    def test_codepoint_for_name(self):
        assert codepoint_for("Delta") == 0x394
        assert codepoint_for("amp") == 0x26

    def test_codepoint_for_is_case_sensitive(self):
        assert codepoint_for("delta") == 0x3B4
        assert codepoint_for("DELTA") is None

    def test_codepoint_for_unknown(self):
        assert codepoint_for("bogus") is None
        assert codepoint_for("") is None

    def test_round_trip_over_table(self):
        """Name -> code point -> name reproduces every entry."""
        for codepoint, name in ENTITY_TABLE.items():
            assert codepoint_for(name) == codepoint


class TestIterEntities:

    def test_sorted_by_code_point(self):
        codepoints = [e.codepoint for e in iter_entities()]
        assert codepoints == sorted(codepoints)
        assert len(codepoints) == len(ENTITY_TABLE)

    def test_entry_helpers(self):
        entry = EntityEntry(0x394, "Delta")
        assert entry.char == "Δ"
        assert entry.reference == "&Delta;"
