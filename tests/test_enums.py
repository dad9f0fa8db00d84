"""Tests for enum synthesis."""

import logging

import pytest

from clientgen.descriptors import EnumMember, NamingContext
from clientgen.enums import synthesize_enum
from clientgen.errors import MalformedEnumError

_CTX = NamingContext(owner="Account", member="status", location="definitions.Account.properties.status")


class TestDescriptionGrammar:
    def test_members_in_description_order(self, profile):
        node = {"enum": [1, 2], "description": "status (1 = active , 2 = closed)"}
        spec = synthesize_enum(node, _CTX, profile)
        assert spec.members == (EnumMember("active", 1), EnumMember("closed", 2))

    def test_order_not_sorted(self, profile):
        node = {"enum": [2, 1], "description": "(2 = Zeta , 1 = Alpha)"}
        spec = synthesize_enum(node, _CTX, profile)
        assert [m.name for m in spec.members] == ["zeta", "alpha"]

    def test_names_are_lower_camel(self, profile):
        node = {"enum": [0], "description": "Kind (0 = DebitCard)"}
        assert synthesize_enum(node, _CTX, profile).members[0].name == "debitCard"

    def test_last_parenthesized_span_wins(self, profile):
        node = {"enum": [1, 2], "description": "Type (deprecated) of card (1 = virtual , 2 = plastic)"}
        spec = synthesize_enum(node, _CTX, profile)
        assert [m.value for m in spec.members] == [1, 2]

    def test_alias_applied_to_member(self, profile):
        node = {"enum": [1, 2], "description": "(1 = Default , 2 = Class)"}
        spec = synthesize_enum(node, _CTX, profile)
        assert [m.name for m in spec.members] == ["aDefault", "aClass"]

    def test_synthetic_name(self, profile):
        node = {"enum": [1], "description": "(1 = one)"}
        assert synthesize_enum(node, _CTX, profile).name == "AccountStatus"

    def test_count_mismatch_warns(self, profile, caplog):
        node = {"enum": [1, 2, 3], "description": "(1 = a , 2 = b)"}
        with caplog.at_level(logging.WARNING, logger="clientgen.enums"):
            spec = synthesize_enum(node, _CTX, profile)
        assert len(spec.members) == 2
        assert "definitions.Account.properties.status" in caplog.text


class TestRawValues:
    def test_no_description(self, profile):
        spec = synthesize_enum({"enum": [1, 2, 3]}, _CTX, profile)
        assert spec.members == (
            EnumMember("el1", 1), EnumMember("el2", 2), EnumMember("el3", 3),
        )

    def test_description_without_markers(self, profile):
        spec = synthesize_enum({"enum": [3, 1], "description": "Plain text"}, _CTX, profile)
        assert [m.name for m in spec.members] == ["el3", "el1"]

    def test_negative_value(self, profile):
        spec = synthesize_enum({"enum": [-1]}, _CTX, profile)
        assert spec.members == (EnumMember("el_1", -1),)


class TestMalformed:
    def test_missing_parens(self, profile):
        node = {"enum": [1], "description": "1 = active"}
        with pytest.raises(MalformedEnumError) as exc_info:
            synthesize_enum(node, _CTX, profile)
        assert exc_info.value.location == "definitions.Account.properties.status"

    def test_unterminated(self, profile):
        with pytest.raises(MalformedEnumError):
            synthesize_enum({"enum": [1], "description": "(1 = active"}, _CTX, profile)

    def test_wrong_delimiter(self, profile):
        node = {"enum": [1, 2], "description": "(1 = active, 2 = closed)"}
        with pytest.raises(MalformedEnumError):
            synthesize_enum(node, _CTX, profile)

    def test_compact_delimiters(self, profile):
        node = {"enum": [1, 2], "description": "Status (1=active,2=closed)"}
        with pytest.raises(MalformedEnumError, match="1=active,2=closed"):
            synthesize_enum(node, _CTX, profile)

    def test_equals_outside_list_is_plain_text(self, profile):
        node = {"enum": [1, 2], "description": "a=b, see (docs)"}
        spec = synthesize_enum(node, _CTX, profile)
        assert [m.name for m in spec.members] == ["el1", "el2"]

    def test_segment_without_pair(self, profile):
        node = {"enum": [1, 2], "description": "(1 = active , closed)"}
        with pytest.raises(MalformedEnumError):
            synthesize_enum(node, _CTX, profile)

    def test_non_integer_raw_value(self, profile):
        with pytest.raises(MalformedEnumError):
            synthesize_enum({"enum": ["asc", "desc"]}, _CTX, profile)

    def test_duplicate_member(self, profile):
        node = {"enum": [1, 2], "description": "(1 = same , 2 = same)"}
        with pytest.raises(MalformedEnumError):
            synthesize_enum(node, _CTX, profile)

    def test_empty_enum(self, profile):
        with pytest.raises(MalformedEnumError):
            synthesize_enum({"enum": []}, _CTX, profile)
