"""Tests for the naming module."""

from clientgen.naming import (
    build_method_name,
    clean_comment,
    first_to_lower,
    first_to_upper,
    group_class_name,
    group_key,
    map_name,
    module_name,
    sanitize_identifier,
)

_ALIASES = {"class": "aClass", "default": "aDefault"}


class TestBuildMethodName:
    """Test client method names from HTTP method + path."""

    def test_single_segment_after_group(self):
        assert build_method_name("get", "/user/get") == "getGet"

    def test_verb_is_lowercased(self):
        assert build_method_name("POST", "/user/update") == "postUpdate"

    def test_placeholder_braces_stripped(self):
        assert build_method_name("put", "/card/{id}/block") == "putIdBlock"

    def test_hyphens_become_underscores(self):
        assert build_method_name("get", "/user/avatar-small-x") == "getAvatar_small_x"

    def test_group_only_path(self):
        assert build_method_name("get", "/card") == "get"

    def test_prefix_is_skipped(self):
        assert build_method_name("get", "/api/v1/user/list", prefix="/api/v1") == "getList"

    def test_valid_python_identifier(self):
        name = build_method_name("get", "/files/{file.name}/download.json")
        assert name.isidentifier()


class TestGroupKey:
    """Test the grouping key rule."""

    def test_first_segment(self):
        assert group_key("/user/get") == "user"
        assert group_key("/user/update") == "user"

    def test_placeholder_segment(self):
        assert group_key("/{tenant}/items") == "{tenant}"

    def test_prefix_stripped(self):
        assert group_key("/api/v1/card/list", prefix="/api/v1") == "card"

    def test_prefix_mismatch_is_ignored(self):
        assert group_key("/card/list", prefix="/api/v1") == "card"

    def test_root_path(self):
        assert group_key("/") == ""


class TestNames:
    def test_first_to_upper(self):
        assert first_to_upper("userName") == "UserName"
        assert first_to_upper("") == ""

    def test_first_to_lower(self):
        assert first_to_lower("Active") == "active"

    def test_alias_table(self):
        assert map_name("class", _ALIASES) == "aClass"
        assert map_name("default", _ALIASES) == "aDefault"

    def test_python_keyword(self):
        assert map_name("from", _ALIASES) == "aFrom"

    def test_reserved_names(self):
        assert map_name("mock", _ALIASES, reserved={"mock"}) == "aMock"
        assert map_name("mock", _ALIASES) == "mock"

    def test_plain_name_untouched(self):
        assert map_name("userName", _ALIASES) == "userName"

    def test_group_class_name(self):
        assert group_class_name("user", "Api") == "UserApi"
        assert group_class_name("bank-cards", "Api") == "Bank_cardsApi"

    def test_module_name(self):
        assert module_name("UserDTO") == "user_dto"
        assert module_name("cardLimits") == "card_limits"

    def test_sanitize_identifier(self):
        assert sanitize_identifier("first name") == "first_name"
        assert sanitize_identifier("1st") == "_1st"

    def test_clean_comment(self):
        text = "Card of PSB\r\nclient "
        assert clean_comment(text, {"psb": "bnk"}) == "Card of bnkclient"
