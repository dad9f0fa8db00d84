"""Tests for generator profiles."""

from __future__ import annotations

import pytest

from clientgen.config import DefaultPolicy, PrimitiveKind, load_profile


def _write(tmp_path, text):
    path = tmp_path / "profile.yaml"
    path.write_text(text, encoding="utf-8")
    return path


def test_presets():
    common = load_profile("common")
    legacy = load_profile("legacy")
    assert common.model_prefix == "CA"
    assert common.default_policy is DefaultPolicy.PATH_ONLY
    assert common.frozen_models
    assert legacy.model_prefix == "PSB"
    assert legacy.default_policy is DefaultPolicy.ALL
    assert not legacy.frozen_models


def test_unknown_profile():
    with pytest.raises(ValueError, match="Unknown profile"):
        load_profile("modern")


def test_overlay(tmp_path):
    path = _write(tmp_path, """
model_prefix: XY
default_policy: all
path_prefix: /api
name_aliases:
  type: aType
comment_replacements:
  bank: Bank
primitive_types:
  string/email: String
  number: Decimal
""")
    profile = load_profile("common", path)

    assert profile.model_prefix == "XY"
    assert profile.default_policy is DefaultPolicy.ALL
    assert profile.path_prefix == "/api"
    assert profile.name_aliases["type"] == "aType"
    assert profile.name_aliases["class"] == "aClass"
    assert profile.comment_replacements == {"bank": "Bank"}
    assert profile.primitive_types[("string", "email")] is PrimitiveKind.STRING
    assert profile.primitive_types[("number", None)] is PrimitiveKind.DECIMAL
    assert profile.primitive_types[("integer", "int64")] is PrimitiveKind.INT64


def test_empty_overlay(tmp_path):
    assert load_profile("legacy", _write(tmp_path, "")) == load_profile("legacy")


def test_unknown_setting(tmp_path):
    with pytest.raises(ValueError, match="colour"):
        load_profile("common", _write(tmp_path, "colour: blue\n"))


def test_bad_policy(tmp_path):
    with pytest.raises(ValueError):
        load_profile("common", _write(tmp_path, "default_policy: sometimes\n"))
