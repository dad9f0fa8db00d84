"""Tests for document loading."""

from __future__ import annotations

import json

import yaml

from clientgen.loader import get_definitions, load_spec, parse_document


def test_load_json(tmp_path, sample_spec):
    path = tmp_path / "api.json"
    path.write_text(json.dumps(sample_spec), encoding="utf-8")
    assert load_spec(path) == sample_spec


def test_load_yaml(tmp_path, sample_spec):
    path = tmp_path / "api.yaml"
    path.write_text(yaml.safe_dump(sample_spec), encoding="utf-8")
    assert load_spec(path) == sample_spec


def test_components_fallback():
    spec = {"components": {"schemas": {"Card": {"type": "object"}}}}
    assert get_definitions(spec) == {"Card": {"type": "object"}}


def test_parse_document(sample_spec):
    sample_spec["paths"]["/user/get"]["parameters"] = [{"name": "shared", "in": "query"}]
    document = parse_document(sample_spec)

    assert document.title == "Bank API"
    assert document.version == "1.2"
    assert list(document.definitions) == ["User", "Address"]
    templates = [template for template, _ in document.paths]
    assert templates == ["/user/get", "/user/update", "/card/{id}/block"]
    assert list(document.paths[0][1]) == ["get"]


def test_parse_empty_document():
    document = parse_document({"paths": None, "definitions": None})
    assert document.paths == []
    assert document.definitions == {}
