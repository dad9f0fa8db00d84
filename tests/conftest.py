"""Shared fixtures for clientgen tests.

The sample document is a small Swagger 2.0 API exercising every resolver
branch: described and undescribed enums, arrays of enums, references in
both directions between two definitions, aliased property names, dotted
parameter names and a date-typed query parameter.
"""

from __future__ import annotations

import copy
from typing import Any

import pytest

from clientgen.config import load_profile
from clientgen.loader import parse_document


# ---------------------------------------------------------------------------
# Sample document
# ---------------------------------------------------------------------------

SAMPLE_SPEC: dict[str, Any] = {
    "swagger": "2.0",
    "info": {"title": "Bank API", "version": "1.2"},
    "definitions": {
        "User": {
            "type": "object",
            "description": "A bank customer",
            "required": ["id", "name"],
            "properties": {
                "id": {"type": "integer", "format": "int64"},
                "name": {"type": "string"},
                "status": {
                    "type": "integer",
                    "enum": [1, 2],
                    "description": "status (1 = active , 2 = closed)",
                },
                "roles": {"type": "array", "items": {"type": "integer", "enum": [1, 2, 3]}},
                "address": {"$ref": "#/definitions/Address"},
                "balance": {"type": "number", "format": "double"},
                "createdAt": {"type": "string", "format": "date-time"},
                "class": {"type": "string"},
                "extra": {"type": "object"},
            },
        },
        "Address": {
            "type": "object",
            "properties": {
                "city": {"type": "string"},
                "owner": {"$ref": "#/definitions/User"},
            },
        },
    },
    "paths": {
        "/user/get": {
            "get": {
                "summary": "Get user",
                "parameters": [{"name": "id", "in": "query", "type": "integer"}],
                "responses": {"200": {"schema": {"$ref": "#/definitions/User"}}},
            },
        },
        "/user/update": {
            "post": {
                "parameters": [
                    {"name": "body", "in": "body", "schema": {"$ref": "#/definitions/User"}},
                ],
                "responses": {"200": {"schema": {"type": "boolean"}}},
            },
        },
        "/card/{id}/block": {
            "put": {
                "summary": "Block a card",
                "parameters": [
                    {"name": "id", "in": "path", "type": "integer"},
                    {"name": "reason", "in": "query", "type": "integer", "enum": [1, 2]},
                    {"name": "filter.from", "in": "query", "type": "string", "format": "date-time"},
                ],
                "responses": {"200": {"schema": {"type": "string"}}},
            },
        },
    },
}


@pytest.fixture
def sample_spec() -> dict[str, Any]:
    """A fresh copy of the sample document, safe to mutate."""
    return copy.deepcopy(SAMPLE_SPEC)


@pytest.fixture
def document(sample_spec):
    return parse_document(sample_spec)


@pytest.fixture
def profile():
    return load_profile("common")


@pytest.fixture
def legacy_profile():
    return load_profile("legacy")
