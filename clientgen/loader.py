"""Load a Swagger/OpenAPI document and split it into definitions and paths."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

import yaml

from .descriptors import SchemaDocument

HTTP_METHODS = ("get", "put", "post", "delete", "options", "head", "patch")


def load_spec(path: Path) -> dict[str, Any]:
    """Load an API document from disk. JSON and YAML are both accepted."""
    text = Path(path).read_text(encoding="utf-8")
    if Path(path).suffix.lower() == ".json":
        return json.loads(text)
    return yaml.safe_load(text)


def get_definitions(spec: dict[str, Any]) -> dict[str, Any]:
    """Extract named schemas (Swagger 2 ``definitions`` or OpenAPI 3 components)."""
    if "definitions" in spec:
        return spec["definitions"] or {}
    return spec.get("components", {}).get("schemas", {}) or {}


def get_paths(spec: dict[str, Any]) -> dict[str, Any]:
    """Extract paths from the spec."""
    return spec.get("paths", {}) or {}


def parse_document(spec: dict[str, Any]) -> SchemaDocument:
    """Build a SchemaDocument, keeping the document's own ordering."""
    paths = [
        (template, {
            method: operation
            for method, operation in (entry or {}).items()
            if method.lower() in HTTP_METHODS
        })
        for template, entry in get_paths(spec).items()
    ]
    info = spec.get("info", {}) or {}
    return SchemaDocument(
        definitions=dict(get_definitions(spec)),
        paths=paths,
        parameters=dict(spec.get("parameters") or {}),
        title=info.get("title", ""),
        version=str(info.get("version", "")),
    )
