"""Compile named schema definitions into model declarations."""

from __future__ import annotations

from typing import Any

from .config import GeneratorProfile
from .descriptors import (
    FieldDecl,
    ModelDeclaration,
    NamingContext,
    collect_enums,
    collect_references,
)
from .errors import GenerationError
from .naming import clean_comment, map_name, sanitize_identifier
from .schema_parser import resolve_type

# Names the generated model class defines itself.
_RESERVED_FIELDS = frozenset({"field", "from_json", "to_json"})


def compile_definition(
    name: str, schema: dict[str, Any], profile: GeneratorProfile,
) -> ModelDeclaration:
    """Resolve every property of one definition, keeping declaration order."""
    required = set(schema.get("required") or [])
    fields: list[FieldDecl] = []
    enums = []
    references: list[str] = []

    for prop_name, prop_schema in (schema.get("properties") or {}).items():
        context = NamingContext(
            owner=name,
            member=prop_name,
            location=f"definitions.{name}.properties.{prop_name}",
        )
        descriptor = resolve_type(prop_schema, context, profile)
        identifier = prop_name if prop_name.isidentifier() else sanitize_identifier(prop_name)
        field_name = map_name(identifier, profile.name_aliases, _RESERVED_FIELDS)
        if any(f.name == field_name for f in fields):
            raise GenerationError(
                f"property {prop_name!r} collides with field {field_name!r}",
                context.location,
            )
        fields.append(FieldDecl(
            name=field_name,
            json_key=prop_name,
            type=descriptor,
            required=prop_name in required,
            description=clean_comment(
                prop_schema.get("description"), profile.comment_replacements,
            ),
        ))
        enums.extend(collect_enums(descriptor))
        for ref in collect_references(descriptor):
            if ref != name and ref not in references:
                references.append(ref)

    return ModelDeclaration(
        name=name,
        fields=tuple(fields),
        enums=tuple(enums),
        references=tuple(references),
        description=clean_comment(schema.get("description"), profile.comment_replacements),
    )
