"""Resolve schema nodes into type descriptors and render them as annotations.

Handles:
- Inline enums (delegated to the enum synthesizer)
- Arrays, one recursion per nesting level
- $ref pointers (named by their final segment)
- (type, format) lookup in the profile's primitive table
- Single-element allOf wrappers around a $ref
"""

from __future__ import annotations

from typing import Any

from .config import GeneratorProfile, PrimitiveKind
from .descriptors import (
    ArrayOf,
    EnumSpec,
    EnumType,
    NamingContext,
    Primitive,
    Reference,
    TypeDescriptor,
)
from .enums import synthesize_enum
from .errors import UnresolvableTypeError

_PYTHON_TYPES: dict[PrimitiveKind, str] = {
    PrimitiveKind.INT: "int",
    PrimitiveKind.INT64: "int",
    PrimitiveKind.STRING: "str",
    PrimitiveKind.BOOL: "bool",
    PrimitiveKind.DECIMAL: "Decimal",
    PrimitiveKind.DATE: "datetime.datetime",
    PrimitiveKind.BINARY: "bytes",
    PrimitiveKind.OBJECT: "ApiObject",
}


def ref_name(ref: str) -> str:
    """Final segment of a $ref pointer."""
    return ref.rsplit("/", 1)[-1]


def resolve_type(
    node: dict[str, Any],
    context: NamingContext,
    profile: GeneratorProfile,
) -> TypeDescriptor:
    """Resolve a schema node to a TypeDescriptor.

    Raises UnresolvableTypeError when the node maps to nothing in the
    primitive table.
    """
    if node.get("enum") is not None:
        return EnumType(synthesize_enum(node, context, profile))

    if node.get("type") == "array":
        items = node.get("items") or {}
        return ArrayOf(resolve_type(items, context.child("items"), profile))

    if "$ref" in node:
        return Reference(ref_name(node["$ref"]))

    all_of = node.get("allOf")
    if all_of and len(all_of) == 1:
        return resolve_type(all_of[0], context.child("allOf"), profile)

    schema_type = node.get("type")
    schema_format = node.get("format")
    if schema_type == "object" and "properties" in node:
        schema_format = None

    kind = profile.primitive_types.get((schema_type, schema_format))
    if kind is None:
        raise UnresolvableTypeError(schema_type, schema_format, context.location)
    return Primitive(kind)


def model_class_name(name: str, profile: GeneratorProfile) -> str:
    return profile.model_prefix + name


def enum_class_name(spec: EnumSpec, profile: GeneratorProfile) -> str:
    return profile.model_prefix + spec.name + profile.enum_suffix


def type_annotation(descriptor: TypeDescriptor, profile: GeneratorProfile) -> str:
    """Render a descriptor as a Python annotation string."""
    if isinstance(descriptor, Primitive):
        return _PYTHON_TYPES[descriptor.kind]
    if isinstance(descriptor, Reference):
        return model_class_name(descriptor.name, profile)
    if isinstance(descriptor, EnumType):
        return enum_class_name(descriptor.spec, profile)
    if isinstance(descriptor, ArrayOf):
        return f"list[{type_annotation(descriptor.element, profile)}]"
    raise TypeError(f"Unsupported descriptor: {descriptor!r}")


def primitive_kinds(descriptor: TypeDescriptor) -> set[PrimitiveKind]:
    """All primitive kinds used anywhere inside a descriptor."""
    if isinstance(descriptor, Primitive):
        return {descriptor.kind}
    if isinstance(descriptor, ArrayOf):
        return primitive_kinds(descriptor.element)
    return set()
