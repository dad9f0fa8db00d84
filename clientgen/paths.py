"""Compile path operations into client method descriptors.

Handles:
- 200-response schema lookup (Swagger 2 ``schema`` or OpenAPI 3 ``content``)
- Parameter placement (path, query, body); other placements are skipped
- Inline enums on parameters and responses, exposed as their literal type
- Two-pass type resolution: the parameter node, then its nested ``schema``
- Zero defaults according to the profile's default policy
- Shared ``#/parameters/...`` references
"""

from __future__ import annotations

import logging
import re
from typing import Any

from .config import DefaultPolicy, GeneratorProfile, PrimitiveKind
from .descriptors import (
    ArrayOf,
    NamingContext,
    OperationDescriptor,
    ParameterSpec,
    Primitive,
    TypeDescriptor,
    collapse_enums,
)
from .errors import GenerationError, MissingResponseSchemaError, UnresolvableTypeError
from .naming import (
    build_method_name,
    clean_comment,
    group_key,
    map_name,
    sanitize_identifier,
)
from .schema_parser import ref_name, resolve_type

logger = logging.getLogger(__name__)

PLACEMENTS = ("path", "query", "body")

# Argument names taken by the generated method itself.
_RESERVED_ARGUMENTS = frozenset({
    "self", "mock", "query", "url", "datetime", "format_date", "with_query",
})

_PLACEHOLDER = re.compile(r"\{([^{}]+)\}")


def get_response_schema(operation: dict[str, Any]) -> dict[str, Any] | None:
    """Schema of the 200 response, or None when the operation declares none."""
    responses = operation.get("responses") or {}
    success = responses.get("200", responses.get(200)) or {}
    if success.get("schema"):
        return success["schema"]
    for content_type in ("application/json", "text/json", "text/plain"):
        schema = (success.get("content") or {}).get(content_type, {}).get("schema")
        if schema:
            return schema
    return None


def _literal_kind(values: list[Any]) -> PrimitiveKind:
    if all(isinstance(v, int) and not isinstance(v, bool) for v in values):
        return PrimitiveKind.INT
    return PrimitiveKind.STRING


def _inline_enum(node: dict[str, Any]) -> tuple[list[Any], bool] | None:
    """Return (values, is_array) for an enum declared on a node or its schema."""
    for candidate in (node, node.get("schema") or {}):
        if candidate.get("enum") is not None:
            return list(candidate["enum"]), False
        items = candidate.get("items") or {}
        if candidate.get("type") == "array" and items.get("enum") is not None:
            return list(items["enum"]), True
    return None


def resolve_wire_type(
    node: dict[str, Any], context: NamingContext, profile: GeneratorProfile,
) -> TypeDescriptor:
    """Resolve a response or parameter type; enums collapse to their literals."""
    inline = _inline_enum({k: v for k, v in node.items() if k != "schema"})
    if inline is not None:
        values, is_array = inline
        literal: TypeDescriptor = Primitive(_literal_kind(values))
        return ArrayOf(literal) if is_array else literal
    return collapse_enums(resolve_type(node, context, profile))


def _resolve_parameter(
    param: dict[str, Any], context: NamingContext, profile: GeneratorProfile,
) -> TypeDescriptor:
    try:
        return resolve_wire_type(param, context, profile)
    except UnresolvableTypeError:
        if not param.get("schema"):
            raise
    return resolve_wire_type(param["schema"], context.child("schema"), profile)


def _default_for(
    placement: str, descriptor: TypeDescriptor, profile: GeneratorProfile,
) -> str | None:
    if not isinstance(descriptor, Primitive):
        return None
    if placement == "path" or profile.default_policy is DefaultPolicy.ALL:
        return profile.default_values.get(descriptor.kind)
    return None


def _identifier(name: str, profile: GeneratorProfile) -> str:
    if not name.isidentifier():
        name = sanitize_identifier(name)
    return map_name(name, profile.name_aliases, _RESERVED_ARGUMENTS)


def compile_parameters(
    operation: dict[str, Any],
    method_name: str,
    location: str,
    profile: GeneratorProfile,
    shared_parameters: dict[str, dict[str, Any]] | None = None,
) -> list[ParameterSpec]:
    params: list[ParameterSpec] = []
    for param in operation.get("parameters") or []:
        if "$ref" in param:
            ref = param["$ref"]
            param = (shared_parameters or {}).get(ref_name(ref))
            if param is None:
                raise GenerationError(f"unknown parameter reference {ref!r}", location)

        name = param["name"]
        placement = param.get("in", "query")
        if placement not in PLACEMENTS:
            logger.warning(
                "%s: skipping parameter %r placed in %r", location, name, placement,
            )
            continue

        key = name.split(".")[-1]
        context = NamingContext(
            owner=method_name, member=key, location=f"{location}.parameters.{name}",
        )
        descriptor = _resolve_parameter(param, context, profile)
        inline = _inline_enum(param)
        identifier = _identifier(key, profile)
        if any(p.identifier == identifier for p in params):
            raise GenerationError(
                f"parameter {name!r} duplicates argument {identifier!r}", context.location,
            )

        params.append(ParameterSpec(
            name=name,
            identifier=identifier,
            key=key,
            placement=placement,
            type=descriptor,
            default=_default_for(placement, descriptor, profile),
            allowed_values=tuple(inline[0]) if inline else (),
            description=clean_comment(param.get("description"), profile.comment_replacements),
        ))
    return params


def build_url_template(path: str, params: list[ParameterSpec], location: str) -> str:
    """Rewrite ``{placeholder}`` segments to reference method arguments."""
    by_name = {}
    for p in params:
        if p.placement == "path":
            by_name[p.name] = p.identifier
            by_name.setdefault(p.key, p.identifier)

    def _replace(match: re.Match[str]) -> str:
        placeholder = match.group(1)
        if placeholder not in by_name:
            raise GenerationError(
                f"placeholder {{{placeholder}}} has no path parameter", location,
            )
        return "{" + by_name[placeholder] + "}"

    return _PLACEHOLDER.sub(_replace, path)


def compile_operation(
    path: str,
    method: str,
    operation: dict[str, Any],
    profile: GeneratorProfile,
    shared_parameters: dict[str, dict[str, Any]] | None = None,
) -> OperationDescriptor:
    """Compile one HTTP method of one path entry."""
    method = method.lower()
    location = f"paths.{path}.{method}"
    method_name = build_method_name(method, path, profile.path_prefix)

    schema = get_response_schema(operation)
    if schema is None:
        raise MissingResponseSchemaError("no schema for the 200 response", location)
    response = resolve_wire_type(
        schema,
        NamingContext(method_name, "response", f"{location}.responses.200"),
        profile,
    )

    params = compile_parameters(operation, method_name, location, profile, shared_parameters)

    return OperationDescriptor(
        method=method,
        path=path,
        method_name=method_name,
        group_key=group_key(path, profile.path_prefix),
        url_template=build_url_template(path, params, location),
        parameters=tuple(params),
        response=response,
        summary=clean_comment(operation.get("summary"), profile.comment_replacements),
    )
