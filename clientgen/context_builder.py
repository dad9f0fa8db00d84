"""Build Jinja2 template contexts from a parsed schema document.

Compiles every definition and operation, groups operations by their first
path segment and assembles one context dict per model, per client group
and for the package index. A failure in one artifact is logged and recorded
without stopping the others.
"""

from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass, field
from typing import Any, Iterable

from .config import GeneratorProfile, PrimitiveKind
from .definitions import compile_definition
from .descriptors import (
    ClientGroup,
    EnumSpec,
    EnumType,
    ModelDeclaration,
    OperationDescriptor,
    ParameterSpec,
    SchemaDocument,
    TypeDescriptor,
    collect_references,
)
from .errors import GenerationError, MissingDependencyError
from .naming import group_class_name, module_name
from .paths import compile_operation
from .schema_parser import (
    enum_class_name,
    model_class_name,
    primitive_kinds,
    type_annotation,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GenerationFailure:
    """One artifact that could not be generated."""

    kind: str  # definition / operation
    name: str
    location: str
    message: str


@dataclass
class GenerationResult:
    models: list[dict[str, Any]] = field(default_factory=list)
    groups: list[dict[str, Any]] = field(default_factory=list)
    package: dict[str, Any] = field(default_factory=dict)
    failures: list[GenerationFailure] = field(default_factory=list)


def group_operations(
    operations: Iterable[OperationDescriptor], profile: GeneratorProfile,
) -> list[ClientGroup]:
    """Group operations by key, keeping first-seen group order and document order."""
    groups: dict[str, ClientGroup] = {}
    for operation in operations:
        group = groups.get(operation.group_key)
        if group is None:
            group = ClientGroup(
                key=operation.group_key,
                class_name=group_class_name(operation.group_key, profile.group_suffix),
            )
            groups[operation.group_key] = group
        group.operations.append(operation)

    for group in groups.values():
        _deduplicate_method_names(group)
    return list(groups.values())


def _deduplicate_method_names(group: ClientGroup) -> None:
    """Append a counter to repeated method names within one group.

    The counter skips names already taken by other operations in the group.
    """
    taken = {operation.method_name for operation in group.operations}
    seen: set[str] = set()
    for index, operation in enumerate(group.operations):
        name = operation.method_name
        if name not in seen:
            seen.add(name)
            continue
        counter = 2
        while f"{name}{counter}" in taken:
            counter += 1
        unique = f"{name}{counter}"
        taken.add(unique)
        group.operations[index] = dataclasses.replace(operation, method_name=unique)


def _imports_for(descriptors: Iterable[TypeDescriptor]) -> dict[str, bool]:
    kinds: set[PrimitiveKind] = set()
    for descriptor in descriptors:
        kinds |= primitive_kinds(descriptor)
    return {
        "datetime": PrimitiveKind.DATE in kinds,
        "decimal": PrimitiveKind.DECIMAL in kinds,
        "api_object": PrimitiveKind.OBJECT in kinds,
    }


def _reference_imports(names: Iterable[str], profile: GeneratorProfile) -> list[dict[str, str]]:
    return [
        {"module": module_name(name), "class_name": model_class_name(name, profile)}
        for name in names
    ]


def _enum_context(spec: EnumSpec, profile: GeneratorProfile) -> dict[str, Any]:
    return {
        "class_name": enum_class_name(spec, profile),
        "members": [{"name": m.name, "value": m.value} for m in spec.members],
    }


def model_context(model: ModelDeclaration, profile: GeneratorProfile) -> dict[str, Any]:
    """Template context for one model module."""
    fields = []
    for decl in model.fields:
        enum_class = None
        annotation = type_annotation(decl.type, profile)
        if isinstance(decl.type, EnumType):
            enum_class = annotation
            annotation = "int"
        fields.append({
            "name": decl.name,
            "json_key": decl.json_key,
            "renamed": decl.name != decl.json_key,
            "annotation": annotation if decl.required else f"Optional[{annotation}]",
            "required": decl.required,
            "description": decl.description,
            "enum_class": enum_class,
            "value_property": f"{decl.name}Value",
        })

    return {
        "name": model.name,
        "module": module_name(model.name),
        "class_name": model_class_name(model.name, profile),
        "description": model.description,
        "frozen": profile.frozen_models,
        "runtime_module": profile.runtime_module,
        "fields": fields,
        "enums": [_enum_context(spec, profile) for spec in model.enums],
        "imports": _imports_for(d.type for d in model.fields),
        "references": _reference_imports(model.references, profile),
    }


def _parameter_context(param: ParameterSpec, profile: GeneratorProfile) -> dict[str, Any]:
    annotation = type_annotation(param.type, profile)
    if param.default is None:
        signature = f"{param.identifier}: Optional[{annotation}] = None"
    else:
        signature = f"{param.identifier}: {annotation} = {param.default}"
    description = param.description
    if param.allowed_values:
        allowed = ", ".join(str(v) for v in param.allowed_values)
        description = f"{description} (values: {allowed})".strip()
    return {
        "identifier": param.identifier,
        "key": param.key,
        "placement": param.placement,
        "signature": signature,
        "description": description,
        "is_date": PrimitiveKind.DATE in primitive_kinds(param.type),
    }


def _operation_context(op: OperationDescriptor, profile: GeneratorProfile) -> dict[str, Any]:
    body = op.body_parameter
    return {
        "method_name": op.method_name,
        "http_method": op.method.upper(),
        "path": op.path,
        "summary": op.summary,
        "params": [_parameter_context(p, profile) for p in op.parameters],
        "query": [_parameter_context(p, profile) for p in op.query_parameters],
        "body": body.identifier if body else None,
        "url_template": op.url_template,
        "url_expr": ("f" if op.path_parameters else "") + f'"{op.url_template}"',
        "result_annotation": type_annotation(op.response, profile),
    }


def group_context(group: ClientGroup, profile: GeneratorProfile) -> dict[str, Any]:
    """Template context for one client group module."""
    descriptors: list[TypeDescriptor] = []
    references: list[str] = []
    for op in group.operations:
        descriptors.append(op.response)
        descriptors.extend(p.type for p in op.parameters)
    for descriptor in descriptors:
        for ref in collect_references(descriptor):
            if ref not in references:
                references.append(ref)

    return {
        "key": group.key,
        "module": module_name(group.key) + "_" + module_name(profile.group_suffix),
        "class_name": group.class_name,
        "runtime_module": profile.runtime_module,
        "operations": [_operation_context(op, profile) for op in group.operations],
        "imports": {
            **_imports_for(descriptors),
            "format_date": any(
                p.placement == "query" and PrimitiveKind.DATE in primitive_kinds(p.type)
                for op in group.operations for p in op.parameters
            ),
        },
        "references": _reference_imports(references, profile),
    }


def _failure(kind: str, name: str, exc: GenerationError) -> GenerationFailure:
    logger.error("Skipping %s %s: %s", kind, name, exc)
    return GenerationFailure(kind=kind, name=name, location=exc.location, message=str(exc))


def _operation_references(operation: OperationDescriptor) -> list[str]:
    references: list[str] = []
    for descriptor in (operation.response, *(p.type for p in operation.parameters)):
        references.extend(collect_references(descriptor))
    return references


def _drop_unresolved_models(
    models: dict[str, ModelDeclaration], failures: list[GenerationFailure],
) -> None:
    """Remove models referring to a definition that is not in ``models``.

    Repeats until stable, so a failure propagates through chains of
    references.
    """
    changed = True
    while changed:
        changed = False
        for name, model in list(models.items()):
            missing = next((ref for ref in model.references if ref not in models), None)
            if missing is None:
                continue
            del models[name]
            failures.append(_failure(
                "definition", name, MissingDependencyError(missing, f"definitions.{name}"),
            ))
            changed = True


def build_context(document: SchemaDocument, profile: GeneratorProfile) -> GenerationResult:
    """Compile the whole document into template contexts."""
    result = GenerationResult()

    models: dict[str, ModelDeclaration] = {}
    for name, schema in document.definitions.items():
        try:
            models[name] = compile_definition(name, schema or {}, profile)
        except GenerationError as exc:
            result.failures.append(_failure("definition", name, exc))
    _drop_unresolved_models(models, result.failures)
    result.models = [model_context(model, profile) for model in models.values()]

    operations: list[OperationDescriptor] = []
    for path, entry in document.paths:
        for method, operation in entry.items():
            label = f"{method.upper()} {path}"
            try:
                compiled = compile_operation(
                    path, method, operation or {}, profile, document.parameters,
                )
            except GenerationError as exc:
                result.failures.append(_failure("operation", label, exc))
                continue
            missing = next(
                (ref for ref in _operation_references(compiled) if ref not in models), None,
            )
            if missing is not None:
                result.failures.append(_failure(
                    "operation", label,
                    MissingDependencyError(missing, f"paths.{path}.{compiled.method}"),
                ))
                continue
            operations.append(compiled)

    result.groups = [group_context(g, profile) for g in group_operations(operations, profile)]
    result.package = {
        "title": document.title,
        "version": document.version,
        "profile": profile.name,
        "models": [{"module": m["module"], "class_name": m["class_name"]} for m in result.models],
        "groups": [{"module": g["module"], "class_name": g["class_name"]} for g in result.groups],
    }

    logger.info(
        "Compiled %d models and %d client groups (%d failures)",
        len(result.models), len(result.groups), len(result.failures),
    )
    return result
