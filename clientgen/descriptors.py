"""Intermediate representation shared by the compilers and the emitter."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterator, Union

from .config import PrimitiveKind


@dataclass(frozen=True)
class NamingContext:
    """Owner/member pair used to name synthesized enums and report errors."""

    owner: str
    member: str
    location: str

    def child(self, suffix: str) -> NamingContext:
        return NamingContext(self.owner, self.member, f"{self.location}.{suffix}")


@dataclass(frozen=True)
class EnumMember:
    name: str
    value: int


@dataclass(frozen=True)
class EnumSpec:
    """A synthesized enum. Member order is the order recovered from input."""

    name: str
    members: tuple[EnumMember, ...]


@dataclass(frozen=True)
class Primitive:
    kind: PrimitiveKind


@dataclass(frozen=True)
class Reference:
    """Reference to another definition by its bare name."""

    name: str


@dataclass(frozen=True)
class ArrayOf:
    element: TypeDescriptor


@dataclass(frozen=True)
class EnumType:
    spec: EnumSpec


TypeDescriptor = Union[Primitive, Reference, ArrayOf, EnumType]


def walk(descriptor: TypeDescriptor) -> Iterator[TypeDescriptor]:
    """Yield a descriptor and all nested element descriptors, outermost first."""
    yield descriptor
    if isinstance(descriptor, ArrayOf):
        yield from walk(descriptor.element)


def collect_enums(descriptor: TypeDescriptor) -> list[EnumSpec]:
    return [d.spec for d in walk(descriptor) if isinstance(d, EnumType)]


def collect_references(descriptor: TypeDescriptor) -> list[str]:
    return [d.name for d in walk(descriptor) if isinstance(d, Reference)]


def collapse_enums(descriptor: TypeDescriptor) -> TypeDescriptor:
    """Replace every enum with its integer representation."""
    if isinstance(descriptor, EnumType):
        return Primitive(PrimitiveKind.INT)
    if isinstance(descriptor, ArrayOf):
        return ArrayOf(collapse_enums(descriptor.element))
    return descriptor


@dataclass
class SchemaDocument:
    """Parsed input: named definitions and ordered path entries."""

    definitions: dict[str, dict[str, Any]]
    paths: list[tuple[str, dict[str, Any]]]
    parameters: dict[str, dict[str, Any]] = field(default_factory=dict)
    title: str = ""
    version: str = ""


@dataclass(frozen=True)
class FieldDecl:
    """One property of a compiled definition."""

    name: str
    json_key: str
    type: TypeDescriptor
    required: bool
    description: str = ""


@dataclass(frozen=True)
class ModelDeclaration:
    name: str
    fields: tuple[FieldDecl, ...]
    enums: tuple[EnumSpec, ...]
    references: tuple[str, ...]
    description: str = ""


@dataclass(frozen=True)
class ParameterSpec:
    """One operation parameter.

    ``name`` is the raw (possibly dotted) name; ``identifier`` is the last
    dotted segment made safe for use as a Python argument.
    """

    name: str
    identifier: str
    key: str
    placement: str
    type: TypeDescriptor
    default: str | None = None
    allowed_values: tuple[Any, ...] = ()
    description: str = ""


@dataclass(frozen=True)
class OperationDescriptor:
    method: str
    path: str
    method_name: str
    group_key: str
    url_template: str
    parameters: tuple[ParameterSpec, ...]
    response: TypeDescriptor
    summary: str = ""

    @property
    def path_parameters(self) -> list[ParameterSpec]:
        return [p for p in self.parameters if p.placement == "path"]

    @property
    def query_parameters(self) -> list[ParameterSpec]:
        return [p for p in self.parameters if p.placement == "query"]

    @property
    def body_parameter(self) -> ParameterSpec | None:
        return next((p for p in self.parameters if p.placement == "body"), None)


@dataclass
class ClientGroup:
    key: str
    class_name: str
    operations: list[OperationDescriptor] = field(default_factory=list)
