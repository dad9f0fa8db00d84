"""Generator profiles and the fixed lookup tables.

A profile bundles the naming prefixes, the default-value policy and the
lookup tables that distinguish one output family from another. Two presets
ship with the generator; a YAML file can override individual settings.
"""

from __future__ import annotations

import dataclasses
import enum
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Mapping

import yaml


class PrimitiveKind(str, enum.Enum):
    """Target-independent primitive kinds."""

    INT = "Int"
    INT64 = "Int64"
    STRING = "String"
    BOOL = "Bool"
    DECIMAL = "Decimal"
    DATE = "Date"
    BINARY = "Data"
    OBJECT = "Object"


class DefaultPolicy(str, enum.Enum):
    """Which parameters receive a zero default instead of ``None``."""

    PATH_ONLY = "path-only"
    ALL = "all"


# (type, format) -> kind. A missing format is keyed as None.
PRIMITIVE_TYPES: dict[tuple[str, str | None], PrimitiveKind] = {
    ("integer", None): PrimitiveKind.INT,
    ("string", None): PrimitiveKind.STRING,
    ("boolean", None): PrimitiveKind.BOOL,
    ("number", "double"): PrimitiveKind.DECIMAL,
    ("string", "date-time"): PrimitiveKind.DATE,
    ("integer", "int32"): PrimitiveKind.INT,
    ("integer", "int64"): PrimitiveKind.INT64,
    ("string", "byte"): PrimitiveKind.BINARY,
    ("string", "uuid"): PrimitiveKind.STRING,
    ("object", None): PrimitiveKind.OBJECT,
    ("number", "float"): PrimitiveKind.DECIMAL,
}

# Python literal used as the zero default of a parameter.
DEFAULT_VALUES: dict[PrimitiveKind, str] = {
    PrimitiveKind.DECIMAL: 'Decimal("0")',
    PrimitiveKind.INT: "0",
    PrimitiveKind.INT64: "0",
    PrimitiveKind.STRING: '""',
    PrimitiveKind.BOOL: "False",
}

# Literal property names that cannot be used as identifiers as-is.
NAME_ALIASES: dict[str, str] = {
    "class": "aClass",
    "default": "aDefault",
}


@dataclass(frozen=True)
class GeneratorProfile:
    """Settings for one output family."""

    name: str
    model_prefix: str = "CA"
    enum_suffix: str = "Enum"
    group_suffix: str = "Api"
    enum_member_prefix: str = "el"
    default_policy: DefaultPolicy = DefaultPolicy.PATH_ONLY
    frozen_models: bool = True
    path_prefix: str = ""
    runtime_module: str = "clientgen.runtime"
    primitive_types: Mapping[tuple[str, str | None], PrimitiveKind] = field(
        default_factory=lambda: dict(PRIMITIVE_TYPES)
    )
    default_values: Mapping[PrimitiveKind, str] = field(
        default_factory=lambda: dict(DEFAULT_VALUES)
    )
    name_aliases: Mapping[str, str] = field(
        default_factory=lambda: dict(NAME_ALIASES)
    )
    # Case-insensitive substring replacements applied to doc comments.
    comment_replacements: Mapping[str, str] = field(default_factory=dict)


PROFILES: dict[str, GeneratorProfile] = {
    "common": GeneratorProfile(name="common"),
    "legacy": GeneratorProfile(
        name="legacy",
        model_prefix="PSB",
        default_policy=DefaultPolicy.ALL,
        frozen_models=False,
    ),
}

_SCALAR_FIELDS = {
    "model_prefix",
    "enum_suffix",
    "group_suffix",
    "enum_member_prefix",
    "frozen_models",
    "path_prefix",
    "runtime_module",
}


def _parse_type_key(key: str) -> tuple[str, str | None]:
    """Parse ``"type"`` or ``"type/format"`` into a lookup key."""
    type_name, _, fmt = key.partition("/")
    return type_name, fmt or None


def load_profile(name: str = "common", config_path: Path | None = None) -> GeneratorProfile:
    """Return a preset profile, optionally overlaid with a YAML config file.

    The config file may set any scalar profile field plus ``default_policy``,
    ``name_aliases``, ``comment_replacements`` and ``primitive_types`` (keyed
    ``type`` or ``type/format``, valued by a kind name such as ``Int64``).
    """
    try:
        profile = PROFILES[name]
    except KeyError:
        raise ValueError(
            f"Unknown profile {name!r}; expected one of {sorted(PROFILES)}"
        ) from None

    if config_path is None:
        return profile

    with open(config_path, encoding="utf-8") as f:
        data: dict[str, Any] = yaml.safe_load(f) or {}

    changes: dict[str, Any] = {k: v for k, v in data.items() if k in _SCALAR_FIELDS}
    if "default_policy" in data:
        changes["default_policy"] = DefaultPolicy(data["default_policy"])
    if "name_aliases" in data:
        changes["name_aliases"] = {**profile.name_aliases, **data["name_aliases"]}
    if "comment_replacements" in data:
        changes["comment_replacements"] = {
            **profile.comment_replacements, **data["comment_replacements"],
        }
    if "primitive_types" in data:
        extra = {
            _parse_type_key(k): PrimitiveKind(v)
            for k, v in data["primitive_types"].items()
        }
        changes["primitive_types"] = {**profile.primitive_types, **extra}

    unknown = set(data) - _SCALAR_FIELDS - {
        "default_policy", "name_aliases", "comment_replacements", "primitive_types",
    }
    if unknown:
        raise ValueError(f"Unknown profile settings: {', '.join(sorted(unknown))}")

    return dataclasses.replace(profile, **changes)
