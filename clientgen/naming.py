"""Identifier and naming rules.

Method names are the HTTP verb followed by the PascalCase path segments
that come after the grouping key:

  GET  /user/get                -> getGet        (group "user")
  POST /user/update             -> postUpdate    (group "user")
  GET  /user/{id}/avatar-small  -> getIdAvatar_small
  GET  /card                    -> get           (group "card")

Group classes are PascalCase(key) + suffix, e.g. ``UserApi``.
"""

from __future__ import annotations

import keyword
import re
from typing import Collection, Mapping

_NON_IDENTIFIER = re.compile(r"\W+")


def first_to_upper(text: str) -> str:
    """Uppercase the first character, leave the rest untouched."""
    if not text:
        return ""
    return text[0].upper() + text[1:]


def first_to_lower(text: str) -> str:
    """Lowercase the first character, leave the rest untouched."""
    if not text:
        return ""
    return text[0].lower() + text[1:]


def camel_to_snake(name: str) -> str:
    """Convert camelCase or PascalCase to snake_case."""
    s1 = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1_\2", name)
    return re.sub(r"([a-z\d])([A-Z])", r"\1_\2", s1).lower()


def sanitize_identifier(text: str) -> str:
    """Replace every run of non-word characters with a single underscore."""
    name = _NON_IDENTIFIER.sub("_", text.strip()).strip("_")
    if name and name[0].isdigit():
        name = "_" + name
    return name


def map_name(
    name: str, aliases: Mapping[str, str], reserved: Collection[str] = (),
) -> str:
    """Apply the alias table, then guard against Python keywords and
    names reserved by the surrounding generated code."""
    if name in aliases:
        return aliases[name]
    if keyword.iskeyword(name) or name in reserved:
        return "a" + first_to_upper(name)
    return name


def module_name(name: str) -> str:
    """Python module name for a definition or group."""
    return sanitize_identifier(camel_to_snake(name)).lower() or "root"


def split_path(path: str, prefix: str = "") -> list[str]:
    """Split a path template after removing the configured API root prefix.

    The first element is always the empty string before the leading slash.
    """
    if prefix and path.startswith(prefix):
        path = path[len(prefix):]
    if not path.startswith("/"):
        path = "/" + path
    return path.split("/")


def group_key(path: str, prefix: str = "") -> str:
    """Grouping key: the segment right after the leading slash."""
    parts = split_path(path, prefix)
    return parts[1] if len(parts) > 1 else ""


def group_class_name(key: str, suffix: str) -> str:
    return first_to_upper(sanitize_identifier(key)) + suffix


def _method_segment(segment: str) -> str:
    if segment.startswith("{") and segment.endswith("}"):
        segment = segment[1:-1]
    return first_to_upper(sanitize_identifier(segment.replace("-", "_")))


def build_method_name(method: str, path: str, prefix: str = "") -> str:
    """Build a client method name from an HTTP verb and path template."""
    parts = split_path(path, prefix)[2:]
    return method.lower() + "".join(_method_segment(p) for p in parts if p)


def clean_comment(text: str | None, replacements: Mapping[str, str]) -> str:
    """Collapse text to one line and apply case-insensitive replacements."""
    comment = re.sub(r"\r?\n", "", text or "").strip()
    for old, new in replacements.items():
        comment = re.sub(re.escape(old), new, comment, flags=re.IGNORECASE)
    return comment
