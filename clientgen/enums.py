"""Synthesize enum types from schema nodes.

Integer enums carry their symbolic names only inside the description, as a
parenthesized list at the end of the text::

    "Account status (1 = Active , 2 = Closed)"

The list delimiter is the literal " , " (space, comma, space) and each pair
is split on " = ". A description whose last "(" is followed by an "=" is held
to the same grammar. Without such markers the members are named from the
raw values: el1, el2, ...
"""

from __future__ import annotations

import logging
from typing import Any

from .config import GeneratorProfile
from .descriptors import EnumMember, EnumSpec, NamingContext
from .errors import MalformedEnumError
from .naming import first_to_lower, first_to_upper, map_name, sanitize_identifier

logger = logging.getLogger(__name__)

PAIR_SEPARATOR = " = "
LIST_SEPARATOR = " , "


def enum_name(context: NamingContext) -> str:
    return context.owner + first_to_upper(context.member)


def carries_grammar(description: str | None) -> bool:
    """True when the description holds a ``(value = name ...)`` list,
    including one written with the wrong delimiters."""
    if not description:
        return False
    if PAIR_SEPARATOR in description:
        return True
    start = description.rfind("(")
    return start >= 0 and "=" in description[start:]


def _as_int(value: Any, context: NamingContext) -> int:
    if isinstance(value, bool):
        raise MalformedEnumError(f"boolean enum value {value!r}", context.location)
    try:
        return int(str(value).strip())
    except ValueError:
        raise MalformedEnumError(
            f"enum value {value!r} is not an integer", context.location,
        ) from None


def _member_name(raw: str, context: NamingContext, profile: GeneratorProfile) -> str:
    name = map_name(first_to_lower(raw.strip()), profile.name_aliases)
    name = sanitize_identifier(name)
    if not name:
        raise MalformedEnumError(f"empty member name in {raw!r}", context.location)
    if name.startswith("_"):
        name = profile.enum_member_prefix + name
    return name


def members_from_values(
    values: list[Any], context: NamingContext, profile: GeneratorProfile,
) -> list[EnumMember]:
    """One member per raw literal, named prefix + value, in input order."""
    members = []
    for raw in values:
        value = _as_int(raw, context)
        members.append(EnumMember(f"{profile.enum_member_prefix}{raw}".replace("-", "_"), value))
    return members


def members_from_description(
    description: str, context: NamingContext, profile: GeneratorProfile,
) -> list[EnumMember]:
    """Parse the last ``( value = name , ... )`` span of a description."""
    start = description.rfind("(")
    if start < 0:
        raise MalformedEnumError(
            f"no '(' in enum description {description!r}", context.location,
        )
    end = description.find(")", start)
    if end < 0:
        raise MalformedEnumError(
            f"unterminated '(' in enum description {description!r}", context.location,
        )

    members = []
    for segment in description[start + 1:end].split(LIST_SEPARATOR):
        value, sep, name = segment.partition(PAIR_SEPARATOR)
        if not sep or PAIR_SEPARATOR in name:
            raise MalformedEnumError(
                f"segment {segment!r} is not a single 'value = name' pair",
                context.location,
            )
        members.append(
            EnumMember(_member_name(name, context, profile), _as_int(value, context))
        )
    return members


def synthesize_enum(
    node: dict[str, Any], context: NamingContext, profile: GeneratorProfile,
) -> EnumSpec:
    """Build the EnumSpec for a node carrying an ``enum`` list."""
    values = list(node.get("enum") or [])
    description = node.get("description")

    if carries_grammar(description):
        members = members_from_description(description, context, profile)
        if len(members) != len(values):
            logger.warning(
                "%s: description lists %d enum members, enum has %d values",
                context.location, len(members), len(values),
            )
    else:
        members = members_from_values(values, context, profile)

    if not members:
        raise MalformedEnumError("enum has no members", context.location)

    seen: set[str] = set()
    for member in members:
        if member.name in seen:
            raise MalformedEnumError(
                f"duplicate enum member {member.name!r}", context.location,
            )
        seen.add(member.name)

    return EnumSpec(enum_name(context), tuple(members))
