"""Errors raised while compiling a single definition or operation.

Each error names the location in the input document it came from, so a run
can report it and continue with the remaining artifacts.
"""

from __future__ import annotations


class GenerationError(Exception):
    """Base class for per-artifact generation failures."""

    def __init__(self, message: str, location: str = "") -> None:
        self.location = location
        super().__init__(f"{location}: {message}" if location else message)


class UnresolvableTypeError(GenerationError):
    """A (type, format) pair is absent from the primitive table."""

    def __init__(self, schema_type: str | None, schema_format: str | None, location: str) -> None:
        self.schema_type = schema_type
        self.schema_format = schema_format
        super().__init__(
            f"cannot map type={schema_type!r} format={schema_format!r}", location,
        )


class MalformedEnumError(GenerationError):
    """Enum description text does not follow the ``(1 = a , 2 = b)`` grammar."""


class MissingResponseSchemaError(GenerationError):
    """An operation has no schema for its 200 response."""


class MissingDependencyError(GenerationError):
    """An artifact refers to a definition that was not generated."""

    def __init__(self, dependency: str, location: str) -> None:
        self.dependency = dependency
        super().__init__(
            f"depends on definition {dependency!r}, which was not generated", location,
        )
