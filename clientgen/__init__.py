"""Generate typed Python API clients from Swagger documents."""

__version__ = "0.1.0"
