"""Render templates and write generated output.

Takes the contexts from context_builder and produces a Python package:

    <output>/__init__.py
    <output>/models/__init__.py, <output>/models/<definition>.py
    <output>/api/__init__.py,    <output>/api/<group>_api.py
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

import jinja2

from .context_builder import GenerationResult

logger = logging.getLogger(__name__)

TEMPLATE_DIR = Path(__file__).parent / "templates"


def docstring(text: Any) -> str:
    """Escape text for use inside a triple-quoted string."""
    value = str(text).replace("\\", "\\\\").replace('"""', '\\"\\"\\"')
    if value.endswith('"'):
        value = value[:-1] + '\\"'
    return value


def _environment() -> jinja2.Environment:
    env = jinja2.Environment(
        loader=jinja2.FileSystemLoader(str(TEMPLATE_DIR)),
        keep_trailing_newline=True,
        trim_blocks=True,
        lstrip_blocks=True,
        undefined=jinja2.StrictUndefined,
    )
    env.filters["docstring"] = docstring
    return env


def render_model(context: dict[str, Any]) -> str:
    return _environment().get_template("model.py.j2").render(**context)


def render_group(context: dict[str, Any]) -> str:
    return _environment().get_template("client_group.py.j2").render(**context)


def render_package(package: dict[str, Any]) -> dict[str, str]:
    """Render the three package index modules."""
    env = _environment()
    return {
        "__init__.py": env.get_template("package_init.py.j2").render(**package),
        "models/__init__.py": env.get_template("models_init.py.j2").render(**package),
        "api/__init__.py": env.get_template("api_init.py.j2").render(**package),
    }


def render_files(result: GenerationResult) -> dict[str, str]:
    """Render every artifact, keyed by path relative to the output directory."""
    env = _environment()
    model_template = env.get_template("model.py.j2")
    group_template = env.get_template("client_group.py.j2")

    files = render_package(result.package)
    for model in result.models:
        files[f"models/{model['module']}.py"] = model_template.render(**model)
    for group in result.groups:
        files[f"api/{group['module']}.py"] = group_template.render(**group)
    return files


def generate(result: GenerationResult, output_dir: Path) -> list[Path]:
    """Render all artifacts and write them under output_dir."""
    written = []
    for relative, text in render_files(result).items():
        output_path = Path(output_dir) / relative
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(text, encoding="utf-8")
        written.append(output_path)

    logger.info(
        "Generated %d models and %d client groups in %s",
        len(result.models), len(result.groups), output_dir,
    )
    return written
