"""Entry point: python -m clientgen SPEC -o OUTPUT

Reads a Swagger document, generates the models and client groups.
"""

from __future__ import annotations

import logging
import sys
from pathlib import Path

import click

from .codegen import generate
from .config import PROFILES, load_profile
from .context_builder import build_context
from .loader import load_spec, parse_document


@click.command()
@click.argument("spec_path", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option("-o", "--output", required=True, type=click.Path(file_okay=False, path_type=Path), help="Output package directory.")
@click.option("--profile", "profile_name", default="common", type=click.Choice(sorted(PROFILES)), help="Generator profile.")
@click.option("--config", "config_path", default=None, type=click.Path(exists=True, dir_okay=False, path_type=Path), help="YAML file overriding profile settings.")
@click.option("-v", "--verbose", is_flag=True, help="Log every compiled artifact.")
def main(spec_path: Path, output: Path, profile_name: str, config_path: Path | None, verbose: bool):
    """Generate typed models and client groups from a Swagger document."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(levelname)s %(name)s: %(message)s",
    )
    try:
        profile = load_profile(profile_name, config_path)
    except ValueError as exc:
        raise click.BadParameter(str(exc), param_hint="--config") from exc

    document = parse_document(load_spec(spec_path))
    result = build_context(document, profile)
    written = generate(result, output)

    click.echo(
        f"Generated {len(result.models)} models and {len(result.groups)} client groups"
        f" ({len(written)} files) in {output}"
    )
    if result.failures:
        click.echo(f"{len(result.failures)} artifacts failed:", err=True)
        for failure in result.failures:
            click.echo(f"  {failure.kind} {failure.name}: {failure.message}", err=True)
        sys.exit(1)


if __name__ == "__main__":
    main()
