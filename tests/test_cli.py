"""Tests for the command line entry point."""

from __future__ import annotations

import json

from click.testing import CliRunner

from clientgen.__main__ import main


def _spec_file(tmp_path, spec):
    path = tmp_path / "api.json"
    path.write_text(json.dumps(spec), encoding="utf-8")
    return path


def test_generates_package(tmp_path, sample_spec):
    out = tmp_path / "out"
    result = CliRunner().invoke(main, [str(_spec_file(tmp_path, sample_spec)), "-o", str(out)])

    assert result.exit_code == 0, result.output
    assert "Generated 2 models and 2 client groups" in result.output
    assert (out / "models" / "user.py").exists()
    assert (out / "api" / "user_api.py").exists()
    assert (out / "api" / "card_api.py").exists()


def test_failures_exit_nonzero(tmp_path, sample_spec):
    sample_spec["definitions"]["Broken"] = {
        "type": "object",
        "properties": {"blob": {"type": "file"}},
    }
    out = tmp_path / "out"
    result = CliRunner().invoke(main, [str(_spec_file(tmp_path, sample_spec)), "-o", str(out)])

    assert result.exit_code == 1
    assert "definition Broken" in result.output
    assert (out / "models" / "user.py").exists()


def test_bad_config(tmp_path, sample_spec):
    config = tmp_path / "profile.yaml"
    config.write_text("colour: blue\n", encoding="utf-8")
    result = CliRunner().invoke(
        main,
        [str(_spec_file(tmp_path, sample_spec)), "-o", str(tmp_path / "out"), "--config", str(config)],
    )
    assert result.exit_code == 2
    assert "colour" in result.output


def test_unknown_profile_rejected(tmp_path, sample_spec):
    result = CliRunner().invoke(
        main,
        [str(_spec_file(tmp_path, sample_spec)), "-o", str(tmp_path / "out"), "--profile", "modern"],
    )
    assert result.exit_code == 2
