"""Tests for the command line interface."""

import io

import pytest
from rich.console import Console

from hue_console import cli
from hue_console.config import ENV_PROFILE, ENV_REGISTRY


@pytest.fixture(autouse=True)
def clean_environment(monkeypatch):
    monkeypatch.delenv(ENV_REGISTRY, raising=False)
    monkeypatch.delenv(ENV_PROFILE, raising=False)


@pytest.fixture
def run(tmp_path, snapshot_file):
    """Run the CLI against the test snapshot and return (exit code, output)."""

    def _run(*args, registry=True):
        buffer = io.StringIO()
        console = Console(file=buffer, width=200, color_system=None)
        argv = ["--config", str(tmp_path / "missing.yaml")]
        if registry:
            argv += ["--registry", str(snapshot_file)]
        code = cli.main(argv + list(args), console=console)
        return code, buffer.getvalue()

    return _run


def test_color_command(run):
    code, output = run("color", "#f00", registry=False)
    assert code == 0
    assert "hue=0 sat=255 value=255" in output
    assert "t=511 value=255" in output
    assert "xy (wide-gamut)" in output


def test_color_command_with_profile(run):
    code, output = run("color", "fff", "--profile", "srgb", registry=False)
    assert code == 0
    assert "xy (srgb)" in output


def test_color_command_rejects_bad_hex(run):
    code, output = run("color", "#12345", registry=False)
    assert code == 1
    assert "invalid hex color" in output


def test_resolve_command(run):
    code, output = run("resolve", "g1,3,l5")
    assert code == 0
    for expected in ("g1", "LivingRoom", "g3", "Office", "l5", "Desk"):
        assert expected in output


def test_resolve_lights(run):
    code, output = run("resolve", "--lights", "LivingRoom")
    assert code == 0
    assert "Spot 1" in output
    assert "Spot 2" in output
    assert "LivingRoom" not in output


def test_resolve_reports_every_unknown_token(run):
    code, output = run("resolve", "nonexistent1,nonexistent2")
    assert code == 1
    assert "nonexistent1, nonexistent2" in output


def test_resolve_without_registry(run):
    code, output = run("resolve", "g1", registry=False)
    assert code == 1
    assert "no registry snapshot configured" in output


def test_plan_color(run):
    code, output = run("plan", "l5,l10", "#f00")
    assert code == 0
    assert "hue=65535" in output
    assert "ct=511" in output
    assert "xy=" in output
    assert "bri=255" in output


def test_plan_black_turns_off(run):
    code, output = run("plan", "g1", "#000")
    assert code == 0
    assert output.count("off") == 2


def test_plan_group_scene(run):
    code, output = run("plan", "Office", "Bright")
    # "Office" also names light 12
    assert code == 1
    assert "scenes only apply to groups" in output

    code, output = run("plan", "g3", "Bright")
    assert code == 0
    assert "bright3" in output


def test_plan_scene_by_id(run):
    code, output = run("plan", "relax3")
    assert code == 0
    assert "g3" in output
    assert "relax3" in output


def test_plan_unknown_scene(run):
    code, output = run("plan", "g2", "Relax")
    assert code == 1
    assert "no such scene" in output


def test_missing_command_is_usage_error(run):
    with pytest.raises(SystemExit) as exc_info:
        run()
    assert exc_info.value.code == 2


def test_malformed_snapshot_is_reported(run, tmp_path):
    """Test that a bad light state exits with an error instead of a traceback."""
    path = tmp_path / "bad.yaml"
    path.write_text('lights:\n  "1": {name: Lamp, state: {bri: x}}\n  "2": {name: Desk, state: null}\n')
    code, output = run("--registry", str(path), "resolve", "l2", registry=False)
    assert code == 1
    assert "invalid state for light 1" in output
