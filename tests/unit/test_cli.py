"""Tests for the command-line interface."""

import json

import pytest
from click.testing import CliRunner

from gamepad_bridge.cli import main


@pytest.fixture
def runner() -> CliRunner:
    return CliRunner()


def write_batch(tmp_path, data) -> str:
    path = tmp_path / "batch.json"
    path.write_text(json.dumps(data))
    return str(path)


class TestTaxonomyCommand:
    """Test `gamepad-bridge taxonomy`."""

    def test_json(self, runner):
        result = runner.invoke(main, ["taxonomy", "--format", "json"])

        assert result.exit_code == 0
        listing = json.loads(result.output)
        assert {"type": "axis", "code": "dpadVert"} in listing["sliderEvents"]

    def test_table(self, runner):
        result = runner.invoke(main, ["taxonomy"])

        assert result.exit_code == 0
        assert "Slider events:" in result.output
        assert "leftTrigger" in result.output


class TestConfigCommand:
    """Test `gamepad-bridge config`."""

    def test_environment_and_overrides(self, runner):
        result = runner.invoke(
            main,
            ["--trigger-range", "unit", "config"],
            env={"GAMEPAD_BRIDGE_ENDPOINT": "ws://example:9"},
        )

        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["endpoint"] == "ws://example:9"
        assert data["trigger_range"] == "unit"

    def test_invalid_endpoint_is_usage_error(self, runner):
        result = runner.invoke(main, ["--endpoint", "http://example:9", "config"])

        assert result.exit_code == 2
        assert "ws://" in result.output

    def test_non_string_endpoint_in_file_is_usage_error(self, runner, tmp_path):
        path = tmp_path / "bridge.yaml"
        path.write_text("endpoint: 123\n")

        result = runner.invoke(main, ["--config", str(path), "config"])

        assert result.exit_code == 2
        assert "endpoint must be" in result.output


class TestValidateCommand:
    """Test `gamepad-bridge validate`."""

    def test_valid_batch(self, runner, tmp_path):
        path = write_batch(
            tmp_path,
            {
                "events": [
                    {"type": "button", "code": "A", "value": True},
                    {"type": "trigger", "code": "leftTrigger", "value": 0.5},
                ]
            },
        )

        result = runner.invoke(main, ["validate", path])

        assert result.exit_code == 0
        assert "2 event(s) valid" in result.output

    def test_bare_list(self, runner, tmp_path):
        path = write_batch(tmp_path, [{"type": "keyboard", "code": "a", "value": False}])

        result = runner.invoke(main, ["validate", path])

        assert result.exit_code == 0

    def test_invalid_event(self, runner, tmp_path):
        path = write_batch(tmp_path, [{"type": "axis", "code": "A", "value": 0}])

        result = runner.invoke(main, ["validate", path])

        assert result.exit_code == 1
        assert "UnknownEventCode: events[0]: Invalid axis code: A" in result.output

    def test_trigger_range_option(self, runner, tmp_path):
        path = write_batch(tmp_path, [{"type": "trigger", "code": "leftTrigger", "value": -0.5}])

        assert runner.invoke(main, ["validate", path]).exit_code == 0
        assert runner.invoke(main, ["--trigger-range", "unit", "validate", path]).exit_code == 1

    def test_empty_batch(self, runner, tmp_path):
        path = write_batch(tmp_path, {"events": []})

        assert runner.invoke(main, ["validate", path]).exit_code == 1
        result = runner.invoke(main, ["--allow-empty-batch", "validate", path])
        assert result.exit_code == 0
        assert "0 event(s) valid" in result.output

    def test_invalid_json(self, runner, tmp_path):
        path = tmp_path / "batch.json"
        path.write_text("{not json")

        result = runner.invoke(main, ["validate", str(path)])

        assert result.exit_code == 1
        assert "Invalid JSON" in result.output


class TestServerOptions:
    """Test option combinations of the server modes."""

    def test_port_requires_http(self, runner):
        result = runner.invoke(main, ["--port", "9000"])

        assert result.exit_code == 2
        assert "--http" in result.output
