"""
Demo Entry Point Tests

Runs run_demo.main() against presets and config files and checks that
malformed configs are reported with exit code 1 instead of a traceback.
"""

from __future__ import annotations

from pathlib import Path
import tempfile

import pytest

from run_demo import main


def _write_temp_yaml(content: str) -> str:
    with tempfile.NamedTemporaryFile(mode="w", suffix=".yaml", delete=False) as f:
        f.write(content)
        return f.name


class TestDemoPresets:
    """Tests for the preset path."""

    def test_default_preset(self, capsys):
        assert main(["--seconds", "1"]) == 0

        out = capsys.readouterr().out
        assert "SOLID" in out
        assert "frame   20" in out

    def test_named_config(self, capsys):
        assert main(["--config", "default_link", "--seconds", "1"]) == 0
        assert "Operational Cycle" in capsys.readouterr().out


class TestDemoConfigErrors:
    """Tests for malformed config files."""

    @pytest.mark.parametrize(
        "content",
        [
            "- a\n- b\n",
            "link: 5\n",
            "link:\n  distance_m: far\n",
            "invalid: yaml: content: [unclosed",
        ],
    )
    def test_bad_config_returns_error_code(self, content, capsys):
        temp_path = _write_temp_yaml(content)
        try:
            assert main(["--config", temp_path]) == 1
            assert "ERROR" in capsys.readouterr().out
        finally:
            Path(temp_path).unlink()

    def test_paused_start_skips_cycle(self, capsys):
        temp_path = _write_temp_yaml(
            "link: {}\nloops: {}\npower: {}\nsimulation:\n  start_running: false\n"
        )
        try:
            assert main(["--config", temp_path]) == 0
            out = capsys.readouterr().out
            assert "paused" in out
            assert "frame " not in out
        finally:
            Path(temp_path).unlink()

    def test_clamp_disabled_in_config(self, capsys):
        temp_path = _write_temp_yaml(
            "link:\n  distance_m: 0.0\nloops: {}\npower: {}\n"
            "simulation:\n  clamp_parameters: false\n"
        )
        try:
            assert main(["--config", temp_path]) == 1
            assert "DOMAIN ERROR" in capsys.readouterr().out
        finally:
            Path(temp_path).unlink()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
