"""
Tests for TBM Link Bench Validation and Configuration

Tests parameter clamping, domain checks, YAML config loading and
config file validation.
"""

from __future__ import annotations

from pathlib import Path
import tempfile

import pytest

from tbm_link.config import (
    DEFAULT_CONFIG_PATH,
    config_from_parameters,
    get_config_path,
    get_default_config,
    load_config,
    load_config_safe,
    parameters_from_config,
    save_config,
    simulation_settings,
)
from tbm_link.physics.constants import PARAMETER_RANGES
from tbm_link.physics.link_budget import ParameterSet, evaluate
from tbm_link.validation import (
    ConfigValidationResult,
    ParameterValidationResult,
    clamp_value,
    validate_config_file,
    validate_parameters,
)
from tbm_link.validation.input_validators import validate_all


def _write_temp_yaml(content: str) -> str:
    with tempfile.NamedTemporaryFile(mode="w", suffix=".yaml", delete=False) as f:
        f.write(content)
        return f.name


# =============================================================================
# Parameter Validation Tests
# =============================================================================


class TestParameterValidation:
    """Tests for range clamping and domain checks."""

    def test_defaults_are_valid(self):
        """Test that the default parameters pass untouched."""
        params = ParameterSet()
        result = validate_parameters(params)

        assert isinstance(result, ParameterValidationResult)
        assert result.is_valid is True
        assert result.parameters == params
        assert result.warnings == []
        assert result.clamped_fields == []

    def test_zero_distance_clamped(self):
        """Test that a zero distance is pulled to the range minimum."""
        result = validate_parameters(ParameterSet(distance=0.0))

        assert result.is_valid is True
        assert result.parameters.distance == PARAMETER_RANGES["distance"][0]
        assert result.clamped_fields == ["distance"]
        assert "RANGE WARNING" in result.warnings[0]

    def test_clamped_parameters_always_evaluate(self):
        """Test that clamping makes any finite input safe to evaluate."""
        wild = ParameterSet(
            ground_conductivity=-1.0,
            carrier_frequency=0.0,
            tx_current=99.0,
            distance=-5.0,
            bit_rate=0.0,
            tx_loop_diameter=0.0,
            rx_loop_diameter=1000.0,
            tx_turns=0,
            rx_turns=500,
            battery_mah=0.0,
        )
        result = validate_parameters(wild)

        assert result.is_valid is True
        for name, (low, high) in PARAMETER_RANGES.items():
            assert low <= getattr(result.parameters, name) <= high
        evaluate(result.parameters)

    def test_integer_fields_stay_integers(self):
        result = validate_parameters(ParameterSet(tx_turns=100, rx_turns=12.6))

        assert result.parameters.tx_turns == 40
        assert isinstance(result.parameters.tx_turns, int)
        assert result.parameters.rx_turns == 13
        assert isinstance(result.parameters.rx_turns, int)

    def test_domain_error_without_clamping(self):
        """Test that non-positive physical inputs are errors when not clamping."""
        result = validate_parameters(ParameterSet(ground_conductivity=0.0), clamp=False)

        assert result.is_valid is False
        assert "DOMAIN ERROR" in result.errors[0]
        assert "ground_conductivity" in result.errors[0]
        assert len(result.recovery_suggestions) > 0
        assert result.parameters.ground_conductivity == 0.0

    def test_out_of_range_warning_without_clamping(self):
        """Test that positive out-of-range values only warn when not clamping."""
        result = validate_parameters(ParameterSet(distance=10.0), clamp=False)

        assert result.is_valid is True
        assert result.parameters.distance == 10.0
        assert "RANGE WARNING" in result.warnings[0]

    def test_unknown_gauge_warns(self):
        result = validate_parameters(ParameterSet(wire_gauge=30))

        assert result.is_valid is True
        assert result.parameters.wire_gauge == 30
        assert "GAUGE FALLBACK" in result.warnings[0]

    def test_nan_is_an_error(self):
        result = validate_parameters(ParameterSet(distance=float("nan")))

        assert result.is_valid is False
        assert "TYPE ERROR" in result.errors[0]

    def test_clamp_value(self):
        assert clamp_value("carrier_frequency", 1.0) == 5_000.0
        assert clamp_value("carrier_frequency", 1e9) == 50_000.0
        assert clamp_value("tx_turns", 7.4) == 7
        assert clamp_value("wire_gauge", 99) == 99


# =============================================================================
# Config Loading Tests
# =============================================================================


class TestConfigLoading:
    """Tests for YAML config loading and conversion."""

    def test_default_config_builds_default_parameters(self):
        params = parameters_from_config(get_default_config())
        assert params == ParameterSet()

    def test_load_config_missing_file_falls_back(self):
        cfg = load_config("/nonexistent/path/config.yaml")
        assert cfg == get_default_config()

    def test_load_config_safe_reports_errors(self):
        cfg, errors = load_config_safe("/nonexistent/path/config.yaml")
        assert cfg == get_default_config()
        assert "not found" in errors[0]

    def test_load_config_safe_malformed_yaml(self):
        temp_path = _write_temp_yaml("invalid: yaml: content: [unclosed")
        try:
            cfg, errors = load_config_safe(temp_path)
            assert cfg == get_default_config()
            assert "YAML parse error" in errors[0]
        finally:
            Path(temp_path).unlink()

    def test_partial_config_keeps_defaults(self):
        params = parameters_from_config({"link": {"distance_m": 2.5}, "loops": {"rx_turns": 45.0}})

        assert params.distance == 2.5
        assert params.rx_turns == 45
        assert isinstance(params.rx_turns, int)
        assert params.carrier_frequency == ParameterSet().carrier_frequency

    def test_save_and_reload(self):
        params = ParameterSet(distance=2.0, wire_gauge=14, tx_turns=12)
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "nested" / "link.yaml"
            save_config(config_from_parameters(params), path)
            reloaded = parameters_from_config(load_config(path))

        assert reloaded == params

    def test_load_config_safe_rejects_non_mapping(self):
        temp_path = _write_temp_yaml("- a\n- b\n")
        try:
            cfg, errors = load_config_safe(temp_path)
            assert cfg == get_default_config()
            assert "mapping" in errors[0]
        finally:
            Path(temp_path).unlink()

    def test_unconvertible_value_keeps_default(self):
        params = parameters_from_config({"link": {"distance_m": "far", "tx_current_a": 1.0}})

        assert params.distance == ParameterSet().distance
        assert params.tx_current == 1.0

    def test_non_mapping_section_is_ignored(self):
        params = parameters_from_config({"link": 5, "loops": {"tx_turns": 12}})

        assert params.distance == ParameterSet().distance
        assert params.tx_turns == 12

    def test_non_mapping_config_gives_defaults(self):
        assert parameters_from_config(["a", "b"]) == ParameterSet()

    def test_infinite_turns_keeps_default(self):
        params = parameters_from_config({"loops": {"tx_turns": float("inf")}})
        assert params.tx_turns == ParameterSet().tx_turns

    def test_get_config_path(self):
        assert get_config_path("default_link") == DEFAULT_CONFIG_PATH
        assert get_config_path("default_link.yaml") == DEFAULT_CONFIG_PATH


class TestSimulationSettings:
    """Tests for reading the simulation section."""

    def test_defaults(self):
        settings = simulation_settings(get_default_config())

        assert settings == {
            "tick_rate_hz": 20.0,
            "start_running": True,
            "clamp_parameters": True,
        }

    def test_custom_values(self):
        settings = simulation_settings(
            {"simulation": {"tick_rate_hz": 50, "start_running": False, "clamp_parameters": False}}
        )

        assert settings["tick_rate_hz"] == 50.0
        assert settings["start_running"] is False
        assert settings["clamp_parameters"] is False

    def test_invalid_values_fall_back(self):
        settings = simulation_settings(
            {"simulation": {"tick_rate_hz": -5, "start_running": "yes please"}}
        )

        assert settings["tick_rate_hz"] == 20.0
        assert settings["start_running"] is True

    def test_missing_or_malformed_section(self):
        assert simulation_settings({}) == simulation_settings(get_default_config())
        assert simulation_settings({"simulation": [1, 2]}) == simulation_settings({})
        assert simulation_settings(["not", "a", "mapping"]) == simulation_settings({})


# =============================================================================
# Config Validation Tests
# =============================================================================


class TestConfigValidation:
    """Tests for configuration file validation."""

    def test_valid_default_config(self):
        """Test loading valid default config."""
        result = validate_config_file()

        assert isinstance(result, ConfigValidationResult)
        assert result.is_valid is True
        assert result.config is not None
        assert "link" in result.config
        assert "loops" in result.config

    def test_nonexistent_file_fallback(self):
        """Test fallback to defaults for nonexistent file."""
        result = validate_config_file("/nonexistent/path/config.yaml")

        assert result.is_valid is True
        assert result.file_path is None
        assert len(result.warnings) > 0
        assert "not found" in result.warnings[0].lower()

    def test_malformed_yaml(self):
        """Test handling of malformed YAML."""
        temp_path = _write_temp_yaml("invalid: yaml: content: [unclosed")
        try:
            result = validate_config_file(temp_path)

            assert result.config is not None
            assert len(result.errors) > 0
            assert "YAML" in result.errors[0].upper()
        finally:
            Path(temp_path).unlink()

    def test_empty_yaml_file(self):
        """Test handling of empty YAML file."""
        temp_path = _write_temp_yaml("")
        try:
            result = validate_config_file(temp_path)

            assert result.config is not None
            assert len(result.warnings) > 0
        finally:
            Path(temp_path).unlink()

    def test_missing_section_filled(self):
        temp_path = _write_temp_yaml("link:\n  distance_m: 2.0\nloops:\n  tx_turns: 20\n")
        try:
            result = validate_config_file(temp_path)

            assert result.is_valid is True
            assert result.config["power"] == get_default_config()["power"]
            assert any("power" in w for w in result.warnings)
        finally:
            Path(temp_path).unlink()

    def test_missing_section_strict(self):
        temp_path = _write_temp_yaml("link:\n  distance_m: 2.0\nloops:\n  tx_turns: 20\n")
        try:
            result = validate_config_file(temp_path, strict=True)
            assert result.is_valid is False
        finally:
            Path(temp_path).unlink()

    def test_out_of_range_value_warns(self):
        temp_path = _write_temp_yaml(
            "link:\n  carrier_frequency_hz: 500000.0\nloops: {}\npower:\n  battery_mah: 3500\n"
        )
        try:
            result = validate_config_file(temp_path)

            assert result.is_valid is True
            assert any("RANGE WARNING" in w for w in result.warnings)
        finally:
            Path(temp_path).unlink()

    def test_type_conversion(self):
        temp_path = _write_temp_yaml(
            "link:\n  distance_m: '2.0'\nloops:\n  tx_turns: 20.0\npower: {}\n"
        )
        try:
            result = validate_config_file(temp_path)

            assert result.config["link"]["distance_m"] == 2.0
            assert result.config["loops"]["tx_turns"] == 20
            assert any("TYPE WARNING" in w for w in result.warnings)
        finally:
            Path(temp_path).unlink()

    def test_unconvertible_value(self):
        temp_path = _write_temp_yaml("link:\n  distance_m: far\nloops: {}\npower: {}\n")
        try:
            result = validate_config_file(temp_path)

            assert result.is_valid is False
            assert "CONVERSION FAILED" in result.errors[0]
        finally:
            Path(temp_path).unlink()


class TestCombinedValidation:
    """Tests for validate_all convenience function."""

    def test_all_valid(self):
        result = validate_all()

        assert result["all_valid"] is True
        assert result["parameters"].parameters == ParameterSet()

    def test_domain_failure_propagates(self):
        result = validate_all(ParameterSet(distance=0.0), clamp=False)

        assert result["all_valid"] is False
        assert result["parameters"].is_valid is False

    def test_unconvertible_value_reported_not_raised(self):
        temp_path = _write_temp_yaml("link:\n  distance_m: far\n")
        try:
            result = validate_all(config_path=temp_path)

            assert result["all_valid"] is False
            assert "CONVERSION FAILED" in result["config"].errors[0]
            assert result["parameters"].parameters == ParameterSet()
        finally:
            Path(temp_path).unlink()

    def test_non_mapping_section_reported_not_raised(self):
        temp_path = _write_temp_yaml("link: 5\n")
        try:
            result = validate_all(config_path=temp_path)

            assert result["all_valid"] is False
            assert "STRUCTURE ERROR" in result["config"].errors[0]
            assert result["config"].config["link"] == get_default_config()["link"]
        finally:
            Path(temp_path).unlink()

    def test_top_level_list_reported_not_raised(self):
        temp_path = _write_temp_yaml("- a\n- b\n")
        try:
            result = validate_all(config_path=temp_path)

            assert result["all_valid"] is False
            assert "STRUCTURE ERROR" in result["config"].errors[0]
        finally:
            Path(temp_path).unlink()

    def test_clamp_setting_read_from_config(self):
        temp_path = _write_temp_yaml(
            "link:\n  distance_m: 0.0\nloops: {}\npower: {}\n"
            "simulation:\n  clamp_parameters: false\n"
        )
        try:
            strict = validate_all(config_path=temp_path)
            clamped = validate_all(config_path=temp_path, clamp=True)

            assert strict["all_valid"] is False
            assert "DOMAIN ERROR" in strict["parameters"].errors[0]
            assert clamped["all_valid"] is True
            assert clamped["parameters"].parameters.distance == PARAMETER_RANGES["distance"][0]
        finally:
            Path(temp_path).unlink()


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
