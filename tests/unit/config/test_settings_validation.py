"""Tests for settings validation."""

from __future__ import annotations

from mnctl.config.validation import validate_config


class TestValidateConfig:
    """Tests for validate_config."""

    def test_valid_settings_have_no_warnings(self) -> None:
        data = {
            "coin": "pivx",
            "monitor": {"start": True, "refresh": "30s"},
            "rpc": {"timeout": 5},
        }

        assert validate_config(data, source="config.yml") == []

    def test_unknown_top_level_key_suggests_match(self) -> None:
        warnings = validate_config({"wallett": "/opt"}, source="config.yml")

        assert len(warnings) == 1
        assert warnings[0].key == "wallett"
        assert warnings[0].suggestion == "wallet"

    def test_unknown_section_key(self) -> None:
        warnings = validate_config({"monitor": {"refrsh": "1m"}}, source="config.yml")

        assert [w.key for w in warnings] == ["monitor.refrsh"]
        assert warnings[0].suggestion == "refresh"

    def test_section_must_be_mapping(self) -> None:
        warnings = validate_config({"rpc": 5}, source="config.yml")

        assert len(warnings) == 1
        assert "mapping" in warnings[0].message
