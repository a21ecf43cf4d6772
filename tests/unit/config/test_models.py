"""Tests for settings models."""

from __future__ import annotations

import pytest

from mnctl.config.models import MnctlSettings, parse_duration


class TestParseDuration:
    """Tests for parse_duration."""

    @pytest.mark.parametrize(
        "value,expected",
        [
            (45, 45.0),
            (0.5, 0.5),
            ("30", 30.0),
            ("30s", 30.0),
            ("5m", 300.0),
            ("1h30m", 5400.0),
            ("500ms", 0.5),
            (" 2M ", 120.0),
        ],
    )
    def test_valid(self, value, expected) -> None:
        assert parse_duration(value) == pytest.approx(expected)

    @pytest.mark.parametrize(
        "value",
        ["", "abc", "30x", "m5", "5m trailing", 0, -1, "0s", True, "inf", "nan", "1e400", float("inf")],
    )
    def test_invalid(self, value) -> None:
        with pytest.raises(ValueError):
            parse_duration(value)


class TestMnctlSettings:
    """Tests for MnctlSettings defaults."""

    def test_defaults(self) -> None:
        settings = MnctlSettings()

        assert settings.coin == ""
        assert settings.monitor.refresh == 30.0
        assert settings.download_timeout == 60.0
        assert settings.sources == []
