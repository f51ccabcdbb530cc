import logging

import pytest

from dental_chart.core.settings import Settings, validate_settings


def test_defaults():
    settings = Settings(_env_file=None)
    assert settings.chart_notation == "fdi"
    assert settings.history_display_limit == 20
    assert settings.col_width == 52
    assert "app_env" not in Settings.model_fields


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("CHART_NOTATION", "universal")
    monkeypatch.setenv("CHART_HISTORY_LIMIT", "5")
    monkeypatch.setenv("CHART_TOOTH_SIZE", "")
    settings = Settings(_env_file=None)
    assert settings.chart_notation == "universal"
    assert settings.history_display_limit == 5
    assert settings.tooth_size == 44


def test_invalid_notation_rejected():
    with pytest.raises(ValueError):
        Settings(_env_file=None, chart_notation="palmer")


@pytest.mark.parametrize(
    "overrides",
    [{"history_display_limit": 0}, {"tooth_size": 10}],
)
def test_validate_settings_failures(overrides):
    with pytest.raises(RuntimeError, match="Config validation failed"):
        validate_settings(Settings(_env_file=None, **overrides))


def test_validate_settings_resets_unknown_default_condition(caplog):
    settings = Settings(_env_file=None, default_condition="crown")
    with caplog.at_level(logging.WARNING, logger="dental_chart.config"):
        validate_settings(settings)
    assert settings.default_condition == "caries"
    assert "Config warning" in caplog.text
