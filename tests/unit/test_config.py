import tomllib
from pathlib import Path

import pytest

from spotrates.config import (
    DEFAULT_CONFIG_TEXT,
    DEFAULT_TIMEOUT_S,
    Settings,
    SourceSettings,
    load_config,
)


@pytest.fixture
def config_path(tmp_path: Path) -> Path:
    """Provides a config file location inside a not-yet-existing directory."""
    return tmp_path / "spotrates" / "config.toml"


def test_missing_file_is_created_and_defaults_returned(config_path: Path) -> None:
    settings = load_config(config_path)

    assert settings == Settings()
    assert config_path.read_text(encoding="utf-8") == DEFAULT_CONFIG_TEXT


def test_default_template_is_valid_toml() -> None:
    assert tomllib.loads(DEFAULT_CONFIG_TEXT) == {}


def test_user_values_override_defaults(config_path: Path) -> None:
    config_path.parent.mkdir(parents=True)
    config_path.write_text(
        "[general]\n"
        'log_level_console = "WARNING"\n'
        "file_logging = true\n"
        "[fetch]\n"
        "timeout_s = 5\n"
        "concurrent = false\n"
        "[sources]\n"
        'disabled = ["Livecoin", "Liquid"]\n',
        encoding="utf-8",
    )

    settings = load_config(config_path)

    assert settings.general.log_level_console == "WARNING"
    assert settings.general.log_level_file == "DEBUG"
    assert settings.general.file_logging is True
    assert settings.fetch.timeout_s == 5.0
    assert isinstance(settings.fetch.timeout_s, float)
    assert settings.fetch.concurrent is False
    assert settings.fetch.http2 is True
    assert settings.sources.disabled == ["Livecoin", "Liquid"]


def test_invalid_toml_falls_back_to_defaults(
    config_path: Path, log_messages: list[str]
) -> None:
    config_path.parent.mkdir(parents=True)
    config_path.write_text("[fetch\ntimeout_s = 5\n", encoding="utf-8")

    assert load_config(config_path) == Settings()
    assert any(m.startswith("ERROR") for m in log_messages)


def test_mistyped_values_keep_defaults(
    config_path: Path, log_messages: list[str]
) -> None:
    config_path.parent.mkdir(parents=True)
    config_path.write_text(
        "[fetch]\n"
        'timeout_s = "fast"\n'
        'concurrent = 1\n'
        "[sources]\n"
        'enabled = "Kraken"\n',
        encoding="utf-8",
    )

    settings = load_config(config_path)

    assert settings.fetch.timeout_s == DEFAULT_TIMEOUT_S
    assert settings.fetch.concurrent is True
    assert settings.sources.enabled == []
    assert sum("keeping default" in m for m in log_messages) == 3


def test_non_positive_timeout_resets_to_default(config_path: Path) -> None:
    config_path.parent.mkdir(parents=True)
    config_path.write_text("[fetch]\ntimeout_s = 0\n", encoding="utf-8")

    assert load_config(config_path).fetch.timeout_s == DEFAULT_TIMEOUT_S


def test_section_that_is_not_a_table_is_ignored(config_path: Path) -> None:
    config_path.parent.mkdir(parents=True)
    config_path.write_text('fetch = "none"\n', encoding="utf-8")

    assert load_config(config_path) == Settings()


@pytest.mark.parametrize(
    ("enabled", "disabled", "name", "expected"),
    [
        ([], [], "Kraken", True),
        ([], ["kraken"], "Kraken", False),
        (["KRAKEN", "Binance"], [], "Kraken", True),
        (["Binance"], [], "Kraken", False),
        (["Kraken"], ["Kraken"], "Kraken", False),
    ],
)
def test_source_selection(
    enabled: list[str], disabled: list[str], name: str, expected: bool
) -> None:
    sources = SourceSettings(enabled=enabled, disabled=disabled)
    assert sources.is_enabled(name) is expected
