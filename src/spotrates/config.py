from dataclasses import dataclass, field, is_dataclass
from pathlib import Path
import sys
import tomllib
from typing import Any, TypeVar

from loguru import logger

# --- Constants ---
APP_NAME = "spotrates"
# Use a platform-agnostic user config directory
if sys.platform == "win32":
    CONFIG_DIR = Path.home() / "AppData" / "Roaming" / APP_NAME
else:
    CONFIG_DIR = Path.home() / ".config" / APP_NAME

CONFIG_FILE = CONFIG_DIR / "config.toml"

DEFAULT_TIMEOUT_S = 20.0
DEFAULT_USER_AGENT = f"{APP_NAME}/0 (+https://www.dash.org)"

DEFAULT_CONFIG_TEXT = """\
# spotrates configuration file
# Uncomment and edit any setting to override its default.

# [general]
# log_level_console = "INFO"
# log_level_file = "DEBUG"
# file_logging = false

# [fetch]
# timeout_s = 20.0
# concurrent = true
# http2 = true

# [sources]
# enabled = []                 # empty means every known venue
# disabled = ["Livecoin"]
"""

# --- Dataclass Models for Settings ---
T = TypeVar("T")


@dataclass
class GeneralSettings:
    """General application settings."""

    log_level_console: str = "INFO"
    log_level_file: str = "DEBUG"
    log_directory: str = str(CONFIG_DIR / "logs")
    file_logging: bool = False


@dataclass
class FetchSettings:
    """Settings for the HTTP client and the fan-out over venues."""

    timeout_s: float = DEFAULT_TIMEOUT_S
    concurrent: bool = True
    http2: bool = True
    follow_redirects: bool = True
    user_agent: str = DEFAULT_USER_AGENT


@dataclass
class SourceSettings:
    """Which venues to query, by display name (case-insensitive)."""

    enabled: list[str] = field(default_factory=list)
    disabled: list[str] = field(default_factory=list)

    def is_enabled(self, display_name: str) -> bool:
        name = display_name.casefold()
        if self.enabled and name not in {n.casefold() for n in self.enabled}:
            return False
        return name not in {n.casefold() for n in self.disabled}


@dataclass
class Settings:
    """Root container for all application settings."""

    general: GeneralSettings = field(default_factory=GeneralSettings)
    fetch: FetchSettings = field(default_factory=FetchSettings)
    sources: SourceSettings = field(default_factory=SourceSettings)


def _same_kind(current: Any, value: Any) -> bool:
    """Whether a TOML value may replace a default of the given type."""
    if isinstance(current, bool) or isinstance(value, bool):
        return type(current) is type(value)
    if isinstance(current, float):
        return isinstance(value, (int, float))
    if isinstance(current, list):
        return isinstance(value, list) and all(isinstance(v, str) for v in value)
    return isinstance(value, type(current))


def _update_dataclass(dc_instance: T, data: dict[str, Any], section: str = "") -> T:
    """Recursively updates a dataclass instance from a dictionary.

    Values whose type does not match the default are ignored with a warning.
    """
    for f in field_names(dc_instance):
        if f not in data:
            continue
        key = f"{section}.{f}" if section else f
        field_value = getattr(dc_instance, f)
        new_value = data[f]
        if is_dataclass(field_value):
            if isinstance(new_value, dict):
                _update_dataclass(field_value, new_value, key)
            else:
                logger.warning(f"Config section '{key}' must be a table; ignoring it.")
        elif _same_kind(field_value, new_value):
            if isinstance(field_value, float):
                new_value = float(new_value)
            setattr(dc_instance, f, new_value)
        else:
            logger.warning(
                f"Config key '{key}' expects {type(field_value).__name__}, "
                f"got {type(new_value).__name__}; keeping default."
            )
    return dc_instance


def field_names(dc_instance: Any) -> list[str]:
    """Helper to get field names from a dataclass instance."""
    return [f.name for f in dc_instance.__dataclass_fields__.values()]


def _validate(settings_obj: Settings) -> Settings:
    if settings_obj.fetch.timeout_s <= 0:
        logger.warning(
            f"fetch.timeout_s must be positive, got {settings_obj.fetch.timeout_s}; "
            f"using {DEFAULT_TIMEOUT_S}."
        )
        settings_obj.fetch.timeout_s = DEFAULT_TIMEOUT_S
    return settings_obj


def load_config(path: Path = CONFIG_FILE) -> Settings:
    """Loads settings from a TOML file, merging them with defaults.

    If the config file does not exist, it creates one containing a commented
    template. An unreadable or malformed file falls back to defaults.

    Args:
        path: The path to the configuration file.

    Returns:
        A populated Settings object.
    """
    settings_obj = Settings()
    logger.info(f"Loading configuration from '{path}'...")

    if not path.exists():
        logger.warning(f"Configuration file not found. Creating default at '{path}'.")
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            with path.open("w", encoding="utf-8") as f:
                f.write(DEFAULT_CONFIG_TEXT)
        except OSError as e:
            logger.error(f"Failed to create default config file: {e}")
        return settings_obj

    try:
        with path.open("rb") as f:
            user_config = tomllib.load(f)
        _update_dataclass(settings_obj, user_config)
        logger.success("Successfully loaded user configuration.")
    except tomllib.TOMLDecodeError as e:
        logger.error(f"Error decoding TOML from '{path}': {e}")
        logger.warning("Using default settings due to configuration error.")
        return Settings()
    except OSError as e:
        logger.error(f"Could not read config file '{path}': {e}")
        logger.warning("Using default settings due to configuration error.")
        return Settings()

    return _validate(settings_obj)
