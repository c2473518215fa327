"""Configuration Management Package

Effective settings are layered: built-in defaults < config file < CLI flags.
"""

import json
from dataclasses import dataclass, asdict, fields, replace
from pathlib import Path
from typing import Any, Optional

from ai_changelog.errors import ConfigError

CONFIG_FILENAME = ".ai-changelog.config"

# Keys accepted from the config file; verbose is CLI-only
FILE_KEYS = {"model", "temperature", "max_tokens"}

MIN_TEMPERATURE = 0.0
MAX_TEMPERATURE = 2.0


@dataclass(frozen=True)
class EffectiveConfig:
    """Resolved settings for one invocation."""
    model: str = "gpt-4-1106-preview"
    temperature: float = 0.3
    max_tokens: int = 500
    verbose: bool = False

    def to_dict(self) -> dict:
        return asdict(self)

    def validate(self) -> None:
        """Raise ConfigError if any value is unusable."""
        if not isinstance(self.model, str) or not self.model.strip():
            raise ConfigError(f"Invalid model {self.model!r}: expected a non-empty string")

        if isinstance(self.temperature, bool) or not isinstance(self.temperature, (int, float)):
            raise ConfigError(f"Invalid temperature {self.temperature!r}: expected a number")
        if not MIN_TEMPERATURE <= self.temperature <= MAX_TEMPERATURE:
            raise ConfigError(
                f"Invalid temperature {self.temperature}: must be between "
                f"{MIN_TEMPERATURE} and {MAX_TEMPERATURE}"
            )

        if isinstance(self.max_tokens, bool) or not isinstance(self.max_tokens, int) or self.max_tokens <= 0:
            raise ConfigError(f"Invalid max_tokens {self.max_tokens!r}: expected a positive integer")

    def merged(self, **overrides: Any) -> 'EffectiveConfig':
        """Return a copy with the non-empty overrides applied."""
        valid_keys = {f.name for f in fields(self)}
        changes = {
            k: v for k, v in overrides.items()
            if k in valid_keys and v is not None and v != ""
        }
        if not changes:
            return self
        config = replace(self, **changes)
        config.validate()
        return config

    @classmethod
    def from_dict(cls, data: dict, base: Optional['EffectiveConfig'] = None) -> 'EffectiveConfig':
        """Layer recognized config-file keys over base (defaults if omitted)."""
        base = base or cls()
        filtered = {k: v for k, v in data.items() if k in FILE_KEYS}
        return base.merged(**filtered)


def get_default_config_path() -> Path:
    return Path.home() / CONFIG_FILENAME


class ConfigResolver:
    """Loads the optional config file and applies CLI overrides."""

    def __init__(self, path: str | Path | None = None):
        self.path = Path(path).expanduser() if path else get_default_config_path()
        self.loaded_from: Optional[Path] = None

    def load_file(self) -> dict:
        """Read the config file. A missing file yields an empty dict."""
        if not self.path.is_file():
            return {}

        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid config file {self.path}: {e}")
        except (OSError, UnicodeDecodeError) as e:
            raise ConfigError(f"Could not read config file {self.path}: {e}")

        if not isinstance(data, dict):
            raise ConfigError(f"Invalid config file {self.path}: expected a JSON object")

        self.loaded_from = self.path
        return data

    def resolve(self, overrides: dict | None = None) -> EffectiveConfig:
        """Defaults < config file < overrides, field by field."""
        config = EffectiveConfig()
        file_data = self.load_file()
        if file_data:
            try:
                config = EffectiveConfig.from_dict(file_data, base=config)
            except ConfigError as e:
                raise ConfigError(f"{self.path}: {e}")
        return config.merged(**(overrides or {}))


def resolve_config(config_path: str | Path | None = None, **overrides: Any) -> EffectiveConfig:
    return ConfigResolver(config_path).resolve(overrides)


__all__ = [
    "EffectiveConfig",
    "ConfigResolver",
    "resolve_config",
    "get_default_config_path",
    "CONFIG_FILENAME",
    "FILE_KEYS",
]
