"""Configuration loading for gitscrape (.gitscrape.json)."""

import json
import os
from dataclasses import dataclass, asdict, fields
from pathlib import Path

from .errors import ConfigError

DEFAULT_CONFIG_FILE = ".gitscrape.json"
CONFIG_ENV_VAR = "GITSCRAPE_CONFIG"
DEFAULT_USER_AGENT = "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:95.0) Gecko/20100101 Firefox/95.0"


@dataclass
class ScraperConfig:
    timeout: float = 10.0
    user_agent: str = DEFAULT_USER_AGENT
    verify_tls: bool = True
    max_depth: int = 64
    keep_going: bool = False
    apply_modes: bool = False

    def as_dict(self) -> dict:
        return asdict(self)


_FIELD_TYPES = {
    "timeout": (int, float),
    "user_agent": (str,),
    "verify_tls": (bool,),
    "max_depth": (int,),
    "keep_going": (bool,),
    "apply_modes": (bool,),
}


def default_config_path() -> Path:
    return Path(os.environ.get(CONFIG_ENV_VAR, DEFAULT_CONFIG_FILE))


def load_config(config_path: Path | None = None) -> ScraperConfig:
    """Load settings from a JSON file, falling back to defaults when it is absent."""
    config_file = Path(config_path) if config_path is not None else default_config_path()
    if not config_file.exists():
        return ScraperConfig()

    try:
        with open(config_file, "r", encoding="utf-8") as file:
            data = json.load(file)
    except (OSError, json.JSONDecodeError) as exc:
        raise ConfigError(f"Cannot read config {config_file}: {exc}") from exc

    if not isinstance(data, dict):
        raise ConfigError(f"Config {config_file} must contain a JSON object")

    known = {field.name for field in fields(ScraperConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError(f"Unknown config keys: {', '.join(unknown)}")

    for key, value in data.items():
        expected = _FIELD_TYPES[key]
        # bool is an int subclass, so it must not pass as a number
        if isinstance(value, bool) and bool not in expected:
            raise ConfigError(f"Config key {key!r} has wrong type: {value!r}")
        if not isinstance(value, expected):
            raise ConfigError(f"Config key {key!r} has wrong type: {value!r}")

    config = ScraperConfig(**data)
    if config.timeout <= 0:
        raise ConfigError("Config key 'timeout' must be positive")
    if config.max_depth < 1:
        raise ConfigError("Config key 'max_depth' must be at least 1")
    return config
