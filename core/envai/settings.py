"""
Envai Configuration Settings

Settings are read from /data/options.json (add-on deployment) or the
``options`` block of config.yaml (development), then overridden by
environment variables (a .env file is honoured).
"""

import json
import logging
import os
from dataclasses import dataclass, field, fields
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml
from dotenv import load_dotenv

from .const import ENERGY_RATE, WINDOW_ELAPSED, WINDOW_STRATEGIES
from .exceptions import ConfigurationError
from .utils import camel_to_snake

logger = logging.getLogger(__name__)

OPTIONS_PATH = "/data/options.json"
PROJECT_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), "..", ".."))
CONFIG_PATH = os.path.join(PROJECT_ROOT, "config.yaml")

# Environment variable -> (setting, parser)
ENV_OVERRIDES = {
    "ENVAI_ENERGY_RATE": ("energy_rate", float),
    "ENVAI_DATA_PATH": ("data_path", str),
    "ENVAI_TIMEZONE": ("timezone", str),
    "ENVAI_WINDOW_STRATEGY": ("window_strategy", str),
    "LLM_API_BASE_URL": ("llm_api_base_url", str),
    "LLM_API_KEY": ("llm_api_key", str),
    "LLM_MODEL_NAME": ("llm_model_name", str),
}


@dataclass
class DashboardSettings:
    """Configuration for the dashboard backend."""

    energy_rate: float = ENERGY_RATE  # $/kWh
    data_path: str = "store/db.json"  # Relative paths resolve against the project root
    timezone: str | None = None  # IANA zone used for hour/weekday bucketing
    window_strategy: str = WINDOW_ELAPSED  # "elapsed" or "positional"
    cors_origins: list[str] = field(default_factory=lambda: ["http://localhost:5173"])
    llm_api_base_url: str = "https://api.openai.com/v1"
    llm_api_key: str = ""  # Empty disables the assistant
    llm_model_name: str = "gpt-3.5-turbo"
    llm_timeout: float = 30.0  # seconds

    @classmethod
    def from_dict(cls, data: dict) -> "DashboardSettings":
        """Create from dictionary (camelCase or snake_case keys)."""
        converted = {camel_to_snake(k): v for k, v in data.items()}
        known = {f.name for f in fields(cls)}
        unknown = set(converted) - known
        if unknown:
            logger.warning(f"Ignoring unknown settings: {sorted(unknown)}")
        settings = cls(**{k: v for k, v in converted.items() if k in known})
        settings.validate()
        return settings

    @property
    def resolved_data_path(self) -> str:
        """Absolute path to the reading file."""
        if os.path.isabs(self.data_path):
            return self.data_path
        return os.path.join(PROJECT_ROOT, self.data_path)

    @property
    def tzinfo(self) -> ZoneInfo | None:
        """Configured zone, or None to keep each timestamp's own offset."""
        if not self.timezone:
            return None
        return ZoneInfo(self.timezone)

    @property
    def assistant_enabled(self) -> bool:
        return bool(self.llm_api_key)

    def validate(self) -> None:
        """Check value ranges.

        Raises:
            ConfigurationError: If a setting is out of range
        """
        try:
            rate = float(self.energy_rate)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"energy_rate must be a number, got {self.energy_rate!r}") from e
        if rate <= 0:
            raise ConfigurationError(f"energy_rate must be positive, got {rate}")
        self.energy_rate = rate

        if self.window_strategy not in WINDOW_STRATEGIES:
            raise ConfigurationError(
                f"window_strategy must be one of {WINDOW_STRATEGIES}, got {self.window_strategy!r}"
            )

        if self.timezone:
            try:
                ZoneInfo(self.timezone)
            except (ZoneInfoNotFoundError, ValueError) as e:
                raise ConfigurationError(f"Unknown timezone: {self.timezone}") from e

        if isinstance(self.cors_origins, str):
            self.cors_origins = [origin.strip() for origin in self.cors_origins.split(",") if origin.strip()]


def _load_file_options(options_path: str, config_path: str) -> dict:
    """Load the raw options dictionary from options.json or config.yaml."""
    if os.path.exists(options_path):
        with open(options_path) as f:
            options = json.load(f)
        logger.info(f"Loaded settings from {options_path}")
        return options.get("dashboard", options)

    if os.path.exists(config_path):
        with open(config_path) as f:
            config = yaml.safe_load(f) or {}
        logger.info(f"Loaded settings from {config_path}")
        return config.get("options", {}) or {}

    logger.warning("No settings file found, using defaults")
    return {}


def load_settings(
    options_path: str = OPTIONS_PATH,
    config_path: str = CONFIG_PATH,
    env: dict[str, str] | None = None,
) -> DashboardSettings:
    """Load settings: file options first, then environment overrides.

    Args:
        options_path: Add-on options file (production)
        config_path: config.yaml (development)
        env: Environment mapping (defaults to os.environ after loading .env)

    Raises:
        ConfigurationError: If the resulting settings are invalid
    """
    options = dict(_load_file_options(options_path, config_path))

    if env is None:
        load_dotenv()  # this loads from .env automatically
        env = dict(os.environ)

    for var, (name, parser) in ENV_OVERRIDES.items():
        raw = env.get(var)
        if raw is None or raw == "":
            continue
        try:
            options[name] = parser(raw)
        except ValueError as e:
            raise ConfigurationError(f"Invalid value for {var}: {raw!r}") from e
        logger.debug(f"Setting {name} overridden by {var}")

    return DashboardSettings.from_dict(options)
