"""Configuration loader for the Event Chronicle core."""

from functools import lru_cache

import yaml

from chronicle.configs.settings import get_settings

settings = get_settings()


class Config:
    """Configuration for the event projection subsystem."""

    # File paths
    PROJECTION_CONFIG_PATH = settings.PROJECTION_CONFIG_PATH

    @classmethod
    @lru_cache
    def load_projection_config(cls) -> dict:
        """Load the YAML configuration for projection defaults and record mapping."""
        if not cls.PROJECTION_CONFIG_PATH.exists():
            raise FileNotFoundError(f"Missing config at {cls.PROJECTION_CONFIG_PATH}")

        with open(cls.PROJECTION_CONFIG_PATH, encoding="utf-8") as f:
            content = f.read()

            # Substitute ${VAR} placeholders with values from settings
            for key, value in settings.model_dump().items():
                placeholder = f"${{{key}}}"
                if placeholder in content:
                    val_str = (
                        value.get_secret_value()
                        if hasattr(value, "get_secret_value")
                        else str(value)
                    )
                    content = content.replace(placeholder, val_str)

            return yaml.safe_load(content) or {}

    @classmethod
    def get_projection_section(cls, name: str) -> dict:
        """Return one top-level section of the projection config (empty if absent)."""
        section = cls.load_projection_config().get(name)
        return dict(section) if isinstance(section, dict) else {}
