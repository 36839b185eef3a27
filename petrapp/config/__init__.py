"""Application configuration module.

- **settings.py**: Environment-based settings (pydantic-settings)
  - Debug/log format, history window, config path override
  - Loaded from the environment (``PETRAPP_`` prefix) or a .env file

- **progression_config.yaml**: Generator tunables
  - Loaded and validated by ProgressionConfigLoader
  - Exercise selection, linear and undulating progression, feedback, defaults
"""
from petrapp.config.settings import Settings, get_settings

# Progression config loader (lazy import to avoid circular dependencies)
# Use: from petrapp.config.progression_config_loader import get_progression_config

__all__ = ["Settings", "get_settings"]
