"""Configuration loader for promptbot.

Loads config.py from the working directory (or a parent), falling back to defaults.
"""

import importlib.util
import sys
from pathlib import Path
from types import ModuleType
from typing import Any

from . import defaults

STORAGE_BACKENDS = ("memory", "sqlite")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")


class Config:
    """Configuration object with attribute access."""

    def __init__(self, config_path: Path | str | None = None) -> None:
        for key in defaults.CONFIG_KEYS:
            setattr(self, key, getattr(defaults, key))

        self.source: Path | None = None
        self._load_user_config(Path(config_path) if config_path else None)

    def _load_user_config(self, config_path: Path | None) -> None:
        """Overlay values from a user config.py, if one exists."""
        if config_path is None:
            config_path = self._find_config_file()

        if config_path is None or not config_path.exists():
            return

        user_config = self._load_module_from_path(config_path)
        self.source = config_path

        for key in defaults.CONFIG_KEYS:
            if hasattr(user_config, key):
                setattr(self, key, getattr(user_config, key))

    def _find_config_file(self) -> Path | None:
        """Find config.py in current dir or parents."""
        current = Path.cwd()

        while True:
            config_path = current / "config.py"
            if config_path.exists():
                return config_path
            if current == current.parent:
                return None
            current = current.parent

    def _load_module_from_path(self, path: Path) -> ModuleType:
        """Load a Python module from a file path."""
        spec = importlib.util.spec_from_file_location("promptbot_user_config", path)
        if spec is None or spec.loader is None:
            raise RuntimeError(f"Could not load config from {path}")

        module = importlib.util.module_from_spec(spec)
        sys.modules["promptbot_user_config"] = module
        spec.loader.exec_module(module)
        return module

    def get(self, key: str, default: Any = None) -> Any:
        """Get config value with optional default."""
        return getattr(self, key, default)

    @property
    def state_db_path(self) -> Path:
        """Location of the sqlite database holding state and the turn log."""
        return Path(self.DATA_DIR) / self.STATE_DB

    def validate(self) -> list[str]:
        """Validate configuration, return list of errors."""
        errors = []

        if self.STORAGE_BACKEND not in STORAGE_BACKENDS:
            errors.append(
                f"STORAGE_BACKEND must be one of {', '.join(STORAGE_BACKENDS)}"
            )

        if str(self.LOG_LEVEL).upper() not in LOG_LEVELS:
            errors.append(f"LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}")

        if not self.STATE_DB:
            errors.append("STATE_DB is not set")

        for key in ("CONVERSATION_ID", "USER_ID"):
            if not getattr(self, key):
                errors.append(f"{key} is not set")

        return errors

    def __repr__(self) -> str:
        return f"<Config backend={self.STORAGE_BACKEND} source={self.source}>"


# Global config instance
_config: Config | None = None


def get_config() -> Config:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = Config()
    return _config


def reload_config(config_path: Path | str | None = None) -> Config:
    """Reload configuration from disk."""
    global _config
    _config = Config(config_path)
    return _config
