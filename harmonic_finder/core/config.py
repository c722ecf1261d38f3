"""Configuration management for Harmonic Finder components."""

from typing import Any, Dict, Optional
import copy
import json
import os
from pathlib import Path

from ..logger import get_logger

logger = get_logger(__name__)

DEFAULT_CONFIG_DIR = os.path.join("~", ".config", "harmonic_finder")

# One JSON file per section
DEFAULT_CONFIGS: Dict[str, Dict[str, Any]] = {
    "resolution": {
        "model": "gpt-4o-mini",
        "api_url": "https://api.openai.com/v1/chat/completions",
        "api_key_env": "OPENAI_API_KEY",
        "timeout": 20.0,
    },
    "cache": {
        "enabled": True,
        "directory": None,  # None means <config_dir>/cache
    },
    "fretboard": {
        "preset": "standard",
        "string_count": 6,
        "fret_count": 24,
    },
    "logging": {
        "log_timings": False,
    },
}


class ConfigManager:
    """Reads and writes the JSON configuration sections.

    Stored values are what the user saved; ``get_config`` layers the
    environment on top (OPENAI_MODEL, the API key variable named by
    ``api_key_env``, HARMONIC_FINDER_CACHE_DIR and LOG_TIMINGS=1) without
    writing it back.
    """

    def __init__(self, config_dir: Optional[str] = None):
        """Initialize the configuration manager.

        Args:
            config_dir: Directory holding the section files, or None for
                ~/.config/harmonic_finder
        """
        self.config_dir = Path(os.path.expanduser(config_dir or DEFAULT_CONFIG_DIR))
        self.config_dir.mkdir(parents=True, exist_ok=True)

        self.default_configs = copy.deepcopy(DEFAULT_CONFIGS)
        self.configs = {
            name: self.load_config(name, defaults)
            for name, defaults in self.default_configs.items()
        }

    def _section_path(self, name: str) -> Path:
        return self.config_dir / f"{name}.json"

    def load_config(self, name: str, default_config: Dict[str, Any]) -> Dict[str, Any]:
        """Read one section, writing the defaults on first use.

        Keys missing from the file are taken from the defaults. An unreadable
        file is logged and the defaults are used for this run.
        """
        path = self._section_path(name)
        if not path.exists():
            config = dict(default_config)
            self.save_config(name, config)
            return config

        try:
            with open(path, "r") as f:
                stored = json.load(f)
        except (OSError, ValueError) as e:
            logger.error(f"Could not read {path}, using defaults: {e}")
            return dict(default_config)

        if not isinstance(stored, dict):
            logger.error(f"Ignoring {path}: expected a JSON object")
            return dict(default_config)

        logger.info(f"Loaded {name} configuration from {path}")
        return {**default_config, **stored}

    def save_config(self, name: str, config: Dict[str, Any]) -> bool:
        """Write one section; returns False if the file could not be written."""
        path = self._section_path(name)
        try:
            with open(path, "w") as f:
                json.dump(config, f, indent=2)
        except OSError as e:
            logger.error(f"Could not write {path}: {e}")
            return False
        logger.info(f"Saved {name} configuration to {path}")
        return True

    def get_config(self, name: str) -> Dict[str, Any]:
        """Return a copy of one section with environment overrides applied.

        Args:
            name: Section name, e.g. "resolution"

        Returns:
            Configuration dictionary; empty for an unknown section
        """
        config = dict(self.configs.get(name, {}))
        env = os.environ

        if name == "resolution":
            if env.get("OPENAI_MODEL"):
                config["model"] = env["OPENAI_MODEL"]
            config["api_key"] = env.get(config.get("api_key_env") or "OPENAI_API_KEY")
        elif name == "cache":
            config["directory"] = (
                env.get("HARMONIC_FINDER_CACHE_DIR")
                or config.get("directory")
                or str(self.config_dir / "cache")
            )
        elif name == "logging" and env.get("LOG_TIMINGS") == "1":
            config["log_timings"] = True

        return config

    def update_config(self, name: str, updates: Dict[str, Any]) -> bool:
        """Merge updates into a section and persist it."""
        if name not in self.configs:
            logger.error(f"Unknown configuration section: {name}")
            return False
        self.configs[name].update(updates)
        return self.save_config(name, self.configs[name])

    def reset_config(self, name: str) -> bool:
        """Restore a section to its defaults and persist it."""
        if name not in self.default_configs:
            logger.error(f"Unknown configuration section: {name}")
            return False
        self.configs[name] = dict(self.default_configs[name])
        return self.save_config(name, self.configs[name])
