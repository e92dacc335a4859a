"""
User configuration management for imagecompare.

Settings are looked up in this order, first hit wins:
1. Explicit values passed by the caller (CLI flags, request fields)
2. ``IMAGECOMPARE_*`` environment variables
3. ``config.json`` in the config directory (``~/.imagecompare`` unless
   ``IMAGECOMPARE_CONFIG_DIR`` points elsewhere)
4. The defaults in ``config.py``

Example config.json:
{
    "default_threshold": 90.0,
    "default_workers": 4,
    "max_image_pixels": 500000000,
    "highlight_color": [255, 0, 0, 255]
}
"""

import json
import os
from pathlib import Path
from typing import Any, Callable, Optional
import logging

from .config import (
    CONFIG_DIR,
    DEFAULT_SIMILARITY_THRESHOLD,
    DEFAULT_WORKERS,
    DEFAULT_HIGHLIGHT_COLOR,
    MAX_IMAGE_PIXELS,
)

logger = logging.getLogger(__name__)

CONFIG_FILENAME = 'config.json'

# setting name -> (environment variable, default)
SETTINGS = {
    'default_threshold': ('IMAGECOMPARE_THRESHOLD', DEFAULT_SIMILARITY_THRESHOLD),
    'default_workers': ('IMAGECOMPARE_WORKERS', DEFAULT_WORKERS),
    'max_image_pixels': ('IMAGECOMPARE_MAX_PIXELS', MAX_IMAGE_PIXELS),
    'highlight_color': ('IMAGECOMPARE_HIGHLIGHT_COLOR', DEFAULT_HIGHLIGHT_COLOR),
}


def _parse_env(raw: str) -> Any:
    """Numbers and lists arrive JSON-encoded; anything else stays a string."""
    try:
        return json.loads(raw)
    except (json.JSONDecodeError, TypeError):
        return raw


class UserConfig:
    """
    Process-wide view of the user's settings.

    The JSON file is read on first use and cached until ``reload()``;
    environment variables are consulted on every lookup.
    """

    _instance: Optional['UserConfig'] = None
    _file_values: Optional[dict] = None

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    @property
    def config_dir(self) -> Path:
        override = os.getenv('IMAGECOMPARE_CONFIG_DIR')
        return Path(override) if override else Path(CONFIG_DIR)

    @property
    def config_file_path(self) -> Path:
        return self.config_dir / CONFIG_FILENAME

    def _read_file(self) -> dict:
        path = self.config_file_path
        if not path.exists():
            return {}
        try:
            with open(path, 'r', encoding='utf-8') as f:
                values = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Ignoring unreadable config file {path}: {e}")
            return {}
        if not isinstance(values, dict):
            logger.warning(f"Ignoring config file {path}: expected a JSON object")
            return {}
        logger.debug(f"Loaded configuration from {path}")
        return values

    def reload(self):
        """Forget the cached file contents so the next lookup re-reads them."""
        self._file_values = None

    def get(self, key: str, default: Any = None, env_var: Optional[str] = None) -> Any:
        """
        Look up one setting.

        Args:
            key: Key in config.json
            default: Value used when neither source has the key
            env_var: Environment variable that overrides the file

        Returns:
            The first value found, environment first
        """
        if env_var:
            raw = os.getenv(env_var)
            if raw is not None:
                return _parse_env(raw)

        if self._file_values is None:
            self._file_values = self._read_file()
        return self._file_values.get(key, default)

    def _setting(self, name: str, cast: Callable[[Any], Any]) -> Any:
        env_var, default = SETTINGS[name]
        value = self.get(name, default=default, env_var=env_var)
        try:
            return cast(value)
        except (TypeError, ValueError):
            logger.warning(f"Invalid value for {name}: {value!r}, using {default!r}")
            return cast(default)

    @property
    def default_threshold(self) -> float:
        """Similarity percentage (0-100) needed to share a similarity group."""
        return self._setting('default_threshold', float)

    @property
    def default_workers(self) -> int:
        return self._setting('default_workers', int)

    @property
    def max_image_pixels(self) -> int:
        """Pillow decompression-bomb limit, in pixels."""
        return self._setting('max_image_pixels', int)

    @property
    def highlight_color(self) -> Any:
        """Difference marker: a color name/hex string, or an RGB(A) tuple."""
        return self._setting('highlight_color', lambda v: tuple(v) if isinstance(v, list) else v)

    def create_example_config(self) -> bool:
        """Write a config.json holding every setting at its default value."""
        example = {"_comment": "imagecompare user configuration"}
        for name, (_, default) in SETTINGS.items():
            example[name] = list(default) if isinstance(default, tuple) else default

        try:
            self.config_dir.mkdir(parents=True, exist_ok=True)
            with open(self.config_file_path, 'w', encoding='utf-8') as f:
                json.dump(example, f, indent=2)
        except OSError as e:
            logger.error(f"Could not write {self.config_file_path}: {e}")
            return False
        logger.info(f"Created example config file at {self.config_file_path}")
        return True


_user_config = UserConfig()


def get_user_config() -> UserConfig:
    """Return the shared UserConfig instance."""
    return _user_config
