"""Configuration file loading and validation.

This module handles loading and saving the wiki configuration from a YAML
file, with environment variable overrides read through python-dotenv.
"""

import os
from typing import Any, Dict

import yaml
from dotenv import load_dotenv

from .errors import ConfigError, ConfigFilesystemError
from .models import WikiConfig


class ConfigLoader:
    """Handles configuration file loading, validation, and saving.

    A missing or empty configuration file yields the defaults, so the wiki
    works without running ``slopopedia init`` first.

    Configuration file structure:
        storage_path: ".slopopedia/storage.json"
        storage_key: "slopopedia-pages"
        feed_url: "http://localhost:3000/api/pages"
        feed_timeout: 10
        pages_dir: null
        export_dir: "exports"

    Environment overrides (a .env file in the working directory is loaded
    first):
        SLOPOPEDIA_STORAGE_PATH, SLOPOPEDIA_FEED_URL, SLOPOPEDIA_PAGES_DIR
    """

    DEFAULT_CONFIG_DIR = '.slopopedia'
    DEFAULT_CONFIG_FILE = 'config.yaml'
    DEFAULT_CONFIG_PATH = os.path.join(DEFAULT_CONFIG_DIR, DEFAULT_CONFIG_FILE)

    STRING_FIELDS = ('storage_path', 'storage_key', 'feed_url', 'export_dir')

    ENV_OVERRIDES = {
        'SLOPOPEDIA_STORAGE_PATH': 'storage_path',
        'SLOPOPEDIA_FEED_URL': 'feed_url',
        'SLOPOPEDIA_PAGES_DIR': 'pages_dir',
    }

    @classmethod
    def load(cls, config_path: str = DEFAULT_CONFIG_PATH) -> WikiConfig:
        """Load configuration from a YAML file and apply environment overrides.

        Args:
            config_path: Path to the YAML configuration file

        Returns:
            WikiConfig with parsed configuration

        Raises:
            ConfigFilesystemError: If the file exists but cannot be read
            ConfigError: If the configuration is invalid or malformed
        """
        try:
            with open(config_path, 'r', encoding='utf-8') as f:
                content = f.read()
        except FileNotFoundError:
            content = ''
        except PermissionError:
            raise ConfigFilesystemError(config_path, 'read', 'Permission denied')
        except OSError as e:
            raise ConfigFilesystemError(config_path, 'read', str(e))

        config_dict: Dict[str, Any] = {}
        if content.strip():
            try:
                loaded = yaml.safe_load(content)
            except yaml.YAMLError as e:
                raise ConfigError(f"Invalid YAML syntax: {str(e)}")

            if loaded is not None:
                if not isinstance(loaded, dict):
                    raise ConfigError(
                        f"Configuration must be a YAML dictionary, got {type(loaded).__name__}"
                    )
                config_dict = loaded

        config = cls._parse_config(config_dict)
        cls._apply_env_overrides(config)
        return config

    @classmethod
    def save(cls, config_path: str, config: WikiConfig) -> None:
        """Save configuration to a YAML file.

        Raises:
            ConfigFilesystemError: If the file cannot be written
        """
        config_dict = {
            'storage_path': config.storage_path,
            'storage_key': config.storage_key,
            'feed_url': config.feed_url,
            'feed_timeout': config.feed_timeout,
            'pages_dir': config.pages_dir,
            'export_dir': config.export_dir,
        }

        yaml_str = yaml.safe_dump(
            config_dict,
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False
        )

        config_dir = os.path.dirname(config_path)
        if config_dir:
            try:
                os.makedirs(config_dir, exist_ok=True)
            except OSError as e:
                raise ConfigFilesystemError(config_dir, 'create_directory', str(e))

        try:
            with open(config_path, 'w', encoding='utf-8') as f:
                f.write(yaml_str)
        except PermissionError:
            raise ConfigFilesystemError(config_path, 'write', 'Permission denied')
        except OSError as e:
            raise ConfigFilesystemError(config_path, 'write', str(e))

    @classmethod
    def _parse_config(cls, config_dict: Dict[str, Any]) -> WikiConfig:
        """Validate field types and fill in defaults.

        Raises:
            ConfigError: If a field has the wrong type or value
        """
        config = WikiConfig()

        for name in cls.STRING_FIELDS:
            if name not in config_dict or config_dict[name] is None:
                continue
            value = config_dict[name]
            if not isinstance(value, str) or not value.strip():
                raise ConfigError(
                    f"must be a non-empty string, got {value!r}",
                    name
                )
            setattr(config, name, value.strip())

        timeout = config_dict.get('feed_timeout')
        if timeout is not None:
            if isinstance(timeout, bool) or not isinstance(timeout, (int, float)):
                raise ConfigError(
                    f"must be a number, got {type(timeout).__name__}",
                    'feed_timeout'
                )
            if timeout <= 0:
                raise ConfigError(f"must be positive, got {timeout}", 'feed_timeout')
            config.feed_timeout = timeout

        pages_dir = config_dict.get('pages_dir')
        if pages_dir is not None:
            if not isinstance(pages_dir, str):
                raise ConfigError(
                    f"must be a string or null, got {type(pages_dir).__name__}",
                    'pages_dir'
                )
            config.pages_dir = pages_dir.strip() or None

        return config

    @classmethod
    def _apply_env_overrides(cls, config: WikiConfig) -> None:
        load_dotenv()
        for env_name, field_name in cls.ENV_OVERRIDES.items():
            value = os.getenv(env_name)
            if value:
                setattr(config, field_name, value)
