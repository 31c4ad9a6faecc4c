"""
MemFS Configuration Loader

Configuration management for the filesystem and its collaborators:
- JSON configuration file loading
- Default value handling
- Validation of numeric limits
- Dot-notation runtime access

Author: YSNRFD
Version: 1.0.0
"""

import json
import threading
from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Optional

from memfs.exceptions import ConfigError


@dataclass
class FilesystemConfig:
    """Filesystem configuration settings."""
    block_size: int = 1024  # bytes per content block
    max_depth: int = 256  # deepest allowed path, in segments


@dataclass
class UsersConfig:
    """User registry configuration settings."""
    seed_file: str = "users/users"


@dataclass
class ShellConfig:
    """Shell configuration settings."""
    prompt: str = "$ "
    read_buffer_size: int = 256
    history_size: int = 1000


@dataclass
class LoggingConfig:
    """Logging configuration settings."""
    level: str = "WARNING"
    log_file: Optional[str] = None
    console_output: bool = True


@dataclass
class Config:
    """
    Main configuration container.

    Holds every configuration section with type-safe attribute access.
    """
    filesystem: FilesystemConfig = field(default_factory=FilesystemConfig)
    users: UsersConfig = field(default_factory=UsersConfig)
    shell: ShellConfig = field(default_factory=ShellConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)


class ConfigLoader:
    """
    Configuration loader and manager.

    Example:
        >>> loader = ConfigLoader()
        >>> config = loader.load('memfs.json')
        >>> config.filesystem.block_size
        1024
    """

    _instance: Optional['ConfigLoader'] = None
    _lock = threading.Lock()

    def __new__(cls) -> 'ConfigLoader':
        """Singleton pattern for configuration access."""
        with cls._lock:
            if cls._instance is None:
                cls._instance = super().__new__(cls)
                cls._instance._config = Config()
                cls._instance._loaded = False
            return cls._instance

    def load(self, config_path: str) -> Config:
        """
        Load configuration from a JSON file.

        Args:
            config_path: Path to the configuration file

        Returns:
            Config object with loaded settings

        Raises:
            ConfigError: If the file cannot be loaded, parsed or validated
        """
        path = Path(config_path)

        if not path.exists():
            raise ConfigError(f"Configuration file not found: {config_path}")

        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError(f"Invalid JSON in configuration file: {e}")
        except OSError as e:
            raise ConfigError(f"Cannot read configuration file: {e}")

        self._config = self.parse(data)
        self._loaded = True
        return self._config

    @staticmethod
    def parse(data: dict[str, Any]) -> Config:
        """Parse configuration data into a validated Config object."""
        if not isinstance(data, dict):
            raise ConfigError("Configuration root must be a JSON object")

        config = Config()

        for section in fields(Config):
            section_data = data.get(section.name)
            if section_data is None:
                continue
            if not isinstance(section_data, dict):
                raise ConfigError(f"Configuration section '{section.name}' must be an object")

            current = getattr(config, section.name)
            known = {f.name for f in fields(current)}
            unknown = set(section_data) - known
            if unknown:
                raise ConfigError(
                    f"Unknown keys in section '{section.name}': {', '.join(sorted(unknown))}"
                )

            values = {name: getattr(current, name) for name in known}
            values.update(section_data)
            setattr(config, section.name, type(current)(**values))

        ConfigLoader.validate(config)
        return config

    @staticmethod
    def validate(config: Config) -> None:
        """Reject settings the filesystem cannot work with."""
        if not isinstance(config.filesystem.block_size, int) or config.filesystem.block_size <= 0:
            raise ConfigError("filesystem.block_size must be a positive integer")
        if not isinstance(config.filesystem.max_depth, int) or config.filesystem.max_depth <= 0:
            raise ConfigError("filesystem.max_depth must be a positive integer")
        if not isinstance(config.shell.read_buffer_size, int) or config.shell.read_buffer_size <= 0:
            raise ConfigError("shell.read_buffer_size must be a positive integer")
        if not isinstance(config.shell.history_size, int) or config.shell.history_size <= 0:
            raise ConfigError("shell.history_size must be a positive integer")

    @property
    def config(self) -> Config:
        """Get the current configuration."""
        if not self._loaded:
            return Config()
        return self._config

    def get(self, key: str, default: Any = None) -> Any:
        """
        Get a configuration value by dot-notation key.

        Args:
            key: Dot-notation key (e.g., 'filesystem.block_size')
            default: Default value if key not found
        """
        obj: Any = self.config

        for part in key.split('.'):
            if hasattr(obj, part):
                obj = getattr(obj, part)
            else:
                return default

        return obj

    def set(self, key: str, value: Any) -> None:
        """
        Set a configuration value at runtime.

        Changes are not persisted to disk. A value that fails validation
        is rolled back.

        Raises:
            ConfigError: For an unknown key or an invalid value
        """
        parts = key.split('.')
        if not self._loaded:
            self._config = Config()
            self._loaded = True
        obj: Any = self._config

        for part in parts[:-1]:
            if hasattr(obj, part):
                obj = getattr(obj, part)
            else:
                raise ConfigError(f"Invalid configuration key: {key}")

        final_key = parts[-1]
        if not hasattr(obj, final_key):
            raise ConfigError(f"Invalid configuration key: {key}")
        previous = getattr(obj, final_key)
        setattr(obj, final_key, value)
        try:
            self.validate(self._config)
        except AttributeError:
            setattr(obj, final_key, previous)
            raise ConfigError(f"Cannot replace configuration section: {key}")
        except ConfigError:
            setattr(obj, final_key, previous)
            raise

    def reset(self) -> None:
        """Drop any loaded configuration and go back to defaults."""
        self._config = Config()
        self._loaded = False

    def to_dict(self) -> dict[str, Any]:
        """Convert configuration to dictionary."""
        def dataclass_to_dict(obj: Any) -> Any:
            if hasattr(obj, '__dataclass_fields__'):
                return {
                    k: dataclass_to_dict(v)
                    for k, v in obj.__dict__.items()
                }
            elif isinstance(obj, list):
                return [dataclass_to_dict(item) for item in obj]
            elif isinstance(obj, dict):
                return {k: dataclass_to_dict(v) for k, v in obj.items()}
            return obj

        return dataclass_to_dict(self.config)


def get_config() -> Config:
    """
    Get the global configuration instance.

    Returns:
        Config object with current settings
    """
    return ConfigLoader().config
