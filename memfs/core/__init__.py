"""
MemFS Core Module

Core components shared by every subsystem:
- Subsystem lifecycle base class
- Configuration Loader
"""

from .registry import Subsystem, SubsystemState
from .config_loader import (
    ConfigLoader,
    Config,
    FilesystemConfig,
    UsersConfig,
    ShellConfig,
    LoggingConfig,
    get_config,
)

__all__ = [
    # Lifecycle
    'Subsystem',
    'SubsystemState',
    # Config
    'ConfigLoader',
    'Config',
    'FilesystemConfig',
    'UsersConfig',
    'ShellConfig',
    'LoggingConfig',
    'get_config',
]
