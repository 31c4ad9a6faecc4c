"""
MemFS Exception Hierarchy

    FileSystemException (Base)
    ├── PathNotFoundError
    │   ├── NotAFileError
    │   └── NotADirectoryError
    ├── AlreadyExistsError
    ├── PermissionDeniedError
    ├── InvalidPathError
    ├── InvalidPermissionFormatError
    ├── FileSystemStateError
    ├── SeedFileError
    └── ConfigError
"""

from .fs_exceptions import (
    FileSystemException,
    PathNotFoundError,
    AlreadyExistsError,
    PermissionDeniedError,
    NotAFileError,
    NotADirectoryError,
    InvalidPathError,
    InvalidPermissionFormatError,
    FileSystemStateError,
    SeedFileError,
    ConfigError,
)

__all__ = [
    "FileSystemException",
    "PathNotFoundError",
    "AlreadyExistsError",
    "PermissionDeniedError",
    "NotAFileError",
    "NotADirectoryError",
    "InvalidPathError",
    "InvalidPermissionFormatError",
    "FileSystemStateError",
    "SeedFileError",
    "ConfigError",
]
