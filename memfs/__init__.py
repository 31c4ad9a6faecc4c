"""
MemFS - An in-memory, permission-gated, multi-user filesystem

Unix-like operations (mkdir, touch, rm, write, read, mv, cp, ls, chmod)
over a single directory tree, with per-node read/write/execute grants,
ownership, inheritance and a superuser.
"""

__version__ = "1.0.0"
__author__ = "YSNRFD"

from .filesystem import FileSystem, create_filesystem
from .shell import Shell, create_shell

__all__ = [
    'FileSystem',
    'create_filesystem',
    'Shell',
    'create_shell',
]
