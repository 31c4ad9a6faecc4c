"""
MemFS File System Module

Provides the in-memory filesystem:
- Directory / File node tree
- Per-node permission sets with ownership and inheritance
- Permission-checked path resolution
- Fixed-size block content storage
- The filesystem operations
"""

from .permissions import (
    PermissionSet,
    Permission,
    SUPERUSER,
    FULL_PERMISSION,
    NO_PERMISSION,
    validate_permission,
)
from .blocks import Block, BlockStore, DEFAULT_BLOCK_SIZE
from .node import Node, Directory, File, NodeType
from .path_resolver import PathResolver, ParsedPath
from .fs import FileSystem, Listing, ListingEntry, create_filesystem

__all__ = [
    # Permissions
    'PermissionSet',
    'Permission',
    'SUPERUSER',
    'FULL_PERMISSION',
    'NO_PERMISSION',
    'validate_permission',
    # Blocks
    'Block',
    'BlockStore',
    'DEFAULT_BLOCK_SIZE',
    # Nodes
    'Node',
    'Directory',
    'File',
    'NodeType',
    # Path Resolver
    'PathResolver',
    'ParsedPath',
    # FileSystem
    'FileSystem',
    'Listing',
    'ListingEntry',
    'create_filesystem',
]
