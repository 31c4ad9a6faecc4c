"""
Path Resolver Module

Handles path parsing and permission-checked traversal of the tree.

Only absolute, ``/``-separated paths are accepted. Empty segments are
ignored (``//a///b/`` is ``/a/b``); ``.`` and ``..`` are rejected since
there is no working directory to be relative to.

Traversal requires execute permission on every directory that is
descended into. The check happens before the next name is looked up, so
walking through a directory the caller cannot enter never reveals what
lies beyond it.

Author: YSNRFD
Version: 1.0.0
"""

from dataclasses import dataclass
from typing import List, Optional, Tuple

from memfs.exceptions import (
    InvalidPathError,
    NotADirectoryError,
    PathNotFoundError,
    PermissionDeniedError,
)
from .node import Directory, Node
from .permissions import Permission


@dataclass
class ParsedPath:
    """An absolute path split into its segments."""
    components: List[str]

    @property
    def is_root(self) -> bool:
        return not self.components

    @property
    def parent(self) -> 'ParsedPath':
        return ParsedPath(self.components[:-1])

    @property
    def name(self) -> Optional[str]:
        return self.components[-1] if self.components else None

    def __str__(self) -> str:
        return '/' + '/'.join(self.components)


class PathResolver:
    """
    Resolves paths against a tree.

    Example:
        >>> PathResolver.parse('/home//alice/').components
        ['home', 'alice']
        >>> node = PathResolver.resolve('/home/alice', root, 'alice')
    """

    @staticmethod
    def parse(path: str, max_depth: Optional[int] = None) -> ParsedPath:
        """
        Split a path into segments.

        Args:
            path: Absolute path string
            max_depth: Reject paths with more segments than this

        Raises:
            InvalidPathError: If the path is not absolute, contains a
                ``.``/``..`` segment or is too deep
        """
        if not isinstance(path, str) or not path.startswith('/'):
            raise InvalidPathError(str(path), reason="path must start with '/'")

        components = [c for c in path.split('/') if c]

        for component in components:
            if component in ('.', '..'):
                raise InvalidPathError(path, reason=f"relative segment {component!r}")
            if '\0' in component:
                raise InvalidPathError(path, reason="NUL character in segment")

        if max_depth is not None and len(components) > max_depth:
            raise InvalidPathError(path, reason=f"deeper than {max_depth} segments")

        return ParsedPath(components=components)

    @staticmethod
    def normalize(path: str) -> str:
        """Canonical form of an absolute path."""
        return str(PathResolver.parse(path))

    @staticmethod
    def join(base: str, *names: str) -> str:
        """Append segment names to an absolute path."""
        parts = PathResolver.parse(base).components + [n for n in names if n]
        return '/' + '/'.join(parts)

    @staticmethod
    def split(path: str) -> Tuple[str, str]:
        """Split into (parent path, final segment). The root splits to ('/', '')."""
        parsed = PathResolver.parse(path)
        if parsed.is_root:
            return ('/', '')
        return (str(parsed.parent), parsed.name)

    @staticmethod
    def _walk(
        components: List[str],
        root: Directory,
        caller: str,
        path: str
    ) -> Node:
        node: Node = root
        walked: List[str] = []

        for name in components:
            if not isinstance(node, Directory):
                raise NotADirectoryError(path, component=node.name)

            if not node.has_permission(caller, Permission.EXECUTE):
                raise PermissionDeniedError(
                    '/' + '/'.join(walked),
                    operation="traverse",
                    user=caller
                )

            child = node.get(name)
            if child is None:
                raise PathNotFoundError(path, component=name)

            node = child
            walked.append(name)

        return node

    @staticmethod
    def resolve(
        path: str,
        root: Directory,
        caller: str,
        max_depth: Optional[int] = None
    ) -> Node:
        """
        Resolve a path to the node it names.

        Raises:
            InvalidPathError: Malformed path
            PermissionDeniedError: Caller cannot traverse a directory on the way
            PathNotFoundError: A segment is missing or lies beneath a file
        """
        parsed = PathResolver.parse(path, max_depth)
        if parsed.is_root:
            return root
        return PathResolver._walk(parsed.components, root, caller, path)

    @staticmethod
    def resolve_parent(
        path: str,
        root: Directory,
        caller: str,
        max_depth: Optional[int] = None
    ) -> Tuple[Directory, str]:
        """
        Resolve the directory that holds (or would hold) the final segment.

        Returns:
            Tuple of (parent directory, final segment name)

        Raises:
            InvalidPathError: Malformed path, or the root itself
            PermissionDeniedError: Caller cannot traverse a directory on the way
            PathNotFoundError: The parent is missing or is not a directory
        """
        parsed = PathResolver.parse(path, max_depth)
        if parsed.is_root:
            raise InvalidPathError(path, reason="the root has no parent")

        parent = PathResolver._walk(parsed.parent.components, root, caller, path)
        if not isinstance(parent, Directory):
            raise NotADirectoryError(path, component=parent.name)

        return parent, parsed.name

    @staticmethod
    def get_depth(path: str) -> int:
        """Number of segments in the path."""
        return len(PathResolver.parse(path).components)
