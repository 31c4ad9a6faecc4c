"""
FileSystem Module

The in-memory filesystem: a single tree rooted at ``/``, a set of
registered users, and the nine operations (mkdir, touch, rm, write,
read, mv, cp, ls, chmod) that every caller goes through.

Each operation runs under one re-entrant lock and performs all of its
checks before it changes anything, so it either succeeds completely or
raises a single FileSystemException and leaves the tree untouched.

Author: YSNRFD
Version: 1.0.0
"""

import threading
from dataclasses import dataclass
from typing import Iterator, List, Optional, Union

from memfs.core.config_loader import FilesystemConfig, get_config
from memfs.core.registry import Subsystem, SubsystemState
from memfs.exceptions import (
    AlreadyExistsError,
    FileSystemStateError,
    NotADirectoryError,
    NotAFileError,
    PermissionDeniedError,
)
from .node import Directory, File, Node
from .path_resolver import PathResolver
from .permissions import Permission, SUPERUSER, validate_permission


@dataclass(frozen=True)
class ListingEntry:
    """One line of an ``ls`` result."""
    name: str
    depth: int
    is_directory: bool

    def __str__(self) -> str:
        suffix = '/' if self.is_directory else ''
        return f"{'  ' * self.depth}{self.name}{suffix}"


class Listing:
    """
    Lazy ``ls`` result.

    Every iteration walks the directory afresh, so a Listing can be
    iterated any number of times. Entries come out in name order; with
    ``recursive`` each directory is followed immediately by its own
    entries, one indentation level deeper.

    Each pass collects its entries while holding the filesystem lock, so
    it never observes a tree that another operation is half way through
    changing.
    """

    def __init__(self, directory: Directory, lock: threading.RLock, recursive: bool = False):
        self._directory = directory
        self._lock = lock
        self._recursive = recursive

    def __iter__(self) -> Iterator[ListingEntry]:
        with self._lock:
            entries = list(self._walk())
        return iter(entries)

    def _walk(self) -> Iterator[ListingEntry]:
        stack: List[tuple[Directory, Iterator[str], int]] = [
            (self._directory, iter(self._directory.names()), 0)
        ]
        while stack:
            directory, names, depth = stack[-1]
            name = next(names, None)
            if name is None:
                stack.pop()
                continue
            child = directory.get(name)
            yield ListingEntry(name, depth, child.is_directory)
            if self._recursive and isinstance(child, Directory):
                stack.append((child, iter(child.names()), depth + 1))

    def lines(self) -> List[str]:
        """Formatted entries, ready for display."""
        return [str(entry) for entry in self]


class FileSystem(Subsystem):
    """
    In-memory, permission-gated filesystem.

    Example:
        >>> fs = FileSystem()
        >>> fs.initialize()
        >>> fs.mkdir('/docs', 'root')
        >>> fs.touch('/docs/notes.txt', 'root')
        >>> fs.write('/docs/notes.txt', 'root', b'hello')
        5
        >>> [str(e) for e in fs.ls('/', 'root', recursive=True)]
        ['docs/', '  notes.txt']
    """

    def __init__(self, config: Optional[FilesystemConfig] = None):
        super().__init__('filesystem')
        config = config or get_config().filesystem
        self._block_size = config.block_size
        self._max_depth = config.max_depth
        self._root: Optional[Directory] = None
        self._users: set[str] = set()
        self._lock = threading.RLock()

    def initialize(self) -> None:
        """Create the root directory. May only be called once."""
        with self._lock:
            if self._root is not None:
                raise FileSystemStateError("Filesystem is already initialized")

            self._root = Directory('/', SUPERUSER)
            self._users = {SUPERUSER}

            self.set_state(SubsystemState.INITIALIZED)
            self._logger.debug(
                "Filesystem initialized",
                context={'block_size': self._block_size, 'max_depth': self._max_depth}
            )

    @property
    def root(self) -> Directory:
        return self._tree()

    @property
    def lock(self) -> threading.RLock:
        return self._lock

    def _tree(self) -> Directory:
        if self._root is None:
            raise FileSystemStateError()
        if self._state is SubsystemState.STOPPED:
            raise FileSystemStateError("Filesystem is stopped")
        return self._root

    # User registry

    def add_user(self, user: str) -> bool:
        """
        Register a user.

        Returns:
            False if the user was already registered

        Raises:
            ValueError: If the name is empty or contains whitespace
        """
        if not isinstance(user, str) or not user or any(c.isspace() for c in user):
            raise ValueError(f"Invalid user name: {user!r}")

        with self._lock:
            self._tree()
            if user in self._users:
                return False
            self._users.add(user)

        self._logger.debug("Registered user", context={'target': user})
        return True

    def remove_user(self, user: str) -> bool:
        """
        Unregister a user. Grants held on nodes are left in place.

        Returns:
            False if the user was not registered

        Raises:
            PermissionDeniedError: For the superuser
        """
        if user == SUPERUSER:
            raise PermissionDeniedError(
                '/', operation="userdel", reason="the superuser cannot be removed"
            )

        with self._lock:
            self._tree()
            if user not in self._users:
                return False
            self._users.discard(user)

        self._logger.debug("Removed user", context={'target': user})
        return True

    def is_known_user(self, user: str) -> bool:
        with self._lock:
            return user in self._users

    def users(self) -> List[str]:
        """Registered users, sorted."""
        with self._lock:
            return sorted(self._users)

    # Permission helpers

    @staticmethod
    def _require(node: Node, user: str, flag: Permission, operation: str) -> None:
        if not node.has_permission(user, flag):
            raise PermissionDeniedError(node.path(), operation=operation, user=user)

    @staticmethod
    def _require_owner(node: Node, user: str, operation: str) -> None:
        if user != SUPERUSER and user != node.owner:
            raise PermissionDeniedError(
                node.path(),
                operation=operation,
                user=user,
                reason="only the owner or root may do this"
            )

    def _resolve(self, path: str, user: str) -> Node:
        return PathResolver.resolve(path, self._tree(), user, self._max_depth)

    def _resolve_parent(self, path: str, user: str) -> tuple[Directory, str]:
        return PathResolver.resolve_parent(path, self._tree(), user, self._max_depth)

    # Operations

    def _create(self, path: str, user: str, operation: str, factory) -> Node:
        parsed = PathResolver.parse(path, self._max_depth)
        if parsed.is_root:
            raise AlreadyExistsError('/')

        parent, name = self._resolve_parent(path, user)
        self._require(parent, user, Permission.WRITE, operation)

        if name in parent:
            raise AlreadyExistsError(str(parsed))

        node = factory(name)
        parent.attach(node)
        return node

    def mkdir(self, path: str, user: str) -> None:
        """
        Create an empty directory owned by ``user``.

        Raises:
            PathNotFoundError: The parent does not exist
            AlreadyExistsError: The name is taken
            PermissionDeniedError: No write permission on the parent
        """
        with self._lock:
            self._create(path, user, "mkdir", lambda name: Directory(name, user))
        self._logger.debug("Created directory", user=user, context={'path': path})

    def touch(self, path: str, user: str) -> None:
        """
        Create an empty file owned by ``user``.

        Raises:
            PathNotFoundError: The parent does not exist
            AlreadyExistsError: The name is taken
            PermissionDeniedError: No write permission on the parent
        """
        with self._lock:
            self._create(
                path, user, "touch", lambda name: File(name, user, self._block_size)
            )
        self._logger.debug("Created file", user=user, context={'path': path})

    def rm(self, path: str, user: str, recursive: bool = False) -> None:
        """
        Remove a file or directory.

        Only the owner or root may remove a node. A non-empty directory
        needs ``recursive``. The root can never be removed.

        Raises:
            PathNotFoundError: The target does not exist
            PermissionDeniedError: Not the owner, non-empty directory
                without ``recursive``, or the root
        """
        with self._lock:
            parsed = PathResolver.parse(path, self._max_depth)
            if parsed.is_root:
                raise PermissionDeniedError(
                    '/', operation="rm", user=user,
                    reason="the root directory cannot be removed"
                )

            node = self._resolve(path, user)
            self._require_owner(node, user, 'rm')

            if isinstance(node, Directory) and not node.is_empty and not recursive:
                raise PermissionDeniedError(
                    str(parsed), operation="rm", user=user,
                    reason="directory not empty"
                )

            node.parent.detach(node.name)
            if isinstance(node, Directory):
                node.clear()

        self._logger.debug(
            "Removed node", user=user,
            context={'path': path, 'recursive': recursive}
        )

    def _resolve_file(self, path: str, user: str) -> File:
        node = self._resolve(path, user)
        if not isinstance(node, File):
            raise NotAFileError(path)
        return node

    def write(
        self,
        path: str,
        user: str,
        data: Union[bytes, bytearray, memoryview],
        *,
        append: bool = False
    ) -> int:
        """
        Store ``data`` in a file, replacing its content unless ``append``.

        Returns:
            Number of bytes written

        Raises:
            TypeError: ``data`` is not bytes-like
            PathNotFoundError: Missing target, or the target is a directory
            PermissionDeniedError: No write permission on the file
        """
        if not isinstance(data, (bytes, bytearray, memoryview)):
            raise TypeError(
                f"data must be bytes, bytearray or memoryview, not {type(data).__name__}"
            )

        with self._lock:
            node = self._resolve_file(path, user)
            self._require(node, user, Permission.WRITE, 'write')
            written = node.content.write(data, append=append)

        self._logger.debug(
            "Wrote file", user=user,
            context={'path': path, 'bytes': written, 'append': append}
        )
        return written

    def read(self, path: str, user: str, buffer: Union[bytearray, memoryview]) -> int:
        """
        Copy a file's content into ``buffer`` from offset 0.

        A buffer smaller than the file receives only the leading bytes.

        Returns:
            Number of bytes copied

        Raises:
            PathNotFoundError: Missing target, or the target is a directory
            PermissionDeniedError: No read permission on the file
        """
        with self._lock:
            node = self._resolve_file(path, user)
            self._require(node, user, Permission.READ, 'read')
            return node.content.read(buffer)

    def mv(self, old_path: str, new_path: str, user: str) -> None:
        """
        Move and/or rename a node. The mover becomes its owner.

        Raises:
            PathNotFoundError: Source or destination parent missing
            AlreadyExistsError: Destination name taken
            PermissionDeniedError: Not the owner of the source, no write
                permission on the destination parent, the root is
                involved, or a directory would move into itself
        """
        with self._lock:
            old_parsed = PathResolver.parse(old_path, self._max_depth)
            new_parsed = PathResolver.parse(new_path, self._max_depth)
            if old_parsed.is_root or new_parsed.is_root:
                raise PermissionDeniedError(
                    '/', operation="mv", user=user,
                    reason="the root directory cannot be moved"
                )

            node = self._resolve(old_path, user)
            self._require_owner(node, user, 'mv')

            new_parent, new_name = self._resolve_parent(new_path, user)
            self._require(new_parent, user, Permission.WRITE, 'mv')

            if new_name in new_parent:
                raise AlreadyExistsError(str(new_parsed))

            if isinstance(node, Directory) and (
                new_parent is node or node.is_ancestor_of(new_parent)
            ):
                raise PermissionDeniedError(
                    str(old_parsed), operation="mv", user=user,
                    reason="cannot move a directory into itself"
                )

            node.parent.detach(node.name)
            node.name = new_name
            node.permissions.set_owner(user)
            new_parent.attach(node)

        self._logger.debug(
            "Moved node", user=user,
            context={'from': old_path, 'to': new_path}
        )

    def _copy_node(self, source: Node, name: str, user: str) -> Node:
        if isinstance(source, File):
            copy = File(name, user, source.content.block_size)
            copy.content = source.content.copy()
            return copy
        return Directory(name, user)

    def _clone(self, source: Node, name: str, user: str) -> Node:
        """
        Build a detached copy of ``source`` owned by ``user`` at every level.

        Read permission is checked on each node before it is copied;
        nothing is attached to the tree here, so a failure leaves no trace.
        """
        top = self._copy_node(source, name, user)
        stack: List[tuple[Node, Node]] = [(source, top)]

        while stack:
            original, copy = stack.pop()
            if not isinstance(original, Directory):
                continue
            for child_name in original.names():
                child = original.get(child_name)
                self._require(child, user, Permission.READ, 'cp')
                child_copy = self._copy_node(child, child_name, user)
                copy.attach(child_copy)
                stack.append((child, child_copy))

        return top

    def cp(self, src_path: str, dst_path: str, user: str, recursive: bool = False) -> None:
        """
        Copy a file, or with ``recursive`` a whole directory tree.

        Content is duplicated, never shared; every copy is owned by
        ``user``.

        Raises:
            PathNotFoundError: Source or destination parent missing
            AlreadyExistsError: Destination name taken
            PermissionDeniedError: No read permission on a copied node, no
                write permission on the destination parent, a directory
                without ``recursive``, or a copy into the source itself
        """
        with self._lock:
            source = self._resolve(src_path, user)
            self._require(source, user, Permission.READ, 'cp')

            if isinstance(source, Directory) and not recursive:
                raise PermissionDeniedError(
                    src_path, operation="cp", user=user,
                    reason="recursive copy required for directories"
                )

            dst_parsed = PathResolver.parse(dst_path, self._max_depth)
            if dst_parsed.is_root:
                raise AlreadyExistsError('/')

            dst_parent, dst_name = self._resolve_parent(dst_path, user)
            self._require(dst_parent, user, Permission.WRITE, 'cp')

            if dst_name in dst_parent:
                raise AlreadyExistsError(str(dst_parsed))

            if isinstance(source, Directory) and (
                dst_parent is source or source.is_ancestor_of(dst_parent)
            ):
                raise PermissionDeniedError(
                    src_path, operation="cp", user=user,
                    reason="cannot copy a directory into itself"
                )

            dst_parent.attach(self._clone(source, dst_name, user))

        self._logger.debug(
            "Copied node", user=user,
            context={'from': src_path, 'to': dst_path, 'recursive': recursive}
        )

    def ls(self, path: str, user: str, recursive: bool = False) -> Listing:
        """
        List a directory.

        Checks happen immediately; the returned Listing is lazy and
        re-iterable.

        Raises:
            PathNotFoundError: Missing target, or the target is a file
            PermissionDeniedError: No read permission on the directory
        """
        with self._lock:
            node = self._resolve(path, user)
            if not isinstance(node, Directory):
                raise NotADirectoryError(path)
            self._require(node, user, Permission.READ, 'ls')
            return Listing(node, self._lock, recursive)

    def chmod(self, path: str, user: str, target_user: str, permission: str) -> None:
        """
        Grant ``permission`` to ``target_user`` on a node.

        Raises:
            InvalidPermissionFormatError: Malformed permission string
            PathNotFoundError: The target does not exist
            PermissionDeniedError: Caller is neither the owner nor root
        """
        validate_permission(permission)

        with self._lock:
            node = self._resolve(path, user)
            self._require_owner(node, user, 'chmod')
            node.permissions.grant(target_user, permission)

        self._logger.debug(
            "Changed permissions", user=user,
            context={'path': path, 'target': target_user, 'permission': permission}
        )


def create_filesystem(config: Optional[FilesystemConfig] = None) -> FileSystem:
    """Factory: build and initialize a FileSystem."""
    fs = FileSystem(config)
    fs.initialize()
    return fs
