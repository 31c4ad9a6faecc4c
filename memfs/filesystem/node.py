"""
Node Module

The tree is built from two node variants:

- ``Directory`` owns its children (name -> Node)
- ``File`` owns a BlockStore with its content

Both carry a name, an owner and a PermissionSet. The parent link is a
weak reference: a directory owns its children, a child never owns its
parent. Directory-only operations live on ``Directory`` alone, so
callers branch on the variant (``isinstance`` or ``node.node_type``)
before touching children.

Author: YSNRFD
Version: 1.0.0
"""

import weakref
from enum import Enum
from typing import Iterator, Optional

from .blocks import BlockStore, DEFAULT_BLOCK_SIZE
from .permissions import PermissionSet, Permission


class NodeType(Enum):
    """Node variants."""
    DIRECTORY = 1
    FILE = 2


class Node:
    """State common to both variants."""

    node_type: NodeType

    def __init__(self, name: str, owner: str):
        self.name = name
        self._parent_ref: Optional[weakref.ref] = None
        self.permissions = self._make_permissions(owner)

    def _make_permissions(self, owner: str) -> PermissionSet:
        return PermissionSet(owner)

    @property
    def owner(self) -> str:
        return self.permissions.owner

    @property
    def parent(self) -> Optional['Directory']:
        if self._parent_ref is None:
            return None
        return self._parent_ref()

    @property
    def is_directory(self) -> bool:
        return self.node_type is NodeType.DIRECTORY

    def effective_permission(self, user: str) -> str:
        return self.permissions.effective_permission(user)

    def has_permission(self, user: str, flag: Permission) -> bool:
        return self.permissions.has(user, flag)

    def ancestors(self) -> Iterator['Directory']:
        """Yield the parent, grandparent, ... up to the root."""
        current = self.parent
        while current is not None:
            yield current
            current = current.parent

    def path(self) -> str:
        """Absolute path of this node, rebuilt from parent links."""
        parts = []
        node: Optional[Node] = self
        while node is not None and node.parent is not None:
            parts.append(node.name)
            node = node.parent
        return '/' + '/'.join(reversed(parts))

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, owner={self.owner!r})"


class Directory(Node):
    """A directory node."""

    node_type = NodeType.DIRECTORY

    def __init__(self, name: str, owner: str):
        self._children: dict[str, Node] = {}
        super().__init__(name, owner)

    def _make_permissions(self, owner: str) -> PermissionSet:
        return PermissionSet(owner, inherit_from=self._parent_permissions)

    def _parent_permissions(self) -> Optional[PermissionSet]:
        parent = self.parent
        return parent.permissions if parent is not None else None

    def get(self, name: str) -> Optional[Node]:
        return self._children.get(name)

    def __contains__(self, name: str) -> bool:
        return name in self._children

    def __len__(self) -> int:
        return len(self._children)

    @property
    def is_empty(self) -> bool:
        return not self._children

    def names(self) -> list[str]:
        """Child names, sorted."""
        return sorted(self._children)

    def attach(self, node: Node) -> None:
        """
        Insert ``node`` under this directory.

        Raises:
            ValueError: If the name is taken or the node still has a parent
        """
        if node.name in self._children:
            raise ValueError(f"Duplicate entry {node.name!r} in {self.path()}")
        if node.parent is not None:
            raise ValueError(f"{node!r} is still attached to {node.parent.path()}")
        node._parent_ref = weakref.ref(self)
        self._children[node.name] = node

    def detach(self, name: str) -> Node:
        """Remove and return the child called ``name``."""
        node = self._children.pop(name)
        node._parent_ref = None
        return node

    def clear(self) -> None:
        """
        Detach the whole subtree, deepest entries first.

        Uses an explicit stack so very deep trees are handled without
        recursion.
        """
        stack: list[Directory] = [self]
        order: list[Directory] = []
        while stack:
            directory = stack.pop()
            order.append(directory)
            stack.extend(
                child for child in directory._children.values()
                if isinstance(child, Directory)
            )
        for directory in reversed(order):
            for name in list(directory._children):
                directory.detach(name)

    def is_ancestor_of(self, node: Node) -> bool:
        """True if ``node`` lives somewhere below this directory."""
        return any(ancestor is self for ancestor in node.ancestors())


class File(Node):
    """A regular file node."""

    node_type = NodeType.FILE

    def __init__(self, name: str, owner: str, block_size: int = DEFAULT_BLOCK_SIZE):
        super().__init__(name, owner)
        self.content = BlockStore(block_size)

    @property
    def size(self) -> int:
        return self.content.size
