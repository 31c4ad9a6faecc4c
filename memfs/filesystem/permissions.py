"""
Permission Module

Per-node access control. Each node carries a PermissionSet mapping user
names to three-character permission strings (``"rwx"``, ``"r-x"``,
``"---"``...). Lookups resolve, in order:

1. the superuser, who always gets ``"rwx"``
2. the node's owner
3. an explicit grant for the user
4. for directories only, the parent directory's answer
5. ``"---"``

Author: YSNRFD
Version: 1.0.0
"""

import re
from enum import Enum
from typing import Callable, Optional

from memfs.exceptions import InvalidPermissionFormatError


SUPERUSER = "root"
FULL_PERMISSION = "rwx"
NO_PERMISSION = "---"

_PERMISSION_RE = re.compile(r"[r-][w-][x-]")


class Permission(Enum):
    """Single permission flags."""
    READ = 'r'
    WRITE = 'w'
    EXECUTE = 'x'


def validate_permission(permission: str) -> str:
    """
    Check a permission string.

    Args:
        permission: Candidate string such as ``"r-x"``

    Returns:
        The same string

    Raises:
        InvalidPermissionFormatError: If it is not exactly ``[r-][w-][x-]``
    """
    if not isinstance(permission, str) or not _PERMISSION_RE.fullmatch(permission):
        raise InvalidPermissionFormatError(permission)
    return permission


class PermissionSet:
    """
    Grants held by a single node.

    The ``inherit_from`` callable returns the parent directory's
    PermissionSet (or None at the root). Files are built without one, so
    a file never inherits.

    Example:
        >>> perms = PermissionSet('alice')
        >>> perms.effective_permission('alice')
        'rwx'
        >>> perms.grant('bob', 'r--')
        >>> perms.has('bob', Permission.WRITE)
        False
    """

    def __init__(
        self,
        owner: str,
        inherit_from: Optional[Callable[[], Optional['PermissionSet']]] = None
    ):
        self._owner = owner
        self._grants: dict[str, str] = {owner: FULL_PERMISSION}
        self._inherit_from = inherit_from

    @property
    def owner(self) -> str:
        return self._owner

    def set_owner(self, owner: str) -> None:
        """
        Hand the node over to a new owner.

        The new owner is seeded with ``"rwx"`` unless they already hold an
        explicit grant on this node.
        """
        self._owner = owner
        self._grants.setdefault(owner, FULL_PERMISSION)

    def grant(self, user: str, permission: str) -> None:
        """
        Set or overwrite the permission string for a user.

        Raises:
            InvalidPermissionFormatError: If the string is malformed
        """
        self._grants[user] = validate_permission(permission)

    def explicit(self, user: str) -> Optional[str]:
        """Return the grant stored on this node for ``user``, if any."""
        return self._grants.get(user)

    def effective_permission(self, user: str) -> str:
        """
        Resolve the permission string that applies to ``user`` here.

        The walk up the tree is iterative so deep trees cannot exhaust
        the interpreter stack.
        """
        if user == SUPERUSER:
            return FULL_PERMISSION

        current: Optional[PermissionSet] = self
        while current is not None:
            if user == current._owner:
                return current._grants.get(user, NO_PERMISSION)
            permission = current._grants.get(user)
            if permission is not None:
                return permission
            if current._inherit_from is None:
                break
            current = current._inherit_from()

        return NO_PERMISSION

    def has(self, user: str, flag: Permission) -> bool:
        """Check whether ``user`` holds a single flag on this node."""
        return flag.value in self.effective_permission(user)

    def __repr__(self) -> str:
        return f"PermissionSet(owner={self._owner!r}, grants={dict(self._grants)!r})"
