"""
Filesystem Exceptions

Exceptions raised by the in-memory filesystem and its collaborators.
Every core operation either succeeds or raises exactly one of these.

Author: YSNRFD
Version: 1.0.0
"""

from typing import Optional, Any


class FileSystemException(Exception):
    """
    Base exception for all filesystem-related errors.

    Attributes:
        message: Human-readable error description
        path: Path associated with the error (if applicable)
        error_code: Numeric error code for programmatic handling
        context: Extra structured details
    """

    def __init__(
        self,
        message: str,
        path: Optional[str] = None,
        error_code: Optional[int] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.path = path
        self.error_code = error_code or 4000
        self.context = context or {}
        if path:
            self.context["path"] = path

    def __str__(self) -> str:
        base = f"[Error {self.error_code}] {self.message}"
        if self.path:
            base = f"{base} (path={self.path})"
        return base


class PathNotFoundError(FileSystemException):
    """
    Some component of the path does not exist.

    Example:
        >>> raise PathNotFoundError("/a/b", component="b")
    """

    def __init__(
        self,
        path: str,
        component: Optional[str] = None,
        message: Optional[str] = None,
        error_code: int = 4001,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        ctx = context or {}
        if component:
            ctx["component"] = component
        super().__init__(
            message=message or f"Path not found: {path}",
            path=path,
            error_code=error_code,
            context=ctx
        )
        self.component = component


class AlreadyExistsError(FileSystemException):
    """
    A create-style operation targets a name that is already taken.

    Example:
        >>> raise AlreadyExistsError("/a/b")
    """

    def __init__(
        self,
        path: str,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        super().__init__(
            message=f"Path already exists: {path}",
            path=path,
            error_code=4002,
            context=context
        )


class PermissionDeniedError(FileSystemException):
    """
    Permission denied for the operation.

    Raised when the caller lacks a flag on the relevant node, is not the
    owner where ownership is required, or attempts a structural operation
    that is never allowed (removing or moving the root, removing a
    non-empty directory without recursion, ...).

    Example:
        >>> raise PermissionDeniedError("/a", operation="write", user="alice")
    """

    def __init__(
        self,
        path: str,
        operation: Optional[str] = None,
        user: Optional[str] = None,
        reason: Optional[str] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        ctx = context or {}
        if operation:
            ctx["operation"] = operation
        if user is not None:
            ctx["user"] = user
        if reason:
            ctx["reason"] = reason
        message = f"Permission denied: {path}"
        if reason:
            message = f"{message}: {reason}"
        super().__init__(
            message=message,
            path=path,
            error_code=4003,
            context=ctx
        )
        self.operation = operation
        self.user = user
        self.reason = reason


class NotAFileError(PathNotFoundError):
    """
    Path names a directory where a file was required.

    Example:
        >>> raise NotAFileError("/a")
    """

    def __init__(
        self,
        path: str,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        super().__init__(
            path,
            message=f"Not a file: {path}",
            error_code=4008,
            context=context
        )


class NotADirectoryError(PathNotFoundError):
    """
    Path names a file where a directory was required.

    Also raised when a path tries to descend beneath a file.

    Example:
        >>> raise NotADirectoryError("/a/f/g", component="f")
    """

    def __init__(
        self,
        path: str,
        component: Optional[str] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        super().__init__(
            path,
            component=component,
            message=f"Not a directory: {path}",
            error_code=4009,
            context=context
        )


class InvalidPathError(FileSystemException):
    """
    The path is malformed (not absolute, bad segment, too deep).

    Example:
        >>> raise InvalidPathError("a/b", reason="path must start with '/'")
    """

    def __init__(
        self,
        path: str,
        reason: Optional[str] = None,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        ctx = context or {}
        if reason:
            ctx["reason"] = reason
        super().__init__(
            message=f"Invalid path: {path!r}" + (f" ({reason})" if reason else ""),
            error_code=4010,
            context=ctx
        )
        self.path = path
        self.reason = reason


class InvalidPermissionFormatError(FileSystemException):
    """
    A permission string is not exactly three characters of the form [r-][w-][x-].

    Example:
        >>> raise InvalidPermissionFormatError("rwxr")
    """

    def __init__(
        self,
        permission: Any,
        context: Optional[dict[str, Any]] = None
    ) -> None:
        ctx = context or {}
        ctx["permission"] = permission
        super().__init__(
            message=f"Invalid permission format: {permission!r}",
            error_code=4011,
            context=ctx
        )
        self.permission = permission


class FileSystemStateError(FileSystemException):
    """The filesystem was used before ``initialize()`` or after ``stop()``."""

    def __init__(self, message: str = "Filesystem is not initialized") -> None:
        super().__init__(message=message, error_code=4012)


class SeedFileError(FileSystemException):
    """
    The user seed file could not be read.

    Example:
        >>> raise SeedFileError("users/users", reason="file not found")
    """

    def __init__(
        self,
        seed_path: str,
        reason: Optional[str] = None
    ) -> None:
        super().__init__(
            message=f"Cannot load user seed file {seed_path}" + (f": {reason}" if reason else ""),
            error_code=4013,
            context={"seed_path": seed_path}
        )
        self.seed_path = seed_path
        self.reason = reason


class ConfigError(FileSystemException):
    """Raised when configuration loading or validation fails."""

    def __init__(self, message: str) -> None:
        super().__init__(message=message, error_code=4014)
