"""
User Seed Loader Module

Reads the user/permission seed file and applies it to a filesystem.

Each non-blank line holds three whitespace-separated fields:

    <user> <directory> <permission>

for example ``maria /** rw-``. The directory ``/**`` stands for the
root. Lines starting with ``#`` are comments. Every user named in the
file is registered, and the permission is granted to them on the
directory, acting as root.

Author: YSNRFD
Version: 1.0.0
"""

from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List

from memfs.exceptions import FileSystemException, SeedFileError
from memfs.filesystem.fs import FileSystem
from memfs.filesystem.permissions import SUPERUSER
from memfs.logger import get_logger


ROOT_WILDCARD = "/**"


@dataclass(frozen=True)
class SeedEntry:
    """A single ``user directory permission`` line."""
    user: str
    directory: str
    permission: str
    line_number: int = 0

    @property
    def path(self) -> str:
        """Directory with the root wildcard translated."""
        return '/' if self.directory == ROOT_WILDCARD else self.directory


class SeedLoader:
    """
    Parses seed text and applies it.

    Example:
        >>> loader = SeedLoader()
        >>> entries = loader.parse("maria /** rw-\\n")
        >>> loader.apply(fs, entries)
        1
    """

    def __init__(self):
        self._logger = get_logger('users')

    def parse(self, text: str) -> List[SeedEntry]:
        """
        Parse seed text into entries.

        Lines that do not have exactly three fields are logged and skipped.
        """
        entries: List[SeedEntry] = []

        for line_number, raw in enumerate(text.splitlines(), start=1):
            line = raw.strip()
            if not line or line.startswith('#'):
                continue

            parts = line.split()
            if len(parts) != 3:
                self._logger.warning(
                    "Skipping malformed seed line",
                    context={'line': line_number, 'text': line}
                )
                continue

            user, directory, permission = parts
            entries.append(SeedEntry(user, directory, permission, line_number))

        return entries

    def load(self, seed_path: str) -> List[SeedEntry]:
        """
        Read and parse a seed file.

        Raises:
            SeedFileError: If the file is missing or unreadable
        """
        path = Path(seed_path)

        if not path.exists():
            raise SeedFileError(seed_path, reason="file not found")

        try:
            text = path.read_text(encoding='utf-8')
        except (OSError, UnicodeDecodeError) as e:
            raise SeedFileError(seed_path, reason=str(e))

        entries = self.parse(text)
        self._logger.info(
            "Loaded user seed file",
            context={'path': seed_path, 'entries': len(entries)}
        )
        return entries

    def apply(self, fs: FileSystem, entries: Iterable[SeedEntry]) -> int:
        """
        Register users and apply their grants.

        Grants that cannot be applied (missing directory, malformed
        permission, invalid user name) are logged and skipped.

        Returns:
            Number of grants applied
        """
        applied = 0

        for entry in entries:
            try:
                fs.add_user(entry.user)
            except ValueError as e:
                self._logger.warning(
                    "Skipping seed entry with invalid user",
                    context={'line': entry.line_number, 'error': e}
                )
                continue

            try:
                fs.chmod(entry.path, SUPERUSER, entry.user, entry.permission)
            except FileSystemException as e:
                self._logger.warning(
                    "Could not apply seed permission",
                    user=entry.user,
                    context={'line': entry.line_number, 'path': entry.directory, 'error': e}
                )
                continue

            applied += 1

        return applied

    def load_into(self, fs: FileSystem, seed_path: str) -> int:
        """Load a seed file and apply it to ``fs``."""
        return self.apply(fs, self.load(seed_path))
