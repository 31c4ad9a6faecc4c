"""
Shell Built-in Commands

Maps each shell command onto a filesystem operation, acting as the
shell's current user.

Author: YSNRFD
Version: 1.0.0
"""

from typing import Callable, List, Tuple

from memfs.exceptions import FileSystemException
from memfs.filesystem.permissions import SUPERUSER


class UsageError(ValueError):
    """Wrong arguments for a built-in command."""


def split_flags(
    args: List[str],
    allowed: str,
    leading_only: bool = False
) -> Tuple[set, List[str]]:
    """
    Separate single-letter flags from positional arguments.

    ``-ra`` and ``-r -a`` are equivalent; ``--`` ends flag parsing. With
    ``leading_only`` the first positional argument ends it too.

    Raises:
        UsageError: For a flag not in ``allowed``
    """
    flags = set()
    positional: List[str] = []
    parsing = True

    for arg in args:
        if parsing and arg == '--':
            parsing = False
        elif parsing and arg.startswith('-') and len(arg) > 1:
            for letter in arg[1:]:
                if letter not in allowed:
                    raise UsageError(f"invalid option -- '{letter}'")
                flags.add(letter)
        else:
            positional.append(arg)
            if leading_only:
                parsing = False

    return flags, positional


class BuiltinCommands:
    """
    Built-in shell commands.

    Every command returns an exit code: 0 on success, 1 when the
    filesystem refused the operation, 2 on a usage error.
    """

    HELP_TEXT = """
MemFS Shell - Built-in Commands

File Operations:
  ls [-r] [path]                 List directory contents
  mkdir <path>...                Create directories
  touch <path>...                Create empty files
  rm [-r] <path>                 Remove file or directory
  write [-a] <path> <text>...    Write (or append) text to a file
  read <path>                    Display file contents (alias: cat)
  mv <src> <dst>                 Move or rename
  cp [-r] <src> <dst>            Copy file or directory
  chmod <path> <user> <perm>     Grant a permission string (e.g. r-x)

Users:
  whoami                         Display current user
  users                          List registered users
  su <user>                      Switch to a registered user
  useradd <user>                 Register a user (root only)
  userdel <user>                 Unregister a user (root only)

Shell:
  help                           Display this help
  history                        Display command history
  exit                           Exit the shell
"""

    def __init__(self, shell):
        """
        Initialize built-in commands.

        Args:
            shell: The shell instance
        """
        self._shell = shell
        self._commands: dict[str, Callable[[List[str]], int]] = {
            'help': self.cmd_help,
            'exit': self.cmd_exit,
            'quit': self.cmd_exit,
            'whoami': self.cmd_whoami,
            'users': self.cmd_users,
            'su': self.cmd_su,
            'useradd': self.cmd_useradd,
            'userdel': self.cmd_userdel,
            'ls': self.cmd_ls,
            'mkdir': self.cmd_mkdir,
            'touch': self.cmd_touch,
            'rm': self.cmd_rm,
            'write': self.cmd_write,
            'read': self.cmd_read,
            'cat': self.cmd_read,
            'mv': self.cmd_mv,
            'cp': self.cmd_cp,
            'chmod': self.cmd_chmod,
            'history': self.cmd_history,
        }

    @property
    def _fs(self):
        return self._shell.filesystem

    @property
    def _user(self) -> str:
        return self._shell.current_user

    def is_builtin(self, name: str) -> bool:
        """Check if a command is built-in."""
        return name in self._commands

    def execute(self, name: str, args: List[str]) -> int:
        """
        Execute a built-in command.

        Returns:
            Exit code (127 for an unknown command)
        """
        cmd = self._commands.get(name)
        if cmd is None:
            return 127

        try:
            return cmd(args)
        except UsageError as e:
            print(f"{name}: {e}")
            return 2
        except FileSystemException as e:
            self._shell.logger.info(
                f"{name} failed", user=self._user,
                context={'error_code': e.error_code, **e.context}
            )
            print(f"{name}: {e}")
            return 1

    @staticmethod
    def _expect(args: List[str], count: int, usage: str) -> None:
        if len(args) != count:
            raise UsageError(f"usage: {usage}")

    # Command implementations

    def cmd_help(self, args: List[str]) -> int:
        """Display help information."""
        print(self.HELP_TEXT)
        return 0

    def cmd_exit(self, args: List[str]) -> int:
        """Exit the shell."""
        self._shell.request_exit()
        return 0

    def cmd_whoami(self, args: List[str]) -> int:
        """Display current user."""
        print(self._user)
        return 0

    def cmd_users(self, args: List[str]) -> int:
        """List registered users."""
        for user in self._fs.users():
            print(user)
        return 0

    def cmd_su(self, args: List[str]) -> int:
        """Switch user."""
        username = args[0] if args else SUPERUSER

        if not self._fs.is_known_user(username):
            print(f"su: user {username} does not exist")
            return 1

        self._shell.current_user = username
        print(f"Switched to user {username}")
        return 0

    def _require_root(self, name: str) -> bool:
        if self._user != SUPERUSER:
            print(f"{name}: only root may manage users")
            return False
        return True

    def cmd_useradd(self, args: List[str]) -> int:
        """Register a user (root only)."""
        self._expect(args, 1, "useradd <user>")
        if not self._require_root('useradd'):
            return 1

        try:
            added = self._fs.add_user(args[0])
        except ValueError as e:
            raise UsageError(str(e))

        if not added:
            print(f"useradd: user {args[0]} already exists")
            return 1
        return 0

    def cmd_userdel(self, args: List[str]) -> int:
        """Unregister a user (root only)."""
        self._expect(args, 1, "userdel <user>")
        if not self._require_root('userdel'):
            return 1

        if not self._fs.remove_user(args[0]):
            print(f"userdel: user {args[0]} does not exist")
            return 1
        return 0

    def cmd_ls(self, args: List[str]) -> int:
        """List directory contents."""
        flags, paths = split_flags(args, 'r')
        if len(paths) > 1:
            raise UsageError("usage: ls [-r] [path]")
        path = paths[0] if paths else '/'

        for line in self._fs.ls(path, self._user, recursive='r' in flags):
            print(line)
        return 0

    def cmd_mkdir(self, args: List[str]) -> int:
        """Create directories."""
        if not args:
            raise UsageError("usage: mkdir <path>...")
        for path in args:
            self._fs.mkdir(path, self._user)
        return 0

    def cmd_touch(self, args: List[str]) -> int:
        """Create empty files."""
        if not args:
            raise UsageError("usage: touch <path>...")
        for path in args:
            self._fs.touch(path, self._user)
        return 0

    def cmd_rm(self, args: List[str]) -> int:
        """Remove a file or directory."""
        flags, paths = split_flags(args, 'r')
        self._expect(paths, 1, "rm [-r] <path>")
        self._fs.rm(paths[0], self._user, recursive='r' in flags)
        return 0

    def cmd_write(self, args: List[str]) -> int:
        """Write text to a file."""
        flags, rest = split_flags(args, 'a', leading_only=True)
        if len(rest) < 2:
            raise UsageError("usage: write [-a] <path> <text>...")
        data = ' '.join(rest[1:]).encode('utf-8')
        self._fs.write(rest[0], self._user, data, append='a' in flags)
        return 0

    def cmd_read(self, args: List[str]) -> int:
        """Display file contents."""
        self._expect(args, 1, "read <path>")
        buffer = bytearray(self._shell.read_buffer_size)
        count = self._fs.read(args[0], self._user, buffer)
        print(buffer[:count].decode('utf-8', errors='replace'))
        return 0

    def cmd_mv(self, args: List[str]) -> int:
        """Move or rename."""
        self._expect(args, 2, "mv <src> <dst>")
        self._fs.mv(args[0], args[1], self._user)
        return 0

    def cmd_cp(self, args: List[str]) -> int:
        """Copy a file or directory."""
        flags, paths = split_flags(args, 'r')
        self._expect(paths, 2, "cp [-r] <src> <dst>")
        self._fs.cp(paths[0], paths[1], self._user, recursive='r' in flags)
        return 0

    def cmd_chmod(self, args: List[str]) -> int:
        """Grant a permission string to a user."""
        self._expect(args, 3, "chmod <path> <user> <perm>")
        path, target, permission = args
        self._fs.chmod(path, self._user, target, permission)
        return 0

    def cmd_history(self, args: List[str]) -> int:
        """Display command history."""
        for index, line in enumerate(self._shell.parser.get_history(), start=1):
            print(f"{index:5d}  {line}")
        return 0
