"""
MemFS Shell Module

The interactive command-line shell over a FileSystem.

Author: YSNRFD
Version: 1.0.0
"""

from typing import Optional

from memfs.core.config_loader import ShellConfig, get_config
from memfs.core.registry import Subsystem, SubsystemState
from memfs.filesystem.fs import FileSystem
from memfs.filesystem.permissions import SUPERUSER
from .builtins import BuiltinCommands
from .parser import CommandParser, ParseError, ParsedCommand


class Shell(Subsystem):
    """
    MemFS Interactive Shell.

    Provides:
    - Command parsing
    - Built-in filesystem and user commands
    - Command history
    - Script execution

    Example:
        >>> shell = Shell(fs, user='alice')
        >>> shell.execute_line('ls -r /')
        0
    """

    def __init__(
        self,
        filesystem: FileSystem,
        user: str = SUPERUSER,
        config: Optional[ShellConfig] = None
    ):
        super().__init__('shell')
        config = config or get_config().shell
        self._fs = filesystem
        self._user = user
        self._prompt_suffix = config.prompt
        self._read_buffer_size = config.read_buffer_size
        self._parser = CommandParser(history_size=config.history_size)
        self._builtins = BuiltinCommands(self)
        self._exiting = False

    def initialize(self) -> None:
        self.set_state(SubsystemState.INITIALIZED)

    @property
    def filesystem(self) -> FileSystem:
        return self._fs

    @property
    def current_user(self) -> str:
        return self._user

    @current_user.setter
    def current_user(self, value: str):
        self._logger.info("Switched user", user=value, context={'from': self._user})
        self._user = value

    @property
    def read_buffer_size(self) -> int:
        return self._read_buffer_size

    @property
    def parser(self) -> CommandParser:
        return self._parser

    @property
    def exiting(self) -> bool:
        return self._exiting

    def get_prompt(self) -> str:
        """Generate the shell prompt."""
        prompt_char = '#' if self._user == SUPERUSER else self._prompt_suffix.rstrip()
        return f"{self._user}@memfs{prompt_char} "

    def run(self) -> None:
        """
        Run the interactive shell.

        This is the main REPL loop.
        """
        self.start()

        print("MemFS shell. Type 'help' for a list of commands.\n")

        while not self._exiting:
            try:
                line = input(self.get_prompt())
            except EOFError:
                print()
                break
            except KeyboardInterrupt:
                print("^C")
                continue

            self.execute_line(line)

        self.stop()

    def execute_line(self, line: str) -> int:
        """
        Execute a command line.

        Returns:
            Exit code
        """
        try:
            cmd = self._parser.parse(line)
        except ParseError as e:
            print(f"shell: {e}")
            return 2

        if cmd is None:
            return 0

        return self._execute_command(cmd)

    def _execute_command(self, cmd: ParsedCommand) -> int:
        if not self._builtins.is_builtin(cmd.command):
            print(f"{cmd.command}: command not found")
            return 127

        self._logger.debug(
            "Executing command", user=self._user,
            context={'command': cmd.command, 'args': cmd.args}
        )
        return self._builtins.execute(cmd.command, cmd.args)

    def request_exit(self) -> None:
        """Request the shell to exit."""
        self._exiting = True

    def run_script(self, script: str) -> int:
        """
        Run a script, one command per line.

        Stops early on ``exit``.

        Returns:
            Last non-empty exit code
        """
        exit_code = 0

        for line in script.splitlines():
            if self._exiting:
                break
            line = line.strip()
            if line and not line.startswith('#'):
                exit_code = self.execute_line(line)

        return exit_code


def create_shell(filesystem: FileSystem, user: str = SUPERUSER) -> Shell:
    """Factory function to create a shell."""
    shell = Shell(filesystem, user)
    shell.initialize()
    return shell
