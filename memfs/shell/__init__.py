"""
MemFS Shell Module

Interactive command-line interface:
- Command parsing
- Built-in commands
- REPL and script execution
"""

from .parser import CommandParser, ParsedCommand, ParseError
from .builtins import BuiltinCommands, UsageError, split_flags
from .shell import Shell, create_shell

__all__ = [
    'CommandParser',
    'ParsedCommand',
    'ParseError',
    'BuiltinCommands',
    'UsageError',
    'split_flags',
    'Shell',
    'create_shell',
]
