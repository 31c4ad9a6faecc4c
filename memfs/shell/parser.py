"""
Command Parser Module

Parses shell command lines into a command name and arguments.

Author: YSNRFD
Version: 1.0.0
"""

from collections import deque
from dataclasses import dataclass, field
from typing import Optional, List


@dataclass
class ParsedCommand:
    """A parsed command line."""
    command: str
    args: List[str] = field(default_factory=list)


class ParseError(ValueError):
    """Raised for unterminated quotes."""


class CommandParser:
    """
    Parses shell command lines.

    Handles:
    - Command and arguments
    - Single and double quoted strings
    - Backslash escapes
    - ``#`` comment lines

    Example:
        >>> parser = CommandParser()
        >>> cmd = parser.parse('write -a /notes "hello world"')
        >>> cmd.command, cmd.args
        ('write', ['-a', '/notes', 'hello world'])
    """

    def __init__(self, history_size: int = 1000):
        self._history: deque[str] = deque(maxlen=history_size)

    def parse(self, line: str) -> Optional[ParsedCommand]:
        """
        Parse a command line.

        Returns:
            ParsedCommand or None if the line is empty or a comment

        Raises:
            ParseError: If a quote is left open
        """
        line = line.strip()

        if not line or line.startswith('#'):
            return None

        self._history.append(line)

        words = self._tokenize(line)
        if not words:
            return None

        return ParsedCommand(command=words[0], args=words[1:])

    def _tokenize(self, line: str) -> List[str]:
        """Split a line into words."""
        words: List[str] = []
        current = ""
        has_word = False
        in_quote = None
        i = 0

        while i < len(line):
            char = line[i]

            if char in ('"', "'") and in_quote is None:
                in_quote = char
                has_word = True
                i += 1
                continue

            if char == in_quote:
                in_quote = None
                i += 1
                continue

            if char == '\\' and i + 1 < len(line) and in_quote != "'":
                current += line[i + 1]
                has_word = True
                i += 2
                continue

            if in_quote:
                current += char
                i += 1
                continue

            if char.isspace():
                if has_word:
                    words.append(current)
                    current = ""
                    has_word = False
                i += 1
                continue

            current += char
            has_word = True
            i += 1

        if in_quote:
            raise ParseError(f"unterminated quote: {in_quote}")

        if has_word:
            words.append(current)

        return words

    def get_history(self) -> List[str]:
        """Get command history."""
        return list(self._history)

    def clear_history(self) -> None:
        """Clear command history."""
        self._history.clear()
