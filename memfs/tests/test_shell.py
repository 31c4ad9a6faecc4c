"""
Shell Tests

Tests for the command parser, built-in commands and script execution.

Run with: python -m pytest memfs/tests -v
"""

import io
import os
import tempfile
import unittest
from contextlib import redirect_stdout

from memfs.core.config_loader import FilesystemConfig, ShellConfig
from memfs.filesystem import create_filesystem
from memfs.main import main
from memfs.shell import CommandParser, ParseError, Shell, UsageError, split_flags


class TestCommandParser(unittest.TestCase):
    """Test command line tokenizing."""

    def setUp(self):
        self.parser = CommandParser(history_size=3)

    def test_simple(self):
        """Test a command and its arguments."""
        cmd = self.parser.parse('cp -r /a /b')
        self.assertEqual(cmd.command, 'cp')
        self.assertEqual(cmd.args, ['-r', '/a', '/b'])

    def test_quotes_and_escapes(self):
        """Test quoted words and backslash escapes."""
        cmd = self.parser.parse('write /f "hello world" \'a "b"\' c\\ d ""')
        self.assertEqual(cmd.args, ['/f', 'hello world', 'a "b"', 'c d', ''])

    def test_blank_and_comment(self):
        """Test blank lines and comments produce nothing."""
        self.assertIsNone(self.parser.parse('   '))
        self.assertIsNone(self.parser.parse('# ls /'))
        self.assertEqual(self.parser.get_history(), [])

    def test_unterminated_quote(self):
        """Test an open quote is a ParseError."""
        with self.assertRaises(ParseError):
            self.parser.parse('write /f "oops')

    def test_history_is_bounded(self):
        """Test history keeps only the most recent lines."""
        for line in ('ls', 'whoami', 'users', 'help'):
            self.parser.parse(line)
        self.assertEqual(self.parser.get_history(), ['whoami', 'users', 'help'])
        self.parser.clear_history()
        self.assertEqual(self.parser.get_history(), [])


class TestSplitFlags(unittest.TestCase):
    """Test flag handling for built-ins."""

    def test_flags(self):
        """Test combined and separate flags."""
        self.assertEqual(split_flags(['-ra', '/x'], 'ra'), ({'r', 'a'}, ['/x']))
        self.assertEqual(split_flags(['-r', '/x', '-a'], 'ra'), ({'r', 'a'}, ['/x']))

    def test_double_dash(self):
        """Test '--' ends flag parsing."""
        self.assertEqual(split_flags(['--', '-r'], 'r'), (set(), ['-r']))

    def test_leading_only(self):
        """Test the first positional argument can end flag parsing."""
        self.assertEqual(
            split_flags(['-a', '/f', '-5', '-a'], 'a', leading_only=True),
            ({'a'}, ['/f', '-5', '-a'])
        )

    def test_unknown_flag(self):
        """Test an unknown flag is a usage error."""
        with self.assertRaises(UsageError):
            split_flags(['-z'], 'r')


class ShellTestCase(unittest.TestCase):
    """Shell over a fresh filesystem, with output captured."""

    def setUp(self):
        self.fs = create_filesystem(FilesystemConfig())
        self.fs.add_user('alice')
        self.shell = Shell(self.fs, 'root', ShellConfig(read_buffer_size=64))
        self.shell.initialize()

    def run_line(self, line):
        out = io.StringIO()
        with redirect_stdout(out):
            code = self.shell.execute_line(line)
        return code, out.getvalue()


class TestBuiltins(ShellTestCase):
    """Test built-in commands."""

    def test_file_commands(self):
        """Test creating, writing and reading a file."""
        self.assertEqual(self.run_line('mkdir /docs')[0], 0)
        self.assertEqual(self.run_line('touch /docs/notes')[0], 0)
        self.assertEqual(self.run_line('write /docs/notes "hello world"')[0], 0)
        self.assertEqual(self.run_line('write -a /docs/notes !')[0], 0)

        code, out = self.run_line('read /docs/notes')
        self.assertEqual(code, 0)
        self.assertEqual(out, 'hello world!\n')

    def test_read_buffer_limit(self):
        """Test read shows at most read_buffer_size bytes."""
        self.run_line('touch /big')
        self.fs.write('/big', 'root', b'x' * 100)
        code, out = self.run_line('cat /big')
        self.assertEqual(code, 0)
        self.assertEqual(out, 'x' * 64 + '\n')

    def test_ls(self):
        """Test flat and recursive listings."""
        self.run_line('mkdir /a /a/b')
        self.run_line('touch /a/b/f /z')

        self.assertEqual(self.run_line('ls')[1], 'a/\nz\n')
        self.assertEqual(self.run_line('ls -r /')[1], 'a/\n  b/\n    f\nz\n')

    def test_mv_cp_rm(self):
        """Test structural commands."""
        self.run_line('mkdir /d')
        self.run_line('touch /d/f')

        self.assertEqual(self.run_line('cp -r /d /e')[0], 0)
        self.assertEqual(self.run_line('mv /e/f /e/g')[0], 0)
        self.assertEqual(self.run_line('ls -r /')[1], 'd/\n  f\ne/\n  g\n')

        self.assertEqual(self.run_line('rm /d')[0], 1)
        self.assertEqual(self.run_line('rm -r /d')[0], 0)
        self.assertEqual(self.run_line('ls')[1], 'e/\n')

    def test_filesystem_errors(self):
        """Test refused operations print the error and return 1."""
        code, out = self.run_line('read /missing')
        self.assertEqual(code, 1)
        self.assertTrue(out.startswith('read: '))
        self.assertIn('/missing', out)

        self.run_line('touch /f')
        code, out = self.run_line('mkdir /f')
        self.assertEqual(code, 1)
        self.assertIn('already exists', out)

    def test_write_text_starting_with_dash(self):
        """Test words after the path are text, never flags."""
        self.run_line('touch /temp')
        self.assertEqual(self.run_line('write /temp -5 degrees')[0], 0)
        self.assertEqual(self.run_line('read /temp')[1], '-5 degrees\n')

        self.assertEqual(self.run_line('write /temp reset -a')[0], 0)
        self.assertEqual(self.run_line('read /temp')[1], 'reset -a\n')

        self.assertEqual(self.run_line('write -a /temp !')[0], 0)
        self.assertEqual(self.run_line('read /temp')[1], 'reset -a!\n')

    def test_usage_errors(self):
        """Test wrong arguments return 2."""
        self.assertEqual(self.run_line('mv /only-one')[0], 2)
        self.assertEqual(self.run_line('chmod /f alice')[0], 2)
        self.assertEqual(self.run_line('ls -z')[0], 2)
        self.assertEqual(self.run_line('write /f')[0], 2)

    def test_parse_error(self):
        """Test an unterminated quote returns 2."""
        self.assertEqual(self.run_line('write /f "open')[0], 2)

    def test_unknown_command(self):
        """Test an unknown command returns 127."""
        code, out = self.run_line('frobnicate')
        self.assertEqual(code, 127)
        self.assertIn('command not found', out)

    def test_chmod_and_su(self):
        """Test granting a permission and acting as another user."""
        self.run_line('mkdir /pub')
        self.assertEqual(self.run_line('chmod / alice --x')[0], 0)
        self.assertEqual(self.run_line('chmod /pub alice rwx')[0], 0)

        self.assertEqual(self.run_line('su alice')[0], 0)
        self.assertEqual(self.shell.current_user, 'alice')
        self.assertEqual(self.run_line('whoami')[1], 'alice\n')

        self.assertEqual(self.run_line('touch /pub/mine')[0], 0)
        self.assertEqual(self.run_line('touch /denied')[0], 1)
        self.assertEqual(self.shell.get_prompt(), 'alice@memfs$ ')

    def test_su_unknown_user(self):
        """Test su refuses unregistered users."""
        self.assertEqual(self.run_line('su ghost')[0], 1)
        self.assertEqual(self.shell.current_user, 'root')
        self.assertEqual(self.shell.get_prompt(), 'root@memfs# ')

    def test_user_management(self):
        """Test useradd, userdel and users."""
        self.assertEqual(self.run_line('useradd bob')[0], 0)
        self.assertEqual(self.run_line('useradd bob')[0], 1)
        self.assertEqual(self.run_line('users')[1], 'alice\nbob\nroot\n')
        self.assertEqual(self.run_line('userdel bob')[0], 0)
        self.assertEqual(self.run_line('userdel bob')[0], 1)
        self.assertEqual(self.run_line('userdel root')[0], 1)

        self.run_line('su alice')
        self.assertEqual(self.run_line('useradd carol')[0], 1)
        self.assertFalse(self.fs.is_known_user('carol'))

    def test_history(self):
        """Test history lists previous lines."""
        self.run_line('whoami')
        self.run_line('users')
        out = self.run_line('history')[1]
        self.assertIn('whoami', out)
        self.assertIn('users', out)


class TestScripts(ShellTestCase):
    """Test script execution."""

    def test_run_script(self):
        """Test commands run in order, skipping comments."""
        script = """
# build a small tree
mkdir /s
touch /s/f
write /s/f scripted
"""
        with redirect_stdout(io.StringIO()):
            code = self.shell.run_script(script)
        self.assertEqual(code, 0)
        self.assertEqual(self.run_line('read /s/f')[1], 'scripted\n')

    def test_exit_stops_script(self):
        """Test nothing runs after exit."""
        with redirect_stdout(io.StringIO()):
            self.shell.run_script("mkdir /before\nexit\nmkdir /after\n")
        self.assertTrue(self.shell.exiting)
        self.assertIn('before', self.fs.root)
        self.assertNotIn('after', self.fs.root)

    def test_last_exit_code(self):
        """Test the last command decides the exit code."""
        with redirect_stdout(io.StringIO()):
            code = self.shell.run_script("mkdir /a\nmkdir /a\n")
        self.assertEqual(code, 1)


class TestMain(unittest.TestCase):
    """Test the command-line entry point."""

    def setUp(self):
        self.tmpdir = tempfile.TemporaryDirectory()
        self.users = self.path('users', "alice /** rwx\n")

    def tearDown(self):
        self.tmpdir.cleanup()

    def path(self, name, content):
        path = os.path.join(self.tmpdir.name, name)
        with open(path, 'w', encoding='utf-8') as f:
            f.write(content)
        return path

    def test_headless(self):
        """Test a headless script runs as the given user."""
        script = self.path('script', "mkdir /home\nls /\n")
        out = io.StringIO()
        with redirect_stdout(out):
            code = main(['--users', self.users, '--headless', script, 'alice'])
        self.assertEqual(code, 0)
        self.assertEqual(out.getvalue(), 'home/\n')

    def test_unknown_user(self):
        """Test starting as an unregistered user fails."""
        script = self.path('script', "ls /\n")
        self.assertEqual(main(['--users', self.users, '--headless', script, 'mallory']), 1)

    def test_missing_seed_file(self):
        """Test an explicitly named seed file must exist."""
        missing = os.path.join(self.tmpdir.name, 'absent')
        self.assertEqual(main(['--users', missing, 'root']), 1)


if __name__ == '__main__':
    unittest.main()
