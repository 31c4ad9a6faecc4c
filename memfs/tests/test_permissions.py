"""
Permission Tests

Tests for permission strings, PermissionSet lookups and inheritance.

Run with: python -m pytest memfs/tests -v
"""

import unittest

from memfs.exceptions import InvalidPermissionFormatError
from memfs.filesystem.node import Directory, File
from memfs.filesystem.permissions import (
    Permission,
    PermissionSet,
    validate_permission,
)


class TestPermissionFormat(unittest.TestCase):
    """Test permission string validation."""

    def test_valid_strings(self):
        """Test every well-formed string is accepted."""
        for perm in ('rwx', 'r--', '-w-', '--x', 'r-x', '---', 'rw-', '-wx'):
            self.assertEqual(validate_permission(perm), perm)

    def test_invalid_strings(self):
        """Test wrong length, wrong letters and wrong positions are rejected."""
        for perm in ('', 'rw', 'rwxr', 'abc', 'wrx', 'xwr', 'RWX', 'r x', None, 7):
            with self.assertRaises(InvalidPermissionFormatError):
                validate_permission(perm)

    def test_grant_rejects_bad_format(self):
        """Test grant leaves the set untouched on a malformed string."""
        perms = PermissionSet('alice')
        with self.assertRaises(InvalidPermissionFormatError):
            perms.grant('bob', 'rwxx')
        self.assertIsNone(perms.explicit('bob'))


class TestPermissionSet(unittest.TestCase):
    """Test effective permission resolution."""

    def test_owner_seeded_with_rwx(self):
        """Test the owner starts with full permission."""
        perms = PermissionSet('alice')
        self.assertEqual(perms.owner, 'alice')
        self.assertEqual(perms.effective_permission('alice'), 'rwx')

    def test_superuser_always_rwx(self):
        """Test root bypasses grants, even explicit restrictive ones."""
        perms = PermissionSet('alice')
        perms.grant('root', '---')
        self.assertEqual(perms.effective_permission('root'), 'rwx')
        for flag in Permission:
            self.assertTrue(perms.has('root', flag))

    def test_explicit_grant(self):
        """Test explicit grants are returned as stored."""
        perms = PermissionSet('alice')
        perms.grant('bob', 'r-x')
        self.assertEqual(perms.effective_permission('bob'), 'r-x')
        self.assertTrue(perms.has('bob', Permission.READ))
        self.assertFalse(perms.has('bob', Permission.WRITE))
        self.assertTrue(perms.has('bob', Permission.EXECUTE))

    def test_grant_overwrites(self):
        """Test a second grant replaces the first."""
        perms = PermissionSet('alice')
        perms.grant('bob', 'rwx')
        perms.grant('bob', 'r--')
        self.assertEqual(perms.effective_permission('bob'), 'r--')

    def test_owner_can_restrict_self(self):
        """Test the owner's own entry is what counts for the owner."""
        perms = PermissionSet('alice')
        perms.grant('alice', 'r--')
        self.assertEqual(perms.effective_permission('alice'), 'r--')

    def test_unknown_user_gets_nothing(self):
        """Test an unknown user resolves to '---' instead of raising."""
        perms = PermissionSet('alice')
        self.assertEqual(perms.effective_permission('nobody'), '---')

    def test_set_owner_keeps_existing_grant(self):
        """Test a new owner keeps an explicit grant they already had."""
        perms = PermissionSet('alice')
        perms.grant('bob', 'r--')
        perms.set_owner('bob')
        self.assertEqual(perms.owner, 'bob')
        self.assertEqual(perms.effective_permission('bob'), 'r--')

        perms.set_owner('carol')
        self.assertEqual(perms.effective_permission('carol'), 'rwx')


class TestInheritance(unittest.TestCase):
    """Test permission inheritance through the tree."""

    def setUp(self):
        self.root = Directory('/', 'root')
        self.a = Directory('a', 'root')
        self.b = Directory('b', 'root')
        self.f = File('f', 'root')
        self.root.attach(self.a)
        self.a.attach(self.b)
        self.b.attach(self.f)

    def test_directory_inherits_from_parent(self):
        """Test a directory without a grant takes its parent's answer."""
        self.a.permissions.grant('alice', 'r-x')
        self.assertEqual(self.b.effective_permission('alice'), 'r-x')

    def test_inheritance_reaches_the_root(self):
        """Test grants on the root flow down every level."""
        self.root.permissions.grant('alice', 'rw-')
        self.assertEqual(self.a.effective_permission('alice'), 'rw-')
        self.assertEqual(self.b.effective_permission('alice'), 'rw-')

    def test_nearest_grant_wins(self):
        """Test a closer grant shadows one further up."""
        self.root.permissions.grant('alice', 'rwx')
        self.b.permissions.grant('alice', '--x')
        self.assertEqual(self.b.effective_permission('alice'), '--x')
        self.assertEqual(self.a.effective_permission('alice'), 'rwx')

    def test_files_do_not_inherit(self):
        """Test a file without a grant yields '---' whatever its parents say."""
        self.a.permissions.grant('alice', 'rwx')
        self.assertEqual(self.f.effective_permission('alice'), '---')
        self.f.permissions.grant('alice', 'r--')
        self.assertEqual(self.f.effective_permission('alice'), 'r--')

    def test_no_grant_anywhere(self):
        """Test inheritance ends at the root with '---'."""
        self.assertEqual(self.b.effective_permission('alice'), '---')

    def test_inheritance_follows_reparenting(self):
        """Test a moved directory inherits from its new parent."""
        other = Directory('other', 'root')
        self.root.attach(other)
        other.permissions.grant('alice', 'r--')

        self.a.detach('b')
        other.attach(self.b)

        self.assertEqual(self.b.effective_permission('alice'), 'r--')


if __name__ == '__main__':
    unittest.main()
