"""
MemFS User Module

Loads the user/permission seed file that registers users and their
initial grants.
"""

from .seed_loader import SeedLoader, SeedEntry, ROOT_WILDCARD

__all__ = [
    'SeedLoader',
    'SeedEntry',
    'ROOT_WILDCARD',
]
