# tests/fixtures/__init__.py
"""Shared test helpers for trashcan tests.

Available helpers:
- ArchiveBuilder: populates an archive store in a real (in-memory) database
- FakeNodeService / FakeTransactionHelper: list-backed store doubles
"""

from tests.fixtures.archive import NOW, ArchiveBuilder
from tests.fixtures.fakes import FakeNodeService, FakeTransactionHelper, node

__all__ = [
    "NOW",
    "ArchiveBuilder",
    "FakeNodeService",
    "FakeTransactionHelper",
    "node",
]
