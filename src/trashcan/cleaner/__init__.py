# src/trashcan/cleaner/__init__.py
"""Trashcan cleaning: batch selection, per-node deletion and the run orchestrator.

Provides TrashcanCleaner for deleting archived nodes past their retention
period in bounded batches.
"""

from trashcan.cleaner.deleter import ItemDeleter
from trashcan.cleaner.orchestrator import TrashcanCleaner
from trashcan.cleaner.selector import is_eligible, select_batch

__all__ = ["ItemDeleter", "TrashcanCleaner", "is_eligible", "select_batch"]
