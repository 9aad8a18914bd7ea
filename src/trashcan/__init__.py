"""
Trashcan: Retention-based purging of archived repository nodes.

Permanently deletes soft-deleted nodes from an archive store once they have
been kept for longer than the configured retention period, in bounded
batches with per-node transactional isolation.
"""

__version__ = "0.1.0"
