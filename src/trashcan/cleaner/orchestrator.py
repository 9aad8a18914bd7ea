# src/trashcan/cleaner/orchestrator.py
"""TrashcanCleaner: Runs one retention pass over the archive store.

A clean run has two phases:
1. Selection: one read-only transaction, as system, lists the oldest
   eligible nodes (at most delete_batch_count of them).
2. Deletion: each selected node is deleted in its own transaction.

The cleaner keeps no state between runs; every call selects afresh from the
current store contents. It assumes no other clean run overlaps with it.
"""

from datetime import timedelta
from time import perf_counter
from typing import TYPE_CHECKING

import structlog

from trashcan.cleaner.deleter import ItemDeleter
from trashcan.cleaner.selector import select_batch
from trashcan.contracts.identity import NodeRef, StoreRef
from trashcan.contracts.model import ASSOC_CHILDREN, DEFAULT_ARCHIVE_STORE_URL
from trashcan.contracts.results import CleanResult
from trashcan.contracts.store import NodeService
from trashcan.core.clock import DEFAULT_CLOCK, Clock
from trashcan.core.retry import RetryConfig, RetryManager
from trashcan.core.security import run_as_system
from trashcan.core.transaction import TransactionHelper

if TYPE_CHECKING:
    from trashcan.core.config import TrashcanSettings
    from trashcan.core.store.database import ArchiveDB

slog = structlog.get_logger(__name__)


class TrashcanCleaner:
    """Cleans the trashcan according to delete_batch_count and keep_period.

    - delete_batch_count: maximum number of nodes deleted per clean() call.
    - keep_period: how long a node stays in the trashcan before it may be
      deleted. Zero or negative deletes regardless of age.

    Example:
        cleaner = TrashcanCleaner(helper, delete_batch_count=1000, keep_period=timedelta(days=28))
        result = cleaner.clean()
        remaining = cleaner.count_pending()
    """

    def __init__(
        self,
        transaction_helper: TransactionHelper,
        *,
        delete_batch_count: int = 1000,
        keep_period: timedelta = timedelta(days=28),
        archive_store_url: str = DEFAULT_ARCHIVE_STORE_URL,
        clock: Clock | None = None,
        logger: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        """Initialize cleaner.

        Args:
            transaction_helper: Opens the selection and per-node delete transactions
            delete_batch_count: Maximum nodes deleted per run (must be positive)
            keep_period: Retention period
            archive_store_url: Store holding the trashcan
            clock: Time source for the age check (default: system clock)
            logger: Structured logger (default: module logger)

        Raises:
            ValueError: If delete_batch_count is not positive or the store URL is invalid
        """
        if delete_batch_count <= 0:
            raise ValueError(f"delete_batch_count must be positive, got {delete_batch_count}")
        self._transaction_helper = transaction_helper
        self._delete_batch_count = delete_batch_count
        self._keep_period = keep_period
        self._archive_store = StoreRef.parse(archive_store_url)
        self._clock = clock or DEFAULT_CLOCK
        self._logger = logger or slog
        self._deleter = ItemDeleter(transaction_helper, logger=self._logger)

    @classmethod
    def from_settings(
        cls,
        settings: "TrashcanSettings",
        db: "ArchiveDB",
        *,
        clock: Clock | None = None,
        logger: structlog.stdlib.BoundLogger | None = None,
    ) -> "TrashcanCleaner":
        """Build a cleaner from validated settings."""
        retry_manager = RetryManager(RetryConfig.from_settings(settings.retry))
        helper = TransactionHelper(db, retry_manager, logger=logger)
        return cls(
            helper,
            delete_batch_count=settings.cleaner.delete_batch_count,
            keep_period=settings.cleaner.keep_period,
            archive_store_url=settings.cleaner.archive_store_url,
            clock=clock,
            logger=logger,
        )

    @property
    def delete_batch_count(self) -> int:
        return self._delete_batch_count

    @property
    def keep_period(self) -> timedelta:
        return self._keep_period

    def clean(self) -> CleanResult:
        """Delete the current batch of expired trashcan nodes.

        Selection failures propagate and nothing is deleted. Failures on
        individual nodes are recorded in the result and do not stop the run.
        """
        start_time = perf_counter()
        self._logger.debug("Running TrashcanCleaner", archive_store=str(self._archive_store))

        batch = self.preview()
        self._logger.debug("Number of nodes to delete", count=len(batch))

        failures = self._deleter.delete_all(batch)

        result = CleanResult(
            selected_count=len(batch),
            deleted_count=len(batch) - len(failures),
            failures=failures,
            duration_seconds=perf_counter() - start_time,
        )
        self._logger.debug(
            "TrashcanCleaner finished",
            deleted=result.deleted_count,
            failed=result.failed_count,
        )
        return result

    def preview(self) -> list[NodeRef]:
        """Return the batch the next clean() would delete, without deleting it."""

        def txn_work(node_service: NodeService) -> list[NodeRef]:
            archive_root = node_service.get_root_node(self._archive_store)
            return select_batch(
                node_service,
                archive_root,
                self._keep_period,
                self._delete_batch_count,
                now=self._clock.now(),
            )

        return run_as_system(lambda: self._transaction_helper.do_in_transaction(txn_work, read_only=True))

    def count_pending(self) -> int:
        """Return the number of nodes currently in the trashcan, regardless of age."""

        def txn_work(node_service: NodeService) -> int:
            archive_root = node_service.get_root_node(self._archive_store)
            return node_service.count_child_assocs(archive_root, ASSOC_CHILDREN)

        return self._transaction_helper.do_in_transaction(txn_work, read_only=True)
