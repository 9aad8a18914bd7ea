# src/trashcan/core/transaction.py
"""Retrying transactional unit of work.

TransactionHelper runs a callback against a NodeService bound to a fresh
transaction. Each attempt gets its own transaction; a failed attempt is
rolled back before the next one starts, so a retry never sees the state
left behind by a previous failure.
"""

from collections.abc import Callable
from typing import TypeVar

import structlog
from sqlalchemy.exc import DBAPIError, OperationalError

from trashcan.contracts.errors import TransientStoreError
from trashcan.contracts.store import NodeService
from trashcan.core.retry import RetryConfig, RetryManager
from trashcan.core.store.database import ArchiveDB
from trashcan.core.store.node_service import SqlNodeService

T = TypeVar("T")

slog = structlog.get_logger(__name__)


# SQLSTATEs for serialization failure, deadlock and lock_not_available
_TRANSIENT_SQLSTATES = frozenset({"40001", "40P01", "55P03"})

# SQLite reports contention only through the message text
_TRANSIENT_SQLITE_MESSAGES = ("database is locked", "database table is locked", "database is busy")


def _sqlstate(error: DBAPIError) -> str | None:
    # psycopg2 exposes pgcode, psycopg 3 exposes sqlstate
    orig = error.orig
    return getattr(orig, "pgcode", None) or getattr(orig, "sqlstate", None)


def is_transient_error(error: BaseException) -> bool:
    """Return True for store errors that a fresh transaction may not hit again.

    Transient:
    - TransientStoreError (raised by store code for known contention)
    - DBAPIError flagged connection_invalidated (connection dropped mid-transaction)
    - PostgreSQL serialization failure, deadlock or lock timeout (by SQLSTATE)
    - SQLite locked/busy database (OperationalError message)

    Everything else, including OperationalErrors such as "no such table" or
    "attempt to write a readonly database", is permanent.
    """
    if isinstance(error, TransientStoreError):
        return True
    if not isinstance(error, DBAPIError):
        return False
    if error.connection_invalidated:
        return True
    if _sqlstate(error) in _TRANSIENT_SQLSTATES:
        return True
    if isinstance(error, OperationalError):
        message = str(error.orig).lower()
        return any(fragment in message for fragment in _TRANSIENT_SQLITE_MESSAGES)
    return False


class TransactionHelper:
    """Runs callbacks in retrying transactions.

    Example:
        helper = TransactionHelper(db, RetryManager(RetryConfig(max_attempts=5)))

        count = helper.do_in_transaction(
            lambda nodes: nodes.count_child_assocs(root, ASSOC_CHILDREN),
            read_only=True,
        )
    """

    def __init__(
        self,
        db: ArchiveDB,
        retry_manager: RetryManager | None = None,
        *,
        logger: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        """Initialize helper.

        Args:
            db: Database whose transactions wrap each attempt
            retry_manager: Retry policy (default: RetryConfig defaults)
            logger: Logger for retry notices (default: module logger)
        """
        self._db = db
        self._retry_manager = retry_manager or RetryManager(RetryConfig())
        self._logger = logger or slog

    def do_in_transaction(
        self,
        work: Callable[[NodeService], T],
        *,
        read_only: bool = False,
    ) -> T:
        """Execute work in a new transaction, retrying transient failures.

        Args:
            work: Callback receiving a NodeService bound to the transaction
            read_only: Roll back instead of committing when work returns

        Returns:
            Whatever work returns

        Raises:
            MaxRetriesExceeded: If every attempt failed with a transient error
            Exception: The first non-transient error raised by work
        """

        def attempt() -> T:
            with self._db.transaction(read_only=read_only) as conn:
                return work(SqlNodeService(conn))

        return self._retry_manager.execute_with_retry(
            attempt,
            is_retryable=is_transient_error,
            on_retry=self._log_retry,
        )

    def _log_retry(self, attempt: int, error: BaseException) -> None:
        self._logger.info(
            "Retrying transaction after transient failure",
            attempt=attempt,
            error_type=type(error).__name__,
            error=str(error),
        )
