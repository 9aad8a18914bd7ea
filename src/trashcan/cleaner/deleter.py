# src/trashcan/cleaner/deleter.py
"""Per-node permanent deletion.

Every node is deleted in its own retrying transaction so that transactions
stay small and a crash mid-batch only loses the node in flight. A node that
cannot be deleted is logged and recorded; the remaining nodes are still
attempted.
"""

from collections.abc import Sequence

import structlog

from trashcan.contracts.errors import DeletionFailure
from trashcan.contracts.identity import NodeRef
from trashcan.contracts.store import NodeService
from trashcan.core.retry import MaxRetriesExceeded
from trashcan.core.security import run_as_system
from trashcan.core.transaction import TransactionHelper

slog = structlog.get_logger(__name__)


class ItemDeleter:
    """Deletes archived nodes one transaction at a time, in the order given."""

    def __init__(
        self,
        transaction_helper: TransactionHelper,
        *,
        logger: structlog.stdlib.BoundLogger | None = None,
    ) -> None:
        self._transaction_helper = transaction_helper
        self._logger = logger or slog

    def delete_all(self, nodes: Sequence[NodeRef]) -> list[DeletionFailure]:
        """Delete each node in its own privileged transaction.

        Args:
            nodes: Nodes to delete, in the order attempts should be made

        Returns:
            One DeletionFailure per node that could not be deleted
        """
        failures: list[DeletionFailure] = []
        for node in nodes:
            try:
                self.delete_one(node)
            except Exception as e:
                # Contain the failure to this node; siblings are independent
                error = e.last_error if isinstance(e, MaxRetriesExceeded) else e
                self._logger.warning(
                    "Failed to delete archived node",
                    node_ref=str(node),
                    error_type=type(error).__name__,
                    error=str(e),
                )
                failures.append(
                    DeletionFailure(
                        node_ref=str(node),
                        type=type(error).__name__,
                        exception=str(e),
                    )
                )
        return failures

    def delete_one(self, node: NodeRef) -> None:
        """Delete a single node and its subtree.

        Raises:
            MaxRetriesExceeded: If transient failures persisted through every attempt
            NodeNotFoundError: If the node is already gone
            PrivilegeError: If the store refused the privileged delete
        """

        def txn_work(node_service: NodeService) -> None:
            node_service.delete_node(node)

        run_as_system(lambda: self._transaction_helper.do_in_transaction(txn_work, read_only=False))
