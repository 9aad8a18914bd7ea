# src/trashcan/contracts/store.py
"""NodeService protocol for the host node store.

This protocol is the whole of what the cleaner needs from the repository:
- trashcan/cleaner/selector.py reads children and properties
- trashcan/cleaner/deleter.py deletes nodes
- trashcan/cleaner/orchestrator.py counts pending nodes

The SQLAlchemy implementation lives in trashcan/core/store/node_service.py.
A NodeService is bound to a single transaction; it never commits itself.
"""

from typing import Any, Protocol, runtime_checkable

from trashcan.contracts.identity import ChildAssociationRef, NodeRef, StoreRef


@runtime_checkable
class NodeService(Protocol):
    """Protocol for transactional node store access."""

    def get_root_node(self, store_ref: StoreRef) -> NodeRef:
        """Return the root node of a store.

        Raises:
            StoreNotFoundError: If the store does not exist
        """
        ...

    def get_child_assocs(
        self,
        parent: NodeRef,
        assoc_type: str,
        *,
        max_results: int | None = None,
    ) -> list[ChildAssociationRef]:
        """Return child associations of a parent in association order.

        Args:
            parent: Parent node
            assoc_type: Only associations of this type are returned
            max_results: Upper bound on the number of results (None = all)

        Returns:
            Associations ordered by position, earliest added first
        """
        ...

    def count_child_assocs(self, parent: NodeRef, assoc_type: str) -> int:
        """Return the number of child associations of a given type."""
        ...

    def get_property(self, node: NodeRef, name: str) -> Any:
        """Return a property value, or None when the property is not set."""
        ...

    def delete_node(self, node: NodeRef) -> None:
        """Permanently delete a node and its primary subtree.

        Raises:
            NodeNotFoundError: If the node does not exist
            PrivilegeError: If the caller is not running with system privileges
        """
        ...
