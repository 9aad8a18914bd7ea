# src/trashcan/contracts/results.py
"""Result types returned by the cleaner."""

from dataclasses import dataclass, field

from trashcan.contracts.errors import DeletionFailure


@dataclass
class CleanResult:
    """Result of a single clean run.

    selected_count == deleted_count + len(failures) for every run.
    """

    selected_count: int
    deleted_count: int
    failures: list[DeletionFailure] = field(default_factory=list)
    duration_seconds: float = 0.0

    @property
    def failed_count(self) -> int:
        return len(self.failures)
