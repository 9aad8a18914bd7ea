# src/trashcan/core/security.py
"""Elevated-privilege execution context.

Deleting archived nodes bypasses the normal per-user permission checks, so
the store only allows it while the current context runs as the system
principal. Elevation is held in a ContextVar: it is scoped to the current
thread or task and the previous principal is restored on every exit path.
"""

from collections.abc import Callable, Iterator
from contextlib import contextmanager
from contextvars import ContextVar
from typing import TypeVar

from trashcan.contracts.errors import PrivilegeError

T = TypeVar("T")

SYSTEM_PRINCIPAL = "System"
ANONYMOUS_PRINCIPAL = "anonymous"

_current_principal: ContextVar[str] = ContextVar("trashcan_principal", default=ANONYMOUS_PRINCIPAL)


def current_principal() -> str:
    """Return the principal the current context runs as."""
    return _current_principal.get()


def is_system() -> bool:
    return _current_principal.get() == SYSTEM_PRINCIPAL


@contextmanager
def system_privileges() -> Iterator[None]:
    """Run the enclosed block as the system principal.

    Usage:
        with system_privileges():
            node_service.delete_node(node)
    """
    token = _current_principal.set(SYSTEM_PRINCIPAL)
    try:
        yield
    finally:
        _current_principal.reset(token)


def run_as_system(work: Callable[[], T]) -> T:
    """Call work with system privileges and return its result."""
    with system_privileges():
        return work()


def require_system(operation: str) -> None:
    """Fail unless the current context runs as the system principal.

    Raises:
        PrivilegeError: If privileges are not elevated
    """
    principal = _current_principal.get()
    if principal != SYSTEM_PRINCIPAL:
        raise PrivilegeError(f"{operation} requires system privileges (running as {principal!r})")
