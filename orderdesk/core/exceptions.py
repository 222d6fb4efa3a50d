"""
Error taxonomy for the persistence layer.

Exception Hierarchy:
    OrderDeskError (base)
    └── ConcurrencyConflictError  - version-guarded write matched no row

Not found is never an exception: lookups return None.
Store failures are psycopg2's own errors, re-raised after rollback.
"""

CONFLICT_MESSAGE = "The record was changed or deleted by another user. Reload it and try again."


class OrderDeskError(Exception):
    """Base exception for all orderdesk errors."""

    def __init__(self, message: str, details: str = None):
        self.message = message
        self.details = details
        super().__init__(self.message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message}: {self.details}"
        return self.message


class ConcurrencyConflictError(OrderDeskError):
    """
    A version-guarded UPDATE/DELETE affected zero rows.

    The row was modified or deleted since the caller read it. The caller
    must re-fetch and retry; nothing is merged or retried here.
    """

    def __init__(self, entity: str, key=None, version: int = None, message: str = CONFLICT_MESSAGE):
        details = f"{entity} {key} (version {version})" if key is not None else entity
        super().__init__(message, details)
        self.entity = entity
        self.key = key
        self.version = version
