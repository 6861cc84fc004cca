"""Domain exceptions for the transaction template.

Every driver exception raised while borrowing a connection, preparing or
executing a statement, consuming a result set, committing or rolling back is
caught and re-raised as a :class:`TransactionError` so that callers only ever
handle a single failure kind.
"""

from __future__ import annotations


class TransactionError(Exception):
    """The uniform failure raised by every public transactor operation.

    Attributes:
        operation: The step of the unit of work that failed (``"acquire"``,
            ``"prepare"``, ``"bind"``, ``"execute"``, ``"consume"``,
            ``"commit"``, ``"rollback"`` or ``"transaction"``).
        detail: A human readable description of what went wrong.
        original_error: For a failed rollback, the failure that caused the
            rollback to be attempted in the first place.
    """

    def __init__(
        self,
        detail: str,
        *,
        operation: str = "transaction",
        cause: BaseException | None = None,
        original_error: BaseException | None = None,
    ) -> None:
        self.operation = operation
        self.detail = detail
        self.original_error = original_error
        super().__init__(f"{operation} failed: {detail}")
        if cause is not None:
            self.__cause__ = cause


class InvalidSQLError(ValueError):
    """Raised when a statement is requested for empty or blank SQL text.

    This is a programming error on the caller's side, not a runtime database
    failure, so it is never translated into :class:`TransactionError`.
    """
