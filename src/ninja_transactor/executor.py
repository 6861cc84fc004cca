"""Connection executor — the transaction template around one unit of work.

Borrow a connection, switch it to explicit transactions, run the work, then
commit or roll back depending on the captured outcome, and always hand the
connection back. Every driver failure reaches the caller as a
:class:`~ninja_transactor.exceptions.TransactionError`.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Generic, TypeVar

from ninja_transactor.exceptions import InvalidSQLError, TransactionError
from ninja_transactor.protocols import ConnectionHandle, ConnectionWork, DataSource
from ninja_transactor.resources import released

logger = logging.getLogger(__name__)

T = TypeVar("T")


@dataclass(frozen=True)
class Outcome(Generic[T]):
    """Result of running a unit of work: either a value or the error it raised."""

    value: T | None = None
    error: Exception | None = None

    @classmethod
    def capture(cls, work: ConnectionWork[T], connection: ConnectionHandle) -> Outcome[T]:
        try:
            return cls(value=work(connection))
        except Exception as exc:
            return cls(error=exc)

    @property
    def succeeded(self) -> bool:
        return self.error is None


class ConnectionExecutor:
    """Runs units of work, each on its own connection borrowed from a data source.

    The executor holds no per-call state; concurrent callers are isolated as
    long as the data source hands out distinct connections.
    """

    def __init__(self, data_source: DataSource) -> None:
        if data_source is None:
            raise ValueError("A valid data source is required to run units of work")
        self._data_source = data_source

    @property
    def data_source(self) -> DataSource:
        return self._data_source

    def run_with_connection(self, work: ConnectionWork[T]) -> T:
        """Run *work* inside a transaction on a freshly borrowed connection.

        * success: commit. A failed commit raises ``TransactionError`` and is
          not followed by a rollback, since the commit outcome is unknown.
        * ``TransactionError`` or ``InvalidSQLError`` from *work*: roll back,
          re-raise unchanged.
        * any other ``Exception``: roll back, raise it wrapped in
          ``TransactionError``.
        * failed rollback: raise a ``TransactionError`` chained to the rollback
          failure, with the triggering error on ``original_error``.

        The connection is released exactly once in every case.
        """
        if work is None:
            raise ValueError("A valid unit of work is required")
        connection = self._borrow_connection()
        with released(connection, "connection"):
            self._begin(connection)
            logger.debug("Passing the borrowed connection to the unit of work")
            outcome = Outcome.capture(work, connection)
            return self._complete(connection, outcome)

    def _borrow_connection(self) -> ConnectionHandle:
        try:
            connection = self._data_source.get_connection()
        except Exception as exc:
            logger.debug("Unable to borrow a connection from the data source: %s", type(exc).__name__)
            raise TransactionError(
                "Unable to borrow a connection from the data source",
                operation="acquire",
                cause=exc,
            ) from exc
        logger.debug("Borrowed a connection from the data source")
        return connection

    def _begin(self, connection: ConnectionHandle) -> None:
        try:
            connection.set_auto_commit(False)
        except Exception as exc:
            logger.debug("Unable to disable auto commit on the borrowed connection")
            raise TransactionError(
                "Unable to disable auto commit on the borrowed connection",
                operation="acquire",
                cause=exc,
            ) from exc
        logger.debug("Set auto commit to FALSE on the borrowed connection")

    def _complete(self, connection: ConnectionHandle, outcome: Outcome[T]) -> T:
        if outcome.succeeded:
            logger.debug("Unit of work finished with the connection, committing")
            self._commit(connection)
            return outcome.value  # type: ignore[return-value]

        error = outcome.error
        assert error is not None  # noqa: S101

        if isinstance(error, (TransactionError, InvalidSQLError)):
            logger.debug("%s from the unit of work, rolling back before re-raising", type(error).__name__)
            self._rollback(connection, error)
            raise error

        logger.debug("Unexpected %s from the unit of work, rolling back before re-raising", type(error).__name__)
        self._rollback(connection, error)
        raise TransactionError("Unexpected error from the unit of work", cause=error) from error

    def _commit(self, connection: ConnectionHandle) -> None:
        try:
            connection.commit()
        except Exception as exc:
            logger.debug("Unable to commit the transaction after completion of the unit of work")
            raise TransactionError(
                "Unable to commit the transaction after completion of the unit of work",
                operation="commit",
                cause=exc,
            ) from exc
        logger.debug("Committed the transaction")

    def _rollback(self, connection: ConnectionHandle, error: Exception) -> None:
        try:
            connection.rollback()
        except Exception as exc:
            logger.error(
                "Rolling back the transaction failed. Reason for rollback was: %s",
                error,
                exc_info=True,
            )
            raise TransactionError(
                f"Rollback of transaction due to: '{error}' has failed",
                operation="rollback",
                cause=exc,
                original_error=error,
            ) from exc
        logger.debug("Rolled back the transaction")
