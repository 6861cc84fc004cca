"""Statement preparation and execution within a borrowed connection."""

from __future__ import annotations

import logging
from typing import TypeVar

from ninja_transactor.exceptions import InvalidSQLError, TransactionError
from ninja_transactor.protocols import (
    ConnectionHandle,
    ConnectionWork,
    ParameterBinder,
    ResultSetConsumer,
    StatementHandle,
)
from ninja_transactor.resources import released

logger = logging.getLogger(__name__)

T = TypeVar("T")


def prepare_statement(connection: ConnectionHandle, sql: str) -> StatementHandle:
    """Prepare *sql* on *connection*.

    Raises:
        InvalidSQLError: If *sql* is ``None``, empty or blank. Checked before
            any driver call.
        TransactionError: If the driver fails to prepare the statement.
    """
    if sql is None or not sql.strip():
        raise InvalidSQLError("A valid SQL (as string) is required to prepare the statement")
    if connection is None:
        raise ValueError("A valid connection is required to prepare the statement")
    logger.debug("Asked to prepare a statement for SQL string: '%s'", sql)
    try:
        return connection.prepare_statement(sql)
    except Exception as exc:
        logger.debug("Preparing the statement failed: %s", type(exc).__name__)
        raise TransactionError(
            "An unexpected error occurred during preparing the statement",
            operation="prepare",
            cause=exc,
        ) from exc


def execute_and_consume(
    statement: StatementHandle,
    binder: ParameterBinder,
    consumer: ResultSetConsumer[T],
) -> T:
    """Bind, execute and hand the result set to *consumer*.

    The result set is released as soon as the consumer returns or raises.
    Binder and driver failures propagate untranslated; the connection
    executor translates them after rolling back.
    """
    binder(statement)
    result_set = statement.execute_query()
    with released(result_set, "result set"):
        return consumer(result_set)


def statement_work(
    sql: str,
    binder: ParameterBinder,
    consumer: ResultSetConsumer[T],
) -> ConnectionWork[T]:
    """Build the unit-of-work body that prepares, runs and releases one statement."""

    def work(connection: ConnectionHandle) -> T:
        statement = prepare_statement(connection, sql)
        with released(statement, "prepared statement"):
            return execute_and_consume(statement, binder, consumer)

    return work
