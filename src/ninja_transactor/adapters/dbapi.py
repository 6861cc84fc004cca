"""PEP 249 (DB-API 2.0) adapter implementing the transactor resource handles.

PEP 249 has no separate prepare step, so a statement is the SQL text plus its
bound parameters until :meth:`DBAPIStatement.execute_query` opens a cursor.
Placeholders follow the driver's ``paramstyle`` (``?`` for :mod:`sqlite3`).
"""

from __future__ import annotations

import logging
import sqlite3
from collections.abc import Callable, Sequence
from typing import Any

from ninja_transactor.exceptions import TransactionError

logger = logging.getLogger(__name__)


class DBAPIResultSet:
    """Row cursor over an executed DB-API cursor. Rows are fetched one at a time."""

    def __init__(self, cursor: Any) -> None:
        self._cursor = cursor
        self._row: Sequence[Any] | None = None
        self._closed = False

    def next(self) -> bool:
        # Statements without a result (DDL, DML) have no description and no rows.
        if self._cursor.description is None:
            self._row = None
            return False
        self._row = self._cursor.fetchone()
        return self._row is not None

    def get_object(self, column: int) -> Any:
        if self._row is None:
            raise TransactionError("No current row; call next() before reading columns", operation="consume")
        if not 1 <= column <= len(self._row):
            raise TransactionError(
                f"Column {column} is out of range for a row of {len(self._row)} columns",
                operation="consume",
            )
        return self._row[column - 1]

    def get_int(self, column: int) -> int:
        value = self.get_object(column)
        try:
            return int(value)
        except (TypeError, ValueError) as exc:
            raise TransactionError(
                f"Column {column} does not hold an integer value: {value!r}",
                operation="consume",
                cause=exc,
            ) from exc

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        self._row = None
        self._cursor.close()


class DBAPIStatement:
    """SQL text with positional parameters, executed on one DB-API connection."""

    def __init__(self, connection: Any, sql: str) -> None:
        self._connection = connection
        self._sql = sql
        self._parameters: dict[int, Any] = {}
        self._closed = False

    @property
    def sql(self) -> str:
        return self._sql

    @property
    def closed(self) -> bool:
        return self._closed

    def set_parameter(self, position: int, value: Any) -> None:
        if position < 1:
            raise TransactionError(f"Parameter positions start at 1, got {position}", operation="bind")
        self._parameters[position] = value

    def parameters(self) -> tuple[Any, ...]:
        """Bound values ordered by position. Gaps are a binding failure."""
        if not self._parameters:
            return ()
        count = max(self._parameters)
        missing = [position for position in range(1, count + 1) if position not in self._parameters]
        if missing:
            raise TransactionError(f"No value bound for parameter position(s) {missing}", operation="bind")
        return tuple(self._parameters[position] for position in range(1, count + 1))

    def execute_query(self) -> DBAPIResultSet:
        if self._closed:
            raise TransactionError("Cannot execute a closed statement", operation="execute")
        parameters = self.parameters()
        cursor = self._connection.cursor()
        try:
            if parameters:
                cursor.execute(self._sql, parameters)
            else:
                cursor.execute(self._sql)
        except Exception:
            _close_quietly(cursor)
            raise
        return DBAPIResultSet(cursor)

    def close(self) -> None:
        self._closed = True
        self._parameters.clear()


class DBAPIConnection:
    """Wraps a DB-API connection as a :class:`~ninja_transactor.protocols.ConnectionHandle`.

    ``driver_connection`` is the object auto-commit is applied to when it
    differs from the connection used for cursors (e.g. behind a pool proxy).
    """

    def __init__(self, raw: Any, *, driver_connection: Any | None = None) -> None:
        self._raw = raw
        self._driver_connection = driver_connection if driver_connection is not None else raw
        self._restore_transaction_control: Callable[[], None] | None = None

    @property
    def raw(self) -> Any:
        return self._raw

    def set_auto_commit(self, auto_commit: bool) -> None:
        """Switch the driver connection in or out of auto-commit.

        The driver's original setting is remembered the first time and put
        back by :meth:`close`, so pooled connections return to the pool the
        way they were checked out.
        """
        # psycopg and sqlite3 (3.12+) expose an attribute, PyMySQL a method;
        # other drivers start outside auto-commit per PEP 249.
        driver = self._driver_connection
        if isinstance(driver, sqlite3.Connection) and not hasattr(driver, "autocommit"):
            self._set_sqlite_transaction_control(driver, auto_commit)
        elif not hasattr(driver, "autocommit"):
            return
        elif callable(driver.autocommit):
            if self._restore_transaction_control is None and hasattr(driver, "get_autocommit"):
                original = driver.get_autocommit()
                self._restore_transaction_control = lambda: driver.autocommit(original)
            driver.autocommit(auto_commit)
        else:
            if self._restore_transaction_control is None:
                original = driver.autocommit
                self._restore_transaction_control = lambda: setattr(driver, "autocommit", original)
            driver.autocommit = auto_commit

    def _set_sqlite_transaction_control(self, driver: sqlite3.Connection, auto_commit: bool) -> None:
        # Legacy sqlite3 only opens a transaction implicitly before DML, so DDL
        # and queries would escape rollback. Take manual control instead.
        if self._restore_transaction_control is None:
            original = driver.isolation_level
            self._restore_transaction_control = lambda: setattr(driver, "isolation_level", original)
        driver.isolation_level = None
        if not auto_commit:
            driver.execute("BEGIN")

    def prepare_statement(self, sql: str) -> DBAPIStatement:
        return DBAPIStatement(self._raw, sql)

    def commit(self) -> None:
        self._raw.commit()

    def rollback(self) -> None:
        self._raw.rollback()

    def close(self) -> None:
        restore, self._restore_transaction_control = self._restore_transaction_control, None
        try:
            if restore is not None:
                restore()
        finally:
            self._raw.close()


class DBAPIDataSource:
    """Data source that opens a new DB-API connection per unit of work.

    Args:
        connect: Zero-argument callable returning a DB-API connection, e.g.
            ``functools.partial(sqlite3.connect, "app.db")``.
    """

    def __init__(self, connect: Callable[[], Any]) -> None:
        if not callable(connect):
            raise TypeError("connect must be a callable returning a DB-API connection")
        self._connect = connect

    def get_connection(self) -> DBAPIConnection:
        return DBAPIConnection(self._connect())


def _close_quietly(cursor: Any) -> None:
    try:
        cursor.close()
    except Exception:
        logger.warning("Failed to close the cursor after a failed execute; ignoring", exc_info=True)
