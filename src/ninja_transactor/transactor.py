"""Transactor — caller-facing facade over the transaction template."""

from __future__ import annotations

from typing import TypeVar

from ninja_transactor.binders import no_op_binder
from ninja_transactor.consumers import IntegerConsumer, NoOpConsumer, RowListConsumer, SingleRowConsumer
from ninja_transactor.executor import ConnectionExecutor
from ninja_transactor.protocols import ConnectionWork, DataSource, ParameterBinder, ResultSetConsumer, RowMapper
from ninja_transactor.statements import statement_work

T = TypeVar("T")


class Transactor:
    """Runs single statements as complete units of work.

    Each call borrows its own connection, prepares *sql*, binds parameters,
    consumes the result set, commits (or rolls back on failure) and releases
    every resource before returning. Failures surface as
    :class:`~ninja_transactor.exceptions.TransactionError`; blank SQL raises
    :class:`~ninja_transactor.exceptions.InvalidSQLError`.

    Example::

        transactor = Transactor(DBAPIDataSource(partial(sqlite3.connect, "app.db")))
        total = transactor.query_for_int("select count(*) from orders where status = ?", bind_parameters("open"))
    """

    NO_OP_BINDER = staticmethod(no_op_binder)

    def __init__(self, data_source: DataSource) -> None:
        if data_source is None:
            raise ValueError("A valid not null data source is required for the Transactor to initialize")
        self._executor = ConnectionExecutor(data_source)

    @property
    def executor(self) -> ConnectionExecutor:
        return self._executor

    def run_with_connection(self, work: ConnectionWork[T]) -> T:
        """Run arbitrary connection-level *work* as one unit of work."""
        return self._executor.run_with_connection(work)

    def execute(self, sql: str) -> None:
        """Execute a statement whose result, if any, is not needed."""
        self._run(sql, None, NoOpConsumer())

    def query_for_object(self, sql: str, binder: ParameterBinder | None, row_mapper: RowMapper[T]) -> T:
        """Return the single mapped row; any other row count is a failure."""
        return self._run(sql, binder, SingleRowConsumer(RowListConsumer(row_mapper)))

    def query_for_list(self, sql: str, binder: ParameterBinder | None, row_mapper: RowMapper[T]) -> list[T]:
        """Return every row mapped, in result order (possibly empty)."""
        return self._run(sql, binder, RowListConsumer(row_mapper))

    def query_for_int(self, sql: str, binder: ParameterBinder | None = None) -> int:
        """Return the first column of the first row as an integer."""
        return self._run(sql, binder, IntegerConsumer())

    def _run(self, sql: str, binder: ParameterBinder | None, consumer: ResultSetConsumer[T]) -> T:
        work = statement_work(sql, binder or no_op_binder, consumer)
        return self._executor.run_with_connection(work)
