"""Resource handle and capability contracts — driver-agnostic transactor interface."""

from __future__ import annotations

from typing import Any, Protocol, TypeVar, runtime_checkable

T_co = TypeVar("T_co", covariant=True)


@runtime_checkable
class ResultSetHandle(Protocol):
    """Cursor over the rows produced by executing a statement.

    Column positions are 1-based, matching SQL parameter positions.
    """

    def next(self) -> bool:
        """Advance to the next row. Returns False once the rows are exhausted."""
        ...

    def get_object(self, column: int) -> Any:
        """Read the value of *column* in the current row."""
        ...

    def get_int(self, column: int) -> int:
        """Read the value of *column* in the current row as an integer."""
        ...

    def close(self) -> None: ...


@runtime_checkable
class StatementHandle(Protocol):
    """A prepared statement bound to one connection."""

    def set_parameter(self, position: int, value: Any) -> None:
        """Bind *value* to the 1-based parameter *position*."""
        ...

    def execute_query(self) -> ResultSetHandle:
        """Execute the statement and return its result set."""
        ...

    def close(self) -> None: ...


@runtime_checkable
class ConnectionHandle(Protocol):
    """A single database connection owned by one unit of work."""

    def set_auto_commit(self, auto_commit: bool) -> None: ...

    def prepare_statement(self, sql: str) -> StatementHandle: ...

    def commit(self) -> None: ...

    def rollback(self) -> None: ...

    def close(self) -> None: ...


@runtime_checkable
class DataSource(Protocol):
    """Hands out ready-to-use connections. Pooling, if any, lives behind it."""

    def get_connection(self) -> ConnectionHandle: ...


class ParameterBinder(Protocol):
    """Injects caller-supplied values into a prepared statement."""

    def __call__(self, statement: StatementHandle) -> None: ...


class RowMapper(Protocol[T_co]):
    """Maps the current row of a result set, given its zero-based index."""

    def __call__(self, result_set: ResultSetHandle, row_index: int) -> T_co: ...


class ResultSetConsumer(Protocol[T_co]):
    """Turns a whole result set into a single value."""

    def __call__(self, result_set: ResultSetHandle) -> T_co: ...


class ConnectionWork(Protocol[T_co]):
    """The body of a unit of work, run against one borrowed connection."""

    def __call__(self, connection: ConnectionHandle) -> T_co: ...
