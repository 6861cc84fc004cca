"""Result set consumers — policies for turning a result set into a value."""

from __future__ import annotations

from typing import Generic, TypeVar

from ninja_transactor.exceptions import TransactionError
from ninja_transactor.protocols import ResultSetConsumer, ResultSetHandle, RowMapper

T = TypeVar("T")


class RowListConsumer(Generic[T]):
    """Maps every row, in order, into a list.

    The row mapper receives the result set positioned on the row and the
    zero-based index of that row. Zero rows yield an empty list.
    """

    def __init__(self, row_mapper: RowMapper[T]) -> None:
        self._row_mapper = row_mapper

    def __call__(self, result_set: ResultSetHandle) -> list[T]:
        rows: list[T] = []
        row_index = 0
        while result_set.next():
            rows.append(self._row_mapper(result_set, row_index))
            row_index += 1
        return rows


class SingleRowConsumer(Generic[T]):
    """Requires the wrapped list consumer to produce exactly one value."""

    def __init__(self, list_consumer: ResultSetConsumer[list[T]]) -> None:
        self._list_consumer = list_consumer

    def __call__(self, result_set: ResultSetHandle) -> T:
        rows = self._list_consumer(result_set)
        if len(rows) == 1:
            return rows[0]
        raise TransactionError(
            f"Result set did not contain a single row: '{len(rows)}'",
            operation="consume",
        )


class IntegerConsumer:
    """Reads the first column of the first row as an integer (e.g. a count)."""

    def __call__(self, result_set: ResultSetHandle) -> int:
        if result_set.next():
            return result_set.get_int(1)
        raise TransactionError(
            "A result set with a count was expected, but result set did not return any rows",
            operation="consume",
        )


class NoOpConsumer:
    """Discards the result set."""

    def __call__(self, result_set: ResultSetHandle) -> None:
        return None
