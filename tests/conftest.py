"""Shared fixtures for ninja-transactor tests.

The fakes record every lifecycle call into one shared event list so tests can
assert on ordering across the connection, statement and result set tiers.
"""

from __future__ import annotations

from typing import Any

import pytest


class DriverError(Exception):
    """Stand-in for a driver-level exception (e.g. ``sqlite3.OperationalError``)."""


class FakeResultSet:
    def __init__(self, events: list[str], rows: list[tuple[Any, ...]], fail_on_close: bool = False) -> None:
        self.events = events
        self.rows = rows
        self.fail_on_close = fail_on_close
        self.position = -1
        self.next_calls = 0
        self.close_calls = 0

    def next(self) -> bool:
        self.next_calls += 1
        self.position += 1
        return self.position < len(self.rows)

    def get_object(self, column: int) -> Any:
        return self.rows[self.position][column - 1]

    def get_int(self, column: int) -> int:
        return int(self.get_object(column))

    def close(self) -> None:
        self.close_calls += 1
        self.events.append("result_set.close")
        if self.fail_on_close:
            raise DriverError("result set close failed")


class FakeStatement:
    def __init__(
        self,
        events: list[str],
        result_set: FakeResultSet,
        fail_on_execute: bool = False,
        fail_on_close: bool = False,
    ) -> None:
        self.events = events
        self.result_set = result_set
        self.fail_on_execute = fail_on_execute
        self.fail_on_close = fail_on_close
        self.parameters: dict[int, Any] = {}
        self.close_calls = 0

    def set_parameter(self, position: int, value: Any) -> None:
        self.events.append(f"statement.set_parameter({position})")
        self.parameters[position] = value

    def execute_query(self) -> FakeResultSet:
        self.events.append("statement.execute_query")
        if self.fail_on_execute:
            raise DriverError("execute failed")
        return self.result_set

    def close(self) -> None:
        self.close_calls += 1
        self.events.append("statement.close")
        if self.fail_on_close:
            raise DriverError("statement close failed")


class FakeConnection:
    def __init__(self, events: list[str], statement: FakeStatement) -> None:
        self.events = events
        self.statement = statement
        self.auto_commit: bool | None = None
        self.prepared_sql: list[str] = []
        self.fail_on: set[str] = set()
        self.close_calls = 0

    def _record(self, name: str) -> None:
        self.events.append(f"connection.{name}")
        if name in self.fail_on:
            raise DriverError(f"{name} failed")

    def set_auto_commit(self, auto_commit: bool) -> None:
        self._record("set_auto_commit")
        self.auto_commit = auto_commit

    def prepare_statement(self, sql: str) -> FakeStatement:
        self._record("prepare_statement")
        self.prepared_sql.append(sql)
        return self.statement

    def commit(self) -> None:
        self._record("commit")

    def rollback(self) -> None:
        self._record("rollback")

    def close(self) -> None:
        self.close_calls += 1
        self._record("close")


class FakeDataSource:
    """Hands out a fresh connection/statement/result set chain per call."""

    def __init__(self) -> None:
        self.events: list[str] = []
        self.rows: list[tuple[Any, ...]] = []
        self.fail_on_acquire = False
        self.connection_fail_on: set[str] = set()
        self.fail_on_execute = False
        self.statement_fail_on_close = False
        self.result_set_fail_on_close = False
        self.connections: list[FakeConnection] = []

    def with_rows(self, *rows: tuple[Any, ...]) -> FakeDataSource:
        self.rows = list(rows)
        return self

    def get_connection(self) -> FakeConnection:
        self.events.append("data_source.get_connection")
        if self.fail_on_acquire:
            raise DriverError("pool exhausted")
        result_set = FakeResultSet(self.events, list(self.rows), fail_on_close=self.result_set_fail_on_close)
        statement = FakeStatement(
            self.events,
            result_set,
            fail_on_execute=self.fail_on_execute,
            fail_on_close=self.statement_fail_on_close,
        )
        connection = FakeConnection(self.events, statement)
        connection.fail_on = set(self.connection_fail_on)
        self.connections.append(connection)
        return connection

    @property
    def connection(self) -> FakeConnection:
        assert len(self.connections) == 1
        return self.connections[0]


@pytest.fixture()
def data_source() -> FakeDataSource:
    return FakeDataSource()


@pytest.fixture()
def sqlite_path(tmp_path):
    return tmp_path / "transactor.db"
