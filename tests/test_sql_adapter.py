"""Tests for the SQLAlchemy engine adapter using a file-backed SQLite engine."""

import sqlite3
from unittest.mock import MagicMock

import pytest
from ninja_transactor.adapters.dbapi import DBAPIConnection
from ninja_transactor.adapters.sql import SQLAlchemyDataSource
from ninja_transactor.binders import bind_parameters
from ninja_transactor.exceptions import TransactionError
from ninja_transactor.transactor import Transactor
from sqlalchemy import create_engine


@pytest.fixture()
def engine(sqlite_path):
    engine = create_engine(f"sqlite:///{sqlite_path}")
    yield engine
    engine.dispose()


@pytest.fixture()
def transactor(engine) -> Transactor:
    t = Transactor(SQLAlchemyDataSource(engine))
    t.execute("create table orders (id integer primary key, status text not null)")
    return t


def _status(result_set, row_index):
    return result_set.get_object(1)


def test_get_connection_wraps_pooled_connection(engine):
    connection = SQLAlchemyDataSource(engine).get_connection()
    try:
        assert isinstance(connection, DBAPIConnection)
        assert engine.pool.checkedout() == 1
    finally:
        connection.close()
    assert engine.pool.checkedout() == 0


def test_units_of_work_return_connections_to_pool(transactor, engine):
    transactor.execute("insert into orders (id, status) values (1, 'open')")
    assert transactor.query_for_int("select count(*) from orders") == 1
    assert engine.pool.checkedout() == 0


def test_bound_query(transactor):
    transactor.execute("insert into orders (id, status) values (1, 'open')")
    transactor.execute("insert into orders (id, status) values (2, 'closed')")
    statuses = transactor.query_for_list(
        "select status from orders where id >= ? order by id", bind_parameters(1), _status
    )
    assert statuses == ["open", "closed"]


def test_failed_unit_of_work_rolls_back(transactor, engine):
    def work(connection):
        for sql in (
            "insert into orders (id, status) values (1, 'open')",
            "insert into orders (id, status) values (1, 'duplicate')",
        ):
            statement = connection.prepare_statement(sql)
            try:
                statement.execute_query().close()
            finally:
                statement.close()

    with pytest.raises(TransactionError) as exc_info:
        transactor.run_with_connection(work)
    assert isinstance(exc_info.value.__cause__, sqlite3.IntegrityError)
    assert transactor.query_for_int("select count(*) from orders") == 0
    assert engine.pool.checkedout() == 0


def test_failed_unit_of_work_rolls_back_ddl(engine):
    transactor = Transactor(SQLAlchemyDataSource(engine))
    with pytest.raises(TransactionError):
        transactor.query_for_int("create table scratch (x integer)")
    names = transactor.query_for_list("select name from sqlite_master", None, _status)
    assert names == []


def test_pooled_connection_returns_with_original_transaction_control(transactor, engine):
    def transaction_control():
        pooled = engine.raw_connection()
        try:
            driver = pooled.driver_connection
            return getattr(driver, "autocommit", None), driver.isolation_level
        finally:
            pooled.close()

    before = transaction_control()
    transactor.execute("insert into orders (id, status) values (1, 'open')")
    assert transaction_control() == before
    assert engine.pool.checkedout() == 0


def test_disposed_data_source_fails_to_acquire(engine):
    data_source = SQLAlchemyDataSource(engine, owns_engine=True)
    data_source.dispose()
    with pytest.raises(TransactionError) as exc_info:
        Transactor(data_source).execute("select 1")
    assert exc_info.value.operation == "acquire"


def test_dispose_only_when_owning_engine():
    engine = MagicMock()
    SQLAlchemyDataSource(engine).dispose()
    engine.dispose.assert_not_called()

    owned = SQLAlchemyDataSource(engine, owns_engine=True)
    owned.dispose()
    owned.dispose()
    engine.dispose.assert_called_once()
