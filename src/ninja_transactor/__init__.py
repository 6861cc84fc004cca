"""Ninja Transactor — transaction template and resource lifecycle for relational database access."""

from ninja_transactor.adapters.dbapi import DBAPIConnection, DBAPIDataSource, DBAPIResultSet, DBAPIStatement
from ninja_transactor.adapters.sql import SQLAlchemyDataSource
from ninja_transactor.binders import NO_OP_BINDER, bind_parameters, no_op_binder
from ninja_transactor.consumers import IntegerConsumer, NoOpConsumer, RowListConsumer, SingleRowConsumer
from ninja_transactor.exceptions import InvalidSQLError, TransactionError
from ninja_transactor.executor import ConnectionExecutor
from ninja_transactor.protocols import (
    ConnectionHandle,
    ConnectionWork,
    DataSource,
    ParameterBinder,
    ResultSetConsumer,
    ResultSetHandle,
    RowMapper,
    StatementHandle,
)
from ninja_transactor.transactor import Transactor

__all__ = [
    "NO_OP_BINDER",
    "ConnectionExecutor",
    "ConnectionHandle",
    "ConnectionWork",
    "DBAPIConnection",
    "DBAPIDataSource",
    "DBAPIResultSet",
    "DBAPIStatement",
    "DataSource",
    "IntegerConsumer",
    "InvalidSQLError",
    "NoOpConsumer",
    "ParameterBinder",
    "ResultSetConsumer",
    "ResultSetHandle",
    "RowListConsumer",
    "RowMapper",
    "SQLAlchemyDataSource",
    "SingleRowConsumer",
    "StatementHandle",
    "TransactionError",
    "Transactor",
    "bind_parameters",
    "no_op_binder",
]
