"""Parameter binders for prepared statements."""

from __future__ import annotations

from typing import Any

from ninja_transactor.protocols import ParameterBinder, StatementHandle


def no_op_binder(statement: StatementHandle) -> None:
    """Binder for statements that take no parameters."""


NO_OP_BINDER: ParameterBinder = no_op_binder


def bind_parameters(*values: Any) -> ParameterBinder:
    """Return a binder that sets *values* at parameter positions 1..n, in order."""

    def binder(statement: StatementHandle) -> None:
        for position, value in enumerate(values, start=1):
            statement.set_parameter(position, value)

    return binder
