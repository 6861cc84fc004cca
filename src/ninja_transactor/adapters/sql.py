"""SQLAlchemy engine adapter — borrows pooled DB-API connections from an Engine."""

from __future__ import annotations

import logging

from sqlalchemy.engine import Engine

from ninja_transactor.adapters.dbapi import DBAPIConnection

logger = logging.getLogger(__name__)


class SQLAlchemyDataSource:
    """Data source backed by a synchronous SQLAlchemy :class:`~sqlalchemy.engine.Engine`.

    Every ``get_connection()`` checks a DB-API connection out of the engine's
    pool; closing the returned handle gives it back to the pool. Auto-commit
    is applied to the underlying driver connection and reset to its original
    setting before the connection is returned, so the engine can be shared.
    """

    def __init__(self, engine: Engine, *, owns_engine: bool = False) -> None:
        self._engine = engine
        self._owns_engine = owns_engine
        self._disposed = False

    @property
    def engine(self) -> Engine:
        return self._engine

    def get_connection(self) -> DBAPIConnection:
        if self._disposed:
            raise RuntimeError("SQLAlchemyDataSource has been disposed")
        pooled = self._engine.raw_connection()
        return DBAPIConnection(pooled, driver_connection=pooled.driver_connection)

    def dispose(self) -> None:
        """Dispose the engine's pool if this data source owns the engine."""
        if not self._owns_engine or self._disposed:
            return
        self._disposed = True
        logger.debug("Disposing engine %s", self._engine.url.render_as_string(hide_password=True))
        self._engine.dispose()
