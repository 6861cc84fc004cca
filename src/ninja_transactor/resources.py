"""Scoped release of driver resources."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Protocol, TypeVar

logger = logging.getLogger(__name__)


class _Closeable(Protocol):
    def close(self) -> None: ...


R = TypeVar("R", bound=_Closeable)


@contextmanager
def released(resource: R, kind: str) -> Iterator[R]:
    """Yield *resource* and close it exactly once when the block exits.

    A failing ``close()`` is logged and suppressed so that it never replaces
    the outcome of the block itself.
    """
    try:
        yield resource
    finally:
        try:
            resource.close()
        except Exception:
            logger.warning("Failed to close the %s; logging and ignoring", kind, exc_info=True)
        else:
            logger.debug("Released the %s", kind)
