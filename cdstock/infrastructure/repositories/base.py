"""Shared helpers for repository implementations."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from cdstock.domain.errors import BackendError

logger = logging.getLogger(__name__)


@contextmanager
def backend_call(session: Session, action: str) -> Iterator[None]:
    """Translate store failures raised inside the block into :class:`BackendError`.

    The session is rolled back so it stays usable for the next call.
    """

    try:
        yield
    except SQLAlchemyError as exc:
        session.rollback()
        logger.warning("Store call '%s' failed: %s", action, exc)
        raise BackendError(f"Could not {action}: {exc}") from exc


__all__ = ["backend_call"]
