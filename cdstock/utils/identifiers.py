"""Identifier helpers."""

from uuid import uuid4


def new_id() -> str:
    """Return a fresh random identifier for a persisted row."""

    return uuid4().hex
