"""Keyed merge of rows that arrive from an initial fetch and from realtime pushes."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any, Generic, TypeVar

T = TypeVar("T")


class Inbox(Generic[T]):
    """Hold rows keyed by id so the same row is never delivered twice.

    Rows can come from a list call and from the realtime bridge in any order;
    merging always replaces by id instead of appending.
    """

    def __init__(
        self,
        key: Callable[[T], Any],
        *,
        sort_key: Callable[[T], Any] | None = None,
        reverse: bool = False,
    ) -> None:
        self._key = key
        self._sort_key = sort_key
        self._reverse = reverse
        self._rows: dict[Any, T] = {}

    def merge(self, row: T) -> bool:
        """Insert or replace ``row``; return ``True`` when its id was new."""

        row_id = self._key(row)
        is_new = row_id not in self._rows
        self._rows[row_id] = row
        return is_new

    def merge_many(self, rows: Iterable[T]) -> list[T]:
        """Merge ``rows`` and return the ones whose id had not been seen."""

        return [row for row in rows if self.merge(row)]

    def __contains__(self, row_id: object) -> bool:
        return row_id in self._rows

    def __len__(self) -> int:
        return len(self._rows)

    def items(self) -> list[T]:
        """Return the merged rows, ordered by ``sort_key`` when one was given."""

        rows = list(self._rows.values())
        if self._sort_key is not None:
            rows.sort(key=self._sort_key, reverse=self._reverse)
        return rows


__all__ = ["Inbox"]
