from __future__ import annotations

from typing import Callable, Iterable, Optional, TypeVar

from ..core.constants import SORT_ASCENDING
from ..core.enums import SortKey

Row = TypeVar("Row")


def is_ascending(direction: Optional[str]) -> bool:
    return not direction or direction.strip().lower() == SORT_ASCENDING


class RowSorter:
    """Stable in-memory ordering of report rows.

    Supports a name key (compared case-insensitively) and ``Percentage``.
    A missing sort key falls back to the name key in the requested direction;
    an unrecognised key falls back to the name key ascending.
    """

    def __init__(self, *, name_key: SortKey, name_of: Callable[[Row], str]):
        self._name_key = name_key
        self._keys: dict[SortKey, Callable[[Row], object]] = {
            name_key: lambda r: (name_of(r) or "").casefold(),
            SortKey.PERCENTAGE: lambda r: r.percentage,
        }

    def resolve(self, sort: Optional[str], direction: Optional[str]) -> tuple[SortKey, bool]:
        if not sort:
            return self._name_key, is_ascending(direction)
        try:
            key = SortKey(sort)
        except ValueError:
            return self._name_key, True
        if key not in self._keys:
            return self._name_key, True
        return key, is_ascending(direction)

    def sort(
        self,
        rows: Iterable[Row],
        sort: Optional[str] = None,
        direction: Optional[str] = None,
        *,
        tiebreak: Optional[SortKey] = None,
    ) -> list[Row]:
        out = list(rows)
        key, ascending = self.resolve(sort, direction)
        if tiebreak is not None and tiebreak != key and tiebreak in self._keys:
            out.sort(key=self._keys[tiebreak])
        out.sort(key=self._keys[key], reverse=not ascending)
        return out
