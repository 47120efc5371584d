"""Explicit process-level caches with ``reset()`` hooks."""

from __future__ import annotations

from collections.abc import Callable
from typing import Generic, TypeVar

K = TypeVar("K")
V = TypeVar("V")


class SingleSlotMemo(Generic[K, V]):
    """Remember the result for the most recent key only."""

    def __init__(self) -> None:
        self._key: K | None = None
        self._value: V | None = None
        self._filled = False

    def get_or_compute(self, key: K, compute: Callable[[K], V]) -> V:
        if self._filled and self._key == key:
            return self._value  # type: ignore[return-value]
        value = compute(key)
        self._key = key
        self._value = value
        self._filled = True
        return value

    def reset(self) -> None:
        self._key = None
        self._value = None
        self._filled = False


def clear_all(entries: dict[object, object]) -> None:
    entries.clear()


class BoundedCache(Generic[K, V]):
    """Dictionary cache that evicts once it grows past ``max_entries``.

    The default eviction clears every entry at once; tests may inject another
    policy that receives the underlying dict.
    """

    def __init__(
        self,
        max_entries: int,
        evict: Callable[[dict[K, V]], None] | None = None,
    ) -> None:
        self.max_entries = max_entries
        self._entries: dict[K, V] = {}
        self._evict = evict or clear_all  # type: ignore[assignment]

    def get(self, key: K) -> V | None:
        return self._entries.get(key)

    def __contains__(self, key: object) -> bool:
        return key in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def set(self, key: K, value: V) -> None:
        if len(self._entries) > self.max_entries:
            self._evict(self._entries)
        self._entries[key] = value

    def reset(self) -> None:
        self._entries.clear()
