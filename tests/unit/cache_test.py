from __future__ import annotations

from snippet_engine.core.cache import BoundedCache, SingleSlotMemo


class TestSingleSlotMemo:
    def test_computes_once_per_key(self) -> None:
        calls: list[str] = []
        memo: SingleSlotMemo[str, int] = SingleSlotMemo()

        def compute(key: str) -> int:
            calls.append(key)
            return len(key)

        assert memo.get_or_compute("abc", compute) == 3
        assert memo.get_or_compute("abc", compute) == 3
        assert memo.get_or_compute("de", compute) == 2
        assert memo.get_or_compute("abc", compute) == 3
        assert calls == ["abc", "de", "abc"]

    def test_reset(self) -> None:
        calls: list[str] = []
        memo: SingleSlotMemo[str, str] = SingleSlotMemo()
        memo.get_or_compute("k", lambda key: calls.append(key) or key)
        memo.reset()
        memo.get_or_compute("k", lambda key: calls.append(key) or key)
        assert calls == ["k", "k"]


class TestBoundedCache:
    def test_clears_once_past_limit(self) -> None:
        cache: BoundedCache[str, int] = BoundedCache(2)
        for index, key in enumerate("abc"):
            cache.set(key, index)
        assert len(cache) == 3
        cache.set("d", 3)
        assert len(cache) == 1
        assert "d" in cache
        assert cache.get("a") is None

    def test_custom_eviction(self) -> None:
        evicted: list[int] = []

        def drop_oldest(entries: dict[str, int]) -> None:
            oldest = next(iter(entries))
            evicted.append(entries.pop(oldest))

        cache: BoundedCache[str, int] = BoundedCache(1, evict=drop_oldest)
        cache.set("a", 1)
        cache.set("b", 2)
        cache.set("c", 3)
        assert evicted == [1]
        assert cache.get("b") == 2
        assert cache.get("c") == 3
