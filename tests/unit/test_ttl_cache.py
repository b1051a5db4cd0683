"""TTL 缓存与缓存 Key 单元测试。"""

import pytest

from src.core.infrastructure.cache import CacheKeys, TTLCache


class TestTTLCache:
    def test_get_returns_value_within_ttl(self, fake_clock):
        cache: TTLCache[str, int] = TTLCache(60, clock=fake_clock)
        cache.set("a", 1)

        fake_clock.advance(59)
        assert cache.get("a") == 1
        assert cache.is_fresh("a") is True

    def test_get_misses_after_ttl(self, fake_clock):
        cache: TTLCache[str, int] = TTLCache(60, clock=fake_clock)
        cache.set("a", 1)

        fake_clock.advance(60)
        assert cache.get("a") is None
        assert cache.is_fresh("a") is False

    def test_peek_returns_stale_entry(self, fake_clock):
        """过期条目仍可通过 peek 取到（先返回旧数据）。"""
        cache: TTLCache[str, str] = TTLCache(10, clock=fake_clock)
        cache.set("k", "old")
        fake_clock.advance(30)

        entry = cache.peek("k")
        assert entry is not None
        assert entry.value == "old"
        assert entry.age(fake_clock()) == 30
        assert "k" in cache

    def test_set_replaces_entry_wholesale(self, fake_clock):
        cache: TTLCache[str, list[int]] = TTLCache(10, clock=fake_clock)
        first = cache.set("k", [1])
        fake_clock.advance(5)
        second = cache.set("k", [2])

        assert first.value == [1]
        assert second.value == [2]
        assert second.written_at == first.written_at + 5
        assert cache.get("k") == [2]

    def test_unset_key_is_miss(self, fake_clock):
        cache: TTLCache[str, int] = TTLCache(10, clock=fake_clock)
        assert cache.get("missing") is None
        assert cache.peek("missing") is None

    def test_invalidate_and_clear(self, fake_clock):
        cache: TTLCache[str, int] = TTLCache(10, clock=fake_clock)
        cache.set("a", 1)
        cache.set("b", 2)

        assert cache.invalidate("a") is True
        assert cache.invalidate("a") is False
        assert cache.keys() == ["b"]

        cache.clear()
        assert len(cache) == 0

    def test_non_positive_ttl_rejected(self):
        with pytest.raises(ValueError):
            TTLCache(0)


class TestCacheKeys:
    def test_price_key_normalizes_case_and_whitespace(self):
        assert CacheKeys.prices("Tomato", "Karnataka", "Bangalore") == CacheKeys.prices(
            " tomato ", "KARNATAKA", "bangalore"
        )

    def test_multi_word_market(self):
        assert (
            CacheKeys.prices("Onion", "Maharashtra", "Navi  Mumbai")
            == "prices:onion:maharashtra:navi-mumbai"
        )

    def test_scheme_listing_default(self):
        assert CacheKeys.scheme_listing() == "schemes:listing:all"
        assert CacheKeys.scheme_listing("Drip Irrigation") == (
            "schemes:listing:drip-irrigation"
        )

    def test_scheme_detail(self):
        assert CacheKeys.scheme_detail("pmksy") == "schemes:detail:pmksy"
