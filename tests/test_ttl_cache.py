from __future__ import annotations

from util.ttl_cache import TTLCache


class _Clock:
	def __init__(self):
		self.now = 1000.0

	def __call__(self):
		return self.now


def test_get_returns_value_until_expiry():
	clock = _Clock()
	cache = TTLCache(clock=clock)
	cache.set("k", {"a": 1}, ttl_seconds=60)
	assert cache.get("k") == {"a": 1}
	clock.now += 60
	assert cache.get("k") is None
	assert len(cache) == 0


def test_oldest_entry_is_evicted_when_full():
	cache = TTLCache(max_items=2)
	cache.set("a", 1, 60)
	cache.set("b", 2, 60)
	cache.set("a", 3, 60)
	assert len(cache) == 2
	cache.set("c", 4, 60)
	assert cache.get("a") is None
	assert cache.get("b") == 2
	assert cache.get("c") == 4


def test_delete_and_clear():
	cache = TTLCache()
	cache.set("a", 1, 60)
	cache.set("b", 2, 60)
	cache.delete("a")
	assert cache.get("a") is None
	cache.clear()
	assert len(cache) == 0


def test_stored_values_do_not_change_after_write():
	cache = TTLCache()
	value = {"topics": [{"id": 1}]}
	cache.set("k", value, 60)
	value["topics"].append({"id": 2})

	hit = cache.get("k")
	assert hit == {"topics": [{"id": 1}]}
	hit["topics"].clear()
	assert cache.get("k") == {"topics": [{"id": 1}]}
