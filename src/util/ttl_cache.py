"""
In-process expiring caches for the navigation endpoints.

Values are JSON-shaped dicts (normalized documents, panel feeds). They are
copied on the way in and on the way out, so a stored entry never changes
after it is written.
"""
import copy
import time
import threading
from dataclasses import dataclass
from typing import Any

@dataclass
class _Entry:
	value: Any
	expires_at: float

class TTLCache:
	def __init__(self, max_items: int = 5000, clock=time.time):
		self._max = max_items
		self._clock = clock
		self._lock = threading.RLock()
		self._data: dict[str, _Entry] = {}

	def get(self, key: str):
		now = self._clock()
		with self._lock:
			entry = self._data.get(key)
			if entry is None:
				return None
			if entry.expires_at <= now:
				self._data.pop(key, None)
				return None
			value = entry.value
		return copy.deepcopy(value)

	def set(self, key: str, value, ttl_seconds: int):
		stored = copy.deepcopy(value)
		now = self._clock()
		with self._lock:
			# Overwriting a live key never evicts another one.
			if key not in self._data and len(self._data) >= self._max:
				self._data.pop(next(iter(self._data)))
			self._data[key] = _Entry(value=stored, expires_at=now + ttl_seconds)

	def delete(self, key: str):
		with self._lock:
			self._data.pop(key, None)

	def clear(self):
		with self._lock:
			self._data.clear()

	def __len__(self) -> int:
		with self._lock:
			return len(self._data)

# Normalized navigation documents, keyed by settings and a hash of the raw text.
config_cache = TTLCache(max_items=64)
# Panel feeds, keyed per viewer and per normalized panel request.
panel_cache = TTLCache(max_items=10000)
