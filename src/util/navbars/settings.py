from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from typing import Mapping

logger = logging.getLogger(__name__)

SERVER_MAX_PANEL_ITEMS = 40

_TRUE_VALUES = {"1", "true", "yes", "on"}
_FALSE_VALUES = {"0", "false", "no", "off"}


@dataclass(frozen=True)
class NavigationSettings:
	enabled: bool = True
	cache_minutes: int = 5
	max_panel_items: int = 20
	fallback_document: str = "navigation.json"

	@property
	def cache_seconds(self) -> int:
		return self.cache_minutes * 60


def _parse_bool(value: str | None, default: bool) -> bool:
	if value is None:
		return default
	low = value.strip().lower()
	if low in _TRUE_VALUES:
		return True
	if low in _FALSE_VALUES:
		return False
	return default


def _parse_int(value: str | None, default: int) -> int:
	if value is None or not value.strip():
		return default
	try:
		return int(value.strip())
	except ValueError:
		logger.warning("Ignoring non-numeric navigation setting value %r", value)
		return default


def load_navigation_settings(*, reader=None, env: Mapping[str, str] | None = None) -> NavigationSettings:
	"""
	Build settings from env vars, then navigation.conf, then defaults.
	`reader` is anything with a `find(filename) -> dict | None` method.
	"""
	env_vars = env if env is not None else os.environ
	conf: dict = {}
	if reader is not None:
		try:
			conf = reader.find("navigation.conf") or {}
		except Exception as e:
			logger.warning("Failed to read navigation.conf, using defaults: %s", e)
			conf = {}

	def pick(env_key: str, conf_key: str) -> str | None:
		val = env_vars.get(env_key)
		if val is not None and val.strip():
			return val
		val = conf.get(conf_key)
		return val if isinstance(val, str) else None

	defaults = NavigationSettings()
	cache_minutes = max(0, _parse_int(pick("NAVIGATION_CACHE_MINUTES", "CACHE_MINUTES"), defaults.cache_minutes))
	max_items = _parse_int(pick("NAVIGATION_MAX_PANEL_ITEMS", "MAX_PANEL_ITEMS"), defaults.max_panel_items)
	max_items = min(max(max_items, 1), SERVER_MAX_PANEL_ITEMS)
	fallback = (pick("NAVIGATION_FALLBACK_FILE", "FALLBACK_FILE") or defaults.fallback_document).strip()

	return NavigationSettings(
		enabled=_parse_bool(pick("NAVIGATION_ENABLED", "ENABLED"), defaults.enabled),
		cache_minutes=cache_minutes,
		max_panel_items=max_items,
		fallback_document=fallback,
	)
