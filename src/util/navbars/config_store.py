from __future__ import annotations

import hashlib
import json
import logging

from util.navbars.document_source import StaticDocumentSource
from util.navbars.normalizer import ConfigNormalizer, ItemType, default_config, is_valid_document
from util.navbars.presets import list_presets
from util.navbars.settings import NavigationSettings
from util.navbars.urls import resolve_url_for_viewer
from util.navbars.visibility import ViewerContext, allowed, build_context
from util.ttl_cache import TTLCache, config_cache

logger = logging.getLogger(__name__)


class ConfigStore:
	"""
	Fetches the raw navigation document, normalizes it (cached by a hash of
	the raw text) and prunes it for a single viewer.
	"""
	def __init__(
		self,
		source=None,
		repository=None,
		settings: NavigationSettings | None = None,
		cache: TTLCache | None = None,
	):
		self.source = source or StaticDocumentSource()
		self.repository = repository
		self.settings = settings or NavigationSettings()
		self.cache = cache if cache is not None else config_cache
		self.normalizer = ConfigNormalizer(repository, max_panel_items=self.settings.max_panel_items)

	def raw_json(self) -> str:
		return self.source.active_document()

	def _cache_key(self, raw: str) -> str:
		digest = hashlib.sha256(raw.encode("utf-8")).hexdigest()
		return f"navigation:config:normalized:{self.settings.max_panel_items}:{digest}"

	def normalized_config(self) -> dict:
		raw = self.raw_json()
		key = self._cache_key(raw)
		cached = self.cache.get(key)
		if cached is not None:
			logger.debug("Normalized navigation cache hit %s", key)
			return cached

		try:
			parsed = json.loads(raw)
		except (ValueError, RecursionError) as e:
			logger.warning("Stored navigation document could not be parsed, using default: %s", e)
			normalized = default_config()
		else:
			normalized = self.normalizer.normalize_config(parsed)

		self.cache.set(key, normalized, self.settings.cache_seconds)
		return normalized

	def visible_config(self, viewer: dict | None) -> dict:
		normalized = self.normalized_config()
		context = build_context(viewer)

		menus = [self._visible_menu(menu, context) for menu in normalized["menus"]]
		sidebars = [self._visible_sidebar(sidebar, context) for sidebar in normalized["sidebars"]]
		blocks = [self._visible_block(block, context) for block in normalized["discovery_blocks"]]
		return {
			"version": normalized["version"],
			"menus": [m for m in menus if m is not None],
			"sidebars": [s for s in sidebars if s is not None],
			"discovery_blocks": [b for b in blocks if b is not None],
		}

	def presets(self) -> dict[str, dict]:
		return list_presets()

	def validate(self, raw_text) -> bool:
		return is_valid_document(raw_text, self.normalizer)

	# ---------- per-viewer pruning ----------
	def _visible_menu(self, menu: dict, context: ViewerContext) -> dict | None:
		if not allowed(menu.get("visibility"), context):
			return None
		items = [self._visible_item(item, context) for item in menu.get("items", [])]
		items = [i for i in items if i is not None]
		# A menu with nothing left to show is dropped, not rendered empty.
		if not items:
			return None
		menu_copy = dict(menu)
		menu_copy["items"] = items
		return menu_copy

	def _visible_item(self, item: dict, context: ViewerContext) -> dict | None:
		if not allowed(item.get("visibility"), context):
			return None
		children = [self._visible_item(child, context) for child in item.get("children", [])]
		children = [c for c in children if c is not None]
		if item.get("type") == ItemType.DIVIDER.value and not children and not item.get("panel"):
			return None

		item_copy = dict(item)
		item_copy["children"] = children
		item_copy["resolved_url"] = resolve_url_for_viewer(item, context, self.repository)
		return item_copy

	def _visible_sidebar(self, sidebar: dict, context: ViewerContext) -> dict | None:
		if not allowed(sidebar.get("visibility"), context):
			return None
		widgets = sidebar.get("widgets")
		widgets = widgets if isinstance(widgets, list) else []
		visible_widgets = [self._visible_block(w, context) for w in widgets]
		sidebar_copy = dict(sidebar)
		sidebar_copy["widgets"] = [w for w in visible_widgets if w is not None]
		return sidebar_copy

	def _visible_block(self, block, context: ViewerContext) -> dict | None:
		if not isinstance(block, dict):
			return None
		if not allowed(block.get("visibility"), context):
			return None
		return block
