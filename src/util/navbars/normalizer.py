from __future__ import annotations

import json
import logging
from enum import Enum

from util.navbars.settings import SERVER_MAX_PANEL_ITEMS
from util.navbars.urls import resolve_url, sanitize_url
from util.navbars.values import presence, to_int
from util.navbars.visibility import normalize_visibility

logger = logging.getLogger(__name__)


class Placement(str, Enum):
	TOP_NAV = "top_nav"
	SIDEBAR = "sidebar"
	FLOATING = "floating"


class MenuLayout(str, Enum):
	DROPDOWN = "dropdown"
	MEGA_GRID = "mega_grid"
	SIDEBAR = "sidebar"


class OpenMode(str, Enum):
	HOVER = "hover"
	CLICK = "click"


class ItemType(str, Enum):
	LINK = "link"
	CATEGORY = "category"
	TAG = "tag"
	TOPIC = "topic"
	EXTERNAL_LINK = "external_link"
	SECTION_HEADING = "section_heading"
	DIVIDER = "divider"


class PanelSource(str, Enum):
	LATEST = "latest"
	CATEGORY_LATEST = "category_latest"
	CATEGORY_TOP = "category_top"
	TAG_LATEST = "tag_latest"
	FEATURED = "featured"


class TimeRange(str, Enum):
	DAILY = "daily"
	WEEKLY = "weekly"
	MONTHLY = "monthly"
	QUARTERLY = "quarterly"
	YEARLY = "yearly"
	ALL = "all"


DEFAULT_PANEL_LIMIT = 6
MAX_HOVER_DELAY_MS = 1000
# Items nested deeper than this lose their children.
MAX_ITEM_DEPTH = 16


def default_config() -> dict:
	return {
		"version": 1,
		"menus": [],
		"sidebars": [],
		"discovery_blocks": [],
	}


def safe_enum(value, enum_cls: type[Enum], fallback: Enum) -> str:
	"""Exact, case-sensitive match against the enum values, else the fallback."""
	if isinstance(value, str):
		for member in enum_cls:
			if member.value == value:
				return member.value
	return fallback.value


def clamp_panel_limit(raw, max_panel_items: int) -> int:
	limit = to_int(raw)
	if limit <= 0:
		limit = DEFAULT_PANEL_LIMIT
	return max(1, min(limit, max_panel_items, SERVER_MAX_PANEL_ITEMS))


def positive_id(raw) -> int | None:
	value = to_int(raw)
	return value if value > 0 else None


def titleize(value: str) -> str:
	words = value.replace("-", " ").replace("_", " ").split()
	return " ".join(word[:1].upper() + word[1:] for word in words)


def _as_list(value) -> list:
	return value if isinstance(value, list) else []


class ConfigNormalizer:
	"""
	Rewrites an arbitrary JSON value into a fully defaulted navigation
	document. Never raises on shape problems; anything it does not
	recognize is replaced by its default.

	`repository` resolves category/topic targets to canonical paths and may
	be None, in which case those items fall back to their authored url.
	"""
	def __init__(self, repository=None, *, max_panel_items: int = 20):
		self.repository = repository
		self.max_panel_items = max_panel_items

	def normalize_config(self, config) -> dict:
		config = config if isinstance(config, dict) else {}
		version = to_int(config.get("version"))
		menus = [self.normalize_menu(menu, index) for index, menu in enumerate(_as_list(config.get("menus")))]
		return {
			"version": version if version > 0 else 1,
			"menus": menus,
			"sidebars": [self.normalize_generic_entity(s) for s in _as_list(config.get("sidebars"))],
			"discovery_blocks": [self.normalize_generic_entity(b) for b in _as_list(config.get("discovery_blocks"))],
		}

	def normalize_menu(self, menu, index: int) -> dict:
		menu = menu if isinstance(menu, dict) else {}
		menu_id = presence(menu.get("id")) or f"menu-{index + 1}"
		items = _as_list(menu.get("items"))

		return {
			"id": menu_id,
			"label": presence(menu.get("label")) or titleize(menu_id),
			"placement": safe_enum(menu.get("placement"), Placement, Placement.TOP_NAV),
			"layout": safe_enum(menu.get("layout"), MenuLayout, MenuLayout.MEGA_GRID),
			"open_mode": safe_enum(menu.get("open_mode"), OpenMode, OpenMode.HOVER),
			"hover_delay_ms": min(max(to_int(menu.get("hover_delay_ms")), 0), MAX_HOVER_DELAY_MS),
			"visibility": normalize_visibility(menu.get("visibility")),
			"items": [
				self.normalize_item(item, f"{menu_id}-{item_index + 1}")
				for item_index, item in enumerate(items)
			],
		}

	def normalize_item(self, item, generated_id: str, depth: int = 0) -> dict:
		item = item if isinstance(item, dict) else {}
		item_id = presence(item.get("id")) or generated_id
		item_type = safe_enum(item.get("type"), ItemType, ItemType.LINK)

		normalized = {
			"id": item_id,
			"title": presence(item.get("title")) or "",
			"type": item_type,
			"url": sanitize_url(item.get("url")),
			"resolved_url": resolve_url(item_type, item, self.repository),
			"category_id": positive_id(item.get("category_id")),
			"category_slug": presence(item.get("category_slug")),
			"tag": presence(item.get("tag")),
			"topic_id": positive_id(item.get("topic_id")),
			"icon": presence(item.get("icon")),
			"image_url": presence(item.get("image_url")),
			"custom_css_class": presence(item.get("custom_css_class")),
			"custom_css": presence(item.get("custom_css")),
			"visibility": normalize_visibility(item.get("visibility")),
			"panel": self.normalize_panel(item.get("panel")),
		}
		children = _as_list(item.get("children")) if depth + 1 < MAX_ITEM_DEPTH else []
		normalized["children"] = [
			self.normalize_item(child, f"{item_id}-{child_index + 1}", depth + 1)
			for child_index, child in enumerate(children)
		]
		return normalized

	def normalize_panel(self, panel) -> dict | None:
		if not isinstance(panel, dict):
			return None
		return {
			"source_type": safe_enum(panel.get("source_type"), PanelSource, PanelSource.LATEST),
			"category_slug": presence(panel.get("category_slug")),
			"category_id": positive_id(panel.get("category_id")),
			"tag": presence(panel.get("tag")),
			"time_range": safe_enum(panel.get("time_range"), TimeRange, TimeRange.WEEKLY),
			"limit": clamp_panel_limit(panel.get("limit"), self.max_panel_items),
			"show_thumbnail": panel.get("show_thumbnail") is not False,
			"show_excerpt": panel.get("show_excerpt") is not False,
		}

	def normalize_generic_entity(self, entity) -> dict:
		entity = dict(entity) if isinstance(entity, dict) else {}
		entity["visibility"] = normalize_visibility(entity.get("visibility"))
		return entity


def is_valid_document(raw_text, normalizer: ConfigNormalizer | None = None) -> bool:
	"""
	Import check: the text must be JSON and its top-level value an object.
	Anything normalization can fix is accepted.
	"""
	try:
		parsed = json.loads(raw_text)
	except (TypeError, ValueError, RecursionError):
		return False
	if not isinstance(parsed, dict):
		return False
	try:
		(normalizer or ConfigNormalizer()).normalize_config(parsed)
	except Exception:
		logger.exception("Normalization failed for a document under validation")
		return False
	return True
