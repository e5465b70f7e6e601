from __future__ import annotations

import hashlib
import html
import json
import logging
import re
from dataclasses import asdict, dataclass
from datetime import datetime, timedelta, timezone

from util.navbars.normalizer import PanelSource, TimeRange, clamp_panel_limit, positive_id, safe_enum
from util.navbars.settings import NavigationSettings
from util.navbars.urls import category_path, find_category, topic_path
from util.navbars.values import presence
from util.navbars.visibility import ViewerContext, build_context
from util.ttl_cache import TTLCache, panel_cache

logger = logging.getLogger(__name__)

TIME_WINDOWS: dict[str, timedelta | None] = {
	TimeRange.DAILY.value: timedelta(days=1),
	TimeRange.WEEKLY.value: timedelta(days=7),
	TimeRange.MONTHLY.value: timedelta(days=30),
	TimeRange.QUARTERLY.value: timedelta(days=90),
	TimeRange.YEARLY.value: timedelta(days=365),
	TimeRange.ALL.value: None,
}

# Sort orders understood by the topic repository.
ORDER_LATEST = "latest"     # bumped_at desc
ORDER_TOP = "top"           # like_count desc, views desc, posts_count desc

EXCERPT_LENGTH = 140

_TAG_RE = re.compile(r"<[^>]*>")
_SPACE_RE = re.compile(r"\s+")


@dataclass(frozen=True)
class PanelRequest:
	source_type: str = PanelSource.LATEST.value
	category_slug: str | None = None
	category_id: int | None = None
	tag: str | None = None
	time_range: str = TimeRange.WEEKLY.value
	limit: int = 6

	def as_dict(self) -> dict:
		return asdict(self)


@dataclass(frozen=True)
class TopicScope:
	"""What the topic repository is asked for. Always read-filtered for `context`."""
	context: ViewerContext
	category_id: int | None = None
	tag: str | None = None
	since: datetime | None = None
	pinned_only: bool = False
	order: str = ORDER_LATEST
	limit: int = 6


def normalize_panel_request(fields, *, max_panel_items: int = 20) -> PanelRequest:
	fields = fields or {}
	return PanelRequest(
		source_type=safe_enum(fields.get("source_type"), PanelSource, PanelSource.LATEST),
		category_slug=presence(fields.get("category_slug")),
		category_id=positive_id(fields.get("category_id")),
		tag=presence(fields.get("tag")),
		time_range=safe_enum(fields.get("time_range"), TimeRange, TimeRange.WEEKLY),
		limit=clamp_panel_limit(fields.get("limit"), max_panel_items),
	)


def panel_cache_key(viewer: dict | None, request: PanelRequest) -> str:
	user_key = "anon" if not viewer else viewer.get("id")
	canonical = json.dumps(request.as_dict(), sort_keys=True, separators=(",", ":"))
	digest = hashlib.sha256(canonical.encode("utf-8")).hexdigest()
	return f"navigation:panel:v1:user:{user_key}:{digest}"


def build_excerpt(cooked: str | None, length: int = EXCERPT_LENGTH) -> str | None:
	if not cooked:
		return None
	text = html.unescape(_TAG_RE.sub(" ", cooked))
	text = _SPACE_RE.sub(" ", text).strip()
	if not text:
		return None
	if len(text) <= length:
		return text
	return text[:length - 1].rstrip() + "…"


def _iso(value):
	if isinstance(value, datetime):
		if value.tzinfo is None:
			value = value.replace(tzinfo=timezone.utc)
		return value.isoformat()
	return value


def serialize_topic(topic: dict, request: PanelRequest) -> dict:
	category = topic.get("category")
	excerpt = None
	if request.source_type != PanelSource.FEATURED.value:
		excerpt = build_excerpt(topic.get("cooked"))

	return {
		"id": topic.get("id"),
		"slug": topic.get("slug"),
		"title": topic.get("title"),
		"fancy_title": topic.get("fancy_title") or topic.get("title"),
		"url": topic_path(topic),
		"created_at": _iso(topic.get("created_at")),
		"bumped_at": _iso(topic.get("bumped_at")),
		"posts_count": topic.get("posts_count") or 0,
		"like_count": topic.get("like_count") or 0,
		"views": topic.get("views") or 0,
		"image_url": topic.get("image_url"),
		"excerpt": excerpt,
		"author_username": topic.get("author_username"),
		"category": category and {
			"id": category.get("id"),
			"name": category.get("name"),
			"slug": category.get("slug"),
			"color": category.get("color"),
			"text_color": category.get("text_color"),
			"url": category_path(category),
		},
	}


class FeedQuery:
	"""
	Panel content: turns a loosely typed panel request into an ordered,
	bounded, permission-filtered list of topic summaries.

	`repository` looks up categories and answers `can_view`; `topics` runs a
	TopicScope. Both are usually the same database interface.
	"""
	def __init__(
		self,
		repository,
		topics=None,
		settings: NavigationSettings | None = None,
		cache: TTLCache | None = None,
		clock=None,
	):
		self.repository = repository
		self.topics = topics if topics is not None else repository
		self.settings = settings or NavigationSettings()
		self.cache = cache if cache is not None else panel_cache
		self.clock = clock or (lambda: datetime.now(timezone.utc))

	def fetch(self, viewer: dict | None, fields=None) -> dict:
		request = normalize_panel_request(fields, max_panel_items=self.settings.max_panel_items)
		key = panel_cache_key(viewer, request)
		cached = self.cache.get(key)
		if cached is not None:
			logger.debug("Panel cache hit %s", key)
			return cached

		context = build_context(viewer)
		scope = self.build_scope(request, context)
		if scope is None:
			topics = []
		else:
			try:
				rows = self.topics.find_topics(scope)
			except Exception as e:
				logger.warning("Topic query failed for panel %s: %s", request.source_type, e)
				return {"source": request.as_dict(), "topics": []}
			topics = [serialize_topic(row, request) for row in list(rows)[:request.limit]]

		result = {"source": request.as_dict(), "topics": topics}
		self.cache.set(key, result, self.settings.cache_seconds)
		return result

	def build_scope(self, request: PanelRequest, context: ViewerContext) -> TopicScope | None:
		"""
		The repository query for a panel, or None when the panel resolves to
		nothing the viewer may see (unknown or unreadable category, no tag).
		"""
		source = request.source_type
		if source == PanelSource.CATEGORY_LATEST.value:
			category_id = self._readable_category_id(request, context)
			if category_id is None:
				return None
			return TopicScope(context=context, category_id=category_id, order=ORDER_LATEST, limit=request.limit)

		if source == PanelSource.CATEGORY_TOP.value:
			category_id = self._readable_category_id(request, context)
			if category_id is None:
				return None
			return TopicScope(
				context=context,
				category_id=category_id,
				since=self._since(request.time_range),
				order=ORDER_TOP,
				limit=request.limit,
			)

		if source == PanelSource.TAG_LATEST.value:
			if not request.tag:
				return None
			return TopicScope(context=context, tag=request.tag, order=ORDER_LATEST, limit=request.limit)

		if source == PanelSource.FEATURED.value:
			# Pinned content ignores the time window.
			return TopicScope(context=context, pinned_only=True, order=ORDER_LATEST, limit=request.limit)

		return TopicScope(
			context=context,
			since=self._since(request.time_range),
			order=ORDER_LATEST,
			limit=request.limit,
		)

	def _since(self, time_range: str) -> datetime | None:
		window = TIME_WINDOWS.get(time_range, TIME_WINDOWS[TimeRange.WEEKLY.value])
		if window is None:
			return None
		return self.clock() - window

	def _readable_category_id(self, request: PanelRequest, context: ViewerContext) -> int | None:
		category = find_category(request.as_dict(), self.repository)
		if not category:
			return None
		try:
			if not self.repository.can_view(context, category):
				return None
		except Exception as e:
			logger.warning("Permission check failed for category %s: %s", category.get("id"), e)
			return None
		return category.get("id")
