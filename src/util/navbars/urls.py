from __future__ import annotations

import logging
from urllib.parse import quote, urlparse

from util.navbars.values import presence, to_int
from util.navbars.visibility import ViewerContext

logger = logging.getLogger(__name__)

ALLOWED_SCHEMES = {"http", "https", "mailto", "tel"}


def sanitize_url(value) -> str | None:
	url = presence(value)
	if url is None:
		return None
	if url.startswith("/"):
		return url
	if any(ch.isspace() or ord(ch) < 32 for ch in url):
		return None
	try:
		parsed = urlparse(url)
	except ValueError:
		return None
	if parsed.scheme not in ALLOWED_SCHEMES:
		return None
	if parsed.scheme in {"http", "https"} and not parsed.netloc:
		return None
	return url


def category_path(category: dict) -> str:
	return f"/c/{category.get('slug')}/{category.get('id')}"


def topic_path(topic: dict) -> str:
	return f"/t/{topic.get('slug') or 'topic'}/{topic.get('id')}"


def tag_path(tag: str) -> str:
	return f"/tag/{quote(tag, safe='')}"


def find_category(item: dict, repository) -> dict | None:
	"""Category named by an item or panel; a positive id wins over the slug."""
	if repository is None:
		return None
	category_id = to_int(item.get("category_id"))
	slug = presence(item.get("category_slug"))
	try:
		if category_id > 0:
			return repository.find_category_by_id(category_id)
		if slug:
			return repository.find_category_by_slug(slug)
	except Exception as e:
		logger.warning("Category lookup failed (id=%s slug=%s): %s", category_id, slug, e)
	return None


def find_topic(item: dict, repository) -> dict | None:
	if repository is None:
		return None
	topic_id = to_int(item.get("topic_id"))
	if topic_id <= 0:
		return None
	try:
		return repository.find_topic_by_id(topic_id)
	except Exception as e:
		logger.warning("Topic lookup failed (id=%s): %s", topic_id, e)
		return None


def _can_view(repository, context: ViewerContext, entity: dict) -> bool:
	try:
		return bool(repository.can_view(context, entity))
	except Exception as e:
		logger.warning("Permission check failed for %s: %s", entity.get("id"), e)
		return False


def resolve_url(item_type: str, item: dict, repository=None) -> str | None:
	"""
	Viewer-independent default target for an item. Category and topic
	targets are looked up but not permission checked here.
	"""
	if item_type in ("link", "external_link"):
		return sanitize_url(item.get("url"))
	if item_type == "category":
		category = find_category(item, repository)
		if category:
			return sanitize_url(category_path(category))
		return sanitize_url(item.get("url"))
	if item_type == "tag":
		tag = presence(item.get("tag"))
		if tag:
			return sanitize_url(tag_path(tag))
		return sanitize_url(item.get("url"))
	if item_type == "topic":
		topic = find_topic(item, repository)
		if topic:
			return sanitize_url(topic_path(topic))
		return sanitize_url(item.get("url"))
	return None


def resolve_url_for_viewer(item: dict, context: ViewerContext, repository=None) -> str | None:
	item_type = item.get("type")
	if item_type == "category":
		category = find_category(item, repository)
		if not category or not _can_view(repository, context, category):
			return None
		return sanitize_url(category_path(category))
	if item_type == "topic":
		topic = find_topic(item, repository)
		if not topic or not _can_view(repository, context, topic):
			return None
		return sanitize_url(topic_path(topic))
	return item.get("resolved_url")
