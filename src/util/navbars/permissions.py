from __future__ import annotations

from util.navbars.visibility import ViewerContext


def can_see_category(context: ViewerContext, category: dict | None) -> bool:
	if not category:
		return False
	if context.is_admin:
		return True
	if not category.get("read_restricted"):
		return True
	allowed_groups = {str(g).strip().lower() for g in (category.get("allowed_groups") or [])}
	return bool(context.group_names & allowed_groups)


def can_see_topic(context: ViewerContext, topic: dict | None) -> bool:
	if not topic:
		return False
	if topic.get("deleted_at") is not None:
		return False
	if topic.get("archetype", "regular") != "regular":
		return False
	if not topic.get("visible", True) and not context.is_admin:
		return False
	category = topic.get("category")
	if category is None:
		return True
	return can_see_category(context, category)


def can_view(context: ViewerContext, entity: dict | None) -> bool:
	if not entity:
		return False
	if entity.get("kind") == "topic":
		return can_see_topic(context, entity)
	return can_see_category(context, entity)
