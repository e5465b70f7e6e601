"""
PostgreSQL-backed collaborators for the navigation core.

Tables read (owned and migrated elsewhere):
	super_navigation_profiles(id, name, profile_key, config_json, active, created_by_id, created_at, updated_at)
	categories(id, name, slug, color, text_color, read_restricted, allowed_groups text[])
	topics(id, slug, title, fancy_title, category_id, user_id, visible, archetype, pinned_globally,
		   pinned_at, bumped_at, created_at, deleted_at, posts_count, like_count, views, image_url)
	posts(topic_id, post_number, cooked)
	tags(id, name), topic_tags(topic_id, tag_id)
	users(id, username, trust_level, is_admin), groups(id, name), group_users(group_id, user_id)
	user_sessions(token_hash, user_id, expires_at)
"""
import hashlib
import logging

from sql.psql_client import PSQLClient
from util.navbars import permissions
from util.navbars.feed_query import ORDER_LATEST, ORDER_TOP, TopicScope
from util.navbars.visibility import ViewerContext

logger = logging.getLogger(__name__)

PROFILE_TABLE = "super_navigation_profiles"

_ORDER_BY = {
	ORDER_LATEST: "t.bumped_at DESC",
	ORDER_TOP: "t.like_count DESC, t.views DESC, t.posts_count DESC",
}

_TOPIC_COLUMNS = """
	t.id, t.slug, t.title, t.fancy_title, t.created_at, t.bumped_at,
	t.posts_count, t.like_count, t.views, t.image_url,
	t.visible, t.archetype, t.deleted_at,
	u.username AS author_username,
	p.cooked,
	c.id AS category_id, c.name AS category_name, c.slug AS category_slug,
	c.color AS category_color, c.text_color AS category_text_color,
	c.read_restricted AS category_read_restricted, c.allowed_groups AS category_allowed_groups
"""

_TOPIC_FROM = """
	FROM topics t
	LEFT JOIN categories c ON c.id = t.category_id
	LEFT JOIN users u ON u.id = t.user_id
	LEFT JOIN posts p ON p.topic_id = t.id AND p.post_number = 1
"""


def build_topic_query(scope: TopicScope) -> tuple[str, list]:
	"""
	SELECT for a panel feed. Read permissions are applied in the base
	conditions, before any source specific filter.
	"""
	conditions = [
		"t.visible = TRUE",
		"t.deleted_at IS NULL",
		"t.archetype = 'regular'",
	]
	params: list = []

	if not scope.context.is_admin:
		# Group names compare the same way permissions.can_see_category does.
		conditions.append(
			"(c.id IS NULL OR c.read_restricted = FALSE OR EXISTS ("
			"SELECT 1 FROM unnest(c.allowed_groups) ag WHERE lower(btrim(ag)) = ANY(%s::text[])))"
		)
		params.append(sorted(scope.context.group_names))

	if scope.category_id is not None:
		conditions.append("t.category_id = %s")
		params.append(scope.category_id)
	if scope.tag:
		conditions.append(
			"EXISTS (SELECT 1 FROM topic_tags tt JOIN tags tg ON tg.id = tt.tag_id"
			" WHERE tt.topic_id = t.id AND tg.name = %s)"
		)
		params.append(scope.tag)
	if scope.since is not None:
		conditions.append("t.bumped_at >= %s")
		params.append(scope.since)
	if scope.pinned_only:
		conditions.append("(t.pinned_globally = TRUE OR t.pinned_at IS NOT NULL)")

	order_by = _ORDER_BY.get(scope.order, _ORDER_BY[ORDER_LATEST])
	query = (
		f"SELECT {_TOPIC_COLUMNS.strip()}\n{_TOPIC_FROM.strip()}\n"
		f"WHERE {' AND '.join(conditions)}\n"
		f"ORDER BY {order_by}\n"
		"LIMIT %s;"
	)
	params.append(scope.limit)
	return query, params


def _category_from_row(row: dict, prefix: str = "") -> dict | None:
	if row.get(f"{prefix}id") is None:
		return None
	return {
		"kind": "category",
		"id": row.get(f"{prefix}id"),
		"name": row.get(f"{prefix}name"),
		"slug": row.get(f"{prefix}slug"),
		"color": row.get(f"{prefix}color"),
		"text_color": row.get(f"{prefix}text_color"),
		"read_restricted": bool(row.get(f"{prefix}read_restricted")),
		"allowed_groups": list(row.get(f"{prefix}allowed_groups") or []),
	}


def _topic_from_row(row: dict) -> dict:
	topic = {k: v for k, v in row.items() if not k.startswith("category_")}
	topic["kind"] = "topic"
	topic["category"] = _category_from_row(row, prefix="category_")
	return topic


class NavigationInterface:
	def __init__(self, client: PSQLClient):
		self._client = client

	@property
	def client(self) -> PSQLClient:
		return self._client

	# ---------- Profiles ----------
	def get_active_profile(self) -> dict | None:
		if not self._client.table_exists("public", PROFILE_TABLE):
			logger.debug("Profile table %s does not exist yet.", PROFILE_TABLE)
			return None
		q = f"""
			SELECT id, name, profile_key, config_json, active, updated_at
			FROM public.{PROFILE_TABLE}
			WHERE active = TRUE
			ORDER BY updated_at DESC
			LIMIT 1;
		"""
		return self._client.fetch_one(q)

	# ---------- Categories & topics ----------
	def find_category_by_id(self, category_id: int) -> dict | None:
		row = self._client.get_row_by_column("public", "categories", "id", category_id)
		return _category_from_row(row) if row else None

	def find_category_by_slug(self, slug: str) -> dict | None:
		row = self._client.get_row_by_column("public", "categories", "slug", slug)
		return _category_from_row(row) if row else None

	def find_topic_by_id(self, topic_id: int) -> dict | None:
		q = f"SELECT {_TOPIC_COLUMNS.strip()}\n{_TOPIC_FROM.strip()}\nWHERE t.id = %s LIMIT 1;"
		row = self._client.fetch_one(q, [topic_id])
		return _topic_from_row(row) if row else None

	def can_view(self, context: ViewerContext, entity: dict) -> bool:
		return permissions.can_view(context, entity)

	def find_topics(self, scope: TopicScope) -> list[dict]:
		query, params = build_topic_query(scope)
		return [_topic_from_row(row) for row in self._client.fetch_all(query, params)]

	# ---------- Viewers ----------
	def get_viewer_by_session_token(self, token: str) -> dict | None:
		if not token:
			return None
		token_hash = hashlib.sha256(token.encode("utf-8")).hexdigest()
		q = """
			SELECT u.id, u.username, u.trust_level, u.is_admin,
				COALESCE(array_agg(g.name) FILTER (WHERE g.name IS NOT NULL), '{}') AS groups
			FROM user_sessions s
			JOIN users u ON u.id = s.user_id
			LEFT JOIN group_users gu ON gu.user_id = u.id
			LEFT JOIN groups g ON g.id = gu.group_id
			WHERE s.token_hash = %s AND s.expires_at > now()
			GROUP BY u.id, u.username, u.trust_level, u.is_admin;
		"""
		row = self._client.fetch_one(q, [token_hash])
		if not row:
			return None
		row["groups"] = list(row.get("groups") or [])
		return row
