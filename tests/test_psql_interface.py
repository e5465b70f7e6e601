from __future__ import annotations

from datetime import datetime, timezone

from sql.psql_interface import NavigationInterface, build_topic_query
from util.navbars.feed_query import ORDER_TOP, TopicScope
from util.navbars.visibility import ANONYMOUS, build_context


class _FakeClient:
	def __init__(self, rows=None, tables=None):
		self.rows = rows or []
		self.tables = tables if tables is not None else {"super_navigation_profiles"}
		self.queries = []

	def table_exists(self, schema, table):
		return table in self.tables

	def fetch_all(self, query, params=None):
		self.queries.append((query, params))
		return [dict(r) for r in self.rows]

	def fetch_one(self, query, params=None):
		rows = self.fetch_all(query, params)
		return rows[0] if rows else None

	def get_row_by_column(self, schema, table, column, value):
		self.queries.append((f"{schema}.{table}.{column}", [value]))
		return next((dict(r) for r in self.rows if r.get(column) == value), None)


def test_topic_query_prefilters_reads_before_source_filters():
	scope = TopicScope(context=build_context({"id": "u-1", "groups": ["Staff", "mods"]}), category_id=5, limit=8)
	query, params = build_topic_query(scope)
	where = query.split("WHERE", 1)[1]
	assert where.index("c.read_restricted = FALSE") < where.index("t.category_id = %s")
	assert "t.visible = TRUE" in query
	assert "ORDER BY t.bumped_at DESC" in query
	assert params == [["mods", "staff"], 5, 8]


def test_topic_query_matches_category_groups_without_case():
	scope = TopicScope(context=build_context({"id": "u-1", "groups": [" STAFF "]}), category_id=2)
	query, params = build_topic_query(scope)
	assert "c.allowed_groups &&" not in query
	assert "unnest(c.allowed_groups) ag WHERE lower(btrim(ag)) = ANY(%s::text[])" in query
	assert params[0] == ["staff"]

	category = {"kind": "category", "id": 2, "read_restricted": True, "allowed_groups": ["Staff"]}
	assert NavigationInterface(_FakeClient()).can_view(scope.context, category) is True


def test_topic_query_for_top_tag_and_window():
	since = datetime(2026, 1, 1, tzinfo=timezone.utc)
	scope = TopicScope(context=ANONYMOUS, tag="news", since=since, order=ORDER_TOP, limit=3)
	query, params = build_topic_query(scope)
	assert "ORDER BY t.like_count DESC, t.views DESC, t.posts_count DESC\n" in query
	assert "tg.name = %s" in query
	assert "t.bumped_at >= %s" in query
	assert params == [[], "news", since, 3]


def test_topic_query_for_admin_and_featured():
	scope = TopicScope(context=build_context({"id": "a-1", "is_admin": True}), pinned_only=True)
	query, params = build_topic_query(scope)
	assert "read_restricted" not in query.split("WHERE", 1)[1]
	assert "t.pinned_globally = TRUE OR t.pinned_at IS NOT NULL" in query
	assert params == [6]


def test_find_topics_nests_category():
	client = _FakeClient(rows=[{
		"id": 3,
		"slug": "hello",
		"title": "Hello",
		"category_id": 1,
		"category_name": "General",
		"category_slug": "general",
		"category_color": "0088CC",
		"category_text_color": "FFFFFF",
		"category_read_restricted": False,
		"category_allowed_groups": None,
	}])
	topics = NavigationInterface(client).find_topics(TopicScope(context=ANONYMOUS))
	assert topics == [{
		"id": 3,
		"slug": "hello",
		"title": "Hello",
		"kind": "topic",
		"category": {
			"kind": "category",
			"id": 1,
			"name": "General",
			"slug": "general",
			"color": "0088CC",
			"text_color": "FFFFFF",
			"read_restricted": False,
			"allowed_groups": [],
		},
	}]


def test_active_profile_requires_table():
	profile = {"id": 1, "profile_key": "main", "config_json": "{}", "active": True}
	assert NavigationInterface(_FakeClient(rows=[profile], tables=set())).get_active_profile() is None
	client = _FakeClient(rows=[profile])
	assert NavigationInterface(client).get_active_profile() == profile
	assert "ORDER BY updated_at DESC" in client.queries[0][0]


def test_category_lookup_and_permissions():
	client = _FakeClient(rows=[{"id": 2, "slug": "staff", "name": "Staff", "read_restricted": True, "allowed_groups": ["staff"]}])
	interface = NavigationInterface(client)
	category = interface.find_category_by_slug("staff")
	assert category["kind"] == "category"
	assert interface.find_category_by_id(2)["slug"] == "staff"
	assert interface.find_category_by_id(3) is None
	assert interface.can_view(ANONYMOUS, category) is False
	assert interface.can_view(build_context({"id": "u", "groups": ["STAFF"]}), category) is True


def test_viewer_lookup_hashes_token():
	client = _FakeClient(rows=[{"id": "u-1", "username": "m", "trust_level": 1, "is_admin": False, "groups": ("a",)}])
	viewer = NavigationInterface(client).get_viewer_by_session_token("secret-token")
	assert viewer["groups"] == ["a"]
	assert client.queries[0][1] != ["secret-token"]
	assert NavigationInterface(client).get_viewer_by_session_token("") is None
