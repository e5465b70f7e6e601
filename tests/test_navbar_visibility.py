from __future__ import annotations

from util.navbars import visibility


def test_allowed_default_true_for_empty_rule():
	assert visibility.allowed({}, visibility.ANONYMOUS) is True
	assert visibility.allowed(None, visibility.ANONYMOUS) is True


def test_normalize_visibility_drops_unknown_keys():
	rule = visibility.normalize_visibility({
		"logged_in_only": True,
		"trust_level_min": "3",
		"groups": ["Staff", " mods ", "", "staff"],
		"colour": "red",
	})
	assert rule == {"logged_in_only": True, "trust_level_min": 3, "groups": ["staff", "mods"]}
	assert visibility.normalize_visibility("admins") == {}


def test_build_context_for_anonymous_and_member(member):
	anon = visibility.build_context(None)
	assert anon.is_authenticated is False
	assert anon.trust_level == 0
	assert anon.group_names == frozenset()

	ctx = visibility.build_context(member)
	assert ctx.is_authenticated is True
	assert ctx.user_id == "u-1"
	assert ctx.trust_level == 2
	assert ctx.group_names == frozenset({"members"})


def test_logged_in_and_logged_out_only(member):
	ctx = visibility.build_context(member)
	assert visibility.allowed({"logged_in_only": True}, visibility.ANONYMOUS) is False
	assert visibility.allowed({"logged_in_only": True}, ctx) is True
	assert visibility.allowed({"logged_out_only": True}, ctx) is False
	assert visibility.allowed({"logged_out_only": True}, visibility.ANONYMOUS) is True


def test_trust_level_minimum(member):
	ctx = visibility.build_context(member)
	assert visibility.allowed({"trust_level_min": 2}, ctx) is True
	assert visibility.allowed({"trust_level_min": 3}, ctx) is False


def test_group_intersection_is_case_insensitive():
	ctx = visibility.build_context({"id": "u-2", "trust_level": 4, "groups": ["Staff", "mods"]})
	assert visibility.allowed({"groups": ["STAFF"]}, ctx) is True
	assert visibility.allowed({"groups": ["designers"]}, ctx) is False
	assert visibility.allowed({"groups": ["staff"]}, visibility.ANONYMOUS) is False


def test_all_conditions_must_pass(member):
	ctx = visibility.build_context(member)
	rule = {"logged_in_only": True, "groups": ["members"], "trust_level_min": 3}
	assert visibility.allowed(rule, ctx) is False
