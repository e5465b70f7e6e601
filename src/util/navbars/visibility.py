from __future__ import annotations

from dataclasses import dataclass, field

from util.navbars.values import to_int, truthy

SUPPORTED_KEYS = ("logged_in_only", "logged_out_only", "groups", "trust_level_min")


@dataclass(frozen=True)
class ViewerContext:
	user_id: str | None = None
	is_authenticated: bool = False
	trust_level: int = 0
	group_names: frozenset[str] = field(default_factory=frozenset)
	is_admin: bool = False


ANONYMOUS = ViewerContext()


def _normalize_groups(raw) -> list[str]:
	if isinstance(raw, str):
		raw = [raw]
	if not isinstance(raw, (list, tuple, set, frozenset)):
		return []
	groups: list[str] = []
	for name in raw:
		if name is None or isinstance(name, (dict, list)):
			continue
		low = str(name).strip().lower()
		if low and low not in groups:
			groups.append(low)
	return groups


def normalize_visibility(raw) -> dict:
	"""
	Keep only the recognized rule keys. Unknown keys are dropped, a
	non-mapping rule becomes the empty rule.
	"""
	if not isinstance(raw, dict):
		return {}

	rule: dict = {}
	if "logged_in_only" in raw:
		rule["logged_in_only"] = truthy(raw["logged_in_only"])
	if "logged_out_only" in raw:
		rule["logged_out_only"] = truthy(raw["logged_out_only"])
	if "groups" in raw:
		rule["groups"] = _normalize_groups(raw["groups"])
	if "trust_level_min" in raw:
		rule["trust_level_min"] = to_int(raw["trust_level_min"])
	return rule


def build_context(viewer: dict | None) -> ViewerContext:
	if not viewer:
		return ANONYMOUS
	user_id = viewer.get("id")
	groups = frozenset(_normalize_groups(viewer.get("groups") or []))
	return ViewerContext(
		user_id=str(user_id) if user_id is not None else None,
		is_authenticated=True,
		trust_level=max(0, to_int(viewer.get("trust_level"))),
		group_names=groups,
		is_admin=bool(viewer.get("is_admin")),
	)


def allowed(rule, context: ViewerContext) -> bool:
	rule = normalize_visibility(rule)
	if not rule:
		return True

	if rule.get("logged_in_only") and not context.is_authenticated:
		return False
	if rule.get("logged_out_only") and context.is_authenticated:
		return False
	if rule.get("trust_level_min", 0) > context.trust_level:
		return False

	required_groups = rule.get("groups") or []
	if required_groups:
		if not context.is_authenticated:
			return False
		if not context.group_names.intersection(required_groups):
			return False
	return True
