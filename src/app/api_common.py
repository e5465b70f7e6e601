from __future__ import annotations

import logging
from typing import Any

import flask

from app.api_context import ApiContext

logger = logging.getLogger(__name__)


def get_request_viewer(ctx: ApiContext) -> dict | None:
	"""Viewer behind the session cookie; lookup failures mean anonymous."""
	token = flask.request.cookies.get(ctx.auth_token_name)
	if not token or ctx.viewers is None:
		return None
	try:
		return ctx.viewers.get_viewer_by_session_token(token)
	except Exception as e:
		logger.warning("Viewer lookup failed, treating request as anonymous: %s", e)
		return None


def require_admin(ctx: ApiContext) -> tuple[dict | None, tuple[Any, int] | None]:
	viewer = get_request_viewer(ctx)
	if not viewer:
		return None, (flask.jsonify({"ok": False, "message": "Authentication required."}), 401)
	if not viewer.get("is_admin"):
		return None, (flask.jsonify({"ok": False, "message": "Admin access required."}), 403)
	return viewer, None


def disabled_response() -> tuple[Any, int]:
	return flask.jsonify({"ok": False, "message": "Navigation is disabled."}), 404


def private_cache(response, ctx: ApiContext):
	response.headers["Cache-Control"] = f"private, max-age={ctx.settings.cache_seconds}"
	return response
