from __future__ import annotations

import logging

import flask

from app.api_common import disabled_response, get_request_viewer, private_cache, require_admin
from app.api_context import ApiContext

logger = logging.getLogger(__name__)

PANEL_FIELDS = ("source_type", "category_slug", "category_id", "tag", "time_range", "limit")


def register(api: flask.Blueprint, ctx: ApiContext) -> None:
	@api.route("/navigation/config")
	def navigation_config():
		if not ctx.settings.enabled:
			return disabled_response()
		viewer = get_request_viewer(ctx)
		try:
			config = ctx.config_store.visible_config(viewer)
		except Exception:
			logger.exception("Failed to build navigation config")
			return flask.jsonify({"ok": False, "message": "Unable to load navigation right now."}), 500
		return private_cache(flask.jsonify(config), ctx)

	@api.route("/navigation/panel")
	def navigation_panel():
		if not ctx.settings.enabled:
			return disabled_response()
		viewer = get_request_viewer(ctx)
		fields = {name: flask.request.args.get(name) for name in PANEL_FIELDS}
		try:
			payload = ctx.feed_query.fetch(viewer, fields)
		except Exception:
			logger.exception("Failed to build navigation panel")
			return flask.jsonify({"ok": False, "message": "Unable to load panel right now."}), 500
		return private_cache(flask.jsonify(payload), ctx)

	@api.route("/navigation/presets")
	def navigation_presets():
		if not ctx.settings.enabled:
			return disabled_response()
		_, error = require_admin(ctx)
		if error:
			return error
		return flask.jsonify(ctx.config_store.presets())

	@api.route("/navigation/validate", methods=["POST"])
	def navigation_validate():
		if not ctx.settings.enabled:
			return disabled_response()
		_, error = require_admin(ctx)
		if error:
			return error
		data = flask.request.get_json(silent=True) or {}
		raw = data.get("config_json") if isinstance(data, dict) else None
		if not isinstance(raw, str) or not ctx.config_store.validate(raw):
			return flask.jsonify({"ok": False, "message": "config_json must be a JSON object."}), 400
		return flask.jsonify({"ok": True})
