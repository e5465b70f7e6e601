from __future__ import annotations

import sys
from pathlib import Path

import flask
import pytest


PROJECT_ROOT = Path(__file__).resolve().parents[1]
SRC_ROOT = PROJECT_ROOT / "src"
if str(SRC_ROOT) not in sys.path:
	sys.path.insert(0, str(SRC_ROOT))


@pytest.fixture
def app_factory():
	def _build(register_fn, ctx):
		app = flask.Flask(__name__)
		bp = flask.Blueprint("api", __name__)
		register_fn(bp, ctx)
		app.register_blueprint(bp)
		app.config["TESTING"] = True
		return app

	return _build


@pytest.fixture
def member():
	return {"id": "u-1", "username": "member", "trust_level": 2, "groups": ["Members"], "is_admin": False}


@pytest.fixture
def admin():
	return {"id": "a-1", "username": "admin", "trust_level": 4, "groups": ["staff"], "is_admin": True}
