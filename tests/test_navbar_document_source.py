from __future__ import annotations

import json
from types import SimpleNamespace

from util.navbars.document_source import ProfileDocumentSource, StaticDocumentSource

DEFAULT = {"version": 1, "menus": [], "sidebars": [], "discovery_blocks": []}


class _FakeProfiles:
	def __init__(self, profile=None, raise_error=False):
		self.profile = profile
		self.raise_error = raise_error

	def get_active_profile(self):
		if self.raise_error:
			raise RuntimeError('relation "super_navigation_profiles" does not exist')
		return self.profile


def _reader(files):
	return SimpleNamespace(read_text=lambda name: files.get(name))


def test_active_profile_wins():
	profile = {"profile_key": "main", "config_json": '{"version": 2}'}
	source = ProfileDocumentSource(_FakeProfiles(profile), reader=_reader({"navigation.json": '{"version": 3}'}))
	assert source.active_document() == '{"version": 2}'


def test_blank_profile_falls_back_to_setting_file():
	profile = {"profile_key": "main", "config_json": "   "}
	source = ProfileDocumentSource(_FakeProfiles(profile), reader=_reader({"navigation.json": '{"version": 3}'}))
	assert source.active_document() == '{"version": 3}'


def test_profile_store_failure_falls_back_to_setting_file():
	source = ProfileDocumentSource(_FakeProfiles(raise_error=True), reader=_reader({"nav.json": '{"version": 4}'}), fallback_document="nav.json")
	assert source.active_document() == '{"version": 4}'


def test_everything_missing_yields_default_document():
	source = ProfileDocumentSource(_FakeProfiles(None), reader=_reader({}))
	assert json.loads(source.active_document()) == DEFAULT

	def _boom(name):
		raise PermissionError(name)

	failing = ProfileDocumentSource(_FakeProfiles(raise_error=True), reader=SimpleNamespace(read_text=_boom))
	assert json.loads(failing.active_document()) == DEFAULT
	assert json.loads(ProfileDocumentSource(None).active_document()) == DEFAULT


def test_static_source():
	assert StaticDocumentSource('{"menus": []}').active_document() == '{"menus": []}'
	assert json.loads(StaticDocumentSource("").active_document()) == DEFAULT
