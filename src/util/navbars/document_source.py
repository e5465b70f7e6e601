from __future__ import annotations

import json
import logging

from util.navbars.normalizer import default_config

logger = logging.getLogger(__name__)


def default_document_json() -> str:
	return json.dumps(default_config())


class StaticDocumentSource:
	"""Serves a fixed document text; blank text means the built-in default."""
	def __init__(self, raw_json: str | None = None):
		self.raw_json = raw_json

	def active_document(self) -> str:
		if self.raw_json and self.raw_json.strip():
			return self.raw_json
		return default_document_json()


class ProfileDocumentSource:
	"""
	Resolves the live navigation document:
	1. the most recently updated active stored profile,
	2. the fallback document file named in the settings,
	3. the built-in empty document.
	A failing step is logged and skipped, this never raises.
	"""
	def __init__(self, profiles, reader=None, fallback_document: str | None = "navigation.json"):
		self.profiles = profiles
		self.reader = reader
		self.fallback_document = fallback_document

	def _profile_json(self) -> str | None:
		if self.profiles is None:
			return None
		try:
			profile = self.profiles.get_active_profile()
		except Exception as e:
			logger.warning("Navigation profile store unavailable, using fallback: %s", e)
			return None
		if not profile:
			return None
		raw = profile.get("config_json")
		if isinstance(raw, str) and raw.strip():
			logger.debug("Using navigation profile %s", profile.get("profile_key"))
			return raw
		return None

	def _fallback_json(self) -> str | None:
		if self.reader is None or not self.fallback_document:
			return None
		try:
			raw = self.reader.read_text(self.fallback_document)
		except Exception as e:
			logger.warning("Failed to read fallback navigation document %s: %s", self.fallback_document, e)
			return None
		if isinstance(raw, str) and raw.strip():
			return raw
		return None

	def active_document(self) -> str:
		return self._profile_json() or self._fallback_json() or default_document_json()
