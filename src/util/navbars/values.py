from __future__ import annotations

import math

_TRUE_STRINGS = {"true", "1", "yes", "on"}


def to_int(value: object, default: int = 0) -> int:
	"""Lenient integer conversion for author-supplied JSON values."""
	if isinstance(value, bool):
		return default
	if isinstance(value, int):
		return value
	if isinstance(value, float):
		if math.isnan(value) or math.isinf(value):
			return default
		return int(value)
	if isinstance(value, str):
		s = value.strip()
		if not s:
			return default
		try:
			return int(s)
		except ValueError:
			pass
		try:
			num = float(s)
		except ValueError:
			return default
		if math.isnan(num) or math.isinf(num):
			return default
		return int(num)
	return default


def presence(value: object) -> str | None:
	"""The value as a stripped string, or None when blank or not scalar."""
	if value is None or isinstance(value, (dict, list)):
		return None
	if isinstance(value, bool):
		value = "true" if value else "false"
	s = str(value).strip()
	return s or None


def truthy(value: object) -> bool:
	if isinstance(value, str):
		return value.strip().lower() in _TRUE_STRINGS
	return bool(value)
