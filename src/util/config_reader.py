import os
import json
from pathlib import Path
from typing import Any, Dict

class _DirNS:
	"""
	A directory namespace with a uniform API:
	- get_raw(filename)
	- get_json(filename)
	- get_kv_config(filename)     # key=value lines
	- resolve(filename)           # path in this namespace
	"""
	def __init__(self, base: Path):
		self.base = base

	def _resolve(self, filename: str) -> Path:
		# exact path first
		p = self.base / filename
		if p.exists():
			return p
		# fallback: match by stem if no suffix was given
		if not Path(filename).suffix and self.base.is_dir():
			candidates = [f for f in self.base.iterdir() if f.stem == filename]
			if len(candidates) == 1:
				return candidates[0]
			if not candidates:
				raise FileNotFoundError(f"No file matching '{filename}' in {self.base}")
			raise FileNotFoundError(f"Multiple files match stem '{filename}' in {self.base}")
		raise FileNotFoundError(f"File '{filename}' not found in {self.base}")

	def get_raw(self, filename: str) -> str:
		return self._resolve(filename).read_text(encoding="utf-8")

	def get_json(self, filename: str) -> Dict[str, Any]:
		return json.loads(self.get_raw(filename))

	def get_kv_config(self, filename: str) -> Dict[str, str]:
		raw = self.get_raw(filename)
		out: Dict[str, str] = {}
		for line in raw.splitlines():
			s = line.strip()
			if not s or s.startswith("#"):
				continue
			if "=" not in s:
				raise ValueError(f"Invalid config line: '{line}'")
			k, v = s.split("=", 1)
			out[k.strip()] = v.strip()
		return out

	def resolve(self, filename: str) -> Path:
		return self._resolve(filename)


class ConfigReader:
	"""
	Directory-based config reader with named namespaces.
	Usage:
		ConfigReader().config_dir.get_kv_config("navigation.conf")
		ConfigReader().find("psql.conf")
		ConfigReader().read_text("navigation.json")

	The base directory is `src/` unless NAVIGATION_BASE_DIR points elsewhere.
	"""
	_NAMESPACES = {
		"config_dir": "config",
	}

	def __init__(self, base_dir: str | Path | None = None):
		env_base = os.environ.get("NAVIGATION_BASE_DIR")
		if base_dir is not None:
			self._base = Path(base_dir)
		elif env_base:
			self._base = Path(env_base)
		else:
			self._base = Path(__file__).resolve().parent.parent

	def _ns(self, name: str) -> _DirNS:
		sub = self._NAMESPACES.get(name)
		if sub is None:
			raise KeyError(f"Unknown namespace '{name}'")
		return _DirNS(self._base / sub)

	@property
	def config_dir(self) -> _DirNS:
		return self._ns("config_dir")

	def find(self, filename: str) -> dict | None:
		"""
		Load a config file by name, or None when it does not exist.
		.json files are parsed as JSON, everything else as key=value lines.
		"""
		try:
			if Path(filename).suffix == ".json":
				data = self.config_dir.get_json(filename)
				return data if isinstance(data, dict) else None
			return self.config_dir.get_kv_config(filename)
		except FileNotFoundError:
			return None

	def read_text(self, filename: str) -> str | None:
		try:
			return self.config_dir.get_raw(filename)
		except FileNotFoundError:
			return None
