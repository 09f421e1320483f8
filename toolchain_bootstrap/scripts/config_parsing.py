import configparser
import json
from dataclasses import dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from toolchain_bootstrap.core.errors import ConfigError

DEFAULT_INSTALLER_URL = "https://sh.rustup.rs"
DEFAULT_ENV_FILE = "~/.cargo/env"
DEFAULT_INTERPRETER = "sh"
DEFAULT_TIMEOUT = 30.0
INI_SECTION = "bootstrap"
LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")


class ConfigParser:
	def __init__(self, config_path):
		self.config_path = str(config_path)

	def parse(self) -> Dict[str, Any]:
		if not Path(self.config_path).exists():
			raise ConfigError(f"Config file {self.config_path} does not exist.")
		try:
			if self.config_path.endswith('.yaml') or self.config_path.endswith('.yml'):
				with open(self.config_path, 'r') as f:
					return yaml.safe_load(f) or {}
			elif self.config_path.endswith('.ini'):
				parser = configparser.ConfigParser()
				parser.read(self.config_path)
				return {section: dict(parser.items(section)) for section in parser.sections()}
			elif self.config_path.endswith('.json'):
				with open(self.config_path, 'r') as f:
					return json.load(f)
		except (yaml.YAMLError, configparser.Error, json.JSONDecodeError) as e:
			raise ConfigError(f"Could not parse {self.config_path}: {e}") from e
		raise ConfigError(f"Unsupported config format: {self.config_path}")


def _as_bool(value) -> bool:
	if isinstance(value, bool):
		return value
	if isinstance(value, str) and value.strip().lower() in ('1', 'true', 'yes', 'on'):
		return True
	if isinstance(value, str) and value.strip().lower() in ('0', 'false', 'no', 'off', ''):
		return False
	raise ConfigError(f"Expected a boolean, got {value!r}")


def _as_args(value) -> List[str]:
	# INI values arrive as one whitespace separated string
	if isinstance(value, str):
		return value.split()
	if isinstance(value, (list, tuple)):
		return [str(v) for v in value]
	raise ConfigError(f"Expected a list of installer arguments, got {value!r}")


@dataclass(frozen=True)
class BootstrapConfig:
	url: str = DEFAULT_INSTALLER_URL
	env_file: str = DEFAULT_ENV_FILE
	interpreter: str = DEFAULT_INTERPRETER
	installer_args: List[str] = field(default_factory=list)
	sha256: Optional[str] = None
	timeout: float = DEFAULT_TIMEOUT
	strict: bool = False
	log_level: str = "INFO"
	log_file: Optional[str] = None
	report_path: Optional[str] = None

	def __post_init__(self):
		if self.timeout <= 0:
			raise ConfigError(f"timeout must be positive, got {self.timeout}")
		if str(self.log_level).upper() not in LOG_LEVELS:
			raise ConfigError(f"Unknown log level {self.log_level!r}, expected one of {', '.join(LOG_LEVELS)}")

	@classmethod
	def from_mapping(cls, data: Optional[Dict[str, Any]]) -> "BootstrapConfig":
		"""
		Build a config from a parsed mapping.
		INI files nest their values under a [bootstrap] section; YAML and JSON
		files may either nest them the same way or keep them at top level.
		"""
		data = dict(data or {})
		if INI_SECTION in data and isinstance(data[INI_SECTION], dict):
			data = dict(data[INI_SECTION])
		known = {f.name for f in fields(cls)}
		unknown = sorted(set(data) - known)
		if unknown:
			raise ConfigError(f"Unknown config keys: {', '.join(unknown)}")
		values = {k: v for k, v in data.items() if v is not None}
		if 'installer_args' in values:
			values['installer_args'] = _as_args(values['installer_args'])
		if 'strict' in values:
			values['strict'] = _as_bool(values['strict'])
		if 'timeout' in values:
			try:
				values['timeout'] = float(values['timeout'])
			except (TypeError, ValueError) as e:
				raise ConfigError(f"Invalid timeout: {values['timeout']!r}") from e
		for key in ('url', 'env_file', 'interpreter', 'sha256', 'log_level', 'log_file', 'report_path'):
			if key in values:
				values[key] = str(values[key])
		if 'sha256' in values:
			values['sha256'] = values['sha256'].strip().lower()
		return cls(**values)

	@classmethod
	def load(cls, config_path: Optional[str] = None) -> "BootstrapConfig":
		if config_path is None:
			return cls()
		return cls.from_mapping(ConfigParser(config_path).parse())

	def override(self, **overrides) -> "BootstrapConfig":
		"""Return a copy with every non-None override applied (CLI options win over the file)."""
		changes = {k: v for k, v in overrides.items() if v is not None}
		if 'installer_args' in changes and not changes['installer_args']:
			del changes['installer_args']
		if 'installer_args' in changes:
			changes['installer_args'] = list(changes['installer_args'])
		return replace(self, **changes)

	@property
	def env_path(self) -> Path:
		return Path(self.env_file).expanduser()
