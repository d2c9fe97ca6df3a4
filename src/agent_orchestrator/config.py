"""Configuration system using platformdirs for cross-platform paths."""

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path

import platformdirs

APP_NAME = "agent-orchestrator"
APP_AUTHOR = "agent-orchestrator"
ENV_PREFIX = "AGENT_ORCHESTRATOR_"


@dataclass
class Settings:
	"""Central settings with XDG/platform conventions."""

	config_dir: Path = field(default_factory=lambda: Path(platformdirs.user_config_dir(APP_NAME)))
	data_dir: Path = field(default_factory=lambda: Path(platformdirs.user_data_dir(APP_NAME)))

	# Derived paths
	log_dir: Path = field(init=False)

	# User-configurable
	max_parallel_steps: int = 3
	log_level: str = field(default_factory=lambda: os.getenv("LOG_LEVEL", "INFO"))
	retry_max_retries: int = 4
	retry_initial_delay: float = 1.0
	retry_max_delay: float = 10.0

	def __post_init__(self) -> None:
		self.log_dir = self.data_dir / "logs"

	def ensure_dirs(self) -> None:
		"""Create all required directories."""
		self.config_dir.mkdir(parents=True, exist_ok=True)
		self.data_dir.mkdir(parents=True, exist_ok=True)
		self.log_dir.mkdir(parents=True, exist_ok=True)

	def retry_policy(self):
		"""RetryPolicy built from the retry_* settings."""
		from .tools.retry import RetryPolicy
		return RetryPolicy(
			max_retries=self.retry_max_retries,
			initial_delay=self.retry_initial_delay,
			max_delay=self.retry_max_delay,
		)


PATH_FIELDS = {"config_dir", "data_dir"}
INT_FIELDS = {"max_parallel_steps", "retry_max_retries"}
FLOAT_FIELDS = {"retry_initial_delay", "retry_max_delay"}


def _coerce(key: str, val: object) -> object:
	if key in PATH_FIELDS:
		return Path(os.path.expanduser(str(val)))
	if key in INT_FIELDS:
		return int(val)
	if key in FLOAT_FIELDS:
		return float(val)
	return val


def _apply_env_overrides(settings: Settings) -> Settings:
	"""Apply AGENT_ORCHESTRATOR_* environment variable overrides."""
	env_map = {
		f"{ENV_PREFIX}CONFIG_DIR": "config_dir",
		f"{ENV_PREFIX}DATA_DIR": "data_dir",
		f"{ENV_PREFIX}MAX_PARALLEL_STEPS": "max_parallel_steps",
		f"{ENV_PREFIX}LOG_LEVEL": "log_level",
		f"{ENV_PREFIX}RETRY_MAX_RETRIES": "retry_max_retries",
		f"{ENV_PREFIX}RETRY_INITIAL_DELAY": "retry_initial_delay",
		f"{ENV_PREFIX}RETRY_MAX_DELAY": "retry_max_delay",
	}
	for env_key, attr in env_map.items():
		val = os.getenv(env_key)
		if val:
			setattr(settings, attr, _coerce(attr, val))
	# Recompute derived paths after overrides
	settings.__post_init__()
	return settings


def _apply_toml(settings: Settings) -> Settings:
	"""Apply config.toml overrides if file exists."""
	toml_path = settings.config_dir / "config.toml"
	if not toml_path.exists():
		return settings

	with open(toml_path, "rb") as f:
		data = tomllib.load(f)

	for key, val in data.items():
		if hasattr(settings, key) and key != "log_dir":
			setattr(settings, key, _coerce(key, val))

	# Recompute derived paths after toml overrides
	settings.__post_init__()
	return settings


def load_settings() -> Settings:
	"""Load settings with precedence: env vars > config.toml > defaults."""
	settings = Settings()
	# config.toml lives in config_dir, which the environment may relocate
	settings = _apply_env_overrides(settings)
	settings = _apply_toml(settings)
	settings = _apply_env_overrides(settings)
	if settings.max_parallel_steps < 1:
		raise ValueError("max_parallel_steps must be at least 1")
	return settings


# Singleton
_settings: Settings | None = None


def get_settings() -> Settings:
	"""Get or create the global settings instance."""
	global _settings
	if _settings is None:
		_settings = load_settings()
	return _settings


def reset_settings() -> None:
	"""Drop the cached settings (tests, reconfiguration)."""
	global _settings
	_settings = None
