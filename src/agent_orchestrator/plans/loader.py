"""Load workflow plans from JSON or TOML files."""

import json
import tomllib
from pathlib import Path

from .models import Plan


class PlanLoadError(Exception):
	"""Raised when a plan file cannot be read or parsed."""
	pass


def load_plan(path: str | Path) -> Plan:
	"""Load a plan from a .json or .toml file."""
	plan_path = Path(path).expanduser()
	if not plan_path.exists():
		raise PlanLoadError(f"Plan file not found: {plan_path}")

	try:
		if plan_path.suffix == ".toml":
			with open(plan_path, "rb") as f:
				data = tomllib.load(f)
		else:
			data = json.loads(plan_path.read_text(encoding="utf-8"))
	except (json.JSONDecodeError, tomllib.TOMLDecodeError, UnicodeDecodeError) as e:
		raise PlanLoadError(f"Could not parse {plan_path}: {e}") from e

	if not isinstance(data, dict):
		raise PlanLoadError(f"Plan file must contain an object: {plan_path}")

	return Plan.from_dict(data)
