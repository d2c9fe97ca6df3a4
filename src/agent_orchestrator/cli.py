"""CLI for agent-orchestrator: validate plans and inspect settings."""

import argparse
import sys
from importlib.metadata import PackageNotFoundError
from importlib.metadata import version as pkg_version

from rich.console import Console

from .config import get_settings
from .logging_config import setup_logging
from .plans.loader import PlanLoadError, load_plan
from .plans.validation import collect_problems


def _package_version() -> str:
	try:
		return pkg_version("agent-orchestrator")
	except PackageNotFoundError:
		return "unknown"


def cmd_validate(args: argparse.Namespace) -> int:
	"""Validate a plan file and show its execution order."""
	from pydantic import ValidationError

	from .visualizer.workflow_progress import render_plan_graph

	console = Console()
	try:
		plan = load_plan(args.plan_file)
	except (PlanLoadError, ValidationError) as e:
		console.print(f"[red]Could not load plan:[/red] {e}")
		return 1

	problems = collect_problems(plan)
	if problems:
		console.print(f"[red]Plan {plan.id} is invalid:[/red]")
		for problem in problems:
			console.print(f"  - {problem}")
		return 1

	console.print(f"[green]Plan {plan.id} is valid[/green]")
	render_plan_graph(plan, console)
	return 0


def cmd_config(args: argparse.Namespace) -> int:
	"""Print effective settings."""
	settings = get_settings()
	print(f"agent-orchestrator {_package_version()}")
	print(f"  Config dir:         {settings.config_dir}")
	print(f"  Data dir:           {settings.data_dir}")
	print(f"  Log dir:            {settings.log_dir}")
	print(f"  Log level:          {settings.log_level}")
	print(f"  Max parallel steps: {settings.max_parallel_steps}")
	print(
		f"  Retry:              {settings.retry_max_retries} retries, "
		f"{settings.retry_initial_delay}s initial, {settings.retry_max_delay}s max"
	)
	return 0


def main() -> None:
	"""CLI entry point."""
	parser = argparse.ArgumentParser(
		prog="agent-orchestrator",
		description="Dependency-aware workflow execution over AI agents",
	)
	subparsers = parser.add_subparsers(dest="command")

	# validate
	validate_parser = subparsers.add_parser("validate", help="Validate a JSON or TOML plan file")
	validate_parser.add_argument("plan_file", help="Path to the plan file")
	validate_parser.set_defaults(func=cmd_validate)

	# config
	config_parser = subparsers.add_parser("config", help="Show effective settings")
	config_parser.set_defaults(func=cmd_config)

	args = parser.parse_args()

	if not args.command:
		parser.print_help()
		sys.exit(1)

	setup_logging(console=False)
	sys.exit(args.func(args))
