"""Rich views for workflow plans and results."""

from typing import Optional

from rich.console import Console
from rich.table import Table
from rich.tree import Tree

from ..orchestrator.results import WorkflowResult
from ..plans.models import Plan, StepStatus
from ..plans.validation import execution_levels
from .utils import format_duration, truncate

STATUS_ICONS = {
	StepStatus.PENDING: "[dim]\\[ ][/dim]",
	StepStatus.RUNNING: "[yellow]\\[~][/yellow]",
	StepStatus.COMPLETED: "[green]\\[x][/green]",
	StepStatus.FAILED: "[red]\\[!][/red]",
	StepStatus.SKIPPED: "[dim]\\[-][/dim]",
}


def render_plan_graph(plan: Plan, console: Optional[Console] = None) -> None:
	"""Render a valid plan as a tree of dependency levels."""
	console = console or Console()

	tree = Tree(f"[bold]{plan.name}[/bold]  [dim]({len(plan.steps)} steps)[/dim]")
	for i, level in enumerate(execution_levels(plan)):
		branch = tree.add(f"[bold]Level {i}[/bold]")
		for step in level:
			deps = f" [dim]<- {', '.join(step.dependencies)}[/dim]" if step.dependencies else ""
			branch.add(f"{step.name} [cyan]({step.agent_name})[/cyan]{deps}")

	console.print(tree)


def render_workflow_result(
	plan: Plan,
	result: WorkflowResult,
	console: Optional[Console] = None,
) -> None:
	"""Render per-step outcomes of a run as a table with a summary line."""
	console = console or Console()

	table = Table(title=f"Workflow: {plan.name}")
	table.add_column("", no_wrap=True)
	table.add_column("Step", style="bold")
	table.add_column("Agent", style="cyan")
	table.add_column("Time", justify="right")
	table.add_column("Error", style="red")

	for step in plan.steps:
		status = result.statuses.get(step.id, StepStatus.PENDING)
		step_result = result.step_results.get(step.id)
		elapsed = ""
		error = ""
		if step_result is not None:
			exec_time = step_result.metadata.get("execution_time")
			if exec_time is not None:
				elapsed = format_duration(exec_time)
			error = truncate(step_result.error or "")
		table.add_row(STATUS_ICONS.get(status, "[ ]"), step.name, step.agent_name, elapsed, error)

	console.print(table)

	completed = len(result.completed_step_ids())
	verdict = "[green]OK[/green]" if result.success else "[red]FAIL[/red]"
	console.print(
		f"{verdict}  {completed}/{len(plan.steps)} completed, "
		f"{len(result.skipped)} skipped in {format_duration(result.execution_time)}"
	)
	for error in result.errors:
		console.print(f"  [red]-[/red] {error}")
