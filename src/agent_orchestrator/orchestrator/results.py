"""Workflow result types returned by the orchestrator."""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional

from ..plans.models import Plan, StepStatus
from ..results import AgentResult


@dataclass
class WorkflowResult:
	"""
	Aggregate report for one plan execution.

	step_results holds an entry for every step that ran (completed or
	failed), keyed by step id. Steps that never ran because a dependency
	failed are listed in skipped instead.
	"""
	plan_id: str
	success: bool
	step_results: dict[str, AgentResult] = field(default_factory=dict)
	errors: list[str] = field(default_factory=list)
	execution_time: float = 0.0
	skipped: list[str] = field(default_factory=list)
	statuses: dict[str, StepStatus] = field(default_factory=dict)
	metadata: dict[str, Any] = field(default_factory=dict)

	def completed_step_ids(self) -> list[str]:
		return [sid for sid, r in self.step_results.items() if r.success]

	def failed_step_ids(self) -> list[str]:
		return [sid for sid, r in self.step_results.items() if not r.success]

	def data_for(self, step_id: str) -> Optional[Any]:
		"""Data produced by a step, or None if it did not complete."""
		result = self.step_results.get(step_id)
		if result is None or not result.success:
			return None
		return result.data


@dataclass
class WorkflowExecution:
	"""History entry for a finished run."""
	plan: Plan
	result: WorkflowResult
	timestamp: str = field(default_factory=lambda: datetime.now().isoformat())

	@property
	def execution_time(self) -> float:
		return self.result.execution_time
