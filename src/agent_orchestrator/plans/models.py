"""
Plan Models - Pydantic schemas for workflow plans.

Defines the declarative graph submitted to the orchestrator: a plan is an
ordered list of steps, each naming the agent to invoke, its input, and the
names of sibling steps it depends on.
"""

import uuid
from enum import Enum
from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class StepStatus(str, Enum):
	"""Status of a step within one workflow run."""
	PENDING = "pending"
	RUNNING = "running"
	COMPLETED = "completed"
	FAILED = "failed"
	SKIPPED = "skipped"


class ExecutionContext(BaseModel):
	"""
	Caller-supplied correlation data for one workflow run.

	Passed unchanged to every agent invocation of the run.
	"""
	model_config = ConfigDict(frozen=True, populate_by_name=True)

	user_id: str = Field(alias="userId", description="User who initiated the request")
	session_id: str = Field(alias="sessionId", description="Session ID for tracking")
	presentation_id: Optional[str] = Field(default=None, alias="presentationId")
	metadata: dict[str, Any] = Field(default_factory=dict)

	@classmethod
	def anonymous(cls) -> "ExecutionContext":
		"""Context for runs started without a caller identity."""
		return cls(user_id="system", session_id=uuid.uuid4().hex)


class Step(BaseModel):
	"""A single unit of work bound to one agent invocation."""
	model_config = ConfigDict(frozen=True, populate_by_name=True)

	id: str = Field(description="Unique step identifier within the plan")
	name: str = Field(description="Logical name used for dependency references")
	agent_name: str = Field(alias="agentName", description="Registry key of the agent to invoke")
	input: Any = Field(default=None, description="Opaque payload for the agent")
	dependencies: list[str] = Field(
		default_factory=list,
		description="Names of steps that must complete successfully first",
	)
	description: str = Field(default="")
	timeout: Optional[float] = Field(
		default=None,
		gt=0,
		description="Seconds before the step is recorded as failed",
	)
	forward_results: bool = Field(
		default=False,
		alias="forwardResults",
		description="Merge dependency data into a mapping input, keyed by step name",
	)


class Plan(BaseModel):
	"""
	A workflow plan.

	Plans are immutable once built. Step statuses belong to a run, not to
	the plan, so the same plan object can be executed any number of times.
	"""
	model_config = ConfigDict(frozen=True, populate_by_name=True)

	id: str = Field(default_factory=lambda: f"plan-{uuid.uuid4().hex[:12]}")
	name: str = Field(description="Human-readable plan name")
	steps: list[Step] = Field(default_factory=list)
	estimated_time: Optional[float] = Field(
		default=None,
		alias="estimatedTime",
		description="Advisory estimate in seconds",
	)
	metadata: dict[str, Any] = Field(default_factory=dict)

	def get_step(self, step_id: str) -> Optional[Step]:
		"""Get a step by id."""
		for step in self.steps:
			if step.id == step_id:
				return step
		return None

	def get_step_by_name(self, name: str) -> Optional[Step]:
		"""Get the first step declared with the given name."""
		for step in self.steps:
			if step.name == name:
				return step
		return None

	def step_names(self) -> list[str]:
		"""Step names in declaration order."""
		return [step.name for step in self.steps]

	def agent_names(self) -> list[str]:
		"""Distinct agent names referenced by the plan, in declaration order."""
		seen: list[str] = []
		for step in self.steps:
			if step.agent_name not in seen:
				seen.append(step.agent_name)
		return seen

	@classmethod
	def from_dict(cls, data: dict[str, Any]) -> "Plan":
		"""Build a plan from a plain dict (camelCase keys accepted)."""
		return cls.model_validate(data)
