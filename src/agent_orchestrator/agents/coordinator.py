"""
Coordinator Agent - plans workflows and drives the orchestrator.

Responsibilities:
- Build a plan (predefined for presentations, LLM-planned otherwise,
  or a caller-supplied custom plan)
- Execute it through an AgentOrchestrator
- Fail the whole task if any step failed
- Synthesize a final output from the step results
"""

import json
import logging
import time
import uuid
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Mapping, Optional, Union

from pydantic import BaseModel, Field

from ..orchestrator.engine import AgentOrchestrator, OrchestratorConfig
from ..orchestrator.results import WorkflowResult
from ..plans.models import ExecutionContext, Plan, Step
from ..results import AgentResult
from ..tools.base import BaseTool
from .base import BaseAgent, ProgressCallback
from .registry import AgentRegistry

logger = logging.getLogger(__name__)

PRESENTATION_WORKFLOW = "presentation"

PLAN_PROMPT = """You are a workflow planner. Create a workflow plan for the following task:

Task: {task}
Type: {task_type}
{requirements}{audience}
Available agents:
{agents}

Create a workflow plan with steps. Each step should use one agent.

Respond in JSON format:
{{
  "steps": [
    {{
      "name": "step_1",
      "agentName": "<one of the available agents>",
      "description": "What this step does",
      "input": {{}},
      "dependencies": []
    }}
  ]
}}"""


class TaskType(str, Enum):
	"""Kind of task the coordinator is asked to perform."""
	PRESENTATION = "presentation"
	ARTICLE = "article"
	RESEARCH = "research"
	ANALYSIS = "analysis"
	CUSTOM = "custom"


class CoordinatorInput(BaseModel):
	"""Input accepted by the coordinator."""
	task: str = Field(description="High-level task description")
	task_type: TaskType = Field(default=TaskType.CUSTOM)
	requirements: list[str] = Field(default_factory=list)
	audience: Optional[str] = Field(default=None)
	autoplan: bool = Field(default=True, description="Plan automatically instead of using custom_plan")
	custom_plan: Optional[Plan] = Field(default=None)


@dataclass
class CoordinatorOutput:
	"""Final output of a coordinated task."""
	task: str
	plan: Plan
	result: Any
	step_data: dict[str, Any] = field(default_factory=dict)
	planning_time: float = 0.0
	execution_time: float = 0.0
	total_time: float = 0.0
	agents_used: list[str] = field(default_factory=list)


def _parse_json_payload(payload: Any) -> dict[str, Any]:
	"""Accept a dict or a JSON string (optionally wrapped in a code fence)."""
	if isinstance(payload, dict):
		return payload
	if not isinstance(payload, str):
		raise ValueError(f"Planner returned unsupported payload: {type(payload).__name__}")

	text = payload.strip()
	if text.startswith("```"):
		text = text.split("\n", 1)[1] if "\n" in text else ""
		text = text.rsplit("```", 1)[0]
	try:
		data = json.loads(text)
	except json.JSONDecodeError as e:
		raise ValueError(f"Planner returned invalid JSON: {e}") from e
	if not isinstance(data, dict):
		raise ValueError("Planner response must be a JSON object")
	return data


class CoordinatorAgent(BaseAgent[CoordinatorInput, CoordinatorOutput]):
	"""
	Master agent that orchestrates specialized agents.

	The coordinator is a consumer of the orchestrator: it owns one, registers
	the specialized agents on it, and escalates any step failure into a
	failure of the whole task.
	"""

	def __init__(
		self,
		agents: Union[AgentRegistry, Mapping[str, BaseAgent], None] = None,
		planner: Optional[BaseTool] = None,
		max_parallel_steps: int = 2,
		on_progress: Optional[ProgressCallback] = None,
	):
		"""
		Initialize the coordinator.

		Args:
			agents: Specialized agents by name (e.g. "research", "content_writer")
			planner: Tool that turns a planning prompt into a JSON plan
			max_parallel_steps: Parallelism ceiling for the owned orchestrator
			on_progress: Async progress callback
		"""
		super().__init__(
			name="coordinator",
			description="Master agent that orchestrates multi-agent workflows",
			version="1.0.0",
			metadata={"capabilities": ["task_planning", "agent_orchestration", "result_synthesis"]},
			on_progress=on_progress,
		)
		self.orchestrator = AgentOrchestrator(
			OrchestratorConfig(
				name="MainOrchestrator",
				description="Orchestrates multi-agent workflows",
				max_parallel_steps=max_parallel_steps,
			),
			agents,
		)
		self._planner_name: Optional[str] = None
		if planner is not None:
			self.register_tool(planner)
			self._planner_name = planner.name

		logger.info(f"Coordinator initialized with agents: {self.orchestrator.get_registered_agents()}")

	def register_agent(self, name: str, agent: BaseAgent) -> None:
		"""Make an additional agent available to planned workflows."""
		self.orchestrator.register_agent(name, agent)

	async def execute(
		self,
		input: Union[CoordinatorInput, dict[str, Any]],
		context: ExecutionContext,
	) -> AgentResult[CoordinatorOutput]:
		start = time.perf_counter()
		request = input if isinstance(input, CoordinatorInput) else CoordinatorInput.model_validate(input)
		await self.emit_progress("coordinator:started", task=request.task)

		# 1. Plan
		await self.emit_progress("coordinator:planning", task=request.task)
		plan_start = time.perf_counter()
		plan = await self.create_plan(request, context) if request.autoplan else request.custom_plan
		if plan is None:
			return AgentResult.fail("No workflow plan available")
		planning_time = time.perf_counter() - plan_start
		await self.emit_progress("coordinator:plan_created", step_count=len(plan.steps))

		# 2. Execute
		await self.emit_progress("coordinator:executing", step_count=len(plan.steps))
		workflow = await self.orchestrator.execute_workflow(plan, context)
		if not workflow.success:
			error = f"Workflow execution failed: {', '.join(workflow.errors)}"
			await self.emit_progress("coordinator:error", error=error)
			return AgentResult.fail(error, plan_id=plan.id, failed_steps=workflow.failed_step_ids())

		# 3. Synthesize
		await self.emit_progress("coordinator:synthesizing")
		final = self.synthesize_results(plan, workflow)
		total_time = time.perf_counter() - start

		output = CoordinatorOutput(
			task=request.task,
			plan=plan,
			result=final,
			step_data={step.name: workflow.data_for(step.id) for step in plan.steps},
			planning_time=planning_time,
			execution_time=workflow.execution_time,
			total_time=total_time,
			agents_used=[step.agent_name for step in plan.steps],
		)
		await self.emit_progress("coordinator:completed", total_time=total_time)
		return AgentResult.ok(output, steps_completed=len(plan.steps))

	async def create_plan(self, request: CoordinatorInput, context: ExecutionContext) -> Plan:
		"""Predefined workflow for presentations, LLM planning for everything else."""
		if request.task_type == TaskType.PRESENTATION:
			return self.create_presentation_workflow(request.task, request.audience)
		return await self._plan_with_llm(request)

	def create_presentation_workflow(self, topic: str, audience: Optional[str] = None) -> Plan:
		"""Research the topic, then write slide content from that research."""
		return Plan(
			id=f"presentation-plan-{uuid.uuid4().hex[:8]}",
			name=f"Presentation Workflow: {topic}",
			estimated_time=60.0,
			metadata={"workflow": PRESENTATION_WORKFLOW},
			steps=[
				Step(
					id="step-0",
					name="research_topic",
					agent_name="research",
					input={"topic": topic, "depth": "medium", "include_news": False},
				),
				Step(
					id="step-1",
					name="generate_content",
					agent_name="content_writer",
					input={
						"topic": topic,
						"content_type": "slide",
						"audience": audience,
						"enable_research": False,
					},
					dependencies=["research_topic"],
					forward_results=True,
				),
			],
		)

	async def _plan_with_llm(self, request: CoordinatorInput) -> Plan:
		if self._planner_name is None:
			raise RuntimeError("No planner tool registered for automatic planning")

		agent_lines = []
		for name in self.orchestrator.get_registered_agents():
			agent = self.orchestrator.registry.get(name)
			agent_lines.append(f"- {name}: {agent.description if agent else ''}")

		prompt = PLAN_PROMPT.format(
			task=request.task,
			task_type=request.task_type.value,
			requirements=f"Requirements: {', '.join(request.requirements)}\n" if request.requirements else "",
			audience=f"Audience: {request.audience}\n" if request.audience else "",
			agents="\n".join(agent_lines) or "- (none)",
		)

		data = _parse_json_payload(await self.use_tool(self._planner_name, {"prompt": prompt}))
		steps = data.get("steps")
		if not isinstance(steps, list) or not steps:
			raise ValueError("Planner response has no steps")

		return Plan(
			id=f"plan-{uuid.uuid4().hex[:8]}",
			name=f"Workflow for: {request.task}",
			steps=[
				Step.model_validate({
					"id": f"step-{i}",
					"name": raw["name"],
					"agentName": raw.get("agentName") or raw.get("agent_name"),
					"description": raw.get("description", ""),
					"input": raw.get("input"),
					"dependencies": raw.get("dependencies") or [],
					"forwardResults": bool(raw.get("dependencies")),
				})
				for i, raw in enumerate(steps)
			],
		)

	def synthesize_results(self, plan: Plan, workflow: WorkflowResult) -> Any:
		"""Presentation plans yield the generated content; others the last step's data."""
		if plan.metadata.get("workflow") == PRESENTATION_WORKFLOW:
			content_step = plan.get_step_by_name("generate_content")
			if content_step is not None:
				return workflow.data_for(content_step.id)

		return workflow.data_for(plan.steps[-1].id)
