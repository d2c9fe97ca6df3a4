"""
Agent Orchestrator - runs workflow plans over registered agents.

Executes a validated plan as a dependency graph:
- Steps become ready once every step they name as a dependency completed
- Ready steps are admitted in plan order, at most max_parallel_steps at a time
- A failed step never blocks unrelated steps; its dependents are skipped
- Every run ends in a WorkflowResult, even for invalid plans
"""

import asyncio
import logging
import time
from collections import deque
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Mapping, Optional, Union

from ..agents.base import BaseAgent
from ..agents.registry import AgentRegistry
from ..plans.models import ExecutionContext, Plan, Step, StepStatus
from ..plans.validation import DependencyIndex, PlanValidationError, validate_plan
from ..results import AgentResult
from .results import WorkflowExecution, WorkflowResult

logger = logging.getLogger(__name__)

StepCallback = Callable[[Step, AgentResult], Awaitable[None]]


@dataclass
class OrchestratorConfig:
	"""Operator-facing orchestrator configuration."""
	name: str = "orchestrator"
	description: str = ""
	max_parallel_steps: int = 3

	def __post_init__(self) -> None:
		if self.max_parallel_steps < 1:
			raise ValueError("max_parallel_steps must be at least 1")

	@classmethod
	def from_settings(cls, name: str = "orchestrator", description: str = "") -> "OrchestratorConfig":
		"""Build a config using the parallelism ceiling from settings."""
		from ..config import get_settings
		return cls(
			name=name,
			description=description,
			max_parallel_steps=get_settings().max_parallel_steps,
		)


class _WorkflowRun:
	"""Run-scoped state for one execution of a plan."""

	def __init__(
		self,
		plan: Plan,
		index: DependencyIndex,
		agents: Mapping[str, BaseAgent],
		context: ExecutionContext,
		max_parallel: int,
		on_step_complete: Optional[StepCallback],
	):
		self.plan = plan
		self.index = index
		self.agents = agents
		self.context = context
		self.max_parallel = max_parallel
		self.on_step_complete = on_step_complete

		self.statuses: dict[str, StepStatus] = {s.id: StepStatus.PENDING for s in plan.steps}
		self.results: dict[str, AgentResult] = {}
		self.errors: list[str] = []
		self.started = time.perf_counter()

	def _offset(self) -> float:
		return time.perf_counter() - self.started

	def ready_steps(self) -> list[Step]:
		"""Pending steps whose dependencies all completed, in plan order."""
		return [
			step for step in self.plan.steps
			if self.statuses[step.id] == StepStatus.PENDING
			and all(
				self.statuses[dep_id] == StepStatus.COMPLETED
				for dep_id in self.index.dependencies[step.id]
			)
		]

	def skip_dependents(self, step_id: str) -> None:
		"""Mark every pending transitive dependent of a step as skipped."""
		pending = list(self.index.dependents[step_id])
		while pending:
			dep_id = pending.pop()
			if self.statuses[dep_id] == StepStatus.PENDING:
				self.statuses[dep_id] = StepStatus.SKIPPED
				pending.extend(self.index.dependents[dep_id])

	def resolve_input(self, step: Step) -> Any:
		"""Step input, with dependency data merged in when requested."""
		if not step.forward_results:
			return step.input
		if step.input is not None and not isinstance(step.input, Mapping):
			return step.input

		merged = dict(step.input or {})
		for dep_name in step.dependencies:
			result = self.results.get(self.index.resolve(dep_name))
			if result is not None and result.data is not None:
				merged[dep_name] = result.data
		return merged

	async def dispatch(self, step: Step) -> AgentResult:
		"""Invoke the step's agent. Never raises for an ordinary exception."""
		started_at = self._offset()
		agent = self.agents.get(step.agent_name)

		if agent is None:
			result: AgentResult = AgentResult.fail(f"Agent not found: {step.agent_name}")
		else:
			logger.debug(f"Dispatching step {step.name} to agent {step.agent_name}")
			try:
				call = agent.execute_with_tracking(self.resolve_input(step), self.context)
				if step.timeout is not None:
					result = await asyncio.wait_for(call, timeout=step.timeout)
				else:
					result = await call
			except asyncio.TimeoutError as e:
				if step.timeout is None:
					result = AgentResult.fail(f"Step {step.name} error: {e or 'timeout'}")
				else:
					logger.warning(f"Step {step.name} timed out after {step.timeout}s")
					result = AgentResult.fail(f"Step '{step.name}' timed out after {step.timeout}s")
			except Exception as e:
				logger.error(f"Step {step.name} raised outside agent tracking: {e}", exc_info=True)
				result = AgentResult.fail(f"Step {step.name} error: {e}")

		return result.with_metadata(
			step_id=step.id,
			step_name=step.name,
			started_at=started_at,
			finished_at=self._offset(),
		)

	def _task_result(self, step: Step, task: asyncio.Task) -> AgentResult:
		# An agent can leak CancelledError from its own child tasks
		if task.cancelled():
			logger.warning(f"Step {step.name} was cancelled")
			return AgentResult.fail(
				f"Step {step.name} was cancelled",
				step_id=step.id,
				step_name=step.name,
				finished_at=self._offset(),
			)
		return task.result()

	async def record(self, step: Step, result: AgentResult) -> None:
		self.results[step.id] = result
		if result.success:
			self.statuses[step.id] = StepStatus.COMPLETED
			logger.debug(f"Step completed: {step.name}")
		else:
			self.statuses[step.id] = StepStatus.FAILED
			self.errors.append(result.error or f"Step {step.name} failed")
			self.skip_dependents(step.id)
			logger.warning(f"Step failed: {step.name}: {result.error}")

		if self.on_step_complete:
			try:
				await self.on_step_complete(step, result)
			except Exception as e:
				logger.warning(f"on_step_complete callback failed for {step.name}: {e}")

	async def run(self) -> None:
		"""Admit ready steps up to the ceiling until nothing is left to run."""
		in_flight: dict[asyncio.Task, Step] = {}
		order = {step.id: i for i, step in enumerate(self.plan.steps)}

		try:
			while True:
				for step in self.ready_steps():
					if len(in_flight) >= self.max_parallel:
						break
					self.statuses[step.id] = StepStatus.RUNNING
					in_flight[asyncio.create_task(self.dispatch(step))] = step

				if not in_flight:
					break

				done, _ = await asyncio.wait(in_flight, return_when=asyncio.FIRST_COMPLETED)
				# Simultaneous completions are recorded in plan order
				for task in sorted(done, key=lambda t: order[in_flight[t].id]):
					step = in_flight.pop(task)
					await self.record(step, self._task_result(step, task))
		finally:
			for task in in_flight:
				task.cancel()

		for step_id, status in self.statuses.items():
			if status == StepStatus.PENDING:
				self.statuses[step_id] = StepStatus.SKIPPED


class AgentOrchestrator:
	"""
	Coordinates registered agents to execute workflow plans.

	Usage:
		orchestrator = AgentOrchestrator(OrchestratorConfig(name="main", max_parallel_steps=2))
		orchestrator.register_agent("research", ResearchAgent())
		result = await orchestrator.execute_workflow(plan, context)
	"""

	MAX_HISTORY = 50

	def __init__(
		self,
		config: Optional[OrchestratorConfig] = None,
		agents: Union[AgentRegistry, Mapping[str, BaseAgent], None] = None,
	):
		"""
		Initialize the orchestrator.

		Args:
			config: Name, description and parallelism ceiling (defaults to settings)
			agents: Registry (shared) or mapping (copied) of agents by name
		"""
		self.config = config or OrchestratorConfig.from_settings()
		if isinstance(agents, AgentRegistry):
			self.registry = agents
		else:
			self.registry = AgentRegistry(agents)
		self._history: deque[WorkflowExecution] = deque(maxlen=self.MAX_HISTORY)
		logger.info(f"Orchestrator initialized: {self.config.name}")

	@property
	def name(self) -> str:
		return self.config.name

	# -- registry --

	def register_agent(self, name: str, agent: BaseAgent) -> None:
		self.registry.register(name, agent)

	def unregister_agent(self, name: str) -> bool:
		return self.registry.unregister(name)

	def get_registered_agents(self) -> list[str]:
		return self.registry.names()

	def has_agent(self, name: str) -> bool:
		return self.registry.has(name)

	# -- execution --

	async def execute_workflow(
		self,
		plan: Plan,
		context: Optional[ExecutionContext] = None,
		on_step_complete: Optional[StepCallback] = None,
	) -> WorkflowResult:
		"""
		Execute a workflow plan.

		Args:
			plan: Plan to execute (not modified)
			context: Correlation data passed to every agent invocation
			on_step_complete: Async callback(step, result) after each step finishes

		Returns:
			WorkflowResult; structural problems yield a failed result with no
			agent invoked
		"""
		start = time.perf_counter()
		context = context or ExecutionContext.anonymous()
		logger.info(f"Starting workflow: {plan.name} ({len(plan.steps)} steps)")

		try:
			index = validate_plan(plan)
		except PlanValidationError as e:
			logger.error(f"Workflow rejected: {plan.name}: {e}")
			result = WorkflowResult(
				plan_id=plan.id,
				success=False,
				errors=list(e.problems),
				execution_time=time.perf_counter() - start,
				statuses={s.id: StepStatus.PENDING for s in plan.steps},
				metadata=self._result_metadata(plan, completed=0),
			)
			self._history.append(WorkflowExecution(plan=plan, result=result))
			return result

		run = _WorkflowRun(
			plan=plan,
			index=index,
			agents=self.registry.snapshot(),
			context=context,
			max_parallel=self.config.max_parallel_steps,
			on_step_complete=on_step_complete,
		)

		try:
			await run.run()
		except Exception as e:
			logger.error(f"Workflow execution failed: {plan.name}: {e}", exc_info=True)
			run.errors.append(f"Workflow execution failed: {e}")

		completed = sum(1 for s in run.statuses.values() if s == StepStatus.COMPLETED)
		result = WorkflowResult(
			plan_id=plan.id,
			success=not run.errors and completed == len(plan.steps),
			step_results=run.results,
			errors=run.errors,
			execution_time=time.perf_counter() - start,
			skipped=[s.id for s in plan.steps if run.statuses[s.id] == StepStatus.SKIPPED],
			statuses=run.statuses,
			metadata=self._result_metadata(plan, completed=completed),
		)
		self._history.append(WorkflowExecution(plan=plan, result=result))

		log = logger.info if result.success else logger.error
		log(
			f"Workflow {'completed' if result.success else 'failed'}: {plan.name} "
			f"({completed}/{len(plan.steps)} steps, {result.execution_time:.2f}s)"
		)
		return result

	def _result_metadata(self, plan: Plan, completed: int) -> dict[str, Any]:
		return {
			"orchestrator_name": self.config.name,
			"plan_name": plan.name,
			"completed_steps": completed,
			"total_steps": len(plan.steps),
		}

	# -- history --

	def get_history(self) -> list[WorkflowExecution]:
		"""Finished runs, oldest first (bounded to MAX_HISTORY)."""
		return list(self._history)

	def clear_history(self) -> None:
		self._history.clear()
		logger.debug("Orchestrator history cleared")
