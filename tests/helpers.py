"""Shared test agents and plan builders for agent-orchestrator tests."""

import asyncio
from typing import Any, Optional

from agent_orchestrator.agents.base import BaseAgent
from agent_orchestrator.plans.models import ExecutionContext, Plan, Step
from agent_orchestrator.results import AgentResult


class EchoAgent(BaseAgent):
	"""Succeeds with the input it received."""

	def __init__(self, name: str = "echo", delay: float = 0.0):
		super().__init__(name=name, description=f"Echoes input ({name})")
		self.delay = delay
		self.calls: list[tuple[Any, ExecutionContext]] = []

	async def execute(self, input: Any, context: ExecutionContext) -> AgentResult:
		self.calls.append((input, context))
		if self.delay:
			await asyncio.sleep(self.delay)
		return AgentResult.ok({"agent": self.name, "input": input})


class FailingAgent(BaseAgent):
	"""Reports failure without raising."""

	def __init__(self, name: str = "failing", error: str = "LLM timeout"):
		super().__init__(name=name)
		self.error = error
		self.calls = 0

	async def execute(self, input: Any, context: ExecutionContext) -> AgentResult:
		self.calls += 1
		return AgentResult.fail(self.error)


class RaisingAgent(BaseAgent):
	"""Raises from execute()."""

	def __init__(self, name: str = "raising", exc: Optional[Exception] = None):
		super().__init__(name=name)
		self.exc = exc or RuntimeError("boom")

	async def execute(self, input: Any, context: ExecutionContext) -> AgentResult:
		raise self.exc


class TrackingAgent(BaseAgent):
	"""Records start order and peak concurrency across a shared tracker."""

	def __init__(self, tracker: "ConcurrencyTracker", name: str = "tracking", delay: float = 0.02):
		super().__init__(name=name)
		self.tracker = tracker
		self.delay = delay

	async def execute(self, input: Any, context: ExecutionContext) -> AgentResult:
		self.tracker.enter(input)
		try:
			await asyncio.sleep(self.delay)
		finally:
			self.tracker.exit()
		return AgentResult.ok(input)


class ConcurrencyTracker:
	"""Counts in-flight calls; single event loop, so no lock needed."""

	def __init__(self) -> None:
		self.active = 0
		self.max_active = 0
		self.started: list[Any] = []

	def enter(self, label: Any) -> None:
		self.active += 1
		self.max_active = max(self.max_active, self.active)
		self.started.append(label)

	def exit(self) -> None:
		self.active -= 1


class HangingAgent(BaseAgent):
	"""Never finishes on its own."""

	def __init__(self, name: str = "hanging"):
		super().__init__(name=name)

	async def execute(self, input: Any, context: ExecutionContext) -> AgentResult:
		await asyncio.Event().wait()
		return AgentResult.ok(None)


class CancelledChildAgent(BaseAgent):
	"""Awaits a child task it cancelled itself, leaking CancelledError."""

	def __init__(self, name: str = "cancelled-child"):
		super().__init__(name=name)

	async def execute(self, input: Any, context: ExecutionContext) -> AgentResult:
		child = asyncio.ensure_future(asyncio.sleep(10))
		child.cancel()
		await child
		return AgentResult.ok(None)


def make_step(
	step_id: str,
	name: Optional[str] = None,
	agent: str = "echo",
	deps: Optional[list[str]] = None,
	**kwargs: Any,
) -> Step:
	"""Build a step; name defaults to the id."""
	return Step(
		id=step_id,
		name=name or step_id,
		agent_name=agent,
		input=kwargs.pop("input", {"step": step_id}),
		dependencies=deps or [],
		**kwargs,
	)


def make_plan(*steps: Step, name: str = "test-plan") -> Plan:
	return Plan(id=f"{name}-id", name=name, steps=list(steps))


def reversed_chain_plan(length: int) -> Plan:
	"""Chain s0 <- s1 <- ... declared last step first."""
	steps = [
		make_step(f"s{i}", deps=[f"s{i - 1}"] if i else None)
		for i in range(length)
	]
	return make_plan(*reversed(steps), name="long-chain")


def research_write_plan() -> Plan:
	"""The two-step research -> write scenario."""
	return make_plan(
		make_step("s1", name="research", agent="research"),
		make_step("s2", name="write", agent="writer", deps=["research"]),
		name="research-write",
	)


def context() -> ExecutionContext:
	return ExecutionContext(user_id="user-1", session_id="session-1")
