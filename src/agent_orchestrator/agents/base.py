"""
Base Agent - autonomous unit invoked by the orchestrator.

An agent exposes a single operation, execute(input, context), and holds
its own private set of tools. The orchestrator only ever calls
execute_with_tracking, which adds timing, history and exception
containment around execute.
"""

import logging
import time
from abc import ABC, abstractmethod
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Awaitable, Callable, Generic, Optional, TypeVar

from ..plans.models import ExecutionContext
from ..results import AgentResult
from ..tools.base import BaseTool

logger = logging.getLogger(__name__)

InputT = TypeVar("InputT")
OutputT = TypeVar("OutputT")

ProgressCallback = Callable[[str, str, dict[str, Any]], Awaitable[None]]


class ToolNotFoundError(LookupError):
	"""Raised when an agent uses a tool it has not registered."""
	pass


class ToolExecutionError(RuntimeError):
	"""Raised when a tool call made by an agent fails."""

	def __init__(self, tool_name: str, error: Optional[str]):
		super().__init__(f"Tool execution failed: {error}")
		self.tool_name = tool_name
		self.error = error


@dataclass
class AgentExecution:
	"""A single recorded agent invocation."""
	input: Any
	context: ExecutionContext
	result: AgentResult
	execution_time: float
	timestamp: str = field(default_factory=lambda: datetime.now().isoformat())


class BaseAgent(ABC, Generic[InputT, OutputT]):
	"""
	Abstract base class for agents.

	Subclasses implement execute() and may call use_tool() for any tool
	they registered. Tool registries are agent-local.
	"""

	MAX_HISTORY = 100

	def __init__(
		self,
		name: str,
		description: str = "",
		version: str = "1.0.0",
		metadata: Optional[dict[str, Any]] = None,
		on_progress: Optional[ProgressCallback] = None,
	):
		"""
		Initialize the agent.

		Args:
			name: Agent identifier, used in logs and result metadata
			description: What the agent does
			version: Version string
			metadata: Free-form agent metadata (capabilities etc.)
			on_progress: Async callback(agent_name, event, data) for progress events
		"""
		self.name = name
		self.description = description
		self.version = version
		self.metadata = metadata or {}
		self.on_progress = on_progress
		self._tools: dict[str, BaseTool] = {}
		self._history: deque[AgentExecution] = deque(maxlen=self.MAX_HISTORY)

	@abstractmethod
	async def execute(self, input: InputT, context: ExecutionContext) -> AgentResult[OutputT]:
		"""Run the agent's task."""
		...

	async def execute_with_tracking(
		self,
		input: InputT,
		context: ExecutionContext,
	) -> AgentResult[OutputT]:
		"""
		Execute with timing, history and error containment.

		Exceptions raised by execute() become a failed AgentResult so that
		one misbehaving agent cannot disrupt the caller.
		"""
		start = time.monotonic()
		logger.debug(f"Agent {self.name} starting (session={context.session_id})")

		try:
			result = await self.execute(input, context)
		except Exception as e:
			logger.error(f"Agent {self.name} raised: {e}", exc_info=True)
			result = AgentResult.fail(str(e) or type(e).__name__)

		elapsed = time.monotonic() - start
		result = result.with_metadata(
			execution_time=elapsed,
			agent_name=self.name,
			agent_version=self.version,
		)
		self._history.append(
			AgentExecution(input=input, context=context, result=result, execution_time=elapsed)
		)
		logger.debug(f"Agent {self.name} finished in {elapsed:.3f}s (success={result.success})")
		return result

	# -- tools --

	def register_tool(self, tool: BaseTool) -> None:
		"""Make a tool available to this agent (replaces a same-named tool)."""
		self._tools[tool.name] = tool
		logger.debug(f"Agent {self.name}: tool registered: {tool.name}")

	def unregister_tool(self, tool_name: str) -> bool:
		"""Remove a tool. Returns False if it was not registered."""
		return self._tools.pop(tool_name, None) is not None

	def get_available_tools(self) -> list[str]:
		return list(self._tools)

	def has_tool(self, tool_name: str) -> bool:
		return tool_name in self._tools

	async def use_tool(self, tool_name: str, input: Any) -> Any:
		"""
		Call a registered tool and return its data.

		Raises:
			ToolNotFoundError: If the tool is not registered
			ToolExecutionError: If the tool reports failure
		"""
		tool = self._tools.get(tool_name)
		if tool is None:
			raise ToolNotFoundError(f"Tool not found: {tool_name}")

		result = await tool.execute_with_tracking(input)
		if not result.success:
			raise ToolExecutionError(tool_name, result.error)
		return result.data

	# -- progress & history --

	async def emit_progress(self, event: str, **data: Any) -> None:
		"""Report a progress event to the registered callback, if any."""
		logger.debug(f"Agent {self.name} progress: {event}")
		if self.on_progress is None:
			return
		try:
			await self.on_progress(self.name, event, data)
		except Exception as e:
			logger.warning(f"Progress callback failed for {self.name}/{event}: {e}")

	def get_history(self) -> list[AgentExecution]:
		"""Recorded invocations, oldest first."""
		return list(self._history)

	def clear_history(self) -> None:
		self._history.clear()
