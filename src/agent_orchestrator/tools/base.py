"""
Base Tool - leaf capability used by agents.

Tools perform the actual external work (LLM completions, search, browser
automation). Each call goes through execute_with_tracking, which times it,
records it in a bounded history and turns exceptions into failed results.
"""

import logging
import time
from abc import ABC, abstractmethod
from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Awaitable, Callable, Generic, Iterable, Optional, TypeVar

from ..results import ToolResult
from .retry import RetryPolicy, retry_async

logger = logging.getLogger(__name__)

InputT = TypeVar("InputT")
OutputT = TypeVar("OutputT")


class ToolInputError(ValueError):
	"""Raised when a tool receives malformed input."""
	pass


@dataclass
class ToolCall:
	"""A single recorded tool call."""
	input: Any
	result: ToolResult
	execution_time: float
	timestamp: str = field(default_factory=lambda: datetime.now().isoformat())


class _ToolFailure(Exception):
	"""Carries a failed ToolResult through the retry loop."""

	def __init__(self, result: ToolResult):
		super().__init__(result.error)
		self.result = result
		self.status = result.metadata.get("status")


class BaseTool(ABC, Generic[InputT, OutputT]):
	"""
	Abstract base class for tools.

	Subclasses implement execute(). Callers use execute_with_tracking().
	"""

	MAX_HISTORY = 100

	def __init__(
		self,
		name: str,
		description: str = "",
		version: str = "1.0.0",
		retry_policy: Optional[RetryPolicy] = None,
	):
		self.name = name
		self.description = description
		self.version = version
		self.retry_policy = retry_policy
		self._history: deque[ToolCall] = deque(maxlen=self.MAX_HISTORY)

	@abstractmethod
	async def execute(self, input: InputT) -> ToolResult[OutputT]:
		"""Perform the tool's operation."""
		...

	async def execute_with_tracking(self, input: InputT) -> ToolResult[OutputT]:
		"""
		Execute with timing, history and error containment.

		When the tool has a retry policy, failed results and exceptions are
		retried according to it. Never raises for an ordinary exception.
		"""
		start = time.monotonic()
		attempts = 0

		async def attempt() -> ToolResult[OutputT]:
			nonlocal attempts
			attempts += 1
			result = await self.execute(input)
			if not result.success and self.retry_policy is not None:
				raise _ToolFailure(result)
			return result

		try:
			if self.retry_policy is not None:
				result = await retry_async(attempt, self.retry_policy)
			else:
				result = await attempt()
		except _ToolFailure as e:
			result = e.result
		except Exception as e:
			logger.warning(f"Tool {self.name} failed: {e}")
			result = ToolResult.fail(str(e))

		elapsed = time.monotonic() - start
		result = result.with_metadata(
			execution_time=elapsed,
			tool_name=self.name,
			tool_version=self.version,
			attempts=attempts,
		)
		self._history.append(ToolCall(input=input, result=result, execution_time=elapsed))
		logger.debug(f"Tool {self.name} finished in {elapsed:.3f}s (success={result.success})")
		return result

	def validate_input(self, input: Any, required: Iterable[str] = ()) -> None:
		"""Check that input is a mapping carrying the required keys."""
		if not isinstance(input, dict):
			raise ToolInputError("Input must be an object")
		for key in required:
			if key not in input:
				raise ToolInputError(f"Missing required field: {key}")

	def get_history(self) -> list[ToolCall]:
		"""Recorded calls, oldest first."""
		return list(self._history)

	def clear_history(self) -> None:
		self._history.clear()


class FunctionTool(BaseTool[Any, Any]):
	"""
	Adapt an async callable into a tool.

	The callable's return value becomes the result data; raising marks the
	call as failed.
	"""

	def __init__(
		self,
		name: str,
		func: Callable[[Any], Awaitable[Any]],
		description: str = "",
		version: str = "1.0.0",
		retry_policy: Optional[RetryPolicy] = None,
	):
		super().__init__(name, description=description, version=version, retry_policy=retry_policy)
		self._func = func

	async def execute(self, input: Any) -> ToolResult[Any]:
		return ToolResult.ok(await self._func(input))
