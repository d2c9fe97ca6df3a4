"""Result envelopes shared by agents and tools."""

from dataclasses import dataclass, field, replace
from typing import Any, Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass
class AgentResult(Generic[T]):
	"""Outcome of one agent invocation: data on success, error on failure."""
	success: bool
	data: Optional[T] = None
	error: Optional[str] = None
	metadata: dict[str, Any] = field(default_factory=dict)

	@classmethod
	def ok(cls, data: T, **metadata: Any) -> "AgentResult[T]":
		return cls(success=True, data=data, metadata=metadata)

	@classmethod
	def fail(cls, error: str, **metadata: Any) -> "AgentResult[T]":
		return cls(success=False, error=error or "Unknown error", metadata=metadata)

	def with_metadata(self, **metadata: Any) -> "AgentResult[T]":
		"""Copy of this result with extra metadata merged in."""
		return replace(self, metadata={**self.metadata, **metadata})


@dataclass
class ToolResult(Generic[T]):
	"""Outcome of one tool call."""
	success: bool
	data: Optional[T] = None
	error: Optional[str] = None
	metadata: dict[str, Any] = field(default_factory=dict)

	@classmethod
	def ok(cls, data: T, **metadata: Any) -> "ToolResult[T]":
		return cls(success=True, data=data, metadata=metadata)

	@classmethod
	def fail(cls, error: str, **metadata: Any) -> "ToolResult[T]":
		return cls(success=False, error=error or "Unknown error", metadata=metadata)

	def with_metadata(self, **metadata: Any) -> "ToolResult[T]":
		"""Copy of this result with extra metadata merged in."""
		return replace(self, metadata={**self.metadata, **metadata})
