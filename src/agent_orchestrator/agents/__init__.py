"""Agents module - Agent contract and registry.

The coordinator lives in agents.coordinator; it depends on the orchestrator
and is imported from there directly.
"""

from .base import (
	AgentExecution,
	BaseAgent,
	ProgressCallback,
	ToolExecutionError,
	ToolNotFoundError,
)
from .registry import AgentRegistry

__all__ = [
	"AgentExecution",
	"AgentRegistry",
	"BaseAgent",
	"ProgressCallback",
	"ToolExecutionError",
	"ToolNotFoundError",
]
