"""Orchestrator module - Dependency-aware workflow execution over agents."""

from .engine import AgentOrchestrator, OrchestratorConfig, StepCallback
from .results import WorkflowExecution, WorkflowResult

__all__ = [
	"AgentOrchestrator",
	"OrchestratorConfig",
	"StepCallback",
	"WorkflowExecution",
	"WorkflowResult",
]
