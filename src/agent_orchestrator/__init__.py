"""agent-orchestrator - dependency-aware workflow execution over AI agents."""

from .agents import AgentRegistry, BaseAgent
from .orchestrator import AgentOrchestrator, OrchestratorConfig, WorkflowResult
from .plans import ExecutionContext, Plan, PlanValidationError, Step, StepStatus, validate_plan
from .results import AgentResult, ToolResult
from .tools import BaseTool, FunctionTool, RetryPolicy, ToolError

__all__ = [
	"AgentOrchestrator",
	"AgentRegistry",
	"AgentResult",
	"BaseAgent",
	"BaseTool",
	"ExecutionContext",
	"FunctionTool",
	"OrchestratorConfig",
	"Plan",
	"PlanValidationError",
	"RetryPolicy",
	"Step",
	"StepStatus",
	"ToolError",
	"ToolResult",
	"WorkflowResult",
	"validate_plan",
]
