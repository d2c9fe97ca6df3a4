"""Plans module - Workflow plan models, validation and loading."""

from .loader import PlanLoadError, load_plan
from .models import ExecutionContext, Plan, Step, StepStatus
from .validation import (
	DependencyIndex,
	PlanValidationError,
	collect_problems,
	execution_levels,
	validate_plan,
)

__all__ = [
	"Plan",
	"Step",
	"StepStatus",
	"ExecutionContext",
	"DependencyIndex",
	"PlanValidationError",
	"PlanLoadError",
	"collect_problems",
	"execution_levels",
	"load_plan",
	"validate_plan",
]
