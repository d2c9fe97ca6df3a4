"""Tools module - Leaf capabilities and retry helpers."""

from .base import BaseTool, FunctionTool, ToolCall, ToolInputError
from .retry import (
	IMAGE_GENERATION_RETRY,
	RetryPolicy,
	ToolError,
	compute_delay,
	is_retryable,
	retry_async,
)

__all__ = [
	"BaseTool",
	"FunctionTool",
	"ToolCall",
	"ToolInputError",
	"ToolError",
	"RetryPolicy",
	"IMAGE_GENERATION_RETRY",
	"compute_delay",
	"is_retryable",
	"retry_async",
]
