"""
Retry with exponential backoff for tool calls.

Tool failures are frequently transient (timeouts, 5xx responses, dropped
connections). Tools opt in by carrying a RetryPolicy; the retry loop runs
below the agent boundary and is invisible to the orchestrator.
"""

import asyncio
import logging
import random
from dataclasses import dataclass, field
from typing import Awaitable, Callable, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ToolError(Exception):
	"""A tool failure, optionally carrying the upstream HTTP status."""

	def __init__(self, message: str, status: Optional[int] = None):
		super().__init__(message)
		self.status = status


def is_retryable(exc: BaseException, attempt: int = 0) -> bool:
	"""
	Default retry predicate.

	Retries timeouts, connection errors, 5xx statuses and errors whose
	message mentions a timeout or the network. Never retries 4xx
	(validation errors and 429 rate limits) or cancellation.
	"""
	if isinstance(exc, asyncio.CancelledError):
		return False
	status = getattr(exc, "status", None)
	if isinstance(status, int):
		if 400 <= status < 500:
			return False
		if status >= 500:
			return True
	if isinstance(exc, (asyncio.TimeoutError, TimeoutError, ConnectionError)):
		return True
	message = str(exc).lower()
	return "timeout" in message or "network" in message


@dataclass
class RetryPolicy:
	"""Bounded exponential backoff with jitter."""
	max_retries: int = 4
	initial_delay: float = 1.0
	max_delay: float = 10.0
	backoff_multiplier: float = 2.0
	should_retry: Callable[[BaseException, int], bool] = field(default=is_retryable)

	@property
	def max_attempts(self) -> int:
		return self.max_retries + 1


def compute_delay(attempt: int, policy: RetryPolicy) -> float:
	"""Delay before retry number `attempt` (0-based), jittered to 50-100%."""
	exponential = policy.initial_delay * (policy.backoff_multiplier ** attempt)
	clamped = min(exponential, policy.max_delay)
	return clamped * (0.5 + random.random() * 0.5)


async def retry_async(
	operation: Callable[[], Awaitable[T]],
	policy: Optional[RetryPolicy] = None,
	on_retry: Optional[Callable[[BaseException, int, float], None]] = None,
) -> T:
	"""
	Run an async operation, retrying transient failures.

	Args:
		operation: Zero-argument coroutine factory
		policy: Retry configuration (defaults to the retry_* settings)
		on_retry: Called with (error, attempt number, delay) before each wait

	Returns:
		The operation's result

	Raises:
		The last error once retries are exhausted or the error is not retryable
	"""
	if policy is None:
		from ..config import get_settings
		policy = get_settings().retry_policy()

	for attempt in range(policy.max_attempts):
		try:
			return await operation()
		except Exception as e:
			is_last = attempt >= policy.max_retries
			if is_last or not policy.should_retry(e, attempt):
				raise

			delay = compute_delay(attempt, policy)
			logger.info(f"Retry {attempt + 1}/{policy.max_retries} after {delay:.2f}s: {e}")
			if on_retry:
				on_retry(e, attempt + 1, delay)
			await asyncio.sleep(delay)

	# Unreachable: the final attempt either returns or raises
	raise RuntimeError("Operation failed after retries")


def _image_generation_should_retry(exc: BaseException, attempt: int) -> bool:
	"""Image APIs intermittently answer 400 with an empty payload."""
	if isinstance(exc, asyncio.CancelledError):
		return False
	status = getattr(exc, "status", None)
	if status == 400:
		message = str(exc)
		return "No image data" in message or "Image URL is invalid" in message
	if status == 429:
		return False
	return True


IMAGE_GENERATION_RETRY = RetryPolicy(
	max_retries=4,
	initial_delay=2.0,
	max_delay=15.0,
	backoff_multiplier=2.0,
	should_retry=_image_generation_should_retry,
)
