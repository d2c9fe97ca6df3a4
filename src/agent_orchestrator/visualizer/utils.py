"""Shared utilities for visualizer views."""


def format_duration(seconds: float) -> str:
	"""Format a duration for display. e.g. '1.2s', '45ms', '2m 3s'."""
	if seconds < 0.001:
		return "<1ms"
	if seconds < 1.0:
		return f"{seconds * 1000:.0f}ms"
	if seconds < 60.0:
		return f"{seconds:.1f}s"
	minutes = int(seconds // 60)
	secs = seconds % 60
	return f"{minutes}m {secs:.0f}s"


def truncate(text: str, max_len: int = 60) -> str:
	"""Shorten text for table display."""
	if not text:
		return ""
	text = text.strip()
	if len(text) <= max_len:
		return text
	return text[:max_len - 3] + "..."
