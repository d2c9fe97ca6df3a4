"""Visualizer package - Rich terminal views for plans and workflow runs."""

from .workflow_progress import render_plan_graph, render_workflow_result

__all__ = [
	"render_plan_graph",
	"render_workflow_result",
]
