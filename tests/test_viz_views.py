"""Tests for visualizer Rich views."""

from io import StringIO

import pytest
from rich.console import Console

from agent_orchestrator.orchestrator.engine import AgentOrchestrator
from agent_orchestrator.visualizer.utils import format_duration, truncate
from agent_orchestrator.visualizer.workflow_progress import render_plan_graph, render_workflow_result

from .helpers import EchoAgent, FailingAgent, make_plan, make_step, research_write_plan


def _console() -> tuple[Console, StringIO]:
	buf = StringIO()
	return Console(file=buf, width=120, force_terminal=False), buf

# -- utils tests --

def test_format_duration_submillisecond():
	assert format_duration(0.0001) == "<1ms"


def test_format_duration_milliseconds():
	assert format_duration(0.045) == "45ms"


def test_format_duration_seconds():
	assert format_duration(1.23) == "1.2s"


def test_format_duration_minutes():
	assert format_duration(123) == "2m 3s"


def test_truncate():
	assert truncate("") == ""
	assert truncate("short") == "short"
	assert truncate("x" * 100, max_len=10) == "xxxxxxx..."

# -- plan graph --

def test_render_plan_graph():
	console, buf = _console()
	plan = make_plan(
		make_step("a", name="research", agent="research"),
		make_step("b", name="outline", agent="writer", deps=["research"]),
		make_step("c", name="write", agent="writer", deps=["outline"]),
		name="graph",
	)
	render_plan_graph(plan, console)
	output = buf.getvalue()

	assert "graph" in output
	assert "Level 0" in output
	assert "Level 2" in output
	assert "<- outline" in output
	assert "(writer)" in output

# -- workflow result --

@pytest.mark.asyncio
async def test_render_successful_run():
	orch = AgentOrchestrator(agents={"research": EchoAgent("research"), "writer": EchoAgent("writer")})
	plan = research_write_plan()
	result = await orch.execute_workflow(plan)

	console, buf = _console()
	render_workflow_result(plan, result, console)
	output = buf.getvalue()

	assert "Workflow: research-write" in output
	assert "OK  2/2 completed, 0 skipped" in output


@pytest.mark.asyncio
async def test_render_failed_run():
	orch = AgentOrchestrator(agents={"echo": EchoAgent(), "bad": FailingAgent("bad", "quota exceeded")})
	plan = make_plan(
		make_step("s1", agent="bad"),
		make_step("s2", deps=["s1"]),
		make_step("s3"),
	)
	result = await orch.execute_workflow(plan)

	console, buf = _console()
	render_workflow_result(plan, result, console)
	output = buf.getvalue()

	assert "FAIL  1/3 completed, 1 skipped" in output
	assert "quota exceeded" in output
	assert "[-]" in output
