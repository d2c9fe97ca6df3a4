"""Tests for plan models, structural validation and plan files."""

import json
from pathlib import Path

import pytest
from pydantic import ValidationError

from agent_orchestrator.plans.loader import PlanLoadError, load_plan
from agent_orchestrator.plans.models import ExecutionContext, Plan, Step
from agent_orchestrator.plans.validation import (
	PlanValidationError,
	collect_problems,
	execution_levels,
	validate_plan,
)

from .helpers import make_plan, make_step, research_write_plan, reversed_chain_plan


class TestModels:
	"""Plan, Step and ExecutionContext schemas."""

	def test_camel_case_aliases(self):
		"""Plans written with camelCase keys should load."""
		plan = Plan.from_dict({
			"id": "p1",
			"name": "demo",
			"estimatedTime": 30,
			"steps": [
				{"id": "s1", "name": "research", "agentName": "research", "input": {"topic": "x"}},
				{
					"id": "s2",
					"name": "write",
					"agentName": "writer",
					"dependencies": ["research"],
					"forwardResults": True,
				},
			],
		})
		assert plan.estimated_time == 30
		assert plan.steps[0].agent_name == "research"
		assert plan.steps[1].forward_results is True

	def test_plans_are_immutable(self):
		plan = research_write_plan()
		with pytest.raises(ValidationError):
			plan.name = "other"
		with pytest.raises(ValidationError):
			plan.steps[0].agent_name = "other"

	def test_default_plan_id(self):
		plan = Plan(name="anon")
		assert plan.id.startswith("plan-")
		assert Plan(name="anon").id != plan.id

	def test_step_timeout_must_be_positive(self):
		with pytest.raises(ValidationError):
			Step(id="s1", name="s1", agent_name="echo", timeout=0)

	def test_lookup_helpers(self):
		plan = research_write_plan()
		assert plan.get_step("s2").name == "write"
		assert plan.get_step("missing") is None
		assert plan.get_step_by_name("research").id == "s1"
		assert plan.step_names() == ["research", "write"]
		assert plan.agent_names() == ["research", "writer"]

	def test_context_aliases(self):
		ctx = ExecutionContext.model_validate({"userId": "u1", "sessionId": "s1"})
		assert ctx.user_id == "u1"
		assert ctx.session_id == "s1"
		assert ctx.presentation_id is None

	def test_anonymous_context(self):
		ctx = ExecutionContext.anonymous()
		assert ctx.user_id == "system"
		assert ctx.session_id


class TestValidation:
	"""Structural checks run before execution."""

	def test_valid_plan_has_no_problems(self):
		assert collect_problems(research_write_plan()) == []

	def test_empty_plan(self):
		assert collect_problems(make_plan()) == ["Workflow plan must have at least one step"]

	def test_duplicate_ids(self):
		plan = make_plan(make_step("s1", name="a"), make_step("s1", name="b"))
		assert collect_problems(plan) == ["Duplicate step id: s1"]

	def test_duplicate_names(self):
		plan = make_plan(make_step("s1", name="a"), make_step("s2", name="a"))
		assert collect_problems(plan) == ["Duplicate step name: a"]

	def test_dangling_dependency(self):
		plan = make_plan(make_step("s1", deps=["ghost"]))
		assert collect_problems(plan) == ["Invalid dependency in step s1: ghost does not exist"]

	def test_self_dependency(self):
		plan = make_plan(make_step("s1", deps=["s1"]))
		assert collect_problems(plan) == ["Step s1 depends on itself"]

	def test_cycle_reports_path(self):
		plan = make_plan(
			make_step("a", deps=["c"]),
			make_step("b", deps=["a"]),
			make_step("c", deps=["b"]),
		)
		problems = collect_problems(plan)
		assert len(problems) == 1
		assert problems[0] == "Circular dependency detected: a -> c -> b -> a"

	def test_long_chain_has_no_problems(self):
		assert collect_problems(reversed_chain_plan(3000)) == []

	def test_long_cycle_detected(self):
		steps = [make_step(f"s{i}", deps=[f"s{(i - 1) % 3000}"]) for i in range(3000)]
		problems = collect_problems(make_plan(*steps))
		assert len(problems) == 1
		assert problems[0].startswith("Circular dependency detected: s0 -> s2999 -> s2998")

	def test_all_problems_reported(self):
		plan = make_plan(
			make_step("s1", name="a", deps=["x"]),
			make_step("s2", name="a", deps=["y"]),
		)
		problems = collect_problems(plan)
		assert "Duplicate step name: a" in problems
		assert "Invalid dependency in step a: x does not exist" in problems
		assert "Invalid dependency in step a: y does not exist" in problems

	def test_validate_plan_raises(self):
		with pytest.raises(PlanValidationError) as exc_info:
			validate_plan(make_plan(make_step("s1", deps=["ghost"]), name="broken"))
		assert exc_info.value.plan_id == "broken-id"
		assert len(exc_info.value.problems) == 1

	def test_dependency_index(self):
		plan = make_plan(
			make_step("s1", name="research"),
			make_step("s2", name="outline", deps=["research"]),
			make_step("s3", name="write", deps=["research", "outline"]),
		)
		index = validate_plan(plan)
		assert index.resolve("outline") == "s2"
		assert index.dependencies["s3"] == ["s1", "s2"]
		assert index.dependents["s1"] == ["s2", "s3"]
		assert index.dependents["s3"] == []


class TestExecutionLevels:

	def test_levels(self):
		plan = make_plan(
			make_step("a"),
			make_step("b"),
			make_step("c", deps=["a"]),
			make_step("d", deps=["c", "b"]),
		)
		levels = [[s.id for s in level] for level in execution_levels(plan)]
		assert levels == [["a", "b"], ["c"], ["d"]]

	def test_long_chain_declared_in_reverse(self):
		"""Chains deeper than the recursion limit still resolve."""
		levels = execution_levels(reversed_chain_plan(3000))
		assert len(levels) == 3000
		assert [s.id for s in levels[0]] == ["s0"]
		assert [s.id for s in levels[-1]] == ["s2999"]

	def test_levels_reject_invalid_plan(self):
		with pytest.raises(PlanValidationError):
			execution_levels(make_plan())


class TestLoader:
	"""Reading plans from disk."""

	def test_load_json(self, tmp_path: Path):
		path = tmp_path / "plan.json"
		path.write_text(json.dumps({
			"id": "from-json",
			"name": "json plan",
			"steps": [{"id": "s1", "name": "only", "agentName": "echo"}],
		}))
		plan = load_plan(path)
		assert plan.id == "from-json"
		assert plan.steps[0].agent_name == "echo"

	def test_load_toml(self, tmp_path: Path):
		path = tmp_path / "plan.toml"
		path.write_text(
			'id = "from-toml"\n'
			'name = "toml plan"\n'
			"\n"
			"[[steps]]\n"
			'id = "s1"\n'
			'name = "research"\n'
			'agent_name = "research"\n'
			"\n"
			"[[steps]]\n"
			'id = "s2"\n'
			'name = "write"\n'
			'agent_name = "writer"\n'
			'dependencies = ["research"]\n'
		)
		plan = load_plan(path)
		assert plan.id == "from-toml"
		assert plan.steps[1].dependencies == ["research"]

	def test_missing_file(self, tmp_path: Path):
		with pytest.raises(PlanLoadError, match="not found"):
			load_plan(tmp_path / "nope.json")

	def test_unparseable_file(self, tmp_path: Path):
		path = tmp_path / "plan.json"
		path.write_text("{not json")
		with pytest.raises(PlanLoadError, match="Could not parse"):
			load_plan(path)

	def test_invalid_utf8(self, tmp_path: Path):
		for suffix in ("json", "toml"):
			path = tmp_path / f"plan.{suffix}"
			path.write_bytes(b'\xff\xfe{"name": "x"}')
			with pytest.raises(PlanLoadError, match="Could not parse"):
				load_plan(path)

	def test_non_object(self, tmp_path: Path):
		path = tmp_path / "plan.json"
		path.write_text("[1, 2]")
		with pytest.raises(PlanLoadError, match="must contain an object"):
			load_plan(path)
