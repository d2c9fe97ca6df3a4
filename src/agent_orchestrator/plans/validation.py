"""
Plan validation - structural checks run before any step executes.

Dependencies reference sibling steps by name, so validation builds a
name -> id index and rejects anything that would make resolution
ambiguous or impossible: duplicate ids or names, dangling references,
self-dependencies and cycles.
"""

import logging
from collections import deque
from dataclasses import dataclass, field

from .models import Plan, Step

logger = logging.getLogger(__name__)


class PlanValidationError(ValueError):
	"""Raised when a plan is structurally invalid."""

	def __init__(self, plan_id: str, problems: list[str]):
		self.plan_id = plan_id
		self.problems = problems
		super().__init__(f"Invalid workflow plan {plan_id}: " + "; ".join(problems))


@dataclass
class DependencyIndex:
	"""Resolved dependency graph of a validated plan."""
	name_to_id: dict[str, str] = field(default_factory=dict)
	# step id -> ids of the steps it depends on
	dependencies: dict[str, list[str]] = field(default_factory=dict)
	# step id -> ids of the steps that depend on it
	dependents: dict[str, list[str]] = field(default_factory=dict)

	def resolve(self, name: str) -> str:
		"""Map a step name to its id."""
		return self.name_to_id[name]


def _find_cycle(plan: Plan) -> list[str] | None:
	"""Return the step names forming a dependency cycle, if any."""
	by_name = {step.name: step for step in plan.steps}
	visited: set[str] = set()

	# Iterative DFS; dependency chains may be longer than the recursion limit
	for root in plan.steps:
		if root.name in visited:
			continue
		visited.add(root.name)
		path = [root.name]
		on_path = {root.name}
		pending = [iter(root.dependencies)]

		while pending:
			dep = next(pending[-1], None)
			if dep is None:
				on_path.discard(path.pop())
				pending.pop()
				continue
			if dep in on_path:
				return path[path.index(dep):] + [dep]
			if dep in visited or dep not in by_name:
				continue
			visited.add(dep)
			path.append(dep)
			on_path.add(dep)
			pending.append(iter(by_name[dep].dependencies))

	return None


def collect_problems(plan: Plan) -> list[str]:
	"""Return every structural problem in the plan (empty when valid)."""
	problems: list[str] = []

	if not plan.steps:
		return ["Workflow plan must have at least one step"]

	seen_ids: set[str] = set()
	seen_names: set[str] = set()
	for step in plan.steps:
		if step.id in seen_ids:
			problems.append(f"Duplicate step id: {step.id}")
		seen_ids.add(step.id)
		if step.name in seen_names:
			problems.append(f"Duplicate step name: {step.name}")
		seen_names.add(step.name)

	for step in plan.steps:
		for dep in step.dependencies:
			if dep == step.name:
				problems.append(f"Step {step.name} depends on itself")
			elif dep not in seen_names:
				problems.append(f"Invalid dependency in step {step.name}: {dep} does not exist")

	# Cycle detection is only meaningful on a name-resolvable graph
	if not problems:
		cycle = _find_cycle(plan)
		if cycle:
			problems.append(f"Circular dependency detected: {' -> '.join(cycle)}")

	return problems


def validate_plan(plan: Plan) -> DependencyIndex:
	"""
	Validate a plan and build its dependency index.

	Raises:
		PlanValidationError: If the plan is structurally invalid
	"""
	problems = collect_problems(plan)
	if problems:
		logger.debug(f"Plan {plan.id} rejected: {problems}")
		raise PlanValidationError(plan.id, problems)

	index = DependencyIndex(
		name_to_id={step.name: step.id for step in plan.steps},
	)
	for step in plan.steps:
		index.dependents.setdefault(step.id, [])
	for step in plan.steps:
		dep_ids = [index.resolve(dep) for dep in step.dependencies]
		index.dependencies[step.id] = dep_ids
		for dep_id in dep_ids:
			index.dependents[dep_id].append(step.id)

	return index


def execution_levels(plan: Plan) -> list[list[Step]]:
	"""
	Group steps into dependency levels.

	Level 0 holds steps with no dependencies; level N holds steps whose
	deepest dependency sits at level N-1. Steps keep declaration order
	within a level.

	Raises:
		PlanValidationError: If the plan is structurally invalid
	"""
	index = validate_plan(plan)
	remaining = {step_id: len(deps) for step_id, deps in index.dependencies.items()}
	ready = deque(step_id for step_id, count in remaining.items() if count == 0)
	depth: dict[str, int] = {}

	# Kahn's algorithm; a step's depth is known once all its dependencies are
	while ready:
		step_id = ready.popleft()
		deps = index.dependencies[step_id]
		depth[step_id] = 1 + max(depth[d] for d in deps) if deps else 0
		for child in index.dependents[step_id]:
			remaining[child] -= 1
			if remaining[child] == 0:
				ready.append(child)

	levels: list[list[Step]] = []
	for step in plan.steps:
		lvl = depth[step.id]
		while len(levels) <= lvl:
			levels.append([])
		levels[lvl].append(step)
	return levels
