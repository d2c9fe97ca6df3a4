"""
Agent Registry - name -> agent lookup for orchestrators.

Registration overwrites on collision (last one wins). Orchestrators take a
read-only snapshot per workflow run, so registry changes never affect a
run already in flight.
"""

import logging
from types import MappingProxyType
from typing import Iterator, Mapping, Optional

from .base import BaseAgent

logger = logging.getLogger(__name__)


class AgentRegistry:
	"""
	Mutable catalog of agents keyed by name.

	Usage:
		registry = AgentRegistry({"research": ResearchAgent()})
		registry.register("writer", WriterAgent())
		agents = registry.snapshot()
	"""

	def __init__(self, agents: Optional[Mapping[str, BaseAgent]] = None):
		self._agents: dict[str, BaseAgent] = dict(agents or {})

	def register(self, name: str, agent: BaseAgent) -> None:
		"""Bind a name to an agent, replacing any previous binding."""
		if name in self._agents and self._agents[name] is not agent:
			logger.warning(f"Agent '{name}' already registered, overwriting")
		self._agents[name] = agent
		logger.debug(f"Agent registered: {name}")

	def unregister(self, name: str) -> bool:
		"""Remove a binding. Returns False if the name was unknown."""
		removed = self._agents.pop(name, None) is not None
		if removed:
			logger.debug(f"Agent unregistered: {name}")
		return removed

	def get(self, name: str) -> Optional[BaseAgent]:
		return self._agents.get(name)

	def has(self, name: str) -> bool:
		return name in self._agents

	def names(self) -> list[str]:
		"""Registered names in registration order."""
		return list(self._agents)

	def snapshot(self) -> Mapping[str, BaseAgent]:
		"""Read-only copy of the current bindings."""
		return MappingProxyType(dict(self._agents))

	def __contains__(self, name: object) -> bool:
		return name in self._agents

	def __len__(self) -> int:
		return len(self._agents)

	def __iter__(self) -> Iterator[str]:
		return iter(list(self._agents))
