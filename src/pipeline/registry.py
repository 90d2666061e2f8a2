# src/pipeline/registry.py — v1
"""Agent registry — dynamic loading and lookup of stage agents.

Loads agent classes from the AGENT_REGISTRY config, checks that each
stage is implemented by the agent registered for it, and that every
declared dependency runs strictly earlier in STAGE_SEQUENCE.
"""

from __future__ import annotations

import importlib
import logging

from contentflow.config.agents import AGENT_REGISTRY
from contentflow.core.models import STAGE_SEQUENCE, StageType
from contentflow.pipeline.plugin_kit.base_agent import BaseAgent

logger = logging.getLogger(__name__)


class RegistryError(Exception):
    """Raised when agent loading or validation fails."""


class AgentRegistry:
    """Registry of the agents implementing each pipeline stage."""

    def __init__(self) -> None:
        self._agents: dict[StageType, BaseAgent] = {}

    @property
    def agents(self) -> dict[StageType, BaseAgent]:
        """Return mapping of stage -> agent instance."""
        return dict(self._agents)

    @property
    def stages(self) -> list[StageType]:
        """Registered stages in execution order."""
        return [s for s in STAGE_SEQUENCE if s in self._agents]

    @classmethod
    def default(cls) -> AgentRegistry:
        """Registry with every configured agent loaded."""
        registry = cls()
        registry.load_all()
        return registry

    def load_all(self) -> None:
        """Load all agents from AGENT_REGISTRY config."""
        for stage, class_path in AGENT_REGISTRY.items():
            try:
                agent = _import_agent(class_path)
            except RegistryError as exc:
                logger.warning("Failed to load agent for %s: %s", stage.value, exc)
                continue
            self.register(agent, stage=stage)
            logger.debug("Loaded agent: %s v%s", agent.name, agent.version)

        logger.info("Registry loaded %d/%d agents", len(self._agents), len(STAGE_SEQUENCE))

    def register(self, agent: BaseAgent, stage: StageType | None = None) -> None:
        """Manually register an agent instance."""
        stage = stage or agent.stage
        if agent.stage != stage:
            raise RegistryError(
                f"Agent '{agent.name}' implements '{agent.stage.value}', not '{stage.value}'"
            )
        if stage in self._agents:
            logger.warning("Overwriting existing agent: %s", stage.value)
        self._agents[stage] = agent

    def get(self, stage: StageType) -> BaseAgent | None:
        """Get agent by stage, or None if not registered."""
        return self._agents.get(stage)

    def get_or_raise(self, stage: StageType) -> BaseAgent:
        """Get agent by stage, raise if not found."""
        agent = self._agents.get(stage)
        if agent is None:
            raise RegistryError(f"No agent registered for stage '{stage.value}'")
        return agent

    def missing_stages(self) -> list[StageType]:
        return [s for s in STAGE_SEQUENCE if s not in self._agents]

    def validate_dependencies(self) -> list[str]:
        """Validate that all agent dependencies are satisfiable.

        Returns:
            List of error messages (empty if valid).
        """
        errors: list[str] = []
        for stage, agent in self._agents.items():
            for dep in agent.dependencies:
                if dep not in self._agents:
                    errors.append(
                        f"Stage '{stage.value}' depends on '{dep.value}' which is not registered"
                    )
                elif dep.position >= stage.position:
                    errors.append(
                        f"Stage '{stage.value}' depends on '{dep.value}' which does not run earlier"
                    )
        return errors

    def get_dependency_map(self) -> dict[str, list[str]]:
        """Return stage -> list of dependency stage names."""
        return {
            stage.value: [d.value for d in agent.dependencies]
            for stage, agent in self._agents.items()
        }


def _import_agent(class_path: str) -> BaseAgent:
    """Import and instantiate an agent from a dotted class path.

    Args:
        class_path: e.g. 'contentflow.pipeline.agents.market_research.MarketResearchAgent'
    """
    parts = class_path.rsplit(".", 1)
    if len(parts) != 2:
        raise RegistryError(f"Invalid class path: {class_path}")
    module_path, class_name = parts

    try:
        module = importlib.import_module(module_path)
    except ImportError as exc:
        raise RegistryError(f"Cannot import module {module_path}: {exc}") from exc

    cls = getattr(module, class_name, None)
    if cls is None:
        raise RegistryError(f"Class {class_name} not found in {module_path}")

    if not isinstance(cls, type) or not issubclass(cls, BaseAgent):
        raise RegistryError(f"{class_path} is not a BaseAgent subclass")

    return cls()
