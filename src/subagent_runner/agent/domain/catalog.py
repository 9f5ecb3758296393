"""AgentCatalog — the result of discovering agent definitions for one working directory."""

from pathlib import Path

from pydantic import BaseModel

from subagent_runner.agent.domain.config import AgentConfig


class AgentCatalog(BaseModel, frozen=True):
    """Discovered agents, in lookup order, plus the project directory consulted (if any)."""

    agents: list[AgentConfig]
    project_agents_dir: Path | None

    def get(self, name: str) -> AgentConfig | None:
        for agent in self.agents:
            if agent.name == name:
                return agent
        return None
