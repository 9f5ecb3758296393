"""AgentLoader Protocol — structural interface for agent discovery implementations."""

from pathlib import Path
from typing import Protocol

from subagent_runner.agent.domain.catalog import AgentCatalog
from subagent_runner.agent.domain.config import AgentScope


class AgentLoader(Protocol):
    """Discovers agent definitions visible from *cwd* for the requested scope."""

    def load(self, cwd: Path, scope: AgentScope) -> AgentCatalog: ...
