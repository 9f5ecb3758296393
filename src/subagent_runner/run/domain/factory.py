"""AgentRunnerFactory Protocol — builds an AgentRunner bound to a set of known agents."""

from pathlib import Path
from typing import Protocol

from subagent_runner.agent.domain.config import AgentConfig
from subagent_runner.run.domain.runner import AgentRunner


class AgentRunnerFactory(Protocol):
    """Structural interface for creating AgentRunner instances.

    One runner is created per delegation call, after agent discovery.
    """

    def create(self, agents: list[AgentConfig], default_cwd: Path) -> AgentRunner: ...
