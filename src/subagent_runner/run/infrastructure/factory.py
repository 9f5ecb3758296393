"""SubprocessAgentRunnerFactory — constructs SubprocessAgentRunner instances."""

from pathlib import Path

from subagent_runner.agent.domain.config import AgentConfig
from subagent_runner.config.domain.settings import RunnerSettings
from subagent_runner.run.domain.observer import RunObserver
from subagent_runner.run.domain.runner import AgentRunner
from subagent_runner.run.infrastructure.subprocess_runner import SubprocessAgentRunner


class SubprocessAgentRunnerFactory:
    """Creates subprocess-backed runners sharing one settings object and observer."""

    def __init__(self, settings: RunnerSettings, observer: RunObserver) -> None:
        self._settings = settings
        self._observer = observer

    def create(self, agents: list[AgentConfig], default_cwd: Path) -> AgentRunner:
        return SubprocessAgentRunner(
            agents=agents,
            default_cwd=default_cwd,
            settings=self._settings,
            observer=self._observer,
        )
