"""AgentDiscoveryObserver port — domain events emitted while discovering agents."""

from pathlib import Path
from typing import Protocol


class AgentDiscoveryObserver(Protocol):
    """Observer port for agent discovery events.

    Implementations may log to structlog, record for tests, or emit metrics.
    """

    def agent_file_skipped(self, path: Path, reason: str) -> None: ...

    def agents_discovered(
        self, scope: str, agent_names: list[str], project_agents_dir: Path | None
    ) -> None: ...
