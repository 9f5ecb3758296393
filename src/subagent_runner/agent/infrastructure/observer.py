"""Structlog implementation of the AgentDiscoveryObserver port."""

from pathlib import Path

import structlog


class StructlogAgentDiscoveryObserver:
    """Delegates agent discovery events to structlog.

    Satisfies the AgentDiscoveryObserver protocol structurally.
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def agent_file_skipped(self, path: Path, reason: str) -> None:
        self._log.warning("agents.file_skipped", path=str(path), reason=reason)

    def agents_discovered(
        self, scope: str, agent_names: list[str], project_agents_dir: Path | None
    ) -> None:
        self._log.info(
            "agents.discovered",
            scope=scope,
            agent_names=agent_names,
            project_agents_dir=str(project_agents_dir) if project_agents_dir else None,
        )
