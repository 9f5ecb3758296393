"""RunObserver port — domain events emitted over the life of one subagent run."""

from pathlib import Path
from typing import Protocol


class RunObserver(Protocol):
    """Observer port for single-run events.

    Implementations may log to structlog, record for tests, or emit metrics.
    """

    def run_unknown_agent(self, agent: str, available: list[str]) -> None: ...

    def run_started(self, agent: str, pid: int, cwd: Path) -> None: ...

    def run_spawn_failed(self, agent: str, reason: str) -> None: ...

    def run_abort_requested(self, agent: str) -> None: ...

    def run_force_killed(self, agent: str, pid: int) -> None: ...

    def run_completed(
        self,
        agent: str,
        exit_code: int,
        phase: str,
        num_turns: int,
        cost_usd: float,
        duration_ms: int,
    ) -> None: ...
