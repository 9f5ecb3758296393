"""Structlog implementation of the RunObserver port."""

from pathlib import Path

import structlog


class StructlogRunObserver:
    """Delegates single-run events to structlog.

    Satisfies the RunObserver protocol structurally.
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def run_unknown_agent(self, agent: str, available: list[str]) -> None:
        self._log.error("run.unknown_agent", agent=agent, available=available)

    def run_started(self, agent: str, pid: int, cwd: Path) -> None:
        self._log.info("run.started", agent=agent, pid=pid, cwd=str(cwd))

    def run_spawn_failed(self, agent: str, reason: str) -> None:
        self._log.error("run.spawn_failed", agent=agent, reason=reason)

    def run_abort_requested(self, agent: str) -> None:
        self._log.warning("run.abort_requested", agent=agent)

    def run_force_killed(self, agent: str, pid: int) -> None:
        self._log.warning("run.force_killed", agent=agent, pid=pid)

    def run_completed(
        self,
        agent: str,
        exit_code: int,
        phase: str,
        num_turns: int,
        cost_usd: float,
        duration_ms: int,
    ) -> None:
        log = self._log.info if exit_code == 0 else self._log.warning
        log(
            "run.completed",
            agent=agent,
            exit_code=exit_code,
            phase=phase,
            num_turns=num_turns,
            cost_usd=round(cost_usd, 6),
            duration_ms=duration_ms,
        )
