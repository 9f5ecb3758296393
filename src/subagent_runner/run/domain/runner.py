"""AgentRunner Protocol — structural interface for anything that executes one subagent run."""

from pathlib import Path
from typing import Protocol

from subagent_runner.core.cancellation import CancellationToken
from subagent_runner.run.domain.progress import ProgressCallback
from subagent_runner.run.domain.result import RunResult


class AgentRunner(Protocol):
    """Runs one task against one named agent and returns its final RunResult.

    Failures (unknown agent, spawn failure, non-zero exit, cancellation) are
    encoded in the returned result; implementations do not raise for them.
    """

    async def run(
        self,
        task: str,
        agent_name: str,
        cwd: Path | None = None,
        cancel: CancellationToken | None = None,
        on_update: ProgressCallback | None = None,
    ) -> RunResult: ...
