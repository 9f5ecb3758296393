"""SubprocessAgentRunner — runs one subagent as an isolated child process.

The child is started in JSON mode and its stdout is parsed line by line into
a RunResult. Each run moves through four phases:

    starting -> streaming -> draining -> terminated

``streaming`` begins once the process has spawned, ``draining`` once stdout
reaches EOF and the last partial line has been flushed, and ``terminated``
once the process has exited as well.
"""

import asyncio
import codecs
import time
from contextlib import suppress
from dataclasses import dataclass, field
from pathlib import Path
from typing import Literal

from subagent_runner.agent.domain.config import AgentConfig, format_agent_names
from subagent_runner.config.domain.settings import RunnerSettings
from subagent_runner.core.cancellation import CancellationToken
from subagent_runner.run.domain.events import process_event_line
from subagent_runner.run.domain.observer import RunObserver
from subagent_runner.run.domain.progress import (
    RUNNING_PLACEHOLDER,
    ProgressCallback,
    ProgressUpdate,
)
from subagent_runner.run.domain.result import RunResult
from subagent_runner.run.infrastructure.line_buffer import LineBuffer
from subagent_runner.run.infrastructure.prompt_file import system_prompt_file

type RunPhase = Literal["starting", "streaming", "draining", "terminated"]

_READ_CHUNK_BYTES = 64 * 1024
_FAILED_EXIT_CODE = 1
_SIGNAL_EXIT_BASE = 128


def build_cli_args(agent: AgentConfig, prompt_path: Path | None, task: str) -> list[str]:
    """Build the child's argument list; the task is always the final positional."""
    args = ["--mode", "json", "-p", "--no-session"]
    if agent.model:
        args += ["--model", agent.model]
    if agent.thinking:
        args += ["--thinking", agent.thinking]
    if agent.tools:
        args += ["--tools", ",".join(agent.tools)]
    if prompt_path is not None:
        args += ["--append-system-prompt", str(prompt_path)]
    args.append(f"Task: {task}")
    return args


def normalize_exit_code(return_code: int | None) -> int:
    """Map a Python return code onto a shell-style exit status.

    A missing code counts as success. Death by signal N becomes 128 + N, the
    shell convention, instead of collapsing to 0: a child killed by a signal
    it did not ask for is reported as failed rather than as a clean exit.
    """
    if return_code is None:
        return 0
    if return_code < 0:
        return _SIGNAL_EXIT_BASE - return_code
    return return_code


@dataclass
class _ActiveRun:
    """Mutable state of one in-flight run. Owned by a single run() call."""

    result: RunResult
    on_update: ProgressCallback | None
    phase: RunPhase = "starting"
    aborted: bool = False
    lines: LineBuffer = field(default_factory=LineBuffer)
    kill_timer: asyncio.TimerHandle | None = None

    def apply_line(self, line: str) -> None:
        if process_event_line(line, self.result):
            self.emit()

    def emit(self) -> None:
        if self.on_update is None:
            return
        self.on_update(
            ProgressUpdate(
                content=self.result.final_output() or RUNNING_PLACEHOLDER,
                mode="single",
                results=[self.result.snapshot()],
            )
        )


class SubprocessAgentRunner:
    """Agent runner that spawns the configured command once per run.

    Satisfies the AgentRunner protocol structurally. One instance is bound to
    the agents discovered for a single delegation call.
    """

    def __init__(
        self,
        agents: list[AgentConfig],
        default_cwd: Path,
        settings: RunnerSettings,
        observer: RunObserver,
    ) -> None:
        self._agents = agents
        self._default_cwd = default_cwd
        self._settings = settings
        self._observer = observer

    async def run(
        self,
        task: str,
        agent_name: str,
        cwd: Path | None = None,
        cancel: CancellationToken | None = None,
        on_update: ProgressCallback | None = None,
    ) -> RunResult:
        """Run *task* with the agent called *agent_name* and return the final result.

        Never raises for unknown agents, spawn failures, non-zero exits or
        cancellation; those are encoded in the result's exit code.
        """
        agent = self._find_agent(agent_name)
        if agent is None:
            return self._unknown_agent_result(task=task, agent_name=agent_name)

        run = _ActiveRun(
            result=RunResult(
                agent=agent_name,
                source=agent.source,
                task=task,
                model=agent.model,
            ),
            on_update=on_update,
        )
        started_at = time.monotonic()

        if cancel is not None and cancel.cancelled:
            run.aborted = True
            run.phase = "terminated"
            self._observer.run_abort_requested(agent=agent_name)
        else:
            with system_prompt_file(agent.name, agent.system_prompt) as prompt_path:
                argv = [*self._settings.command, *build_cli_args(agent, prompt_path, task)]
                run.result.exit_code = await self._execute(
                    argv=argv,
                    cwd=cwd or self._default_cwd,
                    run=run,
                    cancel=cancel,
                )

        if run.aborted:
            run.result.mark_aborted()

        self._observer.run_completed(
            agent=agent_name,
            exit_code=run.result.exit_code,
            phase=run.phase,
            num_turns=run.result.usage.turns,
            cost_usd=run.result.usage.cost_usd,
            duration_ms=int((time.monotonic() - started_at) * 1000),
        )
        return run.result

    def _find_agent(self, name: str) -> AgentConfig | None:
        for agent in self._agents:
            if agent.name == name:
                return agent
        return None

    def _unknown_agent_result(self, task: str, agent_name: str) -> RunResult:
        self._observer.run_unknown_agent(
            agent=agent_name, available=[agent.name for agent in self._agents]
        )
        message = (
            f'Unknown agent: "{agent_name}". '
            f"Available agents: {format_agent_names(self._agents)}."
        )
        return RunResult(
            agent=agent_name,
            source="unknown",
            task=task,
            exit_code=_FAILED_EXIT_CODE,
            stderr=message,
            error_message=message,
        )

    async def _execute(
        self,
        argv: list[str],
        cwd: Path,
        run: _ActiveRun,
        cancel: CancellationToken | None,
    ) -> int:
        """Spawn the child, stream its output into *run*, and return its exit status."""
        try:
            proc = await asyncio.create_subprocess_exec(
                *argv,
                cwd=cwd,
                stdin=asyncio.subprocess.DEVNULL,
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except (OSError, ValueError) as exc:
            # ValueError covers arguments the OS cannot accept, e.g. embedded NUL bytes.
            run.phase = "terminated"
            run.result.stderr += str(exc)
            self._observer.run_spawn_failed(agent=run.result.agent, reason=str(exc))
            return _FAILED_EXIT_CODE

        run.phase = "streaming"
        self._observer.run_started(agent=run.result.agent, pid=proc.pid, cwd=cwd)

        loop = asyncio.get_running_loop()
        registration = (
            cancel.register(lambda: self._request_abort(proc=proc, run=run, loop=loop))
            if cancel is not None
            else None
        )
        try:
            assert proc.stdout is not None and proc.stderr is not None
            await asyncio.gather(
                self._pump_stdout(stream=proc.stdout, run=run),
                self._pump_stderr(stream=proc.stderr, result=run.result),
            )
            return_code = await proc.wait()
        finally:
            if registration is not None:
                registration.dispose()
            if run.kill_timer is not None:
                run.kill_timer.cancel()
                run.kill_timer = None
            if proc.returncode is None:
                with suppress(ProcessLookupError):
                    proc.kill()

        run.phase = "terminated"
        return normalize_exit_code(return_code)

    async def _pump_stdout(self, stream: asyncio.StreamReader, run: _ActiveRun) -> None:
        while chunk := await stream.read(_READ_CHUNK_BYTES):
            for line in run.lines.feed(chunk):
                run.apply_line(line)
        run.phase = "draining"
        tail = run.lines.flush()
        if tail is not None:
            run.apply_line(tail)

    async def _pump_stderr(self, stream: asyncio.StreamReader, result: RunResult) -> None:
        decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        while chunk := await stream.read(_READ_CHUNK_BYTES):
            result.stderr += decoder.decode(chunk)
        result.stderr += decoder.decode(b"", final=True)

    def _request_abort(
        self,
        proc: asyncio.subprocess.Process,
        run: _ActiveRun,
        loop: asyncio.AbstractEventLoop,
    ) -> None:
        """SIGTERM the child now and arm a SIGKILL for after the kill timeout."""
        if run.aborted:
            return
        run.aborted = True
        self._observer.run_abort_requested(agent=run.result.agent)
        if proc.returncode is not None:
            return
        with suppress(ProcessLookupError):
            proc.terminate()
        run.kill_timer = loop.call_later(
            self._settings.kill_timeout_seconds, self._force_kill, proc, run
        )

    def _force_kill(self, proc: asyncio.subprocess.Process, run: _ActiveRun) -> None:
        run.kill_timer = None
        if proc.returncode is not None:
            return
        with suppress(ProcessLookupError):
            proc.kill()
        self._observer.run_force_killed(agent=run.result.agent, pid=proc.pid)
