"""SubagentDelegator — entry point that dispatches a delegation request to a mode."""

from pathlib import Path

from subagent_runner.agent.domain.catalog import AgentCatalog
from subagent_runner.agent.domain.config import AgentScope, format_agent_names
from subagent_runner.agent.domain.loader import AgentLoader
from subagent_runner.config.domain.settings import RunnerSettings
from subagent_runner.core.cancellation import CancellationToken
from subagent_runner.delegation.domain.confirmer import ProjectAgentConfirmer
from subagent_runner.delegation.domain.request import (
    DelegationRequest,
    DelegationResponse,
    SubagentDetails,
)
from subagent_runner.parallel.application.errors import TooManyTasksError
from subagent_runner.parallel.application.runner import ParallelRunner
from subagent_runner.parallel.domain.observer import ParallelObserver
from subagent_runner.run.domain.factory import AgentRunnerFactory
from subagent_runner.run.domain.progress import ProgressCallback, RunMode
from subagent_runner.run.domain.result import RunResult

_NO_OUTPUT = "(no output)"


class SubagentDelegator:
    """Discovers agents, validates the request, and runs it in single or parallel mode.

    Like the runners below it, execute() reports failures through the response
    (``is_error``) rather than raising.
    """

    def __init__(
        self,
        loader: AgentLoader,
        runner_factory: AgentRunnerFactory,
        settings: RunnerSettings,
        parallel_observer: ParallelObserver,
        confirmer: ProjectAgentConfirmer | None = None,
    ) -> None:
        self._loader = loader
        self._runner_factory = runner_factory
        self._settings = settings
        self._parallel_observer = parallel_observer
        self._confirmer = confirmer

    async def execute(
        self,
        request: DelegationRequest,
        cwd: Path,
        cancel: CancellationToken | None = None,
        on_update: ProgressCallback | None = None,
    ) -> DelegationResponse:
        scope: AgentScope = request.agent_scope or self._settings.default_scope
        catalog = self._loader.load(cwd=cwd, scope=scope)

        def respond(
            content: str, mode: RunMode, results: list[RunResult], is_error: bool
        ) -> DelegationResponse:
            return DelegationResponse(
                content=content,
                details=SubagentDetails(
                    mode=mode,
                    agent_scope=scope,
                    project_agents_dir=catalog.project_agents_dir,
                    results=results,
                ),
                is_error=is_error,
            )

        if request.is_single == request.is_parallel:
            return respond(
                "Invalid parameters. Provide exactly one mode.\n"
                f"Available agents: {format_agent_names(catalog.agents)}",
                "single",
                [],
                True,
            )

        mode: RunMode = "parallel" if request.is_parallel else "single"
        if not await self._project_agents_approved(request, scope, catalog):
            return respond(
                "Canceled: project-local agents not approved.", mode, [], True
            )

        runner = self._runner_factory.create(agents=catalog.agents, default_cwd=cwd)

        if request.is_parallel:
            parallel = ParallelRunner(
                runner=runner,
                observer=self._parallel_observer,
                max_tasks=self._settings.max_parallel_tasks,
                max_concurrency=self._settings.max_concurrency,
                heartbeat_interval_seconds=self._settings.heartbeat_interval_seconds,
            )
            try:
                outcome = await parallel.run(
                    tasks=request.tasks, cancel=cancel, on_update=on_update
                )
            except TooManyTasksError as exc:
                return respond(
                    f"Too many parallel tasks ({exc.requested}). Max is {exc.maximum}.",
                    "parallel",
                    [],
                    True,
                )
            return respond(
                outcome.summary(),
                "parallel",
                outcome.results,
                outcome.success_count < len(outcome.results),
            )

        assert request.agent is not None and request.task is not None
        result = await runner.run(
            task=request.task,
            agent_name=request.agent,
            cwd=request.cwd,
            cancel=cancel,
            on_update=on_update,
        )
        if result.is_error:
            detail = (
                result.error_message
                or result.stderr
                or result.final_output()
                or _NO_OUTPUT
            )
            return respond(
                f"Agent {result.stop_reason or 'failed'}: {detail}",
                "single",
                [result],
                True,
            )
        return respond(result.final_output() or _NO_OUTPUT, "single", [result], False)

    async def _project_agents_approved(
        self,
        request: DelegationRequest,
        scope: AgentScope,
        catalog: AgentCatalog,
    ) -> bool:
        confirm_enabled = (
            request.confirm_project_agents
            if request.confirm_project_agents is not None
            else self._settings.confirm_project_agents
        )
        if scope == "user" or not confirm_enabled or self._confirmer is None:
            return True

        project_agents = [
            agent
            for name in request.requested_agents()
            if (agent := catalog.get(name)) is not None and agent.source == "project"
        ]
        if not project_agents:
            return True

        names = ", ".join(agent.name for agent in project_agents)
        source_dir = catalog.project_agents_dir or "(unknown)"
        return await self._confirmer.confirm(
            "Run project-local agents?",
            f"Agents: {names}\nSource: {source_dir}\n\n"
            "Project agents are repo-controlled. Only continue for trusted repositories.",
        )

