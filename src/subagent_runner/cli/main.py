"""CLI entrypoint for subagent-runner — typer app with `agents`, `run` and `parallel` commands."""

import asyncio
import logging
import signal
import sys
from pathlib import Path

import structlog
import typer

from subagent_runner.agent.domain.config import AgentScope
from subagent_runner.agent.domain.prompt import append_available_agents
from subagent_runner.agent.infrastructure.markdown_loader import MarkdownAgentLoader
from subagent_runner.agent.infrastructure.observer import StructlogAgentDiscoveryObserver
from subagent_runner.cli.output.format import format_usage
from subagent_runner.cli.view.progress import LiveProgressView
from subagent_runner.config.domain.settings import RunnerSettings
from subagent_runner.config.infrastructure.observer import StructlogConfigObserver
from subagent_runner.config.infrastructure.yaml_loader import YamlSettingsLoader
from subagent_runner.core.cancellation import CancellationToken
from subagent_runner.core.errors import SubagentRunnerError
from subagent_runner.delegation.application.service import SubagentDelegator
from subagent_runner.delegation.domain.request import (
    DelegationRequest,
    DelegationResponse,
)
from subagent_runner.parallel.domain.task import TaskItem
from subagent_runner.parallel.infrastructure.observer import StructlogParallelObserver
from subagent_runner.run.domain.usage import UsageStats
from subagent_runner.run.infrastructure.factory import SubprocessAgentRunnerFactory
from subagent_runner.run.infrastructure.observer import StructlogRunObserver

app = typer.Typer(add_completion=False, no_args_is_help=True)

_SCOPES: tuple[str, ...] = ("user", "project", "both")


def _configure_structlog(log_format: str, quiet: bool) -> None:
    """Configure structlog based on the requested format. Logs always go to stderr."""
    if log_format == "console":
        renderer: structlog.types.Processor = structlog.dev.ConsoleRenderer()
    elif log_format == "json":
        renderer = structlog.processors.JSONRenderer()
    else:
        typer.echo(
            f"Invalid log format: {log_format!r}. Must be 'console' or 'json'.",
            err=True,
        )
        raise typer.Exit(code=1)

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.WARNING if quiet else logging.INFO
        ),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )


def _validate_scope(scope: str | None) -> AgentScope | None:
    if scope is None:
        return None
    if scope not in _SCOPES:
        raise typer.BadParameter(
            f"{scope!r} is not one of {', '.join(_SCOPES)}", param_hint="--scope"
        )
    return scope  # type: ignore[return-value]


def _parse_task_option(value: str) -> TaskItem:
    """Parse one ``--task AGENT=TASK`` value."""
    agent, sep, task = value.partition("=")
    if not sep or not agent.strip() or not task.strip():
        raise typer.BadParameter(
            f"expected AGENT=TASK, got {value!r}", param_hint="--task"
        )
    return TaskItem(agent=agent.strip(), task=task.strip())


class TerminalConfirmer:
    """Asks on the controlling terminal before project-local agents run."""

    async def confirm(self, title: str, body: str) -> bool:
        typer.echo(f"{title}\n\n{body}\n", err=True)
        return await asyncio.to_thread(typer.confirm, "Continue?", default=False)


def _load_settings(config_path: Path | None) -> RunnerSettings:
    return YamlSettingsLoader(observer=StructlogConfigObserver()).load(path=config_path)


def _make_loader(settings: RunnerSettings) -> MarkdownAgentLoader:
    return MarkdownAgentLoader(
        user_agents_dir=settings.user_agents_dir,
        project_agents_path=settings.project_agents_path,
        observer=StructlogAgentDiscoveryObserver(),
    )


def _make_delegator(settings: RunnerSettings) -> SubagentDelegator:
    return SubagentDelegator(
        loader=_make_loader(settings),
        runner_factory=SubprocessAgentRunnerFactory(
            settings=settings, observer=StructlogRunObserver()
        ),
        settings=settings,
        parallel_observer=StructlogParallelObserver(),
        confirmer=TerminalConfirmer(),
    )


async def _delegate(
    delegator: SubagentDelegator,
    request: DelegationRequest,
    cwd: Path,
    view: LiveProgressView,
) -> DelegationResponse:
    """Execute *request*, cancelling every child on SIGINT."""
    token = CancellationToken()
    loop = asyncio.get_running_loop()
    loop.add_signal_handler(signal.SIGINT, token.cancel)
    try:
        return await delegator.execute(
            request=request, cwd=cwd, cancel=token, on_update=view
        )
    finally:
        loop.remove_signal_handler(signal.SIGINT)
        view.stop()


def _print_response(response: DelegationResponse) -> None:
    typer.echo(response.content)
    results = response.details.results
    if not results:
        return
    typer.echo("")
    for result in results:
        usage = format_usage(result.usage, result.model)
        if usage:
            typer.echo(f"[{result.agent}] {usage}", err=True)
    if len(results) > 1:
        total = UsageStats.total(result.usage for result in results)
        typer.echo(f"Total: {format_usage(total)}", err=True)


def _run_request(
    request: DelegationRequest,
    cwd: Path | None,
    config_path: Path | None,
    log_format: str,
    quiet: bool,
) -> None:
    _configure_structlog(log_format=log_format, quiet=quiet)
    try:
        settings = _load_settings(config_path=config_path)
        view = LiveProgressView(disabled=quiet or not sys.stderr.isatty())
        response = asyncio.run(
            _delegate(
                delegator=_make_delegator(settings),
                request=request,
                cwd=(cwd or Path.cwd()).resolve(),
                view=view,
            )
        )
    except SubagentRunnerError as exc:
        typer.echo(str(exc), err=True)
        sys.exit(1)
    except Exception as exc:  # noqa: BLE001
        typer.echo(f"Unexpected error: {exc}\nPlease report this bug.", err=True)
        sys.exit(1)

    _print_response(response)
    if response.is_error:
        raise typer.Exit(code=1)


_CWD_OPTION = typer.Option(None, "--cwd", help="Working directory for discovery and runs")
_SCOPE_OPTION = typer.Option(None, "--scope", help="Agent scope: user, project or both")
_CONFIG_OPTION = typer.Option(None, "--config", "-c", help="Path to settings YAML")
_YES_OPTION = typer.Option(False, "--yes", "-y", help="Skip project agent confirmation")
_LOG_FORMAT_OPTION = typer.Option("console", "--log-format", help="Log format: 'console' or 'json'")
_QUIET_OPTION = typer.Option(False, "--quiet", "-q", help="Hide progress and info logs")
_PROMPT_OPTION = typer.Option(
    None, "--prompt", help="Print this system prompt file with the agent list appended"
)


@app.command()
def agents(
    cwd: Path | None = _CWD_OPTION,
    scope: str | None = _SCOPE_OPTION,
    config_path: Path | None = _CONFIG_OPTION,
    log_format: str = _LOG_FORMAT_OPTION,
    prompt_path: Path | None = _PROMPT_OPTION,
) -> None:
    """List the subagents discoverable from the working directory.

    With --prompt, print that system prompt with an "Available Subagents"
    section appended instead, ready to hand to a host agent.
    """
    agent_scope = _validate_scope(scope)
    _configure_structlog(log_format=log_format, quiet=True)
    try:
        settings = _load_settings(config_path=config_path)
        catalog = _make_loader(settings).load(
            cwd=(cwd or Path.cwd()).resolve(),
            scope=agent_scope or settings.default_scope,
        )
        base_prompt = prompt_path.read_text(encoding="utf-8") if prompt_path else None
    except SubagentRunnerError as exc:
        typer.echo(str(exc), err=True)
        sys.exit(1)
    except OSError as exc:
        typer.echo(f"Failed to read prompt file {prompt_path}: {exc.strerror or exc}", err=True)
        sys.exit(1)

    if base_prompt is not None:
        typer.echo(append_available_agents(base_prompt, catalog.agents), nl=False)
        return

    if not catalog.agents:
        typer.echo("No agents found.")
        return
    for agent in catalog.agents:
        typer.echo(f"{agent.name} ({agent.source}): {agent.description}")


@app.command()
def run(
    agent: str = typer.Argument(..., help="Name of the agent to invoke"),
    task: str = typer.Argument(..., help="Task to delegate"),
    cwd: Path | None = _CWD_OPTION,
    scope: str | None = _SCOPE_OPTION,
    config_path: Path | None = _CONFIG_OPTION,
    yes: bool = _YES_OPTION,
    log_format: str = _LOG_FORMAT_OPTION,
    quiet: bool = _QUIET_OPTION,
) -> None:
    """Run a single task with one subagent."""
    request = DelegationRequest(
        agent=agent,
        task=task,
        agent_scope=_validate_scope(scope),
        confirm_project_agents=False if yes else None,
        cwd=cwd,
    )
    _run_request(
        request=request,
        cwd=cwd,
        config_path=config_path,
        log_format=log_format,
        quiet=quiet,
    )


@app.command()
def parallel(
    task: list[str] = typer.Option(..., "--task", "-t", help="AGENT=TASK, repeatable"),
    cwd: Path | None = _CWD_OPTION,
    scope: str | None = _SCOPE_OPTION,
    config_path: Path | None = _CONFIG_OPTION,
    yes: bool = _YES_OPTION,
    log_format: str = _LOG_FORMAT_OPTION,
    quiet: bool = _QUIET_OPTION,
) -> None:
    """Run several tasks concurrently, each with its own subagent."""
    request = DelegationRequest(
        tasks=[_parse_task_option(value) for value in task],
        agent_scope=_validate_scope(scope),
        confirm_project_agents=False if yes else None,
    )
    _run_request(
        request=request,
        cwd=cwd,
        config_path=config_path,
        log_format=log_format,
        quiet=quiet,
    )


if __name__ == "__main__":
    app()
