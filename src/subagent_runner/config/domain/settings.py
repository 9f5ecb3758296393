"""RunnerSettings — process, concurrency and discovery settings for the runner."""

from pathlib import Path

from pydantic import BaseModel, Field

from subagent_runner.agent.domain.config import AgentScope


def _default_user_agents_dir() -> Path:
    return Path.home() / ".pi" / "agent" / "agents"


class RunnerSettings(BaseModel, frozen=True):
    """Root settings object. Every field has a default so an empty file is valid."""

    command: list[str] = Field(default_factory=lambda: ["pi"], min_length=1)
    user_agents_dir: Path = Field(default_factory=_default_user_agents_dir)
    project_agents_path: Path = Path(".pi") / "agents"
    max_parallel_tasks: int = Field(default=8, ge=1)
    max_concurrency: int = Field(default=4, ge=1)
    kill_timeout_seconds: float = Field(default=5.0, gt=0.0)
    heartbeat_interval_seconds: float = Field(default=1.0, gt=0.0)
    default_scope: AgentScope = "user"
    confirm_project_agents: bool = True
