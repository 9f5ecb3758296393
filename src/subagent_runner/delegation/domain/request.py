"""DelegationRequest and DelegationResponse — the host-facing shape of a subagent call."""

from pathlib import Path

from pydantic import BaseModel, Field

from subagent_runner.agent.domain.config import AgentScope
from subagent_runner.parallel.domain.task import TaskItem
from subagent_runner.run.domain.progress import RunMode
from subagent_runner.run.domain.result import RunResult


class DelegationRequest(BaseModel, frozen=True):
    """Either single mode (agent + task) or parallel mode (tasks), never both."""

    agent: str | None = None
    task: str | None = None
    tasks: list[TaskItem] = Field(default_factory=list)
    agent_scope: AgentScope | None = None
    confirm_project_agents: bool | None = None
    cwd: Path | None = None

    @property
    def is_single(self) -> bool:
        return bool(self.agent and self.task)

    @property
    def is_parallel(self) -> bool:
        return len(self.tasks) > 0

    def requested_agents(self) -> list[str]:
        names = [item.agent for item in self.tasks]
        if self.agent:
            names.append(self.agent)
        return list(dict.fromkeys(names))


class SubagentDetails(BaseModel, frozen=True):
    mode: RunMode
    agent_scope: AgentScope
    project_agents_dir: Path | None
    results: list[RunResult]


class DelegationResponse(BaseModel, frozen=True):
    content: str
    details: SubagentDetails
    is_error: bool = False
