"""AgentConfig — one subagent definition: model, tools and system prompt."""

from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field

type AgentScope = Literal["user", "project", "both"]
type ConfigSource = Literal["user", "project"]


class AgentConfig(BaseModel, frozen=True):
    """A named subagent configuration, parsed once from its definition file."""

    name: str = Field(min_length=1)
    description: str = Field(min_length=1)
    tools: list[str] | None = None
    model: str | None = None
    thinking: str | None = None
    system_prompt: str = ""
    source: ConfigSource
    file_path: Path


def format_agent_names(agents: list[AgentConfig]) -> str:
    """Render 'name (source)' pairs, comma-joined, or 'none' when empty."""
    return ", ".join(f"{agent.name} ({agent.source})" for agent in agents) or "none"
