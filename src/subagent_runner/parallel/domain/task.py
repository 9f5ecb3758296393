"""TaskItem — one requested (agent, task) pair in a parallel delegation."""

from pathlib import Path

from pydantic import BaseModel, Field


class TaskItem(BaseModel, frozen=True):
    agent: str = Field(min_length=1)
    task: str = Field(min_length=1)
    cwd: Path | None = None
