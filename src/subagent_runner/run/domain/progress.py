"""ProgressUpdate — the partial view handed to progress callbacks while runs stream."""

from collections.abc import Callable
from typing import Literal

from pydantic import BaseModel

from subagent_runner.run.domain.result import RunResult

type RunMode = Literal["single", "parallel"]

RUNNING_PLACEHOLDER = "(running...)"


class ProgressUpdate(BaseModel, frozen=True):
    """Shaped like the final return value: a content summary plus result snapshots."""

    content: str
    mode: RunMode
    results: list[RunResult]


type ProgressCallback = Callable[[ProgressUpdate], None]
