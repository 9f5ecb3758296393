"""ProjectAgentConfirmer Protocol — asks a human before repo-controlled agents run."""

from typing import Protocol


class ProjectAgentConfirmer(Protocol):
    async def confirm(self, title: str, body: str) -> bool: ...
