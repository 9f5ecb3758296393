"""ConfigObserver port — domain events emitted while loading settings."""

from pathlib import Path
from typing import Protocol


class ConfigObserver(Protocol):
    """Observer port for configuration events.

    Implementations may log to structlog, record for tests, or emit metrics.
    """

    def config_loaded(self, path: Path | None) -> None: ...
