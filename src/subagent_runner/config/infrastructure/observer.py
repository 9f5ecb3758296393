"""Structlog implementation of the ConfigObserver port."""

from pathlib import Path

import structlog


class StructlogConfigObserver:
    """Delegates config domain events to structlog.

    Satisfies the ConfigObserver protocol structurally.
    """

    def __init__(self) -> None:
        self._log = structlog.get_logger()

    def config_loaded(self, path: Path | None) -> None:
        self._log.info("config.loaded", path=str(path) if path else None)
