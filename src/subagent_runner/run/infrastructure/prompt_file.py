"""Scoped temporary file holding an agent's system prompt for one run."""

import os
import re
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager, suppress
from pathlib import Path

_UNSAFE_NAME_CHARS = re.compile(r"[^\w.-]+")


@contextmanager
def system_prompt_file(agent_name: str, system_prompt: str) -> Iterator[Path | None]:
    """Write *system_prompt* to an owner-only file in a fresh temp dir; yield its path.

    Yields None (and writes nothing) when the prompt is blank. The file and its
    directory are removed on every exit path; removal failures are ignored.
    """
    if not system_prompt.strip():
        yield None
        return

    directory = Path(tempfile.mkdtemp(prefix="subagent-"))
    path = directory / f"prompt-{_UNSAFE_NAME_CHARS.sub('_', agent_name)}.md"
    try:
        fd = os.open(path, os.O_WRONLY | os.O_CREAT | os.O_EXCL, 0o600)
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            fh.write(system_prompt)
        yield path
    finally:
        with suppress(OSError):
            path.unlink()
        with suppress(OSError):
            directory.rmdir()
