"""Errors raised while turning a settings file into RunnerSettings.

Each one names the offending file so the message is actionable on its own.
"""

from pathlib import Path

from subagent_runner.core.errors import SubagentRunnerError


class SettingsReadError(SubagentRunnerError):
    """The settings file could not be opened."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        super().__init__(f"Failed to read settings file {path}: {reason}")


class SettingsValidationError(SubagentRunnerError):
    """The settings file is not YAML, not a mapping, or breaks the settings schema."""

    def __init__(self, path: Path, reason: str) -> None:
        self.path = path
        super().__init__(f"Failed to apply settings file {path}: {reason}")


class UnsetEnvVarsError(SubagentRunnerError):
    """The settings file references ${VAR} placeholders with no value and no default."""

    def __init__(self, path: Path, missing_vars: list[str]) -> None:
        self.path = path
        self.missing_vars = missing_vars
        names = ", ".join(f"${{{name}}}" for name in sorted(missing_vars))
        super().__init__(
            f"Failed to expand settings file {path}: {names} unset and without a default"
        )
