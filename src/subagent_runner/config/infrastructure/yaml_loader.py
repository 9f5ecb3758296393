"""YAML settings loader — parses, interpolates env vars, validates, and emits observer events."""

from pathlib import Path
from typing import Any

import yaml
from pydantic import ValidationError

from subagent_runner.config.domain.observer import ConfigObserver
from subagent_runner.config.domain.settings import RunnerSettings
from subagent_runner.config.infrastructure.env_interpolation import (
    collect_missing_vars,
    interpolate,
)
from subagent_runner.config.infrastructure.errors import (
    SettingsReadError,
    SettingsValidationError,
    UnsetEnvVarsError,
)


class YamlSettingsLoader:
    """Loads RunnerSettings from an optional YAML file."""

    def __init__(self, observer: ConfigObserver) -> None:
        self._observer = observer

    def load(self, path: Path | None) -> RunnerSettings:
        """
        Return settings from *path*, or the defaults when *path* is None.

        Raises:
            SettingsReadError: if *path* does not exist or cannot be read.
            SettingsValidationError: if the file is not valid YAML or violates the schema.
            UnsetEnvVarsError: if any ${ENV_VAR} reference without default is unset.
        """
        if path is None:
            settings = RunnerSettings()
        else:
            raw = _parse_yaml(path=path)
            _check_missing_env_vars(raw=raw, path=path)
            settings = _build_settings(raw=interpolate(raw), path=path)
        self._observer.config_loaded(path=path)
        return settings


def _parse_yaml(path: Path) -> Any:
    try:
        with path.open("r", encoding="utf-8") as fh:
            raw = yaml.safe_load(fh)
    except OSError as exc:
        raise SettingsReadError(path=path, reason=exc.strerror or str(exc)) from exc
    except yaml.YAMLError as exc:
        raise SettingsValidationError(path=path, reason=f"invalid YAML: {exc}") from exc

    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise SettingsValidationError(path=path, reason="top level must be a mapping")
    return raw


def _check_missing_env_vars(raw: Any, path: Path) -> None:
    missing = collect_missing_vars(raw)
    if missing:
        raise UnsetEnvVarsError(path=path, missing_vars=missing)


def _build_settings(raw: Any, path: Path) -> RunnerSettings:
    try:
        settings = RunnerSettings.model_validate(raw)
    except ValidationError as exc:
        raise SettingsValidationError(path=path, reason=str(exc)) from exc
    return settings.model_copy(
        update={"user_agents_dir": settings.user_agents_dir.expanduser()}
    )
