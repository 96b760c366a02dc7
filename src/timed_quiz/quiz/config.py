"""Configuration loader for quiz sessions."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, MutableMapping, Optional

from timed_quiz.core import config as core_config
from timed_quiz.core import workspace as workspace_mod

from .models import (
    DEFAULT_TIME_LIMIT,
    InvalidConfigurationError,
    QuizConfiguration,
)

CONFIG_FILENAME = "quiz.toml"
CONFIG_ENV = "TIMED_QUIZ_CONFIG"
ENV_PREFIX = "TIMED_QUIZ_"

_DEFAULT_LOG_LEVEL = "INFO"
_TRUE = frozenset({"1", "true", "yes", "on"})
_FALSE = frozenset({"0", "false", "no", "off"})


class QuizConfigError(RuntimeError):
    """Raised when configuration parsing or validation fails."""


@dataclass(frozen=True)
class QuizSettings:
    """Resolved settings for one ``start`` invocation.

    ``bank_path`` of ``None`` selects the bundled sample bank.
    """

    quiz: QuizConfiguration
    bank_path: Optional[Path]
    log_level: str


@dataclass(frozen=True)
class ConfigOverrides:
    """CLI-sourced values that win over env and file options."""

    time_limit_minutes: Optional[int] = None
    randomize: Optional[bool] = None
    bank_path: Optional[Path] = None
    log_level: Optional[str] = None


@dataclass(frozen=True)
class LoadResult:
    settings: QuizSettings
    layout: workspace_mod.WorkspaceLayout
    config_path: Optional[Path]


def load_config(
    *,
    config_path: Optional[Path] = None,
    overrides: Optional[ConfigOverrides] = None,
    env: Optional[Mapping[str, str]] = None,
    workspace_path: Optional[Path] = None,
) -> LoadResult:
    """Resolve settings with precedence CLI > env > TOML > defaults."""

    overrides = overrides or ConfigOverrides()
    env_map = os.environ if env is None else env

    layout = workspace_mod.ensure_workspace(env=env_map, path=workspace_path)
    requested = _resolve_config_path(
        config_path,
        env_map,
        layout.path_for("config") / CONFIG_FILENAME,
    )

    table = _default_table()
    loaded_path: Optional[Path] = None
    if requested.exists():
        loaded_path = requested
        try:
            core_config.merge_defaults(
                table, core_config.load_toml(requested)
            )
        except core_config.TomlConfigError as exc:
            raise QuizConfigError(str(exc)) from exc
    elif config_path is not None or (env_map.get(CONFIG_ENV) or "").strip():
        raise QuizConfigError(f"Config file not found: {requested}")

    minutes = _pick_first(
        overrides.time_limit_minutes,
        _env_int(env_map, "TIME_LIMIT"),
        table["session"]["time_limit_minutes"],
    )
    randomize = _pick_first(
        overrides.randomize,
        _env_bool(env_map, "RANDOMIZE"),
        table["session"]["randomize"],
    )
    if not isinstance(randomize, bool):
        raise QuizConfigError("session.randomize must be true or false.")
    try:
        quiz = QuizConfiguration(
            time_limit_minutes=minutes,  # type: ignore[arg-type]
            randomize=randomize,
        )
    except InvalidConfigurationError as exc:
        raise QuizConfigError(str(exc)) from exc

    cli_or_env_bank = _pick_first(
        overrides.bank_path, _env_string(env_map, "BANK")
    )
    if cli_or_env_bank is not None:
        bank_path = _resolve_bank_path(cli_or_env_bank, base=Path.cwd())
    else:
        # Relative paths in the file are anchored to the file itself.
        bank_path = _resolve_bank_path(
            table["bank"]["path"],
            base=loaded_path.parent if loaded_path else Path.cwd(),
        )

    log_level = _pick_first(
        overrides.log_level,
        _env_string(env_map, "LOG_LEVEL"),
        table["logging"]["level"],
    )
    if not isinstance(log_level, str) or not log_level.strip():
        raise QuizConfigError("logging.level must be a non-empty string.")

    settings = QuizSettings(
        quiz=quiz,
        bank_path=bank_path,
        log_level=log_level.strip().upper(),
    )
    return LoadResult(
        settings=settings, layout=layout, config_path=loaded_path
    )


def _default_table() -> MutableMapping[str, MutableMapping[str, object]]:
    return {
        "session": {
            "time_limit_minutes": DEFAULT_TIME_LIMIT,
            "randomize": False,
        },
        "bank": {"path": ""},
        "logging": {"level": _DEFAULT_LOG_LEVEL},
    }


def _resolve_config_path(
    explicit: Optional[Path],
    env_map: Mapping[str, str],
    default_path: Path,
) -> Path:
    if explicit is not None:
        return explicit.expanduser()
    candidate = (env_map.get(CONFIG_ENV) or "").strip()
    if candidate:
        return Path(candidate).expanduser()
    return default_path


def _resolve_bank_path(value: object, *, base: Path) -> Optional[Path]:
    if value is None:
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
        value = Path(value)
    if not isinstance(value, Path):
        raise QuizConfigError("bank.path must be a string.")
    value = value.expanduser()
    if not value.is_absolute():
        value = base / value
    return value.resolve()


def _env_string(env_map: Mapping[str, str], key: str) -> Optional[str]:
    raw = env_map.get(f"{ENV_PREFIX}{key}")
    if raw is None:
        return None
    value = raw.strip()
    return value or None


def _env_int(env_map: Mapping[str, str], key: str) -> Optional[int]:
    raw = _env_string(env_map, key)
    if raw is None:
        return None
    try:
        return int(raw)
    except ValueError as exc:
        raise QuizConfigError(
            f"{ENV_PREFIX}{key} must be an integer, got '{raw}'."
        ) from exc


def _env_bool(env_map: Mapping[str, str], key: str) -> Optional[bool]:
    raw = _env_string(env_map, key)
    if raw is None:
        return None
    lowered = raw.lower()
    if lowered in _TRUE:
        return True
    if lowered in _FALSE:
        return False
    raise QuizConfigError(
        f"{ENV_PREFIX}{key} must be a boolean (true/false), got '{raw}'."
    )


def _pick_first(*candidates: object) -> object:
    for candidate in candidates:
        if candidate is not None:
            return candidate
    return None
