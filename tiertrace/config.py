"""Project settings read from the ``[tool.tiertrace]`` table of ``pyproject.toml``."""

from __future__ import annotations

import logging
import tomllib
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from tiertrace import DEFAULT_CORE_NAME

logger = logging.getLogger("tiertrace")

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")


@dataclass(frozen=True)
class Settings:
    """Defaults for the CLI and the high-level API."""

    core_name: str = DEFAULT_CORE_NAME
    log_level: str = "WARNING"
    strict: bool = False


def _typed(table: dict[str, Any], key: str, kind: type, default: Any) -> Any:
    value = table.get(key, default)
    if not isinstance(value, kind):
        raise ValueError(
            f"[tool.tiertrace] {key} must be {kind.__name__}, got {type(value).__name__}"
        )
    return value


def load_settings(path: str | Path | None = None) -> Settings:
    """Load settings from *path* (default ``./pyproject.toml``).

    A missing file or section yields the defaults; unknown keys are ignored.

    Raises:
        ValueError: If a known key has the wrong type or an unknown log level.
    """
    p = Path(path) if path is not None else Path.cwd() / "pyproject.toml"
    if not p.exists():
        logger.debug("No config file at %s — using defaults", p)
        return Settings()

    with p.open("rb") as f:
        data = tomllib.load(f)
    table = data.get("tool", {}).get("tiertrace", {})
    if not table:
        return Settings()

    defaults = Settings()
    log_level = _typed(table, "log_level", str, defaults.log_level).upper()
    if log_level not in _LOG_LEVELS:
        raise ValueError(f"[tool.tiertrace] log_level must be one of {_LOG_LEVELS}, got {log_level!r}")
    return Settings(
        core_name=_typed(table, "core_name", str, defaults.core_name),
        log_level=log_level,
        strict=_typed(table, "strict", bool, defaults.strict),
    )
