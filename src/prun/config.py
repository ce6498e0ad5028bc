"""Global runner configuration: TOML loading and override merging."""

from __future__ import annotations

import logging as py_logging
import os
import sys
from collections.abc import Mapping
from pathlib import Path

from pydantic import BaseModel, ConfigDict, ValidationError, field_validator
from typing_extensions import TypedDict

from prun.errors import ExitCode, PrunError

if sys.version_info >= (3, 11):
    import tomllib
else:  # pragma: no cover
    import tomli as tomllib

logger = py_logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("~/.config/prun/config.toml").expanduser()
DEFAULT_WINDOW_ID = "1"
TMUX_WINDOW_ENV = "PRUN_TMUX_WINDOW"

_CONFIG_KEYS = ("window_id", "default_pre", "default_post")


class ConfigOptions(TypedDict, total=False):
    window_id: str | int
    default_pre: str
    default_post: str


class GlobalConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    window_id: str = DEFAULT_WINDOW_ID
    default_pre: str = ""
    default_post: str = ""

    @field_validator("window_id")
    @classmethod
    def _validate_window(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Window id must not be blank")
        return value.strip()


def get_config_path(path: str | Path | None = None) -> Path:
    if path is None:
        return DEFAULT_CONFIG_PATH
    return Path(path).expanduser()


def merge_config(config: GlobalConfig, overrides: Mapping[str, object] | None) -> GlobalConfig:
    """Return ``config`` with every known, non-None override applied."""
    if not overrides:
        return config
    update: dict[str, str] = {}
    for key in _CONFIG_KEYS:
        value = overrides.get(key)
        if value is None:
            continue
        if key == "window_id" and isinstance(value, int) and not isinstance(value, bool):
            value = str(value)
        if not isinstance(value, str):
            raise PrunError(
                f"Invalid config option: {key}",
                code=ExitCode.CONFIG_ERROR,
                hint=f"{key} must be a string.",
            )
        update[key] = value
    if not update:
        return config
    try:
        return GlobalConfig.model_validate({**config.model_dump(), **update})
    except ValidationError as exc:
        raise PrunError(
            "Invalid runner configuration.",
            code=ExitCode.CONFIG_ERROR,
            hint="window_id must be a non-empty tmux target.",
        ) from exc


def _sanitize(raw: dict[str, object]) -> GlobalConfig:
    cfg = GlobalConfig()
    accepted: dict[str, str] = {}

    window_id = raw.get("window_id")
    if isinstance(window_id, int) and not isinstance(window_id, bool):
        window_id = str(window_id)
    if isinstance(window_id, str) and window_id.strip():
        accepted["window_id"] = window_id

    for key in ("default_pre", "default_post"):
        value = raw.get(key)
        if isinstance(value, str):
            accepted[key] = value

    env_window = os.getenv(TMUX_WINDOW_ENV, "").strip()
    if env_window:
        accepted["window_id"] = env_window

    return merge_config(cfg, accepted)


def load_config(path: str | Path | None = None) -> GlobalConfig:
    resolved = get_config_path(path)
    if not resolved.exists():
        logger.debug("No config file at %s; using defaults", resolved)
        return _sanitize({})
    try:
        with resolved.open("rb") as handle:
            raw = tomllib.load(handle)
    except (tomllib.TOMLDecodeError, OSError):
        logger.warning("Ignoring unreadable config file %s", resolved, exc_info=True)
        return _sanitize({})
    return _sanitize(raw)
