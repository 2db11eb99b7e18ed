"""Environment-driven defaults for the editors and the masking client."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from .telemetry import ENV_PREFIX

DEFAULT_ENCODING = "utf-8"
DEFAULT_MASK_TOKEN = "*****"
DEFAULT_INI_COMMENT_PREFIXES: tuple[str, ...] = (";", "#")


def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    return os.getenv(f"{ENV_PREFIX}{name}", default)


def _env_list(name: str, default: tuple[str, ...]) -> tuple[str, ...]:
    raw = _env(name)
    if raw is None:
        return default
    values = tuple(item.strip() for item in raw.split(",") if item.strip())
    return values or default


@dataclass(frozen=True, slots=True)
class EngineSettings:
    """Snapshot of the tunables read from ``INPLACE_ENGINE_*`` variables."""

    default_encoding: str = DEFAULT_ENCODING
    mask_token: str = DEFAULT_MASK_TOKEN
    ini_comment_prefixes: tuple[str, ...] = DEFAULT_INI_COMMENT_PREFIXES

    def __post_init__(self) -> None:
        if not self.default_encoding:
            raise ValueError("default_encoding cannot be empty")
        if not self.mask_token:
            raise ValueError("mask_token cannot be empty")
        object.__setattr__(
            self, "ini_comment_prefixes", tuple(self.ini_comment_prefixes)
        )


def load_settings() -> EngineSettings:
    """Read a fresh settings snapshot from the environment."""

    return EngineSettings(
        default_encoding=_env("DEFAULT_ENCODING") or DEFAULT_ENCODING,
        mask_token=_env("MASK_TOKEN") or DEFAULT_MASK_TOKEN,
        ini_comment_prefixes=_env_list(
            "INI_COMMENT_PREFIXES", DEFAULT_INI_COMMENT_PREFIXES
        ),
    )


__all__ = [
    "DEFAULT_ENCODING",
    "DEFAULT_INI_COMMENT_PREFIXES",
    "DEFAULT_MASK_TOKEN",
    "EngineSettings",
    "load_settings",
]
