"""Logging and profiling for editor operations, backed by telelog.

Nothing is configured at import time. The first logger request builds a
``telelog.Config`` from ``INPLACE_ENGINE_*`` variables; :func:`configure`
swaps in a named preset or an explicit config and drops cached loggers.

Each editor call runs inside :func:`span`, which profiles the call, tags the
log context with the path and format, and reports ``span::done`` or
``span::fail`` together with whatever outcome the editor attached.
"""

from __future__ import annotations

import os
import threading
from contextlib import ExitStack, contextmanager
from dataclasses import dataclass, field
from typing import (
    Any,
    Dict,
    Iterator,
    Mapping,
    MutableMapping,
    Optional,
    Tuple,
    cast,
)

import telelog  # type: ignore[import]

tl = cast(Any, telelog)

ENV_PREFIX = "INPLACE_ENGINE_"
DEFAULT_LOGGER_NAME = "inplace_engine"
DEFAULT_LEVEL = "WARNING"
DEFAULT_BUFFER_SIZE = 2048

_PRESETS: Dict[str, Dict[str, Any]] = {
    "development": {"level": "DEBUG", "console": True, "color": True},
    "production": {
        "level": "INFO",
        "console": False,
        "file": "inplace_engine.log",
        "buffered": True,
    },
    "performance": {
        "level": "DEBUG",
        "console": False,
        "json": True,
        "file": "inplace_engine-performance.log",
        "buffered": True,
    },
}

_LOGGER_CACHE: MutableMapping[str, Any] = {}
_CACHE_LOCK = threading.Lock()
_ACTIVE_CONFIG: Optional[Any] = None


def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    return os.getenv(f"{ENV_PREFIX}{name}", default)


def _env_flag(name: str, default: bool) -> bool:
    raw = _env(name)
    if raw is None:
        return default
    return raw.lower() in {"1", "true", "yes", "on"}


def _env_int(name: str, fallback: int) -> int:
    raw = _env(name)
    if raw is None:
        return fallback
    try:
        return int(raw)
    except ValueError:
        return fallback


def _stringify(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, bytes):
        return f"<{len(value)} bytes>"
    return repr(value) if isinstance(value, (dict, list, tuple, set)) else str(value)


def _format_pairs(data: Mapping[str, Any]) -> list[tuple[str, str]]:
    return [(str(key), _stringify(value)) for key, value in data.items()]


def options_from_env() -> Dict[str, Any]:
    """Logging options as described by the ``INPLACE_ENGINE_*`` variables."""

    return {
        "level": (_env("LOG_LEVEL") or DEFAULT_LEVEL).upper(),
        "console": not _env_flag("DISABLE_CONSOLE", False),
        "color": not _env_flag("NO_COLOR", False),
        "json": _env_flag("LOG_JSON", False),
        "file": _env("LOG_FILE") or None,
        "buffered": _env_flag("LOG_BUFFERED", False),
        "buffer_size": _env_int("LOG_BUFFER_SIZE", DEFAULT_BUFFER_SIZE),
    }


def build_config(options: Mapping[str, Any]) -> Any:
    """Translate an options mapping into a ``telelog.Config``."""

    config = tl.Config()
    config.with_min_level(str(options.get("level", DEFAULT_LEVEL)).upper())

    console = bool(options.get("console", True))
    config.with_console_output(console)
    if console:
        config.with_colored_output(bool(options.get("color", True)))
    if options.get("json"):
        config.with_json_format(True)
    if options.get("file"):
        config.with_file_output(str(options["file"]))
    if options.get("buffered"):
        config.with_buffering(True)
        size = options.get("buffer_size") or DEFAULT_BUFFER_SIZE
        config.with_buffer_size(int(size))

    # Span timings depend on it.
    config.with_profiling(True)
    return config


def preset_options(preset: str) -> Dict[str, Any]:
    key = preset.lower()
    if key == "performance_analysis":
        key = "performance"
    if key not in _PRESETS:
        known = ", ".join(sorted(_PRESETS))
        raise ValueError(f"Unknown preset '{preset}'. Known presets: {known}")
    options = dict(_PRESETS[key])
    log_file = _env("LOG_FILE")
    if log_file and "file" in options:
        options["file"] = log_file
    return options


def configure(*, config: Optional[Any] = None, preset: Optional[str] = None) -> None:
    """Replace the active telelog configuration.

    Parameters
    ----------
    config:
        Explicit ``tl.Config`` instance to adopt.
    preset:
        ``"development"``, ``"production"`` or ``"performance"``. Mutually
        exclusive with ``config``.
    """

    global _ACTIVE_CONFIG
    if config is not None and preset:
        raise ValueError("Provide either `config` or `preset`, not both.")

    if preset:
        config = build_config(preset_options(preset))
    elif config is None:
        config = build_config(options_from_env())

    with _CACHE_LOCK:
        _ACTIVE_CONFIG = config
        _LOGGER_CACHE.clear()


def reset() -> None:
    """Forget the active configuration; the next logger re-reads the environment."""

    global _ACTIVE_CONFIG
    with _CACHE_LOCK:
        _ACTIVE_CONFIG = None
        _LOGGER_CACHE.clear()


def get_logger(name: Optional[str] = None) -> Any:
    """Return a cached ``telelog.Logger`` for ``name`` (default: the engine logger)."""

    global _ACTIVE_CONFIG
    logger_name = name or _env("LOGGER") or DEFAULT_LOGGER_NAME
    with _CACHE_LOCK:
        cached = _LOGGER_CACHE.get(logger_name)
        if cached is None:
            if _ACTIVE_CONFIG is None:
                _ACTIVE_CONFIG = build_config(options_from_env())
            cached = tl.Logger.with_config(logger_name, _ACTIVE_CONFIG)
            _LOGGER_CACHE[logger_name] = cached
        return cached


def _level_method(logger: Any, level: Any) -> Tuple[Any, bool]:
    """Prefer ``<level>_with`` so structured pairs survive; fall back to text."""

    name = str(level).lower()
    with_data = getattr(logger, f"{name}_with", None)
    if with_data is not None:
        return with_data, True
    plain = getattr(logger, name, None)
    if plain is None:
        raise ValueError(f"Unsupported log level '{level}'.")
    return plain, False


def _log(logger: Any, level: Any, message: str, payload: Mapping[str, Any]) -> None:
    method, structured = _level_method(logger, level)
    if structured:
        method(message, _format_pairs(payload))
    else:
        method(f"{message} {dict(payload)}")


def record_event(
    name: str,
    *,
    level: str | Any = "info",
    data: Optional[Dict[str, Any]] = None,
    logger_name: Optional[str] = None,
) -> None:
    """Emit a structured ``event::<name>`` record."""

    payload = {"event": name, **(data or {})}
    _log(get_logger(logger_name), level, f"event::{name}", payload)


@dataclass
class SpanHandle:
    """Handed out by :func:`span`; editors attach outcome metadata to it."""

    logger: Any
    span_name: str
    component_name: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)

    def add_metadata(self, key: str, value: Any) -> None:
        self.metadata[key] = _stringify(value)

    def _payload(self, extra: Optional[Mapping[str, Any]] = None) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"span": self.span_name, **self.metadata}
        if self.component_name:
            payload["component"] = self.component_name
        if extra:
            payload.update({key: _stringify(val) for key, val in extra.items()})
        return payload

    def done(self) -> None:
        _log(self.logger, "debug", "span::done", self._payload())

    def fail(self, reason: str) -> None:
        _log(self.logger, "error", "span::fail", self._payload({"reason": reason}))


@contextmanager
def span(
    name: str,
    *,
    logger_name: Optional[str] = None,
    component: Optional[str | bool] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> Iterator[SpanHandle]:
    """Profile a block and, optionally, track it as a telelog component.

    Parameters
    ----------
    name:
        Operation name passed to ``logger.profile``, e.g. ``"yaml::set_value"``.
    logger_name:
        Target logger; defaults to the engine logger.
    component:
        ``True`` reuses ``name`` as the component; a string names it.
    metadata:
        Carried only in the ``span::done``/``span::fail`` payload, never in
        the shared logger context, so concurrent spans keep their own values.
    """

    log = get_logger(logger_name)
    component_name = name if component is True else component or None
    context = {key: _stringify(value) for key, value in (metadata or {}).items()}
    handle = SpanHandle(
        logger=log,
        span_name=name,
        component_name=cast(Optional[str], component_name),
        metadata=dict(context),
    )
    with ExitStack() as stack:
        if component_name:
            stack.enter_context(log.track_component(component_name))
        stack.enter_context(log.profile(name))
        try:
            yield handle
        except Exception as exc:
            handle.fail(str(exc))
            raise
        handle.done()


__all__ = [
    "DEFAULT_LOGGER_NAME",
    "ENV_PREFIX",
    "SpanHandle",
    "build_config",
    "configure",
    "get_logger",
    "options_from_env",
    "preset_options",
    "record_event",
    "reset",
    "span",
]
