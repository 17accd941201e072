"""Telemetry services built directly on structlog.

This module exposes a narrow surface area for the rest of the engine:

``configure(...)`` -- override or preset the structlog configuration
``get_logger(name)`` -- fetch (and cache) a configured logger
``record_event(name, ...)`` -- emit structured events at a chosen level
``span(name, ...)`` -- context manager marrying timing + component tracking
"""

from __future__ import annotations

import logging
import os
import sys
import time
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import Any, Dict, Iterator, MutableMapping, Optional, TextIO, cast

import structlog

ENV_PREFIX = "MODAL_ENGINE_"
DEFAULT_LOGGER_NAME = os.getenv(f"{ENV_PREFIX}LOGGER", "modal_engine")
DEFAULT_LOG_FILE = os.getenv(f"{ENV_PREFIX}LOG_FILE", "")

_LEVELS: Dict[str, int] = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}
# structlog passes the message positionally as ``event``.
_RESERVED_KEYS = frozenset({"event"})

_LOGGER_CACHE: MutableMapping[str, Any] = {}
_ACTIVE_CONFIG: Optional["TelemetryConfig"] = None
_OPEN_STREAMS: list[TextIO] = []


@dataclass(slots=True)
class TelemetryConfig:
    """Resolved logging options handed to ``structlog.configure``."""

    min_level: str = "INFO"
    console: bool = True
    colors: bool = True
    json: bool = False
    log_file: str = ""


def _env(name: str, default: Optional[str] = None) -> Optional[str]:
    return os.getenv(f"{ENV_PREFIX}{name}", default)


def _env_flag(name: str, default: bool) -> bool:
    raw = _env(name)
    if raw is None:
        return default
    return raw.lower() in {"1", "true", "yes", "on"}


def _stringify(value: Any) -> str:
    if isinstance(value, str):
        return value
    return repr(value) if isinstance(value, (dict, list, tuple, set)) else str(value)


def _format_pairs(data: Dict[str, Any]) -> Dict[str, str]:
    pairs: Dict[str, str] = {}
    for key, value in data.items():
        name = str(key)
        if name in _RESERVED_KEYS:
            name = f"{name}_data"
        pairs[name] = _stringify(value)
    return pairs


def _resolve_level() -> str:
    level = (_env("LOG_LEVEL") or "INFO").upper()
    if level not in _LEVELS:
        raise ValueError(f"Unknown log level '{level}'.")
    return level


def _build_preset_config(preset: str) -> TelemetryConfig:
    key = preset.lower()

    if key == "development":
        return TelemetryConfig(min_level="DEBUG", console=True, colors=True)
    if key == "production":
        log_path = _env("LOG_FILE", DEFAULT_LOG_FILE) or "modal_engine.log"
        return TelemetryConfig(
            min_level="INFO", console=False, colors=False, log_file=log_path
        )
    if key in {"performance", "performance_analysis"}:
        log_path = _env("LOG_FILE", DEFAULT_LOG_FILE) or "modal_engine-performance.log"
        return TelemetryConfig(
            min_level="DEBUG",
            console=False,
            colors=False,
            json=True,
            log_file=log_path,
        )
    raise ValueError(f"Unknown preset '{preset}'.")


def _build_default_config() -> TelemetryConfig:
    return TelemetryConfig(
        min_level=_resolve_level(),
        console=not _env_flag("DISABLE_CONSOLE", False),
        colors=not _env_flag("NO_COLOR", False),
        json=_env_flag("LOG_JSON", False),
        log_file=_env("LOG_FILE") or DEFAULT_LOG_FILE,
    )


def _close_streams() -> None:
    while _OPEN_STREAMS:
        _OPEN_STREAMS.pop().close()


def _logger_factory(config: TelemetryConfig) -> Any:
    if config.log_file:
        stream = open(config.log_file, "a", encoding="utf-8")
        _OPEN_STREAMS.append(stream)
        return structlog.WriteLoggerFactory(file=stream)
    if config.console:
        return structlog.PrintLoggerFactory(file=sys.stderr)
    return structlog.ReturnLoggerFactory()


def _apply(config: TelemetryConfig) -> None:
    if config.json:
        renderer: Any = structlog.processors.JSONRenderer()
    else:
        renderer = structlog.dev.ConsoleRenderer(colors=config.colors)

    _close_streams()
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            _LEVELS[config.min_level.upper()]
        ),
        logger_factory=_logger_factory(config),
        cache_logger_on_first_use=False,
    )


def configure(
    *, config: Optional[TelemetryConfig] = None, preset: Optional[str] = None
) -> None:
    """Override the active structlog configuration.

    Parameters
    ----------
    config:
        Explicit ``TelemetryConfig`` instance to adopt.
    preset:
        Named preset (``"development"``, ``"production"``, ``"performance"``).
        ``config`` and ``preset`` are mutually exclusive.
    """

    global _ACTIVE_CONFIG
    if config and preset:
        raise ValueError("Provide either `config` or `preset`, not both.")

    if preset:
        config = _build_preset_config(preset)
    elif config is None:
        config = _build_default_config()

    _apply(config)
    _ACTIVE_CONFIG = config
    _LOGGER_CACHE.clear()


def active_config() -> TelemetryConfig:
    if _ACTIVE_CONFIG is None:
        configure()
    return cast(TelemetryConfig, _ACTIVE_CONFIG)


def get_logger(name: Optional[str] = None) -> Any:
    """Return a cached structlog logger bound to ``name``."""

    logger_name = name or DEFAULT_LOGGER_NAME
    if logger_name not in _LOGGER_CACHE:
        _LOGGER_CACHE[logger_name] = structlog.get_logger().bind(logger=logger_name)
    return _LOGGER_CACHE[logger_name]


def _resolve_level_method(logger: Any, level: Any) -> Any:
    name = str(level).lower()
    attr = getattr(logger, name, None)
    if attr is None or name.upper() not in _LEVELS:
        raise ValueError(f"Unsupported log level '{level}'.")
    return attr


def record_event(
    name: str,
    *,
    level: str = "info",
    data: Optional[Dict[str, Any]] = None,
    logger_name: Optional[str] = None,
) -> None:
    """Emit a structured ``event::<name>`` line with ``data`` as key/values."""

    log = get_logger(logger_name)
    method = _resolve_level_method(log, level)
    method(f"event::{name}", **_format_pairs(data or {}))


@dataclass
class SpanHandle:
    """Handle returned from ``span`` for optional metadata updates."""

    logger: Any
    span_name: str
    component_name: Optional[str] = None
    metadata: Dict[str, Any] = field(default_factory=dict)
    duration_ms: Optional[float] = None

    def add_metadata(self, key: str, value: Any) -> None:
        self.metadata[key] = _stringify(value)

    def _emit(
        self, level: str, message: str, extra: Optional[Dict[str, Any]] = None
    ) -> None:
        payload = dict(self.metadata)
        if extra:
            payload.update(extra)
        method = _resolve_level_method(self.logger, level)
        method(message, **_format_pairs(payload))

    def fail(self, reason: str) -> None:
        self._emit("error", "span::fail", {"reason": reason})

    def cancel(self, reason: str | None = None) -> None:
        extra = {"reason": reason} if reason else None
        self._emit("warning", "span::cancel", extra)


@contextmanager
def span(
    name: str,
    *,
    logger_name: Optional[str] = None,
    component: Optional[str | bool] = None,
    metadata: Optional[Dict[str, Any]] = None,
) -> Iterator[SpanHandle]:
    """Time a code block and (optionally) tag it with a component.

    Parameters
    ----------
    name:
        Operation name, bound as ``span`` on every line logged inside the block.
    logger_name:
        Target logger; defaults to the engine logger.
    component:
        If ``True`` use the same name as the span; if a string, use it as the
        component identifier.
    metadata:
        Optional metadata bound as context variables for the duration of the
        block and repeated on the closing ``span::end`` line.
    """

    log = get_logger(logger_name)
    component_name = None
    if component is True:
        component_name = name
    elif isinstance(component, str):
        component_name = component

    metadata_payload = _format_pairs(metadata or {})
    context: Dict[str, str] = {"span": name, **metadata_payload}
    if component_name:
        context["component"] = component_name

    handle = SpanHandle(
        logger=log,
        span_name=name,
        component_name=component_name,
        metadata=dict(metadata_payload),
    )
    started = time.perf_counter()
    with structlog.contextvars.bound_contextvars(**context):
        try:
            yield handle
        except Exception as exc:
            handle.fail(str(exc))
            raise
        finally:
            handle.duration_ms = round((time.perf_counter() - started) * 1000.0, 3)
            log.debug(
                "span::end",
                duration_ms=handle.duration_ms,
                **_format_pairs(
                    {k: v for k, v in handle.metadata.items() if k not in context}
                ),
            )


# Initialize the module-level logger once the config is ready.
configure()
logger = get_logger()

__all__ = [
    "SpanHandle",
    "TelemetryConfig",
    "active_config",
    "configure",
    "get_logger",
    "record_event",
    "span",
    "logger",
]
