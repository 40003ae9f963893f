"""Observability helpers: structured logging and call tracing.

structlog is bridged onto stdlib logging so that module loggers obtained
with ``logging.getLogger`` and structlog loggers share one output stream.
"""

from __future__ import annotations

import functools
import inspect
import logging
import re
import sys
import time
from collections.abc import Callable
from typing import Any, TypeVar, cast

import structlog
from structlog.contextvars import bind_contextvars, unbind_contextvars

F = TypeVar("F", bound=Callable[..., Any])

# Sensitive data redaction pattern
_SENSITIVE_KEY_RE = re.compile(
    r"(token|key|secret|password|authorization|auth)", re.IGNORECASE
)

_SHARED_PROCESSORS: list[Any] = [
    structlog.contextvars.merge_contextvars,
    structlog.stdlib.add_logger_name,
    structlog.stdlib.add_log_level,
    structlog.processors.TimeStamper(fmt="iso"),
    structlog.processors.StackInfoRenderer(),
]

structlog.configure(
    processors=[
        structlog.stdlib.filter_by_level,
        *_SHARED_PROCESSORS,
        structlog.stdlib.PositionalArgumentsFormatter(),
        structlog.processors.format_exc_info,
        structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
    ],
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    wrapper_class=structlog.stdlib.BoundLogger,
    cache_logger_on_first_use=True,
)

logger = structlog.get_logger(__name__)


def configure_logging(level: str = "INFO", *, json_output: bool | None = None) -> None:
    """Route stdlib and structlog records through one structlog formatter.

    JSON lines when stderr is not a terminal, console rendering otherwise.
    """
    if json_output is None:
        json_output = not sys.stderr.isatty()
    renderer: Any = (
        structlog.processors.JSONRenderer() if json_output else structlog.dev.ConsoleRenderer()
    )
    formatter = structlog.stdlib.ProcessorFormatter(
        foreign_pre_chain=_SHARED_PROCESSORS,
        processors=[
            structlog.stdlib.ProcessorFormatter.remove_processors_meta,
            structlog.processors.format_exc_info,
            renderer,
        ],
    )
    handler = logging.StreamHandler()
    handler.setFormatter(formatter)

    root = logging.getLogger()
    root.handlers.clear()
    root.addHandler(handler)
    root.setLevel(level.upper())

    logging.getLogger("aiohttp.access").setLevel(logging.WARNING)


def set_correlation_id(correlation_id: str) -> None:
    bind_contextvars(correlation_id=correlation_id)


def clear_correlation_id() -> None:
    unbind_contextvars("correlation_id")


def _mask_scalar(value: Any) -> Any:
    if value is None:
        return None
    s = str(value)
    if len(s) <= 8:
        return "***"
    return f"{s[:4]}…{s[-3:]}"


def redact(key: str, value: Any) -> Any:
    """Mask ``value`` when ``key`` names a credential."""
    if _SENSITIVE_KEY_RE.search(str(key)):
        return _mask_scalar(value)
    return value


def traced(
    *,
    capture_args: bool = True,
    log_level: str = "INFO",
    warn_over_ms: float | None = None,
) -> Callable[[F], F]:
    """Decorator logging entry, duration and failure of a call.

    Keyword arguments whose name looks like a credential are masked.
    Exceptions are logged and re-raised unchanged.

    Example:
        >>> @traced(capture_args=True)
        ... async def compute(team_id: str, api_key: str) -> dict:
        ...     ...
    """

    def decorator(func: F) -> F:
        name = f"{func.__module__}.{func.__qualname__}"
        level = log_level.lower()

        def _entry_fields(args: tuple[Any, ...], kwargs: dict[str, Any]) -> dict[str, Any]:
            if not capture_args:
                return {}
            return {
                "args": [str(a)[:200] for a in args],
                "kwargs": {k: redact(k, v) for k, v in kwargs.items()},
            }

        def _finish(start: float) -> float:
            duration_ms = round((time.perf_counter() - start) * 1000, 1)
            if warn_over_ms is not None and duration_ms > warn_over_ms:
                logger.warning("slow call", function_name=name, duration_ms=duration_ms)
            else:
                logger.log(
                    logging.getLevelName(level.upper()),
                    "call finished",
                    function_name=name,
                    duration_ms=duration_ms,
                )
            return duration_ms

        if inspect.iscoroutinefunction(func):

            @functools.wraps(func)
            async def async_wrapper(*args: Any, **kwargs: Any) -> Any:
                logger.log(
                    logging.getLevelName(level.upper()),
                    "call started",
                    function_name=name,
                    **_entry_fields(args, kwargs),
                )
                start = time.perf_counter()
                try:
                    result = await func(*args, **kwargs)
                except Exception as e:
                    logger.error(
                        "call failed",
                        function_name=name,
                        duration_ms=round((time.perf_counter() - start) * 1000, 1),
                        error_type=type(e).__name__,
                        error_message=str(e),
                    )
                    raise
                _finish(start)
                return result

            return cast(F, async_wrapper)

        @functools.wraps(func)
        def sync_wrapper(*args: Any, **kwargs: Any) -> Any:
            logger.log(
                logging.getLevelName(level.upper()),
                "call started",
                function_name=name,
                **_entry_fields(args, kwargs),
            )
            start = time.perf_counter()
            try:
                result = func(*args, **kwargs)
            except Exception as e:
                logger.error(
                    "call failed",
                    function_name=name,
                    duration_ms=round((time.perf_counter() - start) * 1000, 1),
                    error_type=type(e).__name__,
                    error_message=str(e),
                )
                raise
            _finish(start)
            return result

        return cast(F, sync_wrapper)

    return decorator
