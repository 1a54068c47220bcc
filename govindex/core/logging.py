"""Central logging configuration helpers for govindex."""

from __future__ import annotations

import sys
from collections.abc import Callable, Iterable
from typing import Any, TextIO

from loguru import logger

from .config import IndexerSettings

DEFAULT_LOG_FORMAT = (
    "{time:YYYY-MM-DD HH:mm:ss.SSS} | {level: <8} | "
    "{name}:{function}:{line} - {message}"
)
PACKAGE_PREFIX = "govindex."


def scope_matches(record_name: str, scope: str) -> bool:
    """
    True if a log record emitted from ``record_name`` falls under ``scope``.

    Scopes may be given relative to the package, so ``core.vote_tally`` and
    ``govindex.core.vote_tally`` select the same module.
    """
    if record_name.startswith(scope):
        return True
    return not scope.startswith(PACKAGE_PREFIX) and record_name.startswith(
        PACKAGE_PREFIX + scope
    )


def _debug_scope_filter(scopes: tuple[str, ...]) -> Callable[[Any], bool]:
    def _filter(record: Any) -> bool:
        if record["level"].name != "DEBUG":
            return False
        name = record["name"] or ""
        return any(scope_matches(name, scope) for scope in scopes)

    return _filter


def configure_logging(
    level: str,
    *,
    debug_scopes: Iterable[str] = (),
    colorize: bool = False,
    sink: TextIO | None = None,
) -> tuple[int, ...]:
    """Configure loguru with module-based debug filtering.

    The main sink stays at ``level``; ``debug_scopes`` adds a second handler
    that lets DEBUG records through for the selected modules only.
    """
    logger.remove()
    target = sink if sink is not None else sys.stderr

    handler_ids = [
        logger.add(target, level=level, format=DEFAULT_LOG_FORMAT, colorize=colorize)
    ]

    scopes = tuple(scope.strip() for scope in debug_scopes if scope.strip())
    if scopes and level.upper() not in ("DEBUG", "TRACE"):
        handler_ids.append(
            logger.add(
                target,
                level="DEBUG",
                format=DEFAULT_LOG_FORMAT,
                colorize=colorize,
                filter=_debug_scope_filter(scopes),
            )
        )

    return tuple(handler_ids)


def configure_logging_from_settings(
    settings: IndexerSettings, *, sink: TextIO | None = None
) -> tuple[int, ...]:
    return configure_logging(
        settings.log_level, debug_scopes=settings.debug_scopes, sink=sink
    )
