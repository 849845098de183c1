"""Multiplexer abstraction package — backend-agnostic terminal multiplexer API.

Re-exports the core types and provides backend selection:
  - MultiplexerBackend: ABC for all backends.
  - MuxResult: Outcome of a successful operation.
  - probe_all(): Which backend binaries are installed.
  - select_best_backend(): Pick one backend from config + availability.
  - create_backend(): Instantiate the adapter for a backend.
"""

from __future__ import annotations

import logging
from collections.abc import Mapping

from ..config import Backend, Config
from .base import (
    OPERATIONS,
    MultiplexerBackend,
    MuxResult,
    ResizeDirection,
    SplitDirection,
)
from .probe import is_available, probe_all, resolve_binary
from .runner import CommandRunner

__all__ = [
    "OPERATIONS",
    "CommandRunner",
    "MultiplexerBackend",
    "MuxResult",
    "ResizeDirection",
    "SplitDirection",
    "backend_class",
    "create_backend",
    "is_available",
    "probe_all",
    "resolve_binary",
    "select_best_backend",
]

logger = logging.getLogger(__name__)


def select_best_backend(config: Config, availability: Mapping[Backend, bool]) -> Backend:
    """Choose the backend for this run.

    The configured default wins when available; otherwise the first
    available backend in config.fallback_order. When nothing is available
    tmux is returned and the caller reports the missing install.
    """
    if availability.get(config.default_backend, False):
        return config.default_backend

    for backend in config.fallback_order:
        if availability.get(backend, False):
            return backend

    return Backend.TMUX


def backend_class(backend: Backend) -> type[MultiplexerBackend]:
    """Adapter class implementing backend."""
    if backend is Backend.TMUX:
        from .tmux_backend import TmuxBackend

        return TmuxBackend
    if backend is Backend.ZELLIJ:
        from .zellij_backend import ZellijBackend

        return ZellijBackend
    if backend is Backend.SCREEN:
        from .screen_backend import ScreenBackend

        return ScreenBackend
    raise ValueError(f"Unknown multiplexer backend: {backend!r}")


def create_backend(
    backend: Backend,
    runner: CommandRunner | None = None,
    binary: str | None = None,
) -> MultiplexerBackend:
    """Instantiate the adapter for backend.

    binary overrides the bare executable name, e.g. an absolute install path.
    """
    mux = backend_class(backend)(runner, binary=binary)
    logger.debug("Using %s backend", backend)
    return mux
