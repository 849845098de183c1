"""Backend availability probing.

A backend is available when its executable resolves on PATH or exists at
one of its well-known install locations. Probing only looks at the
filesystem; no process is spawned.
"""

from __future__ import annotations

import logging
import os
import shutil
from collections.abc import Callable

from ..config import Backend

logger = logging.getLogger(__name__)


def is_available(
    backend: Backend,
    which: Callable[[str], str | None] = shutil.which,
    exists: Callable[[str], bool] = os.path.exists,
) -> bool:
    """Check whether backend's binary is installed."""
    found = which(backend.binary)
    if found:
        logger.debug("%s found on PATH at %s", backend, found)
        return True

    for path in backend.install_locations:
        if exists(path):
            logger.debug("%s found at %s", backend, path)
            return True

    logger.debug("%s is not installed", backend)
    return False


def probe_all(
    which: Callable[[str], str | None] = shutil.which,
    exists: Callable[[str], bool] = os.path.exists,
) -> dict[Backend, bool]:
    """Availability of every backend, probed once."""
    return {backend: is_available(backend, which, exists) for backend in Backend}


def resolve_binary(
    backend: Backend,
    which: Callable[[str], str | None] = shutil.which,
    exists: Callable[[str], bool] = os.path.exists,
) -> str:
    """Command to run for backend.

    The bare name when it resolves on PATH, else the first well-known
    install location that exists, else the bare name.
    """
    if which(backend.binary):
        return backend.binary
    for path in backend.install_locations:
        if exists(path):
            logger.debug("%s is not on PATH; using %s", backend, path)
            return path
    return backend.binary
