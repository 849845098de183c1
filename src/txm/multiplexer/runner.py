"""External process boundary for the backend adapters.

CommandRunner is the only place that spawns multiplexer processes:
  - run(): child inherits stdin/stdout/stderr (attach, list, ...).
  - capture(): stdout/stderr are collected for parsing.

Tests replace it with a fake that records argument vectors.
"""

from __future__ import annotations

import logging
import subprocess
from collections.abc import Sequence

from ..errors import SubprocessFailure

logger = logging.getLogger(__name__)


class CommandRunner:
    """Run backend commands synchronously."""

    def run(self, args: Sequence[str]) -> int:
        """Run a command with inherited stdio and return its exit status."""
        logger.debug("Running: %s", " ".join(args))
        try:
            proc = subprocess.run(list(args), check=False)
        except OSError as e:
            raise SubprocessFailure(args[1] if len(args) > 1 else "run", args[0], detail=str(e)) from e
        if proc.returncode != 0:
            logger.debug("Command %s failed (rc=%d)", list(args), proc.returncode)
        return proc.returncode

    def capture(self, args: Sequence[str]) -> tuple[int, str, str]:
        """Run a command and return (returncode, stdout, stderr)."""
        logger.debug("Capturing: %s", " ".join(args))
        try:
            proc = subprocess.run(
                list(args),
                capture_output=True,
                stdin=subprocess.DEVNULL,
                check=False,
            )
        except OSError as e:
            raise SubprocessFailure(args[1] if len(args) > 1 else "run", args[0], detail=str(e)) from e
        stdout = proc.stdout.decode("utf-8", errors="replace")
        stderr = proc.stderr.decode("utf-8", errors="replace")
        if proc.returncode != 0:
            logger.debug(
                "Command %s failed (rc=%d): %s", list(args), proc.returncode, stderr.strip()
            )
        return proc.returncode, stdout, stderr
