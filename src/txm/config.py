"""Configuration — backend identifiers, defaults, and the key=value file.

Resolves the preferred backend from (highest priority first):
  1. the TXM_DEFAULT_BACKEND environment variable,
  2. the first existing file of ~/.txm/config, ~/.txm/config.txt, ~/.txmrc,
  3. compiled-in defaults (tmux, fallback order tmux → screen → zellij).

Loading never fails: bad values are logged and ignored. Saving writes only
the default backend and raises ConfigError on I/O problems.

Key class: Config (dataclass). Key functions: parse_backend, load_config,
save_config.
"""

from __future__ import annotations

import enum
import logging
import os
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from .errors import ConfigError, InvalidBackendName

logger = logging.getLogger(__name__)

ENV_BACKEND = "TXM_DEFAULT_BACKEND"

_INSTALL_DIRS = (
    "/usr/bin",
    "/usr/local/bin",
    "/opt/homebrew/bin",
    "/home/linuxbrew/.linuxbrew/bin",
)


class Backend(enum.Enum):
    """External multiplexer program targeted by a run."""

    TMUX = "tmux"
    ZELLIJ = "zellij"
    SCREEN = "screen"

    def __str__(self) -> str:
        return self.value

    @property
    def binary(self) -> str:
        return self.value

    @property
    def install_locations(self) -> list[str]:
        """Well-known absolute paths of this backend's executable."""
        return [f"{d}/{self.binary}" for d in _INSTALL_DIRS]


DEFAULT_BACKEND = Backend.TMUX
DEFAULT_FALLBACK_ORDER = (Backend.TMUX, Backend.SCREEN, Backend.ZELLIJ)


def parse_backend(text: str) -> Backend:
    """Parse a backend identifier, case-insensitively.

    Raises:
        InvalidBackendName: if text names no known backend.
    """
    try:
        return Backend(text.strip().lower())
    except ValueError:
        raise InvalidBackendName(text) from None


@dataclass
class Config:
    """Effective backend preference for one run.

    Attributes:
        default_backend: Preferred backend (need not be installed).
        fallback_order: Every backend exactly once, probed in this order.
        source: Where default_backend came from ("env", "file", "default").
        path: Config file that was read, if any.
    """

    default_backend: Backend = DEFAULT_BACKEND
    fallback_order: list[Backend] = field(
        default_factory=lambda: list(DEFAULT_FALLBACK_ORDER)
    )
    source: str = "default"
    path: Path | None = None

    def __post_init__(self) -> None:
        order: list[Backend] = []
        for backend in [*self.fallback_order, *DEFAULT_FALLBACK_ORDER]:
            if backend not in order:
                order.append(backend)
        self.fallback_order = order


def config_dir() -> Path:
    return Path.home() / ".txm"


def default_config_path() -> Path:
    """Path written by save_config."""
    return config_dir() / "config"


def find_config_file() -> Path | None:
    """Return the first existing config file, or None."""
    candidates = [
        default_config_path(),
        config_dir() / "config.txt",
        Path.home() / ".txmrc",
    ]
    for candidate in candidates:
        if candidate.is_file():
            return candidate
    return None


def _read_backend_from_file(path: Path) -> Backend | None:
    """Parse the backend key out of a key=value file.

    Returns None when the file sets no valid backend.
    """
    text = path.read_text(encoding="utf-8")
    backend: Backend | None = None
    for raw in text.splitlines():
        line = raw.strip()
        if not line or line.startswith("#") or "=" not in line:
            continue
        key, value = (part.strip() for part in line.split("=", 1))
        if key.lower() not in ("backend", "default_backend"):
            continue
        try:
            backend = parse_backend(value)
        except InvalidBackendName as e:
            logger.warning("Ignoring %s in %s: %s", key, path, e)
    return backend


def load_config(
    env: Mapping[str, str] | None = None,
    path: Path | None = None,
) -> Config:
    """Load the effective configuration.

    Args:
        env: Environment mapping (defaults to os.environ).
        path: Config file to read instead of the well-known locations.

    Returns:
        The resolved Config. Never raises for missing or corrupt input.
    """
    environ = os.environ if env is None else env
    config = Config()

    config_file = path if path is not None else find_config_file()
    if config_file is not None and config_file.exists():
        try:
            backend = _read_backend_from_file(config_file)
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Failed to read config file %s: %s", config_file, e)
        else:
            config.path = config_file
            if backend is not None:
                config.default_backend = backend
                config.source = "file"

    env_value = environ.get(ENV_BACKEND, "")
    if env_value:
        try:
            config.default_backend = parse_backend(env_value)
            config.source = "env"
        except InvalidBackendName as e:
            logger.warning("Ignoring %s: %s", ENV_BACKEND, e)

    logger.debug(
        "Config loaded: default=%s (source=%s), fallback=%s, file=%s",
        config.default_backend,
        config.source,
        ",".join(str(b) for b in config.fallback_order),
        config.path,
    )
    return config


def save_config(config: Config, path: Path | None = None) -> Path:
    """Persist the default backend as a commented key=value file.

    Raises:
        ConfigError: if the directory cannot be created or the file written.
    """
    target = path if path is not None else default_config_path()
    try:
        target.parent.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise ConfigError(f"Failed to create config directory {target.parent}: {e}") from e

    content = (
        "# txm configuration file\n"
        "# Set the default backend (tmux, zellij, screen)\n"
        f"default_backend={config.default_backend}\n"
    )
    try:
        target.write_text(content, encoding="utf-8")
    except OSError as e:
        raise ConfigError(f"Failed to write config file {target}: {e}") from e

    logger.debug("Saved default_backend=%s to %s", config.default_backend, target)
    return target
