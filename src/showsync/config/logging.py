"""Root logger setup for the showsync CLI."""

from __future__ import annotations

import logging

from .env import optional_env_var
from .errors import ConfigurationError

LOG_LEVEL_VAR = "SHOWSYNC_LOG_LEVEL"
LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def resolve_log_level(*, verbose: bool = False) -> int:
    """Pick the root level: DEBUG when verbose, else ``SHOWSYNC_LOG_LEVEL``, else INFO."""

    if verbose:
        return logging.DEBUG
    raw = optional_env_var(LOG_LEVEL_VAR)
    if raw is None:
        return logging.INFO
    level = logging.getLevelNamesMapping().get(raw.upper())
    if level is None:
        raise ConfigurationError(f"{LOG_LEVEL_VAR} must be a logging level name, got {raw!r}")
    return level


def configure_logging(*, level: int | None = None, force: bool = False) -> None:
    """Initialise the root logger.

    ``level`` defaults to :func:`resolve_log_level`. Pass ``force=True`` to replace
    handlers installed earlier, e.g. when ``--verbose`` is parsed after startup.
    """

    logging.basicConfig(
        level=resolve_log_level() if level is None else level,
        format=LOG_FORMAT,
        datefmt="%H:%M:%S",
        force=force,
    )
