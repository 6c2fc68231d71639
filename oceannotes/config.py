"""Runtime configuration for Ocean Notes."""

import logging
import os
from collections.abc import Mapping
from typing import Final

logger = logging.getLogger(__name__)

#: Environment settings consulted for the service base URL, first defined wins.
BASE_URL_SETTINGS: Final[tuple[str, str]] = (
    "OCEANNOTES_API_BASE",
    "OCEANNOTES_BACKEND_URL",
)
#: Base URL used when none of :data:`BASE_URL_SETTINGS` is set.
DEFAULT_BASE_URL: Final[str] = "http://localhost:3001"
#: Environment setting for the per-request timeout, in seconds.
TIMEOUT_SETTING: Final[str] = "OCEANNOTES_TIMEOUT"
#: Request timeout used when :data:`TIMEOUT_SETTING` is unset or invalid.
DEFAULT_TIMEOUT: Final[float] = 10.0
#: Environment setting for the log level.
LOG_LEVEL_SETTING: Final[str] = "OCEANNOTES_LOG_LEVEL"
#: Log level used when :data:`LOG_LEVEL_SETTING` is unset.
DEFAULT_LOG_LEVEL: Final[str] = "INFO"


def resolve_base_url(environ: Mapping[str, str] | None = None) -> str:
    """
    Resolve the notes service base URL.

    The first of :data:`BASE_URL_SETTINGS` with a non-blank value wins;
    otherwise :data:`DEFAULT_BASE_URL` is used.  Trailing slashes are
    stripped so paths can be appended directly.

    Keyword Args:
        environ: Mapping to read settings from (defaults to ``os.environ``)

    Returns:
        The base URL without trailing slashes

    """
    if environ is None:
        environ = os.environ
    for name in BASE_URL_SETTINGS:
        value = environ.get(name, "").strip()
        if value:
            return value.rstrip("/")
    return DEFAULT_BASE_URL.rstrip("/")


def resolve_timeout(environ: Mapping[str, str] | None = None) -> float:
    """
    Resolve the per-request timeout in seconds.

    Keyword Args:
        environ: Mapping to read settings from (defaults to ``os.environ``)

    Returns:
        The timeout, or :data:`DEFAULT_TIMEOUT` if unset or not a positive number

    """
    if environ is None:
        environ = os.environ
    raw = environ.get(TIMEOUT_SETTING, "").strip()
    if not raw:
        return DEFAULT_TIMEOUT
    try:
        timeout = float(raw)
    except ValueError:
        logger.warning(f"Ignoring invalid {TIMEOUT_SETTING}={raw!r}")
        return DEFAULT_TIMEOUT
    if timeout <= 0:
        logger.warning(f"Ignoring non-positive {TIMEOUT_SETTING}={raw!r}")
        return DEFAULT_TIMEOUT
    return timeout


def resolve_log_level(environ: Mapping[str, str] | None = None) -> str:
    """Resolve the log level name, upper-cased."""
    if environ is None:
        environ = os.environ
    level = environ.get(LOG_LEVEL_SETTING, "").strip().upper()
    if not level:
        return DEFAULT_LOG_LEVEL
    if level not in logging.getLevelNamesMapping():
        logger.warning(f"Ignoring unknown {LOG_LEVEL_SETTING}={level!r}")
        return DEFAULT_LOG_LEVEL
    return level
