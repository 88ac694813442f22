from __future__ import annotations

import logging
from typing import Any

from routeguard.state import SecurityState

LOG_PREFIX = "[routeguard]"


def trace(logger: logging.Logger, state: SecurityState, msg: str, *args: Any) -> None:
    """Engine trace messages; silent unless debugging is turned on."""
    if state.debug:
        logger.info(f"{LOG_PREFIX} {msg}", *args)
