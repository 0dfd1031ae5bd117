"""
Process-wide logging setup.
"""

from __future__ import annotations

import asyncio
import logging

from . import config

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"

logger = logging.getLogger(__name__)


def configure_logging() -> None:
    logging.basicConfig(level=config.log_level(), format=LOG_FORMAT)


def install_loop_exception_guard(loop: asyncio.AbstractEventLoop) -> None:
    """
    Log failures from tasks nobody awaits instead of letting them vanish.

    The process keeps running: every operation here is a single statement,
    so there is no half-finished multi-step state to protect.
    """

    def _handle(_: asyncio.AbstractEventLoop, context: dict) -> None:
        exc = context.get("exception")
        message = context.get("message", "unhandled asyncio error")
        if exc is not None:
            logger.error("loop_exception message=%s", message, exc_info=exc)
        else:
            logger.error("loop_exception message=%s", message)

    loop.set_exception_handler(_handle)
