"""
Central logging configuration for script_nav.

Call configure_logging() once from an entrypoint (tools, host server glue):

    from monitoring.logging_config import configure_logging
    configure_logging()

After that, nav_core logs (including the "nav_core.trace" outcome lines
from NavigationTracer) are visible on stdout.
"""

from __future__ import annotations

import logging
import sys


LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def configure_logging(level: int | str = logging.INFO) -> None:
    """
    Configure root logging if no handlers are attached yet.

    Args:
        level: logging level as int (logging.DEBUG) or name ("DEBUG").
    """
    if isinstance(level, str):
        level = getattr(logging, level.upper(), logging.INFO)

    root = logging.getLogger()

    # Don't duplicate handlers if someone already configured logging.
    if root.handlers:
        return

    handler = logging.StreamHandler(stream=sys.stdout)
    handler.setFormatter(logging.Formatter(fmt=LOG_FORMAT))
    root.addHandler(handler)
    root.setLevel(level)
