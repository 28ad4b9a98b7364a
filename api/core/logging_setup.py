"""
Root logger configuration for the API process.
"""

from __future__ import annotations

import logging

from . import settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging() -> None:
    """
    Attach one stream handler to the root logger. Safe to call repeatedly
    (reloads, tests): an existing handler is reused.
    """
    root = logging.getLogger()
    root.setLevel(settings.log_level())

    if any(getattr(h, "_admin_api_handler", False) for h in root.handlers):
        return None

    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._admin_api_handler = True  # type: ignore[attr-defined]
    root.addHandler(handler)
