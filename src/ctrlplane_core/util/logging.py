"""Logger factory for the ctrlplane_core namespace."""

from __future__ import annotations

import logging

from ctrlplane_core.config import settings

_ROOT = "ctrlplane_core"
_configured = False


def _configure() -> None:
    global _configured
    root = logging.getLogger(_ROOT)
    if not root.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s")
        )
        root.addHandler(handler)
    root.setLevel(settings.CTRLPLANE_LOG_LEVEL.upper())
    _configured = True


def get_logger(name: str) -> logging.Logger:
    """Return a logger named ``ctrlplane_core.<name>``."""
    if not _configured:
        _configure()
    return logging.getLogger(f"{_ROOT}.{name}")
