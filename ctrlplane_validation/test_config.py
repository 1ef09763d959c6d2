from __future__ import annotations

import logging

import pytest

from ctrlplane_core.config import Settings
from ctrlplane_core.util.logging import get_logger


def test_settings_read_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("CTRLPLANE_FILTER_RESOLVE_RETRIES", "3")
    monkeypatch.setenv("CTRLPLANE_FILTER_RESOLVE_DELAY_S", "0.5")
    s = Settings()
    assert s.CTRLPLANE_FILTER_RESOLVE_RETRIES == 3
    assert s.CTRLPLANE_FILTER_RESOLVE_DELAY_S == 0.5


def test_get_logger_uses_package_namespace() -> None:
    logger = get_logger("registry")
    assert logger.name == "ctrlplane_core.registry"
    assert logging.getLogger("ctrlplane_core").handlers
