from __future__ import annotations

import pytest

from ctrlplane_core.contracts.filters import FilterNode
from ctrlplane_core.model.registry import FilterRegistry
from ctrlplane_core.resources.base import ResourceContext
from ctrlplane_validation.stubs import build_deep_tree, build_staging_deployments


class RecordingSleep:
    """Stands in for time.sleep so retry budgets can be asserted without waiting."""

    def __init__(self) -> None:
        self.calls: list[float] = []

    def __call__(self, seconds: float) -> None:
        self.calls.append(seconds)


@pytest.fixture()
def recording_sleep() -> RecordingSleep:
    return RecordingSleep()


@pytest.fixture()
def registry(recording_sleep: RecordingSleep) -> FilterRegistry:
    return FilterRegistry(max_retries=10, retry_delay_s=1.0, sleep=recording_sleep)


@pytest.fixture()
def ctx(registry: FilterRegistry) -> ResourceContext:
    return ResourceContext(registry=registry)


@pytest.fixture()
def staging_tree() -> FilterNode:
    return build_staging_deployments()


@pytest.fixture()
def deep_tree() -> FilterNode:
    return build_deep_tree()
