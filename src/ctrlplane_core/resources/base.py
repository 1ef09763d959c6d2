"""Base class shared by all resource adapters."""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field

from ctrlplane_core.model.registry import FilterRegistry, get_registry


@dataclass
class ResourceContext:
    """Collaborators a resource needs; the registry is injectable for tests."""

    registry: FilterRegistry = field(default_factory=get_registry)


class Resource(ABC):
    """A configuration entity that maps typed config onto API payloads."""

    def __init__(self, ctx: ResourceContext | None = None) -> None:
        self.ctx = ctx or ResourceContext()

    @property
    @abstractmethod
    def name(self) -> str: ...

    @property
    @abstractmethod
    def description(self) -> str: ...

    @property
    def registry(self) -> FilterRegistry:
        return self.ctx.registry
