"""State-only resource that registers a reusable filter under its identity."""

from __future__ import annotations

from typing import Any, Mapping, Optional, Union

from pydantic import BaseModel, ValidationError

from ctrlplane_core.contracts.errors import FilterNotFoundError, MalformedFilterError
from ctrlplane_core.contracts.filters import FilterNode, FilterType
from ctrlplane_core.contracts.result import Diagnostic, ResourceResult, diagnostic
from ctrlplane_core.model.filter_codec import check_depth, encode, identity, normalize
from ctrlplane_core.resources.base import Resource
from ctrlplane_core.util.logging import get_logger

logger = get_logger("resources.resource_filter")


class ResourceFilterState(BaseModel):
    id: str
    filter: FilterNode


class ResourceFilterResource(Resource):
    @property
    def name(self) -> str:
        return "resource_filter"

    @property
    def description(self) -> str:
        return "A state-only resource for defining reusable resource filters"

    def _validate(self, config: FilterNode) -> Optional[Diagnostic]:
        if config.type is not FilterType.comparison and not config.operator:
            return diagnostic(
                "missing_operator",
                f"The 'operator' attribute is required for filter type '{config.type.value}'.",
                type=config.type.value,
            )
        if config.type is FilterType.metadata and not config.key:
            return diagnostic(
                "missing_key",
                "The 'key' attribute is required for filter type 'metadata'.",
            )
        return None

    def _register(
        self, config: Union[FilterNode, Mapping[str, Any]], action: str
    ) -> ResourceResult[ResourceFilterState]:
        try:
            node = config if isinstance(config, FilterNode) else FilterNode.model_validate(config)
        except ValidationError as e:
            return ResourceResult.failure(
                diagnostic("invalid_config", f"Invalid resource filter: {e.errors()[0]['msg']}")
            )

        problem = self._validate(node)
        if problem is not None:
            return ResourceResult.failure(problem)

        try:
            check_depth(node)
            node = normalize(node)
            # Encoding checks operators and keys across the whole tree.
            encode(node)
        except MalformedFilterError as e:
            return ResourceResult.failure(Diagnostic.from_error("malformed_filter", e))

        filter_id = identity(node)
        self.registry.register(filter_id, node)
        logger.info(
            f"{action} resource filter id={filter_id} type={node.type.value} "
            f"operator={node.operator} conditions={len(node.children)} "
            f"registry_size={len(self.registry)}"
        )
        return ResourceResult.success(data=ResourceFilterState(id=filter_id, filter=node))

    def create(self, config: Union[FilterNode, Mapping[str, Any]]) -> ResourceResult[ResourceFilterState]:
        return self._register(config, "Created")

    def update(self, config: Union[FilterNode, Mapping[str, Any]]) -> ResourceResult[ResourceFilterState]:
        return self._register(config, "Updated")

    def read(self, state: ResourceFilterState) -> ResourceResult[ResourceFilterState]:
        """Re-register stored state so other entities can resolve it in this process."""
        self.registry.register(state.id, normalize(state.filter))
        logger.info(f"Re-registered existing resource filter id={state.id} during read")
        return ResourceResult.success(data=state)

    def delete(self, state: ResourceFilterState) -> ResourceResult[ResourceFilterState]:
        self.registry.remove(state.id)
        return ResourceResult.success(data=state)

    def import_state(self, filter_id: str) -> ResourceResult[ResourceFilterState]:
        try:
            node = self.registry.resolve(filter_id)
        except FilterNotFoundError as e:
            return ResourceResult.failure(Diagnostic.from_error("filter_not_found", e))
        return ResourceResult.success(data=ResourceFilterState(id=filter_id, filter=node))
