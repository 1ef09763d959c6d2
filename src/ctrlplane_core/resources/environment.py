"""Environment payload mapping.

An environment selects its resources either with an inline filter or by
pointing at a registered resource filter through ``resource_filter_id``.
"""

from __future__ import annotations

from typing import Any, Mapping, Optional

from pydantic import BaseModel, Field

from ctrlplane_core.contracts.errors import FilterNotFoundError, MalformedFilterError
from ctrlplane_core.contracts.filters import FilterNode
from ctrlplane_core.contracts.result import Diagnostic, ResourceResult, diagnostic
from ctrlplane_core.model.filter_codec import check_depth, decode, encode
from ctrlplane_core.resources.base import Resource
from ctrlplane_core.util.logging import get_logger

logger = get_logger("resources.environment")


class EnvironmentConfig(BaseModel):
    name: str
    system_id: str
    description: str = ""
    metadata: dict[str, str] = Field(default_factory=dict)
    resource_filter: Optional[FilterNode] = None
    resource_filter_id: Optional[str] = None


class EnvironmentState(EnvironmentConfig):
    id: str


class EnvironmentResource(Resource):
    @property
    def name(self) -> str:
        return "environment"

    @property
    def description(self) -> str:
        return "Maps environment configuration onto API requests and back"

    def _selected_filter(self, config: EnvironmentConfig) -> Optional[FilterNode]:
        if config.resource_filter_id:
            logger.debug(f"Resolving resource_filter_id={config.resource_filter_id}")
            return self.registry.resolve(config.resource_filter_id)
        return config.resource_filter

    def build_request(self, config: EnvironmentConfig) -> ResourceResult[dict[str, Any]]:
        if config.resource_filter is not None and config.resource_filter_id:
            return ResourceResult.failure(
                diagnostic(
                    "conflicting_filter",
                    "Only one of resource_filter or resource_filter_id may be specified.",
                    resource_filter_id=config.resource_filter_id,
                )
            )

        body: dict[str, Any] = {
            "name": config.name,
            "systemId": config.system_id,
            "description": config.description,
        }
        if config.metadata:
            body["metadata"] = dict(config.metadata)

        try:
            node = self._selected_filter(config)
            if node is not None:
                check_depth(node)
                body["resourceFilter"] = encode(node)
        except FilterNotFoundError as e:
            return ResourceResult.failure(Diagnostic.from_error("filter_not_found", e))
        except MalformedFilterError as e:
            return ResourceResult.failure(Diagnostic.from_error("malformed_filter", e))

        return ResourceResult.success(data=body)

    def state_from_response(
        self, config: EnvironmentConfig, body: Mapping[str, Any]
    ) -> ResourceResult[EnvironmentState]:
        """Rebuild typed state from an API response for ``config``."""
        env_id = body.get("id")
        if not env_id:
            return ResourceResult.failure(
                diagnostic("empty_response", "Empty environment ID in response")
            )

        resource_filter: Optional[FilterNode] = None
        raw_filter = body.get("resourceFilter")
        # Entities that reference a shared filter keep the reference in state.
        if raw_filter is not None and not config.resource_filter_id:
            try:
                resource_filter = decode(raw_filter)
            except MalformedFilterError as e:
                return ResourceResult.failure(Diagnostic.from_error("malformed_filter", e))

        metadata = body.get("metadata") or {}
        return ResourceResult.success(
            data=EnvironmentState(
                id=str(env_id),
                name=body.get("name", config.name),
                system_id=body.get("systemId", config.system_id),
                description=body.get("description") or "",
                metadata=dict(metadata),
                resource_filter=resource_filter,
                resource_filter_id=config.resource_filter_id,
            )
        )
