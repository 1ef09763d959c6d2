"""Deployment variables and their per-resource values."""

from __future__ import annotations

from typing import Any, Mapping, Optional

from pydantic import BaseModel

from ctrlplane_core.contracts.errors import (
    CtrlplaneModelError,
    InconsistentUnionError,
    MalformedFilterError,
)
from ctrlplane_core.contracts.filters import FilterNode
from ctrlplane_core.contracts.result import Diagnostic, ResourceResult, diagnostic
from ctrlplane_core.contracts.values import ReferenceValue
from ctrlplane_core.model.filter_codec import check_depth, decode, encode
from ctrlplane_core.model.value_codec import (
    UNSET,
    from_dynamic,
    literal_from_dynamic,
    literal_to_dynamic,
    tagged_value_from_config,
    to_dynamic,
)
from ctrlplane_core.resources.base import Resource
from ctrlplane_core.util.logging import get_logger

logger = get_logger("resources.deployment_variable")


class DeploymentVariableConfig(BaseModel):
    deployment_id: str
    key: str
    description: str = ""
    # A default of null is distinct from no default; see model_fields_set.
    default_value: Any = None

    @property
    def has_default(self) -> bool:
        return "default_value" in self.model_fields_set


class DeploymentVariableState(DeploymentVariableConfig):
    id: str


class DeploymentVariableValueConfig(BaseModel):
    variable_id: str
    priority: int = 0
    literal_value: Any = None
    reference_value: Optional[ReferenceValue] = None
    resource_filter: Optional[FilterNode] = None


class DeploymentVariableValueState(DeploymentVariableValueConfig):
    id: str


class DeploymentVariableResource(Resource):
    @property
    def name(self) -> str:
        return "deployment_variable"

    @property
    def description(self) -> str:
        return "Maps deployment variables and their default values"

    def build_request(self, config: DeploymentVariableConfig) -> ResourceResult[dict[str, Any]]:
        body: dict[str, Any] = {"key": config.key, "description": config.description}
        if config.has_default:
            try:
                literal = literal_from_dynamic(config.default_value, "default_value")
            except CtrlplaneModelError as e:
                return ResourceResult.failure(Diagnostic.from_error("unsupported_value", e))
            body["defaultValue"] = literal_to_dynamic(literal)
        return ResourceResult.success(data=body)

    def state_from_response(
        self, config: DeploymentVariableConfig, body: Mapping[str, Any]
    ) -> ResourceResult[DeploymentVariableState]:
        fields: dict[str, Any] = {
            "id": str(body.get("id", "")),
            "deployment_id": config.deployment_id,
            "key": body.get("key", config.key),
            "description": body.get("description") or "",
        }
        if "defaultValue" in body:
            try:
                literal = literal_from_dynamic(body["defaultValue"], "defaultValue")
            except CtrlplaneModelError as e:
                return ResourceResult.failure(Diagnostic.from_error("unsupported_value", e))
            fields["default_value"] = literal_to_dynamic(literal)
        return ResourceResult.success(data=DeploymentVariableState(**fields))


class DeploymentVariableValueResource(Resource):
    @property
    def name(self) -> str:
        return "deployment_variable_value"

    @property
    def description(self) -> str:
        return "Maps a literal or reference override for a deployment variable"

    def build_request(
        self, config: DeploymentVariableValueConfig
    ) -> ResourceResult[dict[str, Any]]:
        literal = config.literal_value if "literal_value" in config.model_fields_set else UNSET
        try:
            value = tagged_value_from_config(literal, config.reference_value or UNSET)
        except InconsistentUnionError as e:
            return ResourceResult.failure(diagnostic("invalid_value", str(e)))
        except CtrlplaneModelError as e:
            return ResourceResult.failure(Diagnostic.from_error("unsupported_value", e))

        body: dict[str, Any] = {
            "variableId": config.variable_id,
            "priority": config.priority,
            "value": to_dynamic(value),
        }
        if config.resource_filter is not None:
            try:
                check_depth(config.resource_filter)
                body["resourceFilter"] = encode(config.resource_filter)
            except MalformedFilterError as e:
                return ResourceResult.failure(Diagnostic.from_error("malformed_filter", e))

        logger.debug(
            f"Built variable value request variable_id={config.variable_id} "
            f"reference={value.is_reference}"
        )
        return ResourceResult.success(data=body)

    def state_from_response(
        self, config: DeploymentVariableValueConfig, body: Mapping[str, Any]
    ) -> ResourceResult[DeploymentVariableValueState]:
        fields: dict[str, Any] = {
            "id": str(body.get("id", "")),
            "variable_id": config.variable_id,
            "priority": body.get("priority", config.priority),
        }
        try:
            value = from_dynamic(body.get("value"), "value")
            raw_filter = body.get("resourceFilter")
            if raw_filter is not None:
                fields["resource_filter"] = decode(raw_filter)
        except MalformedFilterError as e:
            return ResourceResult.failure(Diagnostic.from_error("malformed_filter", e))
        except CtrlplaneModelError as e:
            return ResourceResult.failure(Diagnostic.from_error("unsupported_value", e))

        if value.reference is not None:
            fields["reference_value"] = value.reference
        else:
            fields["literal_value"] = to_dynamic(value)
        return ResourceResult.success(data=DeploymentVariableValueState(**fields))
