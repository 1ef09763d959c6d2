"""Resources package."""

from ctrlplane_core.resources.base import Resource, ResourceContext
from ctrlplane_core.resources.deployment_variable import (
    DeploymentVariableResource,
    DeploymentVariableValueResource,
)
from ctrlplane_core.resources.environment import EnvironmentResource
from ctrlplane_core.resources.resource_filter import ResourceFilterResource

__all__ = [
    "Resource",
    "ResourceContext",
    "DeploymentVariableResource",
    "DeploymentVariableValueResource",
    "EnvironmentResource",
    "ResourceFilterResource",
]
