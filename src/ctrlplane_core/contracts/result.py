"""Outcome of a resource operation: mapped data, or the coded problems that stopped it."""

from __future__ import annotations

from typing import Any, Generic, Optional, TypeVar

from pydantic import BaseModel, Field

from ctrlplane_core.contracts.errors import CtrlplaneModelError

T = TypeVar("T")

# Attributes of model errors that are copied into a diagnostic's context.
_ERROR_ATTRS = ("path", "identity", "retries", "type_name")


class Diagnostic(BaseModel):
    """A problem found while mapping configuration or API data."""

    code: str = Field(..., description="Machine-readable problem code")
    message: str = Field(..., description="Human-readable message")
    context: dict[str, Any] = Field(
        default_factory=dict, description="Where the problem was found"
    )

    @classmethod
    def from_error(cls, code: str, exc: CtrlplaneModelError) -> Diagnostic:
        context = {attr: getattr(exc, attr) for attr in _ERROR_ATTRS if hasattr(exc, attr)}
        return cls(code=code, message=str(exc), context=context)


class ResourceResult(BaseModel, Generic[T]):
    """What every resource operation returns."""

    ok: bool
    data: Optional[T] = None
    errors: list[Diagnostic] = Field(default_factory=list)

    @classmethod
    def success(cls, data: T) -> ResourceResult[T]:
        return cls(ok=True, data=data)

    @classmethod
    def failure(cls, *errors: Diagnostic) -> ResourceResult[T]:
        return cls(ok=False, errors=list(errors))

    @property
    def error_codes(self) -> list[str]:
        return [e.code for e in self.errors]


def diagnostic(code: str, message: str, **context: Any) -> Diagnostic:
    return Diagnostic(code=code, message=message, context=context)
