"""Tagged value union for deployment variable defaults and overrides."""
from __future__ import annotations

from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field, model_validator

from ctrlplane_core.contracts.errors import InconsistentUnionError


# Literals (inline values)


class NullLiteral(BaseModel):
    kind: Literal["null"] = "null"


class BooleanLiteral(BaseModel):
    kind: Literal["boolean"] = "boolean"
    value: bool


class StringLiteral(BaseModel):
    kind: Literal["string"] = "string"
    value: str


class IntegerLiteral(BaseModel):
    kind: Literal["integer"] = "integer"
    value: int


class FloatLiteral(BaseModel):
    kind: Literal["float"] = "float"
    value: float


class ObjectLiteral(BaseModel):
    kind: Literal["object"] = "object"
    value: dict[str, LiteralValue] = Field(default_factory=dict)


LiteralValue = Annotated[
    Union[
        NullLiteral,
        BooleanLiteral,
        StringLiteral,
        IntegerLiteral,
        FloatLiteral,
        ObjectLiteral,
    ],
    Field(discriminator="kind"),
]


ObjectLiteral.model_rebuild()


# References (pointers to another entity's field)


class ReferenceValue(BaseModel):
    reference: str = Field(min_length=1)
    path: list[str] = Field(default_factory=list)


class TaggedValue(BaseModel):
    """Exactly one of ``literal`` or ``reference``."""

    literal: Optional[LiteralValue] = None
    reference: Optional[ReferenceValue] = None

    @model_validator(mode="after")
    def _exactly_one(self) -> TaggedValue:
        if self.literal is not None and self.reference is not None:
            raise InconsistentUnionError(
                "value has both a literal and a reference populated"
            )
        if self.literal is None and self.reference is None:
            raise InconsistentUnionError(
                "value has neither a literal nor a reference populated"
            )
        return self

    @property
    def is_reference(self) -> bool:
        return self.reference is not None
