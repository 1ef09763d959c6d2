"""Exception taxonomy for the structured value model.

None of these subclass ValueError, so they pass through pydantic validators
unchanged instead of being folded into a ValidationError.
"""

from __future__ import annotations


class CtrlplaneModelError(Exception):
    """Base class for filter and value conversion failures."""


class MalformedFilterError(CtrlplaneModelError):
    """A filter tree or wire payload is not well-formed."""

    def __init__(self, message: str, path: str = "filter") -> None:
        self.path = path
        super().__init__(f"{path}: {message}")


class FilterNotFoundError(CtrlplaneModelError):
    """A filter identity could not be resolved within the retry budget."""

    def __init__(self, identity: str, retries: int) -> None:
        self.identity = identity
        self.retries = retries
        super().__init__(
            f"resource filter with ID {identity} not found in registry after "
            f"{retries} retries; if it is declared in the same configuration, "
            "add an explicit dependency on the filter so it is created first"
        )


class UnsupportedValueTypeError(CtrlplaneModelError):
    """A dynamic value contains a type the tagged union cannot represent."""

    def __init__(self, type_name: str, path: str = "value") -> None:
        self.type_name = type_name
        self.path = path
        super().__init__(f"{path}: unsupported value type {type_name}")


class InconsistentUnionError(CtrlplaneModelError):
    """Both or neither of literal/reference were populated."""
