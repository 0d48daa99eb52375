"""Pydantic base classes shared by recipebox models."""

from collections.abc import Mapping
from types import MappingProxyType
from typing import Annotated, Any

from pydantic import AfterValidator, BaseModel, ConfigDict, PlainSerializer


def _read_only(value: Mapping[str, str]) -> Mapping[str, str]:
    return MappingProxyType(dict(value))


def _as_dict(value: Mapping[str, str]) -> dict[str, str]:
    return dict(value)


# Environment variables of a frozen model; assigning keys raises TypeError
EnvironmentMap = Annotated[
    Mapping[str, str],
    AfterValidator(_read_only),
    PlainSerializer(_as_dict, return_type=dict[str, str]),
]


def empty_environment() -> Mapping[str, str]:
    return MappingProxyType({})


class RecipeboxBaseModel(BaseModel):
    """Mutable model: project configuration and operation results.

    Unknown keys are rejected so typos in ``recipebox.yaml`` surface as
    validation errors instead of being silently ignored.
    """

    model_config = ConfigDict(
        extra="forbid",
        str_strip_whitespace=True,
        validate_assignment=True,
    )

    def to_json_dict(self) -> dict[str, Any]:
        """Every field, serialized to JSON-compatible values."""
        return self.model_dump(mode="json")


class FrozenModel(RecipeboxBaseModel):
    """Immutable model for resolved profiles and recipes."""

    model_config = ConfigDict(extra="forbid", frozen=True)
