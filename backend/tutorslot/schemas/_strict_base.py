"""Schema bases: unknown fields are rejected and aliases are optional on input."""

from pydantic import BaseModel, ConfigDict


class StrictModel(BaseModel):
    """Base for response bodies; ``date`` style aliases are used on output."""

    model_config = ConfigDict(extra="forbid", validate_assignment=True, populate_by_name=True)


class StrictRequestModel(StrictModel):
    """Base for request bodies; surrounding whitespace is stripped from strings."""

    model_config = ConfigDict(
        extra="forbid",
        validate_assignment=True,
        populate_by_name=True,
        str_strip_whitespace=True,
    )
