"""Base schema class for Sweap API payloads."""

from typing import Any

from pydantic import BaseModel, ConfigDict, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel


class SweapModel(BaseModel):
    """Base class for all Sweap API schemas.

    Python attributes are snake_case; the wire format is camelCase.
    Unknown fields sent by the API are ignored, and a JSON null for a field
    with a default yields that default.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    @field_validator("*", mode="before")
    @classmethod
    def null_as_default(cls, value: Any, info: ValidationInfo) -> Any:
        """Replace null with the field default; required fields still reject it."""
        if value is not None or info.field_name is None:
            return value
        field = cls.model_fields[info.field_name]
        if field.is_required():
            return value
        return field.get_default(call_default_factory=True)

    def to_payload(self) -> dict[str, Any]:
        """Serialize to the JSON document the API expects.

        Unset optional fields are left out of the request body.
        """
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)
