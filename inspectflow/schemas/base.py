"""Shared base classes for API payload schemas."""

from datetime import datetime
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    SerializationInfo,
    SerializerFunctionWrapHandler,
    model_serializer,
)
from pydantic.alias_generators import to_camel


class ApiModel(BaseModel):
    """
    Base for every payload exchanged with the backend.

    Wire names are camelCase; attributes are snake_case. Either name is
    accepted on input.

    Optional fields that are None are left out of dumps. Required fields
    that allow None (e.g. a deleted assignee) are always dumped, so a dump
    validates back into the same model.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    @model_serializer(mode="wrap")
    def _omit_absent_fields(
        self, handler: SerializerFunctionWrapHandler, info: SerializationInfo
    ) -> dict[str, Any]:
        data = handler(self)
        for name, field in type(self).model_fields.items():
            if field.is_required():
                continue
            key = field.alias if info.by_alias and field.alias else name
            if key in data and data[key] is None:
                del data[key]
        return data

    def to_payload(self) -> dict[str, Any]:
        """Dump with wire names, ready to send as JSON."""
        return self.model_dump(mode="json", by_alias=True)


class Document(ApiModel):
    """A stored record: opaque ``_id`` plus server timestamps."""

    id: str = Field(alias="_id")
    created_at: datetime
    updated_at: datetime


def strip_text(value: Any) -> Any:
    """Trim surrounding whitespace from string input."""
    if isinstance(value, str):
        return value.strip()
    return value
