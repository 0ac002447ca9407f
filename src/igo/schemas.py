"""Shared Pydantic bases for camelCase API payloads."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, model_validator
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """snake_case attributes internally, camelCase keys on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class CommandModel(CamelModel):
    """Request body. Only fields present in the JSON end up in ``model_fields_set``."""

    @model_validator(mode="before")
    @classmethod
    def require_object(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            raise ValueError("Request body must be a JSON object")
        return data
