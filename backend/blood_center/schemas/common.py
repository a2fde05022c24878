"""Common Schemas — camelCase bases and the update/delete result envelopes."""

from pydantic import AliasGenerator, BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelInput(BaseModel):
    """Request body accepting camelCase or snake_case keys."""
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True,
        str_strip_whitespace=True,
    )


class CamelOutput(BaseModel):
    """Response model read from ORM attributes, serialized as camelCase."""
    model_config = ConfigDict(
        from_attributes=True,
        alias_generator=AliasGenerator(serialization_alias=to_camel),
    )


class UpdateResult(CamelOutput):
    matched_count: int
    modified_count: int


class DeleteResult(CamelOutput):
    deleted_count: int


class CreatedResponse(BaseModel):
    message: str
    id: str
