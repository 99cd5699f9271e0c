"""Shared base for every record crossing the engine boundary."""

from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class WireModel(BaseModel):
    """Immutable snapshot accepting snake_case or camelCase input.

    ``model_dump(by_alias=True)`` yields the camelCase wire names.
    """

    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)
