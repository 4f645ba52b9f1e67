from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Base schema exposing snake_case attributes as camelCase JSON fields."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


def reject_null(value, info):
    """Field validator for optional update fields that may be omitted but not cleared."""
    if value is None:
        raise ValueError(f"{info.field_name} may not be null")
    return value
