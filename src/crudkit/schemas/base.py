from pydantic import BaseModel, ConfigDict, model_validator


class InputSchema(BaseModel):
    """
    Base for request payload schemas: unknown fields are dropped silently and
    surrounding whitespace is trimmed from strings.
    """

    model_config = ConfigDict(extra="ignore", str_strip_whitespace=True)


class PartialUpdateSchema(InputSchema):
    """Every field optional, but at least one has to carry a value."""

    @model_validator(mode="after")
    def at_least_one_field(self):
        if all(getattr(self, name) is None for name in type(self).model_fields):
            raise ValueError("At least one field must be provided")
        return self
