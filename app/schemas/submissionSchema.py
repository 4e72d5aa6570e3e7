from typing import ClassVar, Tuple
from pydantic import BaseModel, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel

from app.utils.sanitize_input import parse_list_field, stringify


class FormSubmission(BaseModel):
    """
    Base schema for web form submissions.

    Field names are snake_case and read from the form's camelCase keys. Values
    arrive as text from url-encoded and multipart posts but may be numbers,
    booleans or arrays in JSON bodies, so everything is normalized to text
    here. Fields named in LIST_FIELDS become lists of strings.
    """

    LIST_FIELDS: ClassVar[Tuple[str, ...]] = ()

    @field_validator("*", mode="before")
    @classmethod
    def normalize_value(cls, value, info: ValidationInfo):
        if info.field_name in cls.LIST_FIELDS:
            return parse_list_field(value)
        if value is None or isinstance(value, str):
            return value
        if isinstance(value, (list, tuple)):
            return ", ".join(stringify(item) for item in value)
        return stringify(value)

    @classmethod
    def list_field_aliases(cls) -> Tuple[str, ...]:
        """Wire names of the list fields, e.g. ("routeType",)."""
        return tuple(cls.model_fields[name].alias or name for name in cls.LIST_FIELDS)

    class Config:
        alias_generator = to_camel
        populate_by_name = True
        extra = "ignore"


class SubmissionResponse(BaseModel):
    """Response schema for a relayed submission."""
    message: str
