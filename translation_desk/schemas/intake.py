from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel
from pydantic_core import PydanticCustomError

from translation_desk.models.enums import DocumentType
from translation_desk.services.pricing import DeliveryTier, parse_page_count, parse_tier
from translation_desk.utils.text import is_valid_email, is_valid_phone, sanitize_input


class OrderIntake(BaseModel):
    """Customer-supplied order fields, sanitised and shape-checked."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    customer_name: str = Field(max_length=100)
    customer_email: str
    customer_phone: str | None = None
    customer_address: str | None = None
    source_language: str
    target_language: str
    document_type: DocumentType
    urgency: DeliveryTier = DeliveryTier.STANDARD
    hard_copy: bool = False
    specialization: str | None = None
    additional_notes: str | None = None
    number_of_pages: int

    @field_validator("*", mode="before")
    @classmethod
    def _sanitize(cls, value):
        if isinstance(value, str):
            value = sanitize_input(value)
            return value or None
        return value

    @field_validator("customer_email")
    @classmethod
    def _check_email(cls, value: str) -> str:
        if not is_valid_email(value):
            raise PydanticCustomError("email_format", "must be a valid email address")
        return value

    @field_validator("customer_phone")
    @classmethod
    def _check_phone(cls, value: str | None) -> str | None:
        if value is not None and not is_valid_phone(value):
            raise PydanticCustomError("phone_format", "must be a valid phone number")
        return value

    @field_validator("target_language")
    @classmethod
    def _languages_differ(cls, value: str, info: ValidationInfo) -> str:
        source = info.data.get("source_language")
        if source and source.casefold() == value.casefold():
            raise PydanticCustomError("same_language", "must differ from the source language")
        return value

    @field_validator("document_type", mode="before")
    @classmethod
    def _upper_document_type(cls, value):
        return value.upper() if isinstance(value, str) else value

    @field_validator("urgency", mode="before")
    @classmethod
    def _parse_urgency(cls, value):
        if value is None or isinstance(value, DeliveryTier):
            return DeliveryTier.STANDARD if value is None else value
        try:
            return parse_tier(value)
        except ValueError:
            raise PydanticCustomError(
                "urgency", "must be one of STANDARD, NEXT_DAY or SAME_DAY"
            ) from None

    @field_validator("hard_copy", mode="before")
    @classmethod
    def _blank_hard_copy(cls, value):
        if value is None or (isinstance(value, str) and not value.strip()):
            return False
        return value

    @field_validator("number_of_pages", mode="before")
    @classmethod
    def _parse_pages(cls, value):
        if value is None:
            return None
        pages = parse_page_count(value)
        if pages is None:
            raise PydanticCustomError("page_count", "must be a positive whole number")
        return pages
