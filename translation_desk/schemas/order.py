from datetime import date

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

from translation_desk.models.enums import OrderStatus


class CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class StatusHistoryResponse(CamelModel):
    status: str
    notes: str | None
    changed_by: str
    created_at: str


class OrderResponse(CamelModel):
    id: str
    customer_name: str
    customer_email: str
    customer_phone: str | None
    customer_address: str | None
    source_language: str
    target_language: str
    document_type: str
    urgency: str
    hard_copy: bool
    specialization: str | None
    additional_notes: str | None
    number_of_pages: str
    original_file_name: str
    file_url: str
    file_size: int
    file_type: str
    status: str
    estimated_price: float | None
    final_price: float | None
    estimated_delivery: str | None
    actual_delivery: str | None
    admin_notes: str | None
    assigned_to: str | None
    version: int
    created_at: str
    updated_at: str
    status_history: list[StatusHistoryResponse] = []


class Pagination(BaseModel):
    page: int
    limit: int
    total: int
    pages: int


class OrderListResponse(BaseModel):
    requests: list[OrderResponse]
    pagination: Pagination


class _UpdateModel(CamelModel):
    @field_validator("*", mode="before")
    @classmethod
    def _blank_is_null(cls, value):
        if isinstance(value, str) and not value.strip():
            return None
        return value


class OrderUpdate(_UpdateModel):
    status: OrderStatus | None = None
    estimated_price: float | None = None
    final_price: float | None = None
    estimated_delivery: date | None = None
    actual_delivery: date | None = None
    admin_notes: str | None = None
    assigned_to: str | None = None
    version: int | None = None

    @field_validator("status")
    @classmethod
    def _status_not_null(cls, value):
        if value is None:
            raise ValueError("status cannot be cleared")
        return value


class StatusUpdate(_UpdateModel):
    status: OrderStatus
    notes: str | None = None
    version: int | None = None


class IntakeResponse(CamelModel):
    success: bool = True
    request_id: str
    estimated_price: float
    message: str = "Translation request submitted successfully"


class UploadResponse(CamelModel):
    success: bool = True
    url: str
    file_name: str
    file_size: int
    file_type: str


class QuoteResponse(CamelModel):
    pages: int
    urgency: str
    hard_copy: bool
    rate_per_page: int
    hard_copy_fee: int
    total: int
