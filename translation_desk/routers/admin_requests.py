from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from translation_desk.database import get_db
from translation_desk.dependencies import require_staff
from translation_desk.errors import ValidationError
from translation_desk.models.enums import OrderStatus
from translation_desk.models.order import Order
from translation_desk.models.staff import StaffAccount
from translation_desk.models.status_history import StatusHistoryEntry
from translation_desk.schemas.order import (
    OrderListResponse,
    OrderResponse,
    OrderUpdate,
    Pagination,
    StatusHistoryResponse,
    StatusUpdate,
)
from translation_desk.services import order_service
from translation_desk.services.order_service import OrderQuery

router = APIRouter(
    prefix="/admin/requests",
    tags=["admin"],
    dependencies=[Depends(require_staff)],
)


def _history_to_response(entry: StatusHistoryEntry) -> StatusHistoryResponse:
    return StatusHistoryResponse(
        status=entry.status,
        notes=entry.notes,
        changed_by=entry.changed_by,
        created_at=entry.created_at,
    )


def _order_to_response(order: Order, history: list[StatusHistoryEntry]) -> OrderResponse:
    return OrderResponse(
        id=order.id,
        customer_name=order.customer_name,
        customer_email=order.customer_email,
        customer_phone=order.customer_phone,
        customer_address=order.customer_address,
        source_language=order.source_language,
        target_language=order.target_language,
        document_type=order.document_type,
        urgency=order.urgency,
        hard_copy=bool(order.hard_copy),
        specialization=order.specialization,
        additional_notes=order.additional_notes,
        number_of_pages=order.number_of_pages,
        original_file_name=order.original_file_name,
        file_url=order.file_url,
        file_size=order.file_size,
        file_type=order.file_type,
        status=order.status,
        estimated_price=order.estimated_price,
        final_price=order.final_price,
        estimated_delivery=order.estimated_delivery,
        actual_delivery=order.actual_delivery,
        admin_notes=order.admin_notes,
        assigned_to=order.assigned_to,
        version=order.version,
        created_at=order.created_at,
        updated_at=order.updated_at,
        status_history=[_history_to_response(h) for h in history],
    )


def _detail(db: Session, order: Order) -> OrderResponse:
    return _order_to_response(order, order_service.get_history(db, order.id))


def _parse_list_query(
    page: str,
    limit: str,
    status: str | None,
    search: str | None,
    sort_by: str,
    sort_order: str,
    date_from: str | None,
    date_to: str | None,
) -> OrderQuery:
    errors = []
    q = OrderQuery(search=search or None, sort_by=sort_by, sort_order=sort_order)

    if page.isdigit() and int(page) >= 1:
        q.page = int(page)
    else:
        errors.append({"field": "page", "message": "must be a positive integer"})

    if limit == "all":
        q.limit = None
    elif limit.isdigit() and int(limit) >= 1:
        q.limit = int(limit)
    else:
        errors.append({"field": "limit", "message": "must be a positive integer or 'all'"})

    if status:
        try:
            q.status = OrderStatus(status)
        except ValueError:
            errors.append({"field": "status", "message": "is not a valid status"})

    for name, raw in (("dateFrom", date_from), ("dateTo", date_to)):
        if not raw:
            continue
        try:
            value = date.fromisoformat(raw[:10])
        except ValueError:
            errors.append({"field": name, "message": "must be a calendar date (YYYY-MM-DD)"})
            continue
        if name == "dateFrom":
            q.date_from = value
        else:
            q.date_to = value

    if errors:
        raise ValidationError(errors)
    return q


@router.get("", response_model=OrderListResponse)
async def list_requests(
    page: str = "1",
    limit: str = "10",
    status: str | None = None,
    search: str | None = None,
    sort_by: str = Query("date", alias="sortBy"),
    sort_order: str = Query("desc", alias="sortOrder"),
    date_from: str | None = Query(None, alias="dateFrom"),
    date_to: str | None = Query(None, alias="dateTo"),
    db: Session = Depends(get_db),
):
    q = _parse_list_query(page, limit, status, search, sort_by, sort_order, date_from, date_to)
    result = order_service.list_orders(db, q)
    return OrderListResponse(
        requests=[
            _order_to_response(o, [result.latest[o.id]] if o.id in result.latest else [])
            for o in result.orders
        ],
        pagination=Pagination(
            page=result.page,
            limit=result.limit,
            total=result.total,
            pages=result.pages,
        ),
    )


@router.get("/{order_id}", response_model=OrderResponse)
async def get_request(order_id: str, db: Session = Depends(get_db)):
    return _detail(db, order_service.get_order(db, order_id))


@router.patch("/{order_id}", response_model=OrderResponse)
async def update_request(
    order_id: str,
    req: OrderUpdate,
    staff: StaffAccount = Depends(require_staff),
    db: Session = Depends(get_db),
):
    fields = req.model_dump(exclude_unset=True, exclude={"version"})
    order = order_service.update_order(
        db, order_id, fields, actor=staff.email, expected_version=req.version
    )
    return _detail(db, order)


@router.put("/{order_id}/status", response_model=OrderResponse)
async def update_request_status(
    order_id: str,
    req: StatusUpdate,
    staff: StaffAccount = Depends(require_staff),
    db: Session = Depends(get_db),
):
    order = order_service.transition_status(
        db, order_id, req.status, req.notes, actor=staff.email, expected_version=req.version
    )
    return _detail(db, order)


@router.delete("/{order_id}")
async def delete_request(order_id: str, db: Session = Depends(get_db)):
    order_service.delete_order(db, order_id)
    return {"message": "Translation request deleted successfully"}
