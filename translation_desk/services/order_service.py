"""Order status lifecycle: creation, transitions, updates, deletion and listing.

Any status may follow any status. Every status assignment after creation
appends one ``StatusHistoryEntry``, including a transition to the status the
order already has. Concurrent edits are caught by the ``version`` column: a
caller that passes the version it read gets a ``ConflictError`` when someone
else wrote in between.
"""
import logging
import math
import uuid
from dataclasses import dataclass, field
from datetime import date

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session
from sqlalchemy.orm.exc import StaleDataError

from translation_desk.errors import ConflictError, NotFoundError, StorageError
from translation_desk.models.enums import OrderStatus
from translation_desk.models.order import Order, PROVISIONAL_FILE_URL
from translation_desk.models.status_history import StatusHistoryEntry
from translation_desk.utils.text import utcnow_iso

logger = logging.getLogger(__name__)

SYSTEM_ACTOR = "System"
UPDATABLE_FIELDS = (
    "status",
    "estimated_price",
    "final_price",
    "estimated_delivery",
    "actual_delivery",
    "admin_notes",
    "assigned_to",
)


def default_status_note(status: str) -> str:
    return f"Status changed to {status}"


def _commit(db: Session) -> None:
    try:
        db.commit()
    except StaleDataError as exc:
        db.rollback()
        raise ConflictError("Order was modified by someone else; reload and try again") from exc
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Persistence failure: %s", exc)
        raise StorageError("Could not save changes") from exc


def _flush(db: Session) -> None:
    try:
        db.flush()
    except SQLAlchemyError as exc:
        db.rollback()
        logger.error("Persistence failure: %s", exc)
        raise StorageError("Could not save changes") from exc


def _load(db: Session, order_id: str, include_provisional: bool = False) -> Order:
    order = db.query(Order).filter(Order.id == order_id).first()
    if order is None or (order.is_provisional and not include_provisional):
        raise NotFoundError("Translation request not found")
    return order


def _check_version(order: Order, expected_version: int | None) -> None:
    if expected_version is not None and order.version != expected_version:
        raise ConflictError(
            f"Order is at version {order.version}, not {expected_version}; reload and try again"
        )


def _append_history(db: Session, order_id: str, status: str, notes: str | None, actor: str, now: str):
    db.add(StatusHistoryEntry(
        order_id=order_id,
        status=status,
        notes=notes,
        changed_by=actor,
        created_at=now,
    ))


def get_order(db: Session, order_id: str) -> Order:
    return _load(db, order_id)


def get_history(db: Session, order_id: str) -> list[StatusHistoryEntry]:
    """Full history for one order, newest first."""
    return (
        db.query(StatusHistoryEntry)
        .filter(StatusHistoryEntry.order_id == order_id)
        .order_by(StatusHistoryEntry.created_at.desc(), StatusHistoryEntry.id.desc())
        .all()
    )


def latest_history(db: Session, order_ids: list[str]) -> dict[str, StatusHistoryEntry]:
    if not order_ids:
        return {}
    rows = (
        db.query(StatusHistoryEntry)
        .filter(StatusHistoryEntry.order_id.in_(order_ids))
        .order_by(StatusHistoryEntry.created_at.desc(), StatusHistoryEntry.id.desc())
        .all()
    )
    latest: dict[str, StatusHistoryEntry] = {}
    for entry in rows:
        latest.setdefault(entry.order_id, entry)
    return latest


def create_order(db: Session, fields: dict) -> Order:
    """Persist a validated order at PENDING with its first history entry.

    ``fields`` holds column values; id, status, version and timestamps are
    assigned here.
    """
    now = utcnow_iso()
    order = Order(
        id=str(uuid.uuid4()),
        **fields,
        status=OrderStatus.PENDING.value,
        created_at=now,
        updated_at=now,
    )
    db.add(order)
    _flush(db)
    _append_history(db, order.id, OrderStatus.PENDING.value, "Request submitted", SYSTEM_ACTOR, now)
    _commit(db)
    db.refresh(order)
    return order


def attach_file(db: Session, order_id: str, file_url: str) -> Order:
    """Replace the provisional file reference once the upload is filed."""
    order = _load(db, order_id, include_provisional=True)
    order.file_url = file_url
    order.updated_at = utcnow_iso()
    _commit(db)
    db.refresh(order)
    return order


def transition_status(
    db: Session,
    order_id: str,
    new_status: OrderStatus | str,
    notes: str | None = None,
    actor: str = SYSTEM_ACTOR,
    expected_version: int | None = None,
) -> Order:
    status = OrderStatus(new_status).value
    order = _load(db, order_id)
    _check_version(order, expected_version)

    now = utcnow_iso()
    order.status = status
    order.updated_at = now
    _append_history(db, order.id, status, notes or default_status_note(status), actor, now)
    _commit(db)
    db.refresh(order)
    logger.info("Order %s moved to %s by %s", order_id, status, actor)
    return order


def update_order(
    db: Session,
    order_id: str,
    fields: dict,
    actor: str = SYSTEM_ACTOR,
    expected_version: int | None = None,
) -> Order:
    """Overwrite the given mutable fields; keys not present are left alone.

    A key present with ``None`` clears the column. A status different from the
    stored one appends a history entry noted with ``admin_notes`` when given.
    """
    unknown = set(fields) - set(UPDATABLE_FIELDS)
    if unknown:
        raise ValueError(f"Fields not updatable: {sorted(unknown)}")

    order = _load(db, order_id)
    _check_version(order, expected_version)

    now = utcnow_iso()
    new_status = fields.get("status")
    status_changed = new_status is not None and OrderStatus(new_status).value != order.status

    for key, value in fields.items():
        if key == "status":
            if value is not None:
                order.status = OrderStatus(value).value
            continue
        if isinstance(value, date):
            value = value.isoformat()
        setattr(order, key, value)
    order.updated_at = now

    if status_changed:
        _append_history(
            db,
            order.id,
            order.status,
            fields.get("admin_notes") or default_status_note(order.status),
            actor,
            now,
        )
    _commit(db)
    db.refresh(order)
    return order


def delete_order(db: Session, order_id: str) -> None:
    """Hard-delete an order: its history rows first, then the order."""
    _load(db, order_id, include_provisional=True)
    db.query(StatusHistoryEntry).filter(StatusHistoryEntry.order_id == order_id).delete(
        synchronize_session=False
    )
    db.query(Order).filter(Order.id == order_id).delete(synchronize_session=False)
    _commit(db)
    logger.info("Order %s deleted", order_id)


@dataclass
class OrderQuery:
    page: int = 1
    limit: int | None = 10  # None means every matching row
    status: OrderStatus | None = None
    search: str | None = None
    sort_by: str = "date"
    sort_order: str = "desc"
    date_from: date | None = None
    date_to: date | None = None


@dataclass
class OrderPage:
    orders: list[Order]
    latest: dict[str, StatusHistoryEntry]
    page: int
    limit: int
    total: int
    pages: int = field(init=False)

    def __post_init__(self):
        self.pages = math.ceil(self.total / self.limit) if self.limit > 0 else 1


def list_orders(db: Session, q: OrderQuery) -> OrderPage:
    query = db.query(Order).filter(Order.file_url != PROVISIONAL_FILE_URL)

    if q.status:
        query = query.filter(Order.status == OrderStatus(q.status).value)
    if q.search:
        query = query.filter(
            Order.customer_name.icontains(q.search, autoescape=True)
            | Order.customer_email.icontains(q.search, autoescape=True)
            | Order.original_file_name.icontains(q.search, autoescape=True)
        )
    if q.date_from:
        query = query.filter(Order.created_at >= f"{q.date_from.isoformat()}T00:00:00.000Z")
    if q.date_to:
        query = query.filter(Order.created_at <= f"{q.date_to.isoformat()}T23:59:59.999Z")

    descending = q.sort_order != "asc"
    if q.sort_by == "name":
        column = Order.customer_name
    else:
        column = Order.created_at
        if q.sort_by != "date":
            descending = True
    query = query.order_by(column.desc() if descending else column.asc(), Order.id)

    total = query.count()
    if q.limit is None:
        orders = query.all()
        limit = total
    else:
        orders = query.offset((q.page - 1) * q.limit).limit(q.limit).all()
        limit = q.limit

    return OrderPage(
        orders=orders,
        latest=latest_history(db, [o.id for o in orders]),
        page=q.page,
        limit=limit,
        total=total,
    )
