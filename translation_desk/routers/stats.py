import asyncio

from fastapi import APIRouter, Depends
from fastapi.concurrency import run_in_threadpool
from sqlalchemy import func
from sqlalchemy.orm import Session

from translation_desk.database import get_db
from translation_desk.dependencies import require_staff
from translation_desk.models.enums import OrderStatus
from translation_desk.models.order import Order, PROVISIONAL_FILE_URL
from translation_desk.schemas.stats import RecentRequest, StatsResponse

router = APIRouter(
    prefix="/admin/stats",
    tags=["admin"],
    dependencies=[Depends(require_staff)],
)


def _count(bind, status: OrderStatus | None = None) -> int:
    with Session(bind=bind) as db:
        query = db.query(func.count(Order.id)).filter(Order.file_url != PROVISIONAL_FILE_URL)
        if status is not None:
            query = query.filter(Order.status == status.value)
        return query.scalar()


def _recent(bind, limit: int = 5) -> list[RecentRequest]:
    with Session(bind=bind) as db:
        rows = (
            db.query(Order)
            .filter(Order.file_url != PROVISIONAL_FILE_URL)
            .order_by(Order.created_at.desc())
            .limit(limit)
            .all()
        )
        return [
            RecentRequest(
                id=o.id,
                customer_name=o.customer_name,
                source_language=o.source_language,
                target_language=o.target_language,
                status=o.status,
                created_at=o.created_at,
            )
            for o in rows
        ]


def _distribution(bind) -> dict[str, int]:
    with Session(bind=bind) as db:
        rows = (
            db.query(Order.status, func.count(Order.id).label("n"))
            .filter(Order.file_url != PROVISIONAL_FILE_URL)
            .group_by(Order.status)
            .all()
        )
        return {row.status: row.n for row in rows}


@router.get("", response_model=StatsResponse)
async def get_stats(db: Session = Depends(get_db)):
    # Independent read-only aggregates, each on its own session.
    bind = db.get_bind()
    total, pending, in_progress, completed, recent, distribution = await asyncio.gather(
        run_in_threadpool(_count, bind),
        run_in_threadpool(_count, bind, OrderStatus.PENDING),
        run_in_threadpool(_count, bind, OrderStatus.IN_PROGRESS),
        run_in_threadpool(_count, bind, OrderStatus.COMPLETED),
        run_in_threadpool(_recent, bind),
        run_in_threadpool(_distribution, bind),
    )
    return StatsResponse(
        total_requests=total,
        pending_requests=pending,
        in_progress_requests=in_progress,
        completed_requests=completed,
        recent_requests=recent,
        status_distribution=distribution,
    )
