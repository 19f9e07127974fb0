from fastapi import APIRouter, Depends, File, Query, Request, UploadFile
from sqlalchemy.orm import Session
from starlette.datastructures import UploadFile as FormFile

from translation_desk.config import settings
from translation_desk.database import get_db
from translation_desk.dependencies import get_notifier, get_storage
from translation_desk.errors import ValidationError
from translation_desk.schemas.order import IntakeResponse, QuoteResponse, UploadResponse
from translation_desk.services import intake_service
from translation_desk.services.intake_service import IncomingFile
from translation_desk.services.notification_service import Notifier
from translation_desk.services.pricing import (
    HARD_COPY_FEE,
    RATE_PER_PAGE,
    calculate_price,
    parse_page_count,
    parse_tier,
)
from translation_desk.services.storage_service import LocalFileStorage

router = APIRouter(tags=["intake"])


async def _read_capped(file: FormFile) -> bytes:
    # Stops reading once the cap is exceeded; the caller reports the size.
    max_bytes = settings.max_upload_bytes
    size = 0
    chunks: list[bytes] = []
    while True:
        chunk = await file.read(1024 * 1024)
        if not chunk:
            break
        size += len(chunk)
        chunks.append(chunk)
        if size > max_bytes:
            break
    return b"".join(chunks)


@router.post("/requests", response_model=IntakeResponse, status_code=201)
async def submit_request(
    request: Request,
    db: Session = Depends(get_db),
    storage: LocalFileStorage = Depends(get_storage),
    notifier: Notifier = Depends(get_notifier),
):
    form = await request.form()
    fields = {key: value for key, value in form.items() if isinstance(value, str)}

    incoming = None
    upload = form.get("file")
    if isinstance(upload, FormFile):
        content = await _read_capped(upload)
        incoming = IncomingFile(
            filename=upload.filename or "",
            content_type=upload.content_type or "",
            size=len(content),
            content=content,
        )

    order = intake_service.submit_order(db, fields, incoming, storage, notifier)
    return IntakeResponse(request_id=order.id, estimated_price=order.estimated_price)


@router.post("/upload", response_model=UploadResponse, status_code=201)
async def upload_file(
    file: UploadFile = File(...),
    storage: LocalFileStorage = Depends(get_storage),
):
    content = await _read_capped(file)
    errors = intake_service.check_upload(file.filename, file.content_type, len(content))
    if errors:
        raise ValidationError(errors)
    reference = storage.stage(file.filename, content)
    return UploadResponse(
        url=reference,
        file_name=file.filename,
        file_size=len(content),
        file_type=file.content_type or "application/octet-stream",
    )


@router.get("/quote", response_model=QuoteResponse)
async def quote(
    pages: str = "",
    urgency: str = "STANDARD",
    hard_copy: bool = Query(False, alias="hardCopy"),
):
    try:
        tier = parse_tier(urgency)
    except ValueError:
        raise ValidationError.single("urgency", "must be one of STANDARD, NEXT_DAY or SAME_DAY")
    return QuoteResponse(
        pages=parse_page_count(pages) or 0,
        urgency=tier.value,
        hard_copy=hard_copy,
        rate_per_page=RATE_PER_PAGE[tier],
        hard_copy_fee=HARD_COPY_FEE if hard_copy else 0,
        total=calculate_price(pages, tier, hard_copy),
    )
