"""Customer order intake.

The order row is created before the file is filed so the upload can live under
the order's id; until then the order carries a provisional file reference and
is invisible to every read path. A storage failure removes the order again.
"""
import logging
from dataclasses import dataclass
from pathlib import PurePath

from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.orm import Session

from translation_desk.config import settings
from translation_desk.errors import StorageError, ValidationError
from translation_desk.models.order import Order, PROVISIONAL_FILE_URL
from translation_desk.schemas.intake import OrderIntake
from translation_desk.services import order_service
from translation_desk.services.notification_service import Notifier
from translation_desk.services.pricing import calculate_price
from translation_desk.services.storage_service import LocalFileStorage, is_remote_reference
from translation_desk.utils.text import sanitize_input

logger = logging.getLogger(__name__)

ALLOWED_MIME_TYPES = {
    "application/pdf",
    "application/msword",
    "application/vnd.openxmlformats-officedocument.wordprocessingml.document",
    "text/plain",
}
ALLOWED_EXTENSIONS = {".pdf", ".doc", ".docx", ".txt"}


@dataclass
class IncomingFile:
    """Either uploaded bytes or a reference to an already stored file."""

    filename: str
    content_type: str
    size: int
    content: bytes | None = None
    reference: str | None = None


def _error(field: str, message: str) -> dict:
    return {"field": field, "message": message}


def pydantic_errors_to_fields(exc: PydanticValidationError) -> list[dict]:
    fields = []
    for err in exc.errors():
        name = ".".join(str(part) for part in err["loc"]) or "body"
        if err["type"] == "missing" or err.get("input") in (None, ""):
            message = "is required"
        else:
            message = err["msg"]
        fields.append(_error(name, message))
    return fields


def check_upload(filename: str | None, content_type: str | None, size: int, field: str = "file") -> list[dict]:
    """Shape checks shared by inline uploads and the pre-upload endpoint."""
    errors = []
    if not filename:
        errors.append(_error(field, "is required"))
        return errors
    extension = PurePath(filename).suffix.lower()
    if content_type not in ALLOWED_MIME_TYPES and extension not in ALLOWED_EXTENSIONS:
        errors.append(_error(field, "file type not allowed; upload a PDF, DOC, DOCX or TXT file"))
    if size <= 0:
        errors.append(_error(field, "file is empty"))
    elif size > settings.max_upload_bytes:
        errors.append(_error(field, f"file too large (max {settings.max_upload_bytes} bytes)"))
    return errors


def validate_file(
    form: dict, upload: IncomingFile | None, storage: LocalFileStorage
) -> tuple[IncomingFile | None, list[dict]]:
    if upload is not None:
        return upload, check_upload(upload.filename, upload.content_type, upload.size)

    reference = (form.get("fileUrl") or "").strip()
    if not reference:
        return None, [_error("file", "is required")]

    errors = []
    filename = sanitize_input(form.get("originalFileName") or "")
    file_type = (form.get("fileType") or "").strip()
    raw_size = str(form.get("fileSize") or "").strip()
    size = int(raw_size) if raw_size.isdigit() else 0
    if not filename:
        errors.append(_error("originalFileName", "is required"))
    if not file_type:
        errors.append(_error("fileType", "is required"))
    if size <= 0:
        errors.append(_error("fileSize", "must be a positive number of bytes"))
    if not is_remote_reference(reference) and storage.staged(reference) is None:
        errors.append(_error("fileUrl", "must reference a file returned by the upload endpoint"))
    if errors:
        return None, errors
    return IncomingFile(filename=filename, content_type=file_type, size=size, reference=reference), []


def submit_order(
    db: Session,
    form: dict,
    upload: IncomingFile | None,
    storage: LocalFileStorage,
    notifier: Notifier,
) -> Order:
    errors: list[dict] = []
    intake = None
    try:
        intake = OrderIntake.model_validate(form)
    except PydanticValidationError as exc:
        errors.extend(pydantic_errors_to_fields(exc))
    incoming, file_errors = validate_file(form, upload, storage)
    errors.extend(file_errors)
    if errors:
        raise ValidationError(errors)

    price = calculate_price(intake.number_of_pages, intake.urgency, intake.hard_copy)
    order = order_service.create_order(db, {
        "customer_name": intake.customer_name,
        "customer_email": intake.customer_email,
        "customer_phone": intake.customer_phone,
        "customer_address": intake.customer_address,
        "source_language": intake.source_language,
        "target_language": intake.target_language,
        "document_type": intake.document_type.value,
        "urgency": intake.urgency.value,
        "hard_copy": intake.hard_copy,
        "specialization": intake.specialization,
        "additional_notes": intake.additional_notes,
        "number_of_pages": str(intake.number_of_pages),
        "estimated_price": price,
        "original_file_name": incoming.filename,
        "file_url": PROVISIONAL_FILE_URL,
        "file_size": incoming.size,
        "file_type": incoming.content_type,
    })
    logger.info("Created request %s for %s", order.id, intake.customer_email)

    stored = None
    try:
        if incoming.content is not None:
            stored = storage.save_for_order(order.id, incoming.filename, incoming.content)
        else:
            stored = storage.claim(incoming.reference, order.id)
        order = order_service.attach_file(db, order.id, stored)
    except Exception as exc:
        logger.error("File processing failed for request %s, removing it: %s", order.id, exc)
        if stored is not None and stored != incoming.reference:
            storage.delete(stored)
        order_service.delete_order(db, order.id)
        raise StorageError("File processing failed. Please try again.") from exc

    for send in (notifier.send_request_confirmation, notifier.send_admin_notification):
        try:
            send(order)
        except Exception:
            # The order is committed; mail problems are only reported.
            logger.exception("Email notification failed for request %s", order.id)

    return order
