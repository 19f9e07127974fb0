from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from translation_desk.database import get_db
from translation_desk.dependencies import get_file_proxy, require_staff
from translation_desk.services import order_service
from translation_desk.services.file_proxy import ATTACHMENT, INLINE, FileProxy

router = APIRouter(
    prefix="/admin/requests/{order_id}/file",
    tags=["files"],
    dependencies=[Depends(require_staff)],
)


@router.get("/view")
async def view_file(
    order_id: str,
    db: Session = Depends(get_db),
    proxy: FileProxy = Depends(get_file_proxy),
):
    order = order_service.get_order(db, order_id)
    return proxy.respond(order, INLINE)


@router.get("/download")
async def download_file(
    order_id: str,
    db: Session = Depends(get_db),
    proxy: FileProxy = Depends(get_file_proxy),
):
    order = order_service.get_order(db, order_id)
    return proxy.respond(order, ATTACHMENT)
