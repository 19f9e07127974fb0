from fastapi import Depends, Header
from sqlalchemy.orm import Session

from translation_desk.database import get_db
from translation_desk.errors import ForbiddenError, UnauthorizedError
from translation_desk.models.enums import StaffRole
from translation_desk.models.staff import StaffAccount
from translation_desk.services.auth_service import auth_service
from translation_desk.services.file_proxy import FileProxy
from translation_desk.services.notification_service import Notifier
from translation_desk.services.storage_service import LocalFileStorage

STAFF_ROLES = {StaffRole.ADMIN.value, StaffRole.SUPER_ADMIN.value}


def bearer_token(authorization: str | None = Header(None)) -> str:
    if not authorization or not authorization.startswith("Bearer "):
        raise UnauthorizedError("Missing bearer token")
    return authorization[7:]


async def require_staff(
    token: str = Depends(bearer_token),
    db: Session = Depends(get_db),
) -> StaffAccount:
    staff = auth_service.authenticate(db, token)
    if staff.role not in STAFF_ROLES:
        raise ForbiddenError("Staff access required")
    return staff


async def require_super_admin(staff: StaffAccount = Depends(require_staff)) -> StaffAccount:
    if staff.role != StaffRole.SUPER_ADMIN.value:
        raise ForbiddenError("Super admin access required")
    return staff


def get_storage() -> LocalFileStorage:
    return LocalFileStorage()


def get_notifier() -> Notifier:
    return Notifier()


def get_file_proxy(storage: LocalFileStorage = Depends(get_storage)) -> FileProxy:
    return FileProxy(storage)
