from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from translation_desk.database import get_db
from translation_desk.dependencies import require_super_admin
from translation_desk.models.staff import StaffAccount
from translation_desk.routers.auth import _staff_to_response
from translation_desk.schemas.auth import StaffCreate, StaffResponse
from translation_desk.services.auth_service import auth_service

router = APIRouter(
    prefix="/admin/users",
    tags=["users"],
    dependencies=[Depends(require_super_admin)],
)


@router.post("", response_model=StaffResponse, status_code=201)
async def create_user(req: StaffCreate, db: Session = Depends(get_db)):
    staff = auth_service.create_staff(db, req.email, req.password, req.name, req.role)
    return _staff_to_response(staff)


@router.get("", response_model=list[StaffResponse])
async def list_users(db: Session = Depends(get_db)):
    accounts = db.query(StaffAccount).order_by(StaffAccount.created_at.asc()).all()
    return [_staff_to_response(a) for a in accounts]
