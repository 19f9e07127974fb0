from fastapi import APIRouter, Depends, Request
from sqlalchemy.orm import Session

from translation_desk.config import settings
from translation_desk.database import get_db
from translation_desk.dependencies import bearer_token, require_staff
from translation_desk.models.staff import StaffAccount
from translation_desk.schemas.auth import LoginRequest, LoginResponse, StaffResponse
from translation_desk.services.auth_service import auth_service

router = APIRouter(prefix="/auth", tags=["auth"])


def _staff_to_response(staff: StaffAccount) -> StaffResponse:
    return StaffResponse(id=staff.id, email=staff.email, name=staff.name, role=staff.role)


@router.post("/login", response_model=LoginResponse)
async def login(req: LoginRequest, request: Request, db: Session = Depends(get_db)):
    # Throttled per client host, counters persist across restarts.
    forwarded = request.headers.get("x-forwarded-for") if settings.trust_forwarded_for else None
    if forwarded:
        origin = forwarded.split(",")[0].strip()
    else:
        origin = request.client.host if request.client else "unknown"
    result = auth_service.login(db, req.email, req.password, origin=origin)
    return LoginResponse(
        token=result["token"],
        expires_in_seconds=result["expires_in_seconds"],
        user=_staff_to_response(result["user"]),
    )


@router.get("/me", response_model=StaffResponse)
async def me(staff: StaffAccount = Depends(require_staff)):
    return _staff_to_response(staff)


@router.post("/logout")
async def logout(_staff: StaffAccount = Depends(require_staff), token: str = Depends(bearer_token)):
    auth_service.logout(token)
    return {"message": "Logged out"}
