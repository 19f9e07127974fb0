from pydantic import BaseModel

from translation_desk.models.enums import StaffRole
from translation_desk.schemas.order import CamelModel


class LoginRequest(BaseModel):
    email: str
    password: str


class StaffResponse(CamelModel):
    id: str
    email: str
    name: str
    role: str


class LoginResponse(CamelModel):
    success: bool = True
    token: str
    expires_in_seconds: int
    user: StaffResponse


class StaffCreate(BaseModel):
    email: str
    password: str
    name: str
    role: StaffRole = StaffRole.ADMIN
