import logging
import time
import uuid

from sqlalchemy.orm import Session

from translation_desk.config import settings
from translation_desk.errors import ConflictError, RateLimitError, UnauthorizedError, ValidationError
from translation_desk.models.enums import StaffRole
from translation_desk.models.staff import StaffAccount
from translation_desk.services.throttle_service import LoginThrottle
from translation_desk.utils.security import generate_token, hash_password, verify_password
from translation_desk.utils.text import is_valid_email, utcnow_iso

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 8


class AuthService:
    def __init__(self, throttle: LoginThrottle):
        self.throttle = throttle
        self._sessions: dict[str, tuple[str, float]] = {}  # token -> (staff id, expires_at)

    def _cleanup_expired(self):
        now = time.time()
        self._sessions = {t: s for t, s in self._sessions.items() if s[1] > now}

    def login(self, db: Session, email: str, password: str, origin: str = "unknown") -> dict:
        throttle_key = f"login:{origin}"
        delay = self.throttle.retry_after(db, throttle_key)
        if delay > 0:
            logger.warning("Login blocked for %s, retry in %.0fs", origin, delay)
            raise RateLimitError(delay)

        email = (email or "").strip().lower()
        if not is_valid_email(email):
            raise ValidationError.single("email", "must be a valid email address")

        staff = db.query(StaffAccount).filter(StaffAccount.email == email).first()
        if staff is None or not verify_password(staff.password_hash, password or ""):
            self.throttle.record_failure(db, throttle_key)
            logger.warning("Failed login for %s from %s", email, origin)
            raise UnauthorizedError("Invalid credentials")

        self.throttle.reset(db, throttle_key)
        token = generate_token()
        ttl = settings.session_ttl_seconds
        self._sessions[token] = (staff.id, time.time() + ttl)
        return {"token": token, "expires_in_seconds": ttl, "user": staff}

    def logout(self, token: str) -> None:
        self._sessions.pop(token, None)

    def clear(self) -> None:
        self._sessions.clear()

    def authenticate(self, db: Session, token: str) -> StaffAccount:
        self._cleanup_expired()
        session = self._sessions.get(token)
        if session is None:
            raise UnauthorizedError("Invalid or expired token")
        staff = db.query(StaffAccount).filter(StaffAccount.id == session[0]).first()
        if staff is None:
            self._sessions.pop(token, None)
            raise UnauthorizedError("Account no longer exists")
        return staff

    def create_staff(self, db: Session, email: str, password: str, name: str, role: StaffRole = StaffRole.ADMIN) -> StaffAccount:
        email = email.strip().lower()
        errors = []
        if not is_valid_email(email):
            errors.append({"field": "email", "message": "must be a valid email address"})
        if len(password) < MIN_PASSWORD_LENGTH:
            errors.append({"field": "password", "message": f"must be at least {MIN_PASSWORD_LENGTH} characters"})
        if not name.strip():
            errors.append({"field": "name", "message": "is required"})
        if errors:
            raise ValidationError(errors)
        if db.query(StaffAccount).filter(StaffAccount.email == email).first():
            raise ConflictError("User with this email already exists")

        staff = StaffAccount(
            id=str(uuid.uuid4()),
            email=email,
            password_hash=hash_password(password),
            name=name.strip(),
            role=StaffRole(role).value,
            created_at=utcnow_iso(),
        )
        db.add(staff)
        db.commit()
        db.refresh(staff)
        return staff

    def seed_admin(self, db: Session, email: str, password: str) -> StaffAccount | None:
        if db.query(StaffAccount).filter(StaffAccount.email == email.strip().lower()).first():
            return None
        staff = self.create_staff(db, email, password, "Admin User", StaffRole.SUPER_ADMIN)
        logger.info("Seeded SUPER_ADMIN account %s", staff.email)
        return staff


auth_service = AuthService(
    LoginThrottle(settings.login_max_attempts, settings.login_window_seconds)
)
