from pathlib import Path
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    data_dir: Path = Path.home() / "TranslationDesk"
    # Uploads are capped before they reach the storage collaborator.
    max_upload_bytes: int = 10 * 1024 * 1024  # 10 MiB
    session_ttl_seconds: int = 24 * 60 * 60
    login_max_attempts: int = 5
    login_window_seconds: int = 15 * 60
    # Key the login throttle on X-Forwarded-For. Enable only behind a reverse proxy.
    trust_forwarded_for: bool = False
    file_fetch_timeout_seconds: float = 30.0
    api_prefix: str = "/api/v1"
    host: str = "127.0.0.1"
    port: int = 8000
    cors_origins: list[str] = ["http://127.0.0.1:3000", "http://localhost:3000"]

    # Outbound mail. Notifications are skipped (and logged) when smtp_host is unset.
    smtp_host: str | None = None
    smtp_port: int = 587
    smtp_user: str | None = None
    smtp_password: str | None = None
    mail_from: str = "no-reply@translationdesk.local"
    admin_email: str | None = None

    # First SUPER_ADMIN account, created at startup when both are set.
    seed_admin_email: str | None = None
    seed_admin_password: str | None = None

    @property
    def db_path(self) -> Path:
        return self.data_dir / "db.sqlite"

    @property
    def uploads_dir(self) -> Path:
        return self.data_dir / "uploads"

    model_config = {"env_prefix": "TDESK_"}


settings = Settings()
