import time
from typing import Callable

from sqlalchemy import text
from sqlalchemy.orm import Session


class LoginThrottle:
    """Failed-login counters per origin, kept in the ``auth_throttle`` table.

    After ``max_attempts`` failures inside ``window_seconds`` the origin is
    blocked until the window since the last failure has passed. Counters older
    than the window expire; a successful login clears them.
    """

    def __init__(self, max_attempts: int, window_seconds: float, clock: Callable[[], float] = time.time):
        self.max_attempts = max_attempts
        self.window_seconds = window_seconds
        self._clock = clock

    def retry_after(self, db: Session, key: str) -> float:
        row = db.execute(
            text("SELECT failed_attempts, last_failed_at FROM auth_throttle WHERE key = :key"),
            {"key": key},
        ).fetchone()
        if not row:
            return 0
        failed_attempts = int(row[0])
        elapsed = self._clock() - float(row[1])
        if failed_attempts < self.max_attempts or elapsed >= self.window_seconds:
            return 0
        return self.window_seconds - elapsed

    def record_failure(self, db: Session, key: str) -> None:
        db.execute(
            text(
                """
                INSERT INTO auth_throttle (key, failed_attempts, last_failed_at)
                VALUES (:key, 1, :now)
                ON CONFLICT(key) DO UPDATE SET
                    failed_attempts = CASE
                        WHEN :now - last_failed_at >= :window THEN 1
                        ELSE failed_attempts + 1
                    END,
                    last_failed_at = :now
                """
            ),
            {"key": key, "now": self._clock(), "window": self.window_seconds},
        )
        db.commit()

    def reset(self, db: Session, key: str) -> None:
        db.execute(text("DELETE FROM auth_throttle WHERE key = :key"), {"key": key})
        db.commit()
