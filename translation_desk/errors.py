"""Closed error taxonomy shared by services and routers.

Every error carries a machine-checkable ``kind`` and the HTTP status that goes
with it; callers branch on the class or ``kind``, never on the message.
"""


class DeskError(Exception):
    kind = "InternalError"
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_payload(self) -> dict:
        return {"kind": self.kind, "message": self.message}


class UnauthorizedError(DeskError):
    kind = "Unauthorized"
    status_code = 401


class ForbiddenError(DeskError):
    kind = "Forbidden"
    status_code = 403


class NotFoundError(DeskError):
    kind = "NotFound"
    status_code = 404


class ValidationError(DeskError):
    kind = "ValidationError"
    status_code = 400

    def __init__(self, fields: list[dict], message: str = "Validation failed"):
        super().__init__(message)
        self.fields = fields

    @classmethod
    def single(cls, field: str, message: str) -> "ValidationError":
        return cls([{"field": field, "message": message}], message=f"{field}: {message}")

    @property
    def field_names(self) -> list[str]:
        return [f["field"] for f in self.fields]

    def to_payload(self) -> dict:
        payload = super().to_payload()
        payload["fields"] = self.fields
        return payload


class ConflictError(DeskError):
    kind = "Conflict"
    status_code = 409


class RateLimitError(DeskError):
    kind = "RateLimited"
    status_code = 429

    def __init__(self, retry_after_seconds: float, message: str = "Too many login attempts. Please try again later."):
        super().__init__(message)
        self.retry_after_seconds = retry_after_seconds

    def to_payload(self) -> dict:
        payload = super().to_payload()
        payload["retryAfterSeconds"] = round(self.retry_after_seconds, 1)
        return payload


class StorageError(DeskError):
    kind = "StorageError"
    status_code = 500


class InternalError(DeskError):
    pass
