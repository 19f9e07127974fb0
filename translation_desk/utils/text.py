import re
from datetime import datetime, timezone

_SCRIPT_RE = re.compile(r"<script\b[^<]*(?:(?!</script>)<[^<]*)*</script>", re.IGNORECASE)
_TAG_RE = re.compile(r"<[^>]*>")
EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
PHONE_RE = re.compile(r"^\+?[1-9]\d{0,15}$")


def sanitize_input(value: str | None) -> str | None:
    """Strip script blocks and HTML tags, then surrounding whitespace."""
    if value is None:
        return None
    return _TAG_RE.sub("", _SCRIPT_RE.sub("", value)).strip()


def is_valid_email(value: str) -> bool:
    return bool(EMAIL_RE.match(value))


def is_valid_phone(value: str) -> bool:
    return bool(PHONE_RE.match(re.sub(r"\s", "", value)))


def utcnow_iso() -> str:
    # Millisecond precision keeps same-second history entries ordered.
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")
