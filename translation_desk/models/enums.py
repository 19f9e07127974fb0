import enum


class OrderStatus(str, enum.Enum):
    PENDING = "PENDING"
    UNDER_REVIEW = "UNDER_REVIEW"
    QUOTE_SENT = "QUOTE_SENT"
    APPROVED = "APPROVED"
    IN_PROGRESS = "IN_PROGRESS"
    COMPLETED = "COMPLETED"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"
    ON_HOLD = "ON_HOLD"


class DocumentType(str, enum.Enum):
    LEGAL = "LEGAL"
    MEDICAL = "MEDICAL"
    TECHNICAL = "TECHNICAL"
    BUSINESS = "BUSINESS"
    ACADEMIC = "ACADEMIC"
    PERSONAL = "PERSONAL"
    CERTIFIED = "CERTIFIED"
    OTHER = "OTHER"


class StaffRole(str, enum.Enum):
    ADMIN = "ADMIN"
    SUPER_ADMIN = "SUPER_ADMIN"
