from translation_desk.models.order import Order
from translation_desk.models.status_history import StatusHistoryEntry
from translation_desk.models.staff import StaffAccount

__all__ = ["Order", "StatusHistoryEntry", "StaffAccount"]
