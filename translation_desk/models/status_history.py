from sqlalchemy import Column, ForeignKey, Integer, Text
from translation_desk.database import Base


class StatusHistoryEntry(Base):
    __tablename__ = "status_history"

    id = Column(Integer, primary_key=True, autoincrement=True)
    order_id = Column(Text, ForeignKey("orders.id"), nullable=False)
    status = Column(Text, nullable=False)
    notes = Column(Text)
    changed_by = Column(Text, nullable=False)
    created_at = Column(Text, nullable=False)
