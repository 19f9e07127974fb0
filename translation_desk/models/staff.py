from sqlalchemy import Column, Text
from translation_desk.database import Base


class StaffAccount(Base):
    __tablename__ = "staff_accounts"

    id = Column(Text, primary_key=True)
    email = Column(Text, nullable=False, unique=True)
    password_hash = Column(Text, nullable=False)
    name = Column(Text, nullable=False)
    role = Column(Text, nullable=False, default="ADMIN")
    created_at = Column(Text, nullable=False)
