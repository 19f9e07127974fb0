from sqlalchemy import Boolean, Column, Float, Integer, Text
from translation_desk.database import Base

# File reference held between order creation and the upload being filed.
PROVISIONAL_FILE_URL = "pending"


class Order(Base):
    __tablename__ = "orders"

    id = Column(Text, primary_key=True)
    customer_name = Column(Text, nullable=False)
    customer_email = Column(Text, nullable=False)
    customer_phone = Column(Text)
    customer_address = Column(Text)
    source_language = Column(Text, nullable=False)
    target_language = Column(Text, nullable=False)
    document_type = Column(Text, nullable=False)
    urgency = Column(Text, nullable=False, default="STANDARD")
    hard_copy = Column(Boolean, nullable=False, default=False)
    specialization = Column(Text)
    additional_notes = Column(Text)
    number_of_pages = Column(Text, nullable=False)
    original_file_name = Column(Text, nullable=False)
    file_url = Column(Text, nullable=False)
    file_size = Column(Integer, nullable=False)
    file_type = Column(Text, nullable=False)
    status = Column(Text, nullable=False, default="PENDING")
    estimated_price = Column(Float)
    final_price = Column(Float)
    estimated_delivery = Column(Text)
    actual_delivery = Column(Text)
    admin_notes = Column(Text)
    assigned_to = Column(Text)
    version = Column(Integer, nullable=False, default=1)
    created_at = Column(Text, nullable=False)
    updated_at = Column(Text, nullable=False)

    __mapper_args__ = {"version_id_col": version}

    @property
    def is_provisional(self) -> bool:
        return self.file_url == PROVISIONAL_FILE_URL
