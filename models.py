import time
from sqlalchemy import Column, String, Text, Integer, PrimaryKeyConstraint
from database import Base

class Record(Base):
    __tablename__ = "records"
    __table_args__ = (PrimaryKeyConstraint("collection", "id"),)

    # "users" | "tokens" | "checks"
    collection = Column(String, nullable=False)
    id = Column(String, nullable=False)
    data = Column(Text, nullable=False)  # JSON-encoded record body
    updated_at = Column(Integer, nullable=False, default=lambda: int(time.time()))
