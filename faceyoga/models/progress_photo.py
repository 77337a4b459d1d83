from sqlalchemy import Column, Integer, String, DateTime, Text
from sqlalchemy.sql import func
from faceyoga.core.database import Base

class ProgressPhoto(Base):
    __tablename__ = "user_progress"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, index=True, nullable=False)
    image_url = Column(String, nullable=False)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
