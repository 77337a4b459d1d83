from sqlalchemy import Boolean, Column, Integer, String, DateTime, Enum
from sqlalchemy.sql import func
from faceyoga.core.database import Base
from faceyoga.core.constants import RoleEnum, ExperienceLevelEnum

class Profile(Base):
    __tablename__ = "profiles"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, unique=True, index=True, nullable=False)  # auth provider subject
    email = Column(String, index=True, nullable=False)
    username = Column(String, nullable=True)
    full_name = Column(String, nullable=True)
    avatar_url = Column(String, nullable=True)
    role = Column(Enum(RoleEnum), nullable=False, default=RoleEnum.USER)
    streak = Column(Integer, nullable=False, default=0)
    exercises_done = Column(Integer, nullable=False, default=0)
    practice_time = Column(Integer, nullable=False, default=0)  # seconds
    experience_level = Column(Enum(ExperienceLevelEnum), nullable=True)
    onboarding_completed = Column(Boolean, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
