from pydantic import BaseModel, ConfigDict
from typing import Optional
from datetime import datetime

from faceyoga.core.constants import RoleEnum, ExperienceLevelEnum


class ProfileUpdate(BaseModel):
    username: Optional[str] = None
    full_name: Optional[str] = None
    experience_level: Optional[ExperienceLevelEnum] = None
    onboarding_completed: Optional[bool] = None


class Profile(BaseModel):
    id: int
    user_id: str
    email: str
    username: Optional[str] = None
    full_name: Optional[str] = None
    avatar_url: Optional[str] = None
    role: RoleEnum
    streak: int
    exercises_done: int
    practice_time: int
    experience_level: Optional[ExperienceLevelEnum] = None
    onboarding_completed: Optional[bool] = False
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
