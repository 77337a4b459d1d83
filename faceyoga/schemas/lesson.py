from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional
from datetime import datetime

from faceyoga.schemas.validators import validate_video_url, require_text


class LessonBase(BaseModel):
    title: str
    description: Optional[str] = None
    duration: int = Field(default=0, ge=0)
    image_url: Optional[str] = None
    video_url: Optional[str] = None
    category: Optional[str] = None
    difficulty: Optional[str] = None
    is_premium: bool = False


class LessonCreate(LessonBase):
    @field_validator("title")
    @classmethod
    def title_required(cls, v):
        return require_text(v, "Title")

    @field_validator("video_url")
    @classmethod
    def check_video_url(cls, v):
        return validate_video_url(v)


class LessonUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    duration: Optional[int] = Field(default=None, ge=0)
    image_url: Optional[str] = None
    video_url: Optional[str] = None
    category: Optional[str] = None
    difficulty: Optional[str] = None
    is_premium: Optional[bool] = None

    @field_validator("video_url")
    @classmethod
    def check_video_url(cls, v):
        return validate_video_url(v)


class Lesson(LessonBase):
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class LessonDetail(Lesson):
    locked: bool = False
