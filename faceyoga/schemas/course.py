from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator
from typing import Optional, List
from datetime import datetime

from faceyoga.core.constants import AccessTypeEnum
from faceyoga.schemas.exercise import Exercise
from faceyoga.schemas.lesson import Lesson
from faceyoga.schemas.validators import require_text, validate_video_url


class SectionIn(BaseModel):
    title: str
    description: Optional[str] = None
    exercises: List[int] = Field(default_factory=list)
    lessons: List[int] = Field(default_factory=list)

    @field_validator("title")
    @classmethod
    def title_required(cls, v):
        return require_text(v, "Section title")


class CourseBase(BaseModel):
    title: str
    description: Optional[str] = None
    image_url: Optional[str] = None
    welcome_video: Optional[str] = None
    difficulty: Optional[str] = None
    duration: Optional[str] = None
    price: float = Field(default=0.0, ge=0)
    currency: str = "usd"
    access_type: AccessTypeEnum = AccessTypeEnum.LIFETIME
    trial_duration_days: Optional[int] = Field(default=None, gt=0)
    subscription_duration_months: Optional[int] = Field(default=None, gt=0)


class CourseCreate(CourseBase):
    sections: List[SectionIn] = Field(default_factory=list)

    @field_validator("title")
    @classmethod
    def title_required(cls, v):
        return require_text(v, "Title")

    @field_validator("welcome_video")
    @classmethod
    def check_welcome_video(cls, v):
        return validate_video_url(v)

    @model_validator(mode="after")
    def check_access_terms(self):
        if self.access_type == AccessTypeEnum.TRIAL and not self.trial_duration_days:
            raise ValueError("Trial courses require trial_duration_days")
        if self.access_type == AccessTypeEnum.SUBSCRIPTION and not self.subscription_duration_months:
            raise ValueError("Subscription courses require subscription_duration_months")
        return self


class CourseUpdate(CourseCreate):
    """Full replacement: the submitted sections replace the existing ones."""
    pass


class SectionItem(BaseModel):
    id: int
    order_index: int
    exercise_id: Optional[int] = None
    lesson_id: Optional[int] = None
    exercise: Optional[Exercise] = None
    lesson: Optional[Lesson] = None

    model_config = ConfigDict(from_attributes=True)


class CourseSection(BaseModel):
    id: int
    course_id: int
    title: str
    description: Optional[str] = None
    order_index: int
    items: List[SectionItem] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)


class Course(CourseBase):
    id: int
    is_free: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class CourseDetail(Course):
    sections: List[CourseSection] = Field(default_factory=list)
    has_access: Optional[bool] = None
