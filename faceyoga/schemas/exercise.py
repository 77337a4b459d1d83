from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional, List
from datetime import datetime

from faceyoga.core.constants import DifficultyEnum, ExerciseCategoryEnum
from faceyoga.schemas.validators import validate_video_url, require_text, clean_list


class ExerciseBase(BaseModel):
    title: str
    description: str
    duration: str
    target_area: str
    image_url: Optional[str] = None
    video_url: Optional[str] = None
    category: ExerciseCategoryEnum
    difficulty: DifficultyEnum
    instructions: List[str] = Field(default_factory=list)
    benefits: List[str] = Field(default_factory=list)
    is_premium: bool = False

    model_config = ConfigDict(use_enum_values=True)


class ExerciseCreate(ExerciseBase):
    @field_validator("title", "description", "duration", "target_area")
    @classmethod
    def not_blank(cls, v, info):
        return require_text(v, info.field_name.replace("_", " ").capitalize())

    @field_validator("image_url")
    @classmethod
    def image_required(cls, v):
        return require_text(v or "", "Image")

    @field_validator("video_url")
    @classmethod
    def check_video_url(cls, v):
        return validate_video_url(v)

    @field_validator("instructions")
    @classmethod
    def check_instructions(cls, v):
        return clean_list(v, "instruction")

    @field_validator("benefits")
    @classmethod
    def check_benefits(cls, v):
        return clean_list(v, "benefit")


class ExerciseUpdate(BaseModel):
    title: Optional[str] = None
    description: Optional[str] = None
    duration: Optional[str] = None
    target_area: Optional[str] = None
    image_url: Optional[str] = None
    video_url: Optional[str] = None
    category: Optional[ExerciseCategoryEnum] = None
    difficulty: Optional[DifficultyEnum] = None
    instructions: Optional[List[str]] = None
    benefits: Optional[List[str]] = None
    is_premium: Optional[bool] = None

    model_config = ConfigDict(use_enum_values=True)

    @field_validator("video_url")
    @classmethod
    def check_video_url(cls, v):
        return validate_video_url(v)

    @field_validator("instructions")
    @classmethod
    def check_instructions(cls, v):
        return None if v is None else clean_list(v, "instruction")

    @field_validator("benefits")
    @classmethod
    def check_benefits(cls, v):
        return None if v is None else clean_list(v, "benefit")


class Exercise(ExerciseBase):
    id: int
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True, use_enum_values=True)


class ExerciseDetail(Exercise):
    """Exercise as seen by a given user; the video is withheld while locked."""
    locked: bool = False
