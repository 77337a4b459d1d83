from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional, List
from datetime import datetime

from faceyoga.core.constants import GoalStatusEnum
from faceyoga.schemas.validators import require_text


class MilestoneIn(BaseModel):
    label: Optional[str] = None
    target_value: float = Field(..., gt=0)
    reward_points: int = Field(default=0, ge=0)


class LessonMappingIn(BaseModel):
    lesson_id: int
    contribution_weight: float = Field(default=1.0, ge=0)


class GoalCreate(BaseModel):
    label: str
    description: Optional[str] = None
    milestones: List[MilestoneIn] = Field(default_factory=list)
    lesson_mappings: List[LessonMappingIn] = Field(default_factory=list)

    @field_validator("label")
    @classmethod
    def label_required(cls, v):
        return require_text(v, "Label")


class GoalMilestone(BaseModel):
    id: int
    goal_id: int
    label: Optional[str] = None
    target_value: float
    reward_points: int

    model_config = ConfigDict(from_attributes=True)


class LessonGoalMapping(BaseModel):
    id: int
    lesson_id: int
    goal_id: int
    contribution_weight: float

    model_config = ConfigDict(from_attributes=True)


class Goal(BaseModel):
    id: int
    label: str
    description: Optional[str] = None
    milestones: List[GoalMilestone] = Field(default_factory=list)
    lesson_mappings: List[LessonGoalMapping] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)


class GoalProgress(BaseModel):
    id: int
    user_id: str
    goal_id: int
    progress_value: float
    milestone_reached: int
    status: GoalStatusEnum
    created_at: datetime
    last_updated: datetime

    model_config = ConfigDict(from_attributes=True)


class ContributionIn(BaseModel):
    weight: float = Field(..., ge=0)


class GoalStatusUpdate(BaseModel):
    status: GoalStatusEnum


class GoalAnalytics(BaseModel):
    goal_id: int
    participants: int
    completion_rate: float
    average_progress: float
    time_spent_hours: float
