from pydantic import BaseModel, ConfigDict, Field
from typing import List
from datetime import datetime

from faceyoga.schemas.goal import GoalProgress


class ExerciseCompletion(BaseModel):
    duration: int = Field(default=0, ge=0)


class LessonCompletion(BaseModel):
    practice_time: int = Field(default=0, ge=0)


class ExerciseHistory(BaseModel):
    id: int
    user_id: str
    exercise_id: int
    duration: int
    completed_at: datetime

    model_config = ConfigDict(from_attributes=True)


class LessonHistory(BaseModel):
    id: int
    user_id: str
    lesson_id: int
    practice_time: int
    completed_at: datetime

    model_config = ConfigDict(from_attributes=True)


class LessonCompletionResult(BaseModel):
    history: LessonHistory
    streak: int
    goal_progress: List[GoalProgress] = Field(default_factory=list)
