import logging
from datetime import datetime
from typing import List, Optional

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from faceyoga.core.constants import ContentKindEnum
from faceyoga.crud.exercise import exercise as crud_exercise
from faceyoga.crud.history import exercise_history as crud_exercise_history
from faceyoga.crud.history import lesson_history as crud_lesson_history
from faceyoga.crud.lesson import lesson as crud_lesson
from faceyoga.crud.profile import profile as crud_profile
from faceyoga.models.history import ExerciseHistory, LessonHistory
from faceyoga.schemas.auth import AuthSession
from faceyoga.schemas.goal import GoalProgress
from faceyoga.schemas.history import LessonCompletionResult, LessonHistory as LessonHistorySchema
from faceyoga.services.access import access_service
from faceyoga.services.goal_progress import goal_progress_service
from faceyoga.services.profile import profile_service

logger = logging.getLogger(__name__)


def next_streak(current: int, last_completed_at: Optional[datetime], now: datetime) -> int:
    """Consecutive practice days: same day keeps the streak, yesterday extends it, a gap restarts it."""
    if last_completed_at is None:
        return 1
    gap = (now.date() - last_completed_at.date()).days
    if gap <= 0:
        return max(current, 1)
    if gap == 1:
        return current + 1
    return 1


class HistoryService:

    async def complete_exercise(
        self, db: Session, session: AuthSession, exercise_id: int, duration: int = 0
    ) -> ExerciseHistory:
        exercise = crud_exercise.get(db, id=exercise_id)
        if not exercise:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Exercise not found.")
        await access_service.require_access(db, session, ContentKindEnum.EXERCISE, exercise_id)

        entry = crud_exercise_history.create(
            db, user_id=session.user_id, exercise_id=exercise_id, duration=duration
        )
        profile = profile_service.get_or_create(db, session)
        crud_profile.increment_practice(db, profile, exercises=1, seconds=duration)
        return entry

    async def complete_lesson(
        self, db: Session, session: AuthSession, lesson_id: int, practice_time: int = 0
    ) -> LessonCompletionResult:
        lesson = crud_lesson.get(db, id=lesson_id)
        if not lesson:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Lesson not found.")
        await access_service.require_access(db, session, ContentKindEnum.LESSON, lesson_id)

        previous = crud_lesson_history.get_latest(db, session.user_id)
        entry = crud_lesson_history.create(
            db, user_id=session.user_id, lesson_id=lesson_id, practice_time=practice_time
        )

        profile = profile_service.get_or_create(db, session)
        streak = next_streak(profile.streak or 0, previous.completed_at if previous else None, entry.completed_at)
        profile = crud_profile.update(
            db,
            db_obj=profile,
            obj_in={"streak": streak, "practice_time": (profile.practice_time or 0) + practice_time},
        )

        progress = await goal_progress_service.track_lesson_completion(db, session, lesson_id)
        logger.info(f"User {session.user_id} completed lesson {lesson_id}; streak {streak}")
        return LessonCompletionResult(
            history=LessonHistorySchema.model_validate(entry),
            streak=profile.streak,
            goal_progress=[GoalProgress.model_validate(p) for p in progress],
        )

    async def get_exercise_history(self, db: Session, session: AuthSession) -> List[ExerciseHistory]:
        return crud_exercise_history.get_by_user(db, session.user_id)

    async def get_lesson_history(self, db: Session, session: AuthSession) -> List[LessonHistory]:
        return crud_lesson_history.get_by_user(db, session.user_id)

history_service = HistoryService()
