from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from faceyoga.schemas.auth import AuthSession
from faceyoga.schemas.history import (
    ExerciseCompletion,
    ExerciseHistory,
    LessonCompletion,
    LessonCompletionResult,
    LessonHistory,
)
from faceyoga.schemas.response import APIResponse
from faceyoga.services.history import history_service
from faceyoga.utils import deps

router = APIRouter()

@router.post("/exercises/{exercise_id}/complete", response_model=APIResponse[ExerciseHistory])
async def complete_exercise(
    *,
    db: Session = Depends(deps.get_transactional_db),
    exercise_id: int,
    completion_in: ExerciseCompletion,
    session: AuthSession = Depends(deps.require_session)
):
    entry = await history_service.complete_exercise(db, session, exercise_id, completion_in.duration)
    return APIResponse(message="Exercise completed", data=ExerciseHistory.model_validate(entry))


@router.post("/lessons/{lesson_id}/complete", response_model=APIResponse[LessonCompletionResult])
async def complete_lesson(
    *,
    db: Session = Depends(deps.get_transactional_db),
    lesson_id: int,
    completion_in: LessonCompletion,
    session: AuthSession = Depends(deps.require_session)
):
    result = await history_service.complete_lesson(db, session, lesson_id, completion_in.practice_time)
    return APIResponse(message="Lesson completed", data=result)


@router.get("/history/exercises", response_model=APIResponse[List[ExerciseHistory]])
async def get_exercise_history(
    *,
    db: Session = Depends(deps.get_db),
    session: AuthSession = Depends(deps.require_session)
):
    entries = await history_service.get_exercise_history(db, session)
    return APIResponse(
        message="Exercise history retrieved successfully",
        data=[ExerciseHistory.model_validate(e) for e in entries]
    )


@router.get("/history/lessons", response_model=APIResponse[List[LessonHistory]])
async def get_lesson_history(
    *,
    db: Session = Depends(deps.get_db),
    session: AuthSession = Depends(deps.require_session)
):
    entries = await history_service.get_lesson_history(db, session)
    return APIResponse(
        message="Lesson history retrieved successfully",
        data=[LessonHistory.model_validate(e) for e in entries]
    )
