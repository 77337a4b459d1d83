from typing import Optional
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from faceyoga.core.constants import ContentKindEnum
from faceyoga.schemas.auth import AuthSession
from faceyoga.schemas.response import APIResponse, AccessCheck
from faceyoga.services.access import access_service
from faceyoga.utils import deps

router = APIRouter()

@router.get("/exercises/{exercise_id}", response_model=APIResponse[AccessCheck])
async def check_exercise_access(
    *,
    db: Session = Depends(deps.get_db),
    exercise_id: int,
    session: Optional[AuthSession] = Depends(deps.get_optional_session)
):
    allowed = await access_service.has_access(db, session, ContentKindEnum.EXERCISE, exercise_id)
    return APIResponse(message="Access checked", data=AccessCheck(has_access=allowed))


@router.get("/lessons/{lesson_id}", response_model=APIResponse[AccessCheck])
async def check_lesson_access(
    *,
    db: Session = Depends(deps.get_db),
    lesson_id: int,
    session: Optional[AuthSession] = Depends(deps.get_optional_session)
):
    allowed = await access_service.has_access(db, session, ContentKindEnum.LESSON, lesson_id)
    return APIResponse(message="Access checked", data=AccessCheck(has_access=allowed))


@router.get("/courses/{course_id}", response_model=APIResponse[AccessCheck])
async def check_course_access(
    *,
    db: Session = Depends(deps.get_db),
    course_id: int,
    session: Optional[AuthSession] = Depends(deps.get_optional_session)
):
    allowed = await access_service.has_access_to_course(db, session, course_id)
    return APIResponse(message="Access checked", data=AccessCheck(has_access=allowed))
