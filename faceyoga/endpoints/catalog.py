from typing import List, Optional
from fastapi import APIRouter, Depends, Query, Request
from sqlalchemy.orm import Session

from faceyoga.core.decorators import cache_endpoint
from faceyoga.schemas.auth import AuthSession
from faceyoga.schemas.course import CourseDetail
from faceyoga.schemas.exercise import Exercise, ExerciseDetail
from faceyoga.schemas.lesson import Lesson, LessonDetail
from faceyoga.schemas.response import APIResponse
from faceyoga.services.catalog import catalog_service
from faceyoga.utils import deps

router = APIRouter()

@router.get("/exercises", response_model=APIResponse[List[Exercise]])
@cache_endpoint("catalog:exercises", ttl=300)
async def list_exercises(
    *,
    request: Request,
    db: Session = Depends(deps.get_db),
    category: Optional[str] = None,
    page: int = Query(1, ge=1)
):
    exercises = await catalog_service.list_exercises(db, category=category, page=page)
    return APIResponse(message="Exercises retrieved successfully", data=exercises)


@router.get("/exercises/{exercise_id}", response_model=APIResponse[ExerciseDetail])
async def get_exercise(
    *,
    db: Session = Depends(deps.get_db),
    exercise_id: int,
    session: Optional[AuthSession] = Depends(deps.get_optional_session)
):
    exercise = await catalog_service.get_exercise(db, session, exercise_id)
    return APIResponse(message="Exercise retrieved successfully", data=exercise)


@router.get("/lessons", response_model=APIResponse[List[Lesson]])
@cache_endpoint("catalog:lessons", ttl=300)
async def list_lessons(
    *,
    request: Request,
    db: Session = Depends(deps.get_db),
    category: Optional[str] = None,
    page: int = Query(1, ge=1)
):
    lessons = await catalog_service.list_lessons(db, category=category, page=page)
    return APIResponse(message="Lessons retrieved successfully", data=lessons)


@router.get("/lessons/{lesson_id}", response_model=APIResponse[LessonDetail])
async def get_lesson(
    *,
    db: Session = Depends(deps.get_db),
    lesson_id: int,
    session: Optional[AuthSession] = Depends(deps.get_optional_session)
):
    lesson = await catalog_service.get_lesson(db, session, lesson_id)
    return APIResponse(message="Lesson retrieved successfully", data=lesson)


@router.get("/courses", response_model=APIResponse[List[CourseDetail]])
@cache_endpoint("catalog:courses", ttl=300)
async def list_courses(
    *,
    request: Request,
    db: Session = Depends(deps.get_db)
):
    courses = await catalog_service.list_courses(db)
    return APIResponse(message="Courses retrieved successfully", data=courses)


@router.get("/courses/{course_id}", response_model=APIResponse[CourseDetail])
async def get_course(
    *,
    db: Session = Depends(deps.get_db),
    course_id: int,
    session: Optional[AuthSession] = Depends(deps.get_optional_session)
):
    course = await catalog_service.get_course(db, session, course_id)
    return APIResponse(message="Course retrieved successfully", data=course)
