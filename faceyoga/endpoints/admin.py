from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from faceyoga.core.cache import cache
from faceyoga.schemas.course import CourseCreate, CourseDetail, CourseUpdate
from faceyoga.schemas.dashboard import DashboardStats
from faceyoga.schemas.exercise import Exercise, ExerciseCreate, ExerciseUpdate
from faceyoga.schemas.feedback import Feedback
from faceyoga.schemas.goal import Goal, GoalCreate
from faceyoga.schemas.lesson import Lesson, LessonCreate, LessonUpdate
from faceyoga.schemas.response import APIResponse
from faceyoga.services.admin import admin_service
from faceyoga.services.feedback import feedback_service
from faceyoga.utils import deps

router = APIRouter(dependencies=[Depends(deps.require_admin)])

@router.get("/dashboard", response_model=APIResponse[DashboardStats])
async def get_dashboard(*, db: Session = Depends(deps.get_db)):
    stats = await admin_service.get_dashboard(db)
    return APIResponse(message="Dashboard retrieved successfully", data=stats)


@router.post("/exercises", response_model=APIResponse[Exercise], status_code=201)
async def create_exercise(
    *,
    db: Session = Depends(deps.get_transactional_db),
    exercise_in: ExerciseCreate
):
    exercise = await admin_service.create_exercise(db, exercise_in)
    await cache.invalidate_catalog()
    return APIResponse(message="Exercise created successfully", data=Exercise.model_validate(exercise))


@router.put("/exercises/{exercise_id}", response_model=APIResponse[Exercise])
async def update_exercise(
    *,
    db: Session = Depends(deps.get_transactional_db),
    exercise_id: int,
    exercise_in: ExerciseUpdate
):
    exercise = await admin_service.update_exercise(db, exercise_id, exercise_in)
    await cache.invalidate_catalog()
    return APIResponse(message="Exercise updated successfully", data=Exercise.model_validate(exercise))


@router.delete("/exercises/{exercise_id}", response_model=APIResponse[dict])
async def delete_exercise(
    *,
    db: Session = Depends(deps.get_transactional_db),
    exercise_id: int
):
    await admin_service.delete_exercise(db, exercise_id)
    await cache.invalidate_catalog()
    return APIResponse(message="Exercise deleted successfully")


@router.post("/lessons", response_model=APIResponse[Lesson], status_code=201)
async def create_lesson(
    *,
    db: Session = Depends(deps.get_transactional_db),
    lesson_in: LessonCreate
):
    lesson = await admin_service.create_lesson(db, lesson_in)
    await cache.invalidate_catalog()
    return APIResponse(message="Lesson created successfully", data=Lesson.model_validate(lesson))


@router.put("/lessons/{lesson_id}", response_model=APIResponse[Lesson])
async def update_lesson(
    *,
    db: Session = Depends(deps.get_transactional_db),
    lesson_id: int,
    lesson_in: LessonUpdate
):
    lesson = await admin_service.update_lesson(db, lesson_id, lesson_in)
    await cache.invalidate_catalog()
    return APIResponse(message="Lesson updated successfully", data=Lesson.model_validate(lesson))


@router.delete("/lessons/{lesson_id}", response_model=APIResponse[dict])
async def delete_lesson(
    *,
    db: Session = Depends(deps.get_transactional_db),
    lesson_id: int
):
    await admin_service.delete_lesson(db, lesson_id)
    await cache.invalidate_catalog()
    return APIResponse(message="Lesson deleted successfully")


@router.post("/courses", response_model=APIResponse[CourseDetail], status_code=201)
async def create_course(
    *,
    db: Session = Depends(deps.get_transactional_db),
    course_in: CourseCreate
):
    course = await admin_service.create_course(db, course_in)
    await cache.invalidate_catalog()
    return APIResponse(message="Course created successfully", data=CourseDetail.model_validate(course))


@router.put("/courses/{course_id}", response_model=APIResponse[CourseDetail])
async def update_course(
    *,
    db: Session = Depends(deps.get_transactional_db),
    course_id: int,
    course_in: CourseUpdate
):
    course = await admin_service.update_course(db, course_id, course_in)
    await cache.invalidate_catalog()
    return APIResponse(message="Course updated successfully", data=CourseDetail.model_validate(course))


@router.delete("/courses/{course_id}", response_model=APIResponse[dict])
async def delete_course(
    *,
    db: Session = Depends(deps.get_transactional_db),
    course_id: int
):
    await admin_service.delete_course(db, course_id)
    await cache.invalidate_catalog()
    return APIResponse(message="Course deleted successfully")


@router.post("/goals", response_model=APIResponse[Goal], status_code=201)
async def create_goal(
    *,
    db: Session = Depends(deps.get_transactional_db),
    goal_in: GoalCreate
):
    goal = await admin_service.create_goal(db, goal_in)
    return APIResponse(message="Goal created successfully", data=Goal.model_validate(goal))


@router.put("/goals/{goal_id}", response_model=APIResponse[Goal])
async def update_goal(
    *,
    db: Session = Depends(deps.get_transactional_db),
    goal_id: int,
    goal_in: GoalCreate
):
    goal = await admin_service.update_goal(db, goal_id, goal_in)
    return APIResponse(message="Goal updated successfully", data=Goal.model_validate(goal))


@router.delete("/goals/{goal_id}", response_model=APIResponse[dict])
async def delete_goal(
    *,
    db: Session = Depends(deps.get_transactional_db),
    goal_id: int
):
    await admin_service.delete_goal(db, goal_id)
    return APIResponse(message="Goal deleted successfully")


@router.get("/feedback", response_model=APIResponse[List[Feedback]])
async def list_feedback(
    *,
    db: Session = Depends(deps.get_db),
    skip: int = 0,
    limit: int = 100
):
    entries = await feedback_service.list_recent(db, skip=skip, limit=limit)
    return APIResponse(message="Feedback retrieved successfully", data=[Feedback.model_validate(f) for f in entries])
