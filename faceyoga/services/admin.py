import logging
from typing import Iterable, List

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from faceyoga.crud.course import course as crud_course
from faceyoga.crud.course_access import course_access as crud_course_access
from faceyoga.crud.exercise import exercise as crud_exercise
from faceyoga.crud.goal import goal as crud_goal
from faceyoga.crud.goal_progress import goal_progress as crud_goal_progress
from faceyoga.crud.history import exercise_history as crud_exercise_history
from faceyoga.crud.history import lesson_history as crud_lesson_history
from faceyoga.crud.lesson import lesson as crud_lesson
from faceyoga.crud.profile import profile as crud_profile
from faceyoga.crud.purchase import purchase as crud_purchase
from faceyoga.models.course import Course
from faceyoga.models.exercise import Exercise
from faceyoga.models.goal import Goal
from faceyoga.models.lesson import Lesson
from faceyoga.schemas.course import CourseCreate, CourseUpdate
from faceyoga.schemas.dashboard import DashboardStats
from faceyoga.schemas.exercise import ExerciseCreate, ExerciseUpdate
from faceyoga.schemas.goal import GoalCreate
from faceyoga.schemas.lesson import LessonCreate, LessonUpdate
from faceyoga.services.goal_progress import count_reached, next_status

logger = logging.getLogger(__name__)


class AdminService:

    def _missing_ids(self, db: Session, crud, ids: Iterable[int]) -> List[int]:
        return sorted({i for i in ids if crud.get(db, id=i) is None})

    def _validate_course_items(self, db: Session, course_in: CourseCreate) -> None:
        exercise_ids = [i for s in course_in.sections for i in s.exercises]
        lesson_ids = [i for s in course_in.sections for i in s.lessons]
        missing_exercises = self._missing_ids(db, crud_exercise, exercise_ids)
        missing_lessons = self._missing_ids(db, crud_lesson, lesson_ids)
        if missing_exercises or missing_lessons:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail=f"Unknown section items: exercises {missing_exercises}, lessons {missing_lessons}",
            )

    def _get_or_404(self, db: Session, crud, id: int, label: str):
        obj = crud.get(db, id=id)
        if not obj:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=f"{label} not found.")
        return obj

    async def create_exercise(self, db: Session, exercise_in: ExerciseCreate) -> Exercise:
        exercise = crud_exercise.create(db, obj_in=exercise_in)
        logger.info(f"Exercise {exercise.id} created")
        return exercise

    async def update_exercise(self, db: Session, exercise_id: int, exercise_in: ExerciseUpdate) -> Exercise:
        exercise = self._get_or_404(db, crud_exercise, exercise_id, "Exercise")
        return crud_exercise.update(db, db_obj=exercise, obj_in=exercise_in)

    async def delete_exercise(self, db: Session, exercise_id: int) -> None:
        self._get_or_404(db, crud_exercise, exercise_id, "Exercise")
        crud_exercise.delete(db, id=exercise_id)
        logger.info(f"Exercise {exercise_id} deleted")

    async def create_lesson(self, db: Session, lesson_in: LessonCreate) -> Lesson:
        lesson = crud_lesson.create(db, obj_in=lesson_in)
        logger.info(f"Lesson {lesson.id} created")
        return lesson

    async def update_lesson(self, db: Session, lesson_id: int, lesson_in: LessonUpdate) -> Lesson:
        lesson = self._get_or_404(db, crud_lesson, lesson_id, "Lesson")
        return crud_lesson.update(db, db_obj=lesson, obj_in=lesson_in)

    async def delete_lesson(self, db: Session, lesson_id: int) -> None:
        self._get_or_404(db, crud_lesson, lesson_id, "Lesson")
        crud_lesson.delete(db, id=lesson_id)
        logger.info(f"Lesson {lesson_id} deleted")

    async def create_course(self, db: Session, course_in: CourseCreate) -> Course:
        self._validate_course_items(db, course_in)
        course = crud_course.create_with_sections(db, obj_in=course_in)
        logger.info(f"Course {course.id} created with {len(course.sections)} sections")
        return course

    async def update_course(self, db: Session, course_id: int, course_in: CourseUpdate) -> Course:
        course = self._get_or_404(db, crud_course, course_id, "Course")
        self._validate_course_items(db, course_in)
        return crud_course.update_with_sections(db, db_obj=course, obj_in=course_in)

    async def delete_course(self, db: Session, course_id: int) -> None:
        self._get_or_404(db, crud_course, course_id, "Course")
        if crud_purchase.exists_for_course(db, course_id):
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Course has purchases and cannot be deleted.")
        crud_course.delete(db, id=course_id)
        logger.info(f"Course {course_id} deleted")

    def _validate_goal_lessons(self, db: Session, goal_in: GoalCreate) -> None:
        missing = self._missing_ids(db, crud_lesson, [m.lesson_id for m in goal_in.lesson_mappings])
        if missing:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=f"Unknown lessons: {missing}")

    async def create_goal(self, db: Session, goal_in: GoalCreate) -> Goal:
        self._validate_goal_lessons(db, goal_in)
        return crud_goal.create_with_children(db, obj_in=goal_in)

    async def update_goal(self, db: Session, goal_id: int, goal_in: GoalCreate) -> Goal:
        goal = self._get_or_404(db, crud_goal, goal_id, "Goal")
        self._validate_goal_lessons(db, goal_in)
        goal = crud_goal.update_with_children(db, db_obj=goal, obj_in=goal_in)
        self._recount_milestones(db, goal)
        return goal

    def _recount_milestones(self, db: Session, goal: Goal) -> None:
        total = len(goal.milestones)
        for row in crud_goal_progress.get_by_goal(db, goal.id):
            reached = count_reached(goal.milestones, row.progress_value)
            crud_goal_progress.upsert(
                db,
                user_id=row.user_id,
                goal_id=goal.id,
                progress_value=row.progress_value,
                milestone_reached=reached,
                status=next_status(row.status, row.progress_value, reached, total),
                now=row.last_updated,
            )

    async def delete_goal(self, db: Session, goal_id: int) -> None:
        self._get_or_404(db, crud_goal, goal_id, "Goal")
        crud_goal.delete(db, id=goal_id)

    async def get_dashboard(self, db: Session) -> DashboardStats:
        return DashboardStats(
            total_users=crud_profile.count(db),
            total_exercises=crud_exercise.count(db),
            total_lessons=crud_lesson.count(db),
            total_courses=crud_course.count(db),
            total_completions=crud_exercise_history.count(db) + crud_lesson_history.count(db),
            active_grants=crud_course_access.count_active(db),
            total_revenue=round(crud_purchase.total_revenue(db), 2),
        )

admin_service = AdminService()
