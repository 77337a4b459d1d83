import logging
from typing import List, Optional

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from faceyoga.core.config import settings
from faceyoga.core.constants import ContentKindEnum
from faceyoga.crud.course import course as crud_course
from faceyoga.crud.course_access import course_access as crud_course_access
from faceyoga.crud.exercise import exercise as crud_exercise
from faceyoga.crud.lesson import lesson as crud_lesson
from faceyoga.schemas.auth import AuthSession
from faceyoga.schemas.course import CourseDetail
from faceyoga.schemas.exercise import Exercise, ExerciseDetail
from faceyoga.schemas.lesson import Lesson, LessonDetail
from faceyoga.services.access import access_service

logger = logging.getLogger(__name__)


class CatalogService:

    def _offset(self, page: int) -> int:
        return max(page - 1, 0) * settings.CATALOG_PAGE_SIZE

    def _public_listing(self, schema, item):
        # Listings are shared through the cache, so premium videos are never included.
        listed = schema.model_validate(item)
        if item.is_premium:
            listed = listed.model_copy(update={"video_url": None})
        return listed

    async def list_exercises(self, db: Session, category: Optional[str] = None, page: int = 1) -> List[Exercise]:
        exercises = crud_exercise.get_catalog(
            db, category=category, skip=self._offset(page), limit=settings.CATALOG_PAGE_SIZE
        )
        return [self._public_listing(Exercise, e) for e in exercises]

    async def list_lessons(self, db: Session, category: Optional[str] = None, page: int = 1) -> List[Lesson]:
        lessons = crud_lesson.get_catalog(
            db, category=category, skip=self._offset(page), limit=settings.CATALOG_PAGE_SIZE
        )
        return [self._public_listing(Lesson, l) for l in lessons]

    async def _is_locked(self, db: Session, session: Optional[AuthSession], kind: ContentKindEnum, item) -> bool:
        if not item.is_premium:
            return False
        if session is None:
            return True
        return not await access_service.has_access(db, session, kind, item.id)

    async def get_exercise(self, db: Session, session: Optional[AuthSession], exercise_id: int) -> ExerciseDetail:
        exercise = crud_exercise.get(db, id=exercise_id)
        if not exercise:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Exercise not found.")
        locked = await self._is_locked(db, session, ContentKindEnum.EXERCISE, exercise)
        detail = ExerciseDetail.model_validate(exercise)
        if locked:
            detail = detail.model_copy(update={"locked": True, "video_url": None})
        return detail

    async def get_lesson(self, db: Session, session: Optional[AuthSession], lesson_id: int) -> LessonDetail:
        lesson = crud_lesson.get(db, id=lesson_id)
        if not lesson:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Lesson not found.")
        locked = await self._is_locked(db, session, ContentKindEnum.LESSON, lesson)
        detail = LessonDetail.model_validate(lesson)
        if locked:
            detail = detail.model_copy(update={"locked": True, "video_url": None})
        return detail

    def _withhold_premium_videos(self, detail: CourseDetail) -> CourseDetail:
        for section in detail.sections:
            for item in section.items:
                for content in (item.exercise, item.lesson):
                    if content is not None and content.is_premium:
                        content.video_url = None
        return detail

    async def list_courses(self, db: Session) -> List[CourseDetail]:
        return [
            CourseDetail.model_validate(c) if c.is_free
            else self._withhold_premium_videos(CourseDetail.model_validate(c))
            for c in crud_course.get_multi(db)
        ]

    def _record_visit(self, db: Session, user_id: str, course_id: int) -> None:
        grant = crud_course_access.get_active_grant(db, user_id, course_id)
        if grant is not None:
            crud_course_access.touch(db, grant)

    async def get_course(self, db: Session, session: Optional[AuthSession], course_id: int) -> CourseDetail:
        course = crud_course.get(db, id=course_id)
        if not course:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Course not found.")
        detail = CourseDetail.model_validate(course)
        if session is not None:
            detail.has_access = await access_service.has_access_to_course(db, session, course_id)
            if detail.has_access and not course.is_free:
                self._record_visit(db, session.user_id, course_id)
        elif course.is_free:
            detail.has_access = True
        if not detail.has_access:
            self._withhold_premium_videos(detail)
        return detail

catalog_service = CatalogService()
