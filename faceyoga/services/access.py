import logging
from typing import Optional, Union

from fastapi import HTTPException, status
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from faceyoga.core.config import settings
from faceyoga.core.constants import ContentKindEnum, UnmappedPremiumPolicy
from faceyoga.crud.course import course as crud_course
from faceyoga.crud.course_access import course_access as crud_course_access
from faceyoga.crud.exercise import exercise as crud_exercise
from faceyoga.crud.lesson import lesson as crud_lesson
from faceyoga.crud.subscription import subscription as crud_subscription
from faceyoga.models.exercise import Exercise
from faceyoga.models.lesson import Lesson
from faceyoga.schemas.auth import AuthSession

logger = logging.getLogger(__name__)


def unmapped_premium_policy() -> bool:
    """Decide access to a premium item that no course contains.

    Controlled by ``UNMAPPED_PREMIUM_ACCESS``; anything other than ``allow`` denies.
    """
    try:
        policy = UnmappedPremiumPolicy(settings.UNMAPPED_PREMIUM_ACCESS.lower())
    except ValueError:
        logger.warning(f"Unknown UNMAPPED_PREMIUM_ACCESS value '{settings.UNMAPPED_PREMIUM_ACCESS}', denying")
        return False
    return policy == UnmappedPremiumPolicy.ALLOW


class AccessService:

    def _require_session(self, session: Optional[AuthSession]) -> AuthSession:
        if session is None:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
        return session

    def _get_item(self, db: Session, kind: ContentKindEnum, item_id: int) -> Optional[Union[Exercise, Lesson]]:
        if kind == ContentKindEnum.EXERCISE:
            return crud_exercise.get(db, id=item_id)
        return crud_lesson.get(db, id=item_id)

    def _check_item(self, db: Session, user_id: str, kind: ContentKindEnum, item_id: int) -> bool:
        item = self._get_item(db, kind, item_id)
        if item is None:
            return False
        if not item.is_premium:
            return True

        if crud_subscription.get_active(db, user_id) is not None:
            return True

        course_ids = crud_course.get_owning_course_ids(db, kind, item_id)
        if not course_ids:
            return unmapped_premium_policy()

        if any(c.is_free for c in crud_course.get_by_ids(db, course_ids)):
            return True

        return crud_course_access.has_any_active_grant(db, user_id, course_ids)

    async def has_access(
        self, db: Session, session: Optional[AuthSession], kind: ContentKindEnum, item_id: int
    ) -> bool:
        session = self._require_session(session)
        try:
            return self._check_item(db, session.user_id, ContentKindEnum(kind), item_id)
        except SQLAlchemyError as e:
            logger.error(f"Access check failed for {kind} {item_id} (user {session.user_id}): {e}")
            db.rollback()
            return False

    async def has_access_to_course(self, db: Session, session: Optional[AuthSession], course_id: int) -> bool:
        session = self._require_session(session)
        try:
            course = crud_course.get(db, id=course_id)
            if course is None:
                return False
            if course.is_free:
                return True
            if crud_subscription.get_active(db, session.user_id) is not None:
                return True
            return crud_course_access.get_active_grant(db, session.user_id, course_id) is not None
        except SQLAlchemyError as e:
            logger.error(f"Course access check failed for course {course_id} (user {session.user_id}): {e}")
            db.rollback()
            return False

    async def require_access(
        self, db: Session, session: Optional[AuthSession], kind: ContentKindEnum, item_id: int
    ) -> None:
        if not await self.has_access(db, session, kind, item_id):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="This content requires a course purchase.",
            )

access_service = AccessService()
