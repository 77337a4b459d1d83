from datetime import datetime
from typing import Iterable, Optional
from sqlalchemy import or_
from sqlalchemy.orm import Session

from faceyoga.core.constants import AccessTypeEnum
from faceyoga.crud.base import CRUDBase, UpsertResult
from faceyoga.models.purchase import CourseAccess
from faceyoga.schemas.purchase import CourseAccess as CourseAccessSchema


class CRUDCourseAccess(CRUDBase[CourseAccess, CourseAccessSchema, CourseAccessSchema]):

    def _query_unexpired(self, db: Session, now: Optional[datetime] = None):
        now = now or datetime.utcnow()
        return db.query(CourseAccess).filter(
            or_(CourseAccess.expires_at.is_(None), CourseAccess.expires_at > now)
        )

    def get_active_grant(self, db: Session, user_id: str, course_id: int) -> Optional[CourseAccess]:
        return (
            self._query_unexpired(db)
            .filter(CourseAccess.user_id == user_id)
            .filter(CourseAccess.course_id == course_id)
            .first()
        )

    def has_any_active_grant(self, db: Session, user_id: str, course_ids: Iterable[int]) -> bool:
        for course_id in course_ids:
            if self.get_active_grant(db, user_id, course_id) is not None:
                return True
        return False

    def get_by_purchase(self, db: Session, purchase_id: int) -> Optional[CourseAccess]:
        return db.query(CourseAccess).filter(CourseAccess.purchase_id == purchase_id).first()

    def count_active(self, db: Session) -> int:
        return self._query_unexpired(db).count()

    def grant(
        self,
        db: Session,
        *,
        user_id: str,
        course_id: int,
        purchase_id: Optional[int],
        access_type: AccessTypeEnum,
        starts_at: datetime,
        expires_at: Optional[datetime],
    ) -> UpsertResult[CourseAccess]:
        values = {
            "user_id": user_id,
            "course_id": course_id,
            "purchase_id": purchase_id,
            "access_type": access_type,
            "starts_at": starts_at,
            "expires_at": expires_at,
            "created_at": starts_at,
        }
        return self.insert_ignore_conflict(db, values=values, conflict_columns=["user_id", "course_id"])

    def end(self, db: Session, db_obj: CourseAccess, at: Optional[datetime] = None) -> CourseAccess:
        db_obj.expires_at = at or datetime.utcnow()
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def touch(self, db: Session, db_obj: CourseAccess) -> CourseAccess:
        db_obj.last_accessed_at = datetime.utcnow()
        db.add(db_obj)
        db.commit()
        return db_obj

course_access = CRUDCourseAccess(CourseAccess)
