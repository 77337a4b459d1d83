from typing import List, Optional
from sqlalchemy.orm import Session

from faceyoga.crud.base import CRUDBase
from faceyoga.models.lesson import Lesson
from faceyoga.schemas.lesson import LessonCreate, LessonUpdate


class CRUDLesson(CRUDBase[Lesson, LessonCreate, LessonUpdate]):

    def get_catalog(
        self, db: Session, *, category: Optional[str] = None, skip: int = 0, limit: int = 50
    ) -> List[Lesson]:
        query = db.query(Lesson)
        if category:
            query = query.filter(Lesson.category == category)
        return query.order_by(Lesson.id).offset(skip).limit(limit).all()

lesson = CRUDLesson(Lesson)
