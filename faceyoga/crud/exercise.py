from typing import List, Optional
from sqlalchemy.orm import Session

from faceyoga.crud.base import CRUDBase
from faceyoga.models.exercise import Exercise
from faceyoga.schemas.exercise import ExerciseCreate, ExerciseUpdate


class CRUDExercise(CRUDBase[Exercise, ExerciseCreate, ExerciseUpdate]):

    def get_catalog(
        self, db: Session, *, category: Optional[str] = None, skip: int = 0, limit: int = 50
    ) -> List[Exercise]:
        query = db.query(Exercise)
        if category:
            query = query.filter(Exercise.category == category)
        return (
            query.order_by(Exercise.created_at.desc(), Exercise.id.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )

exercise = CRUDExercise(Exercise)
