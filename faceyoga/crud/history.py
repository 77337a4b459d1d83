from datetime import datetime
from typing import List, Optional
from sqlalchemy.orm import Session

from faceyoga.models.history import ExerciseHistory, LessonHistory


class CRUDExerciseHistory:
    def create(self, db: Session, *, user_id: str, exercise_id: int, duration: int, completed_at: Optional[datetime] = None) -> ExerciseHistory:
        db_obj = ExerciseHistory(
            user_id=user_id,
            exercise_id=exercise_id,
            duration=duration,
            completed_at=completed_at or datetime.utcnow(),
        )
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def get_by_user(self, db: Session, user_id: str, skip: int = 0, limit: int = 100) -> List[ExerciseHistory]:
        return (
            db.query(ExerciseHistory)
            .filter(ExerciseHistory.user_id == user_id)
            .order_by(ExerciseHistory.completed_at.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )

    def count(self, db: Session) -> int:
        return db.query(ExerciseHistory).count()


class CRUDLessonHistory:
    def create(self, db: Session, *, user_id: str, lesson_id: int, practice_time: int, completed_at: Optional[datetime] = None) -> LessonHistory:
        db_obj = LessonHistory(
            user_id=user_id,
            lesson_id=lesson_id,
            practice_time=practice_time,
            completed_at=completed_at or datetime.utcnow(),
        )
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def get_by_user(self, db: Session, user_id: str, skip: int = 0, limit: int = 100) -> List[LessonHistory]:
        return (
            db.query(LessonHistory)
            .filter(LessonHistory.user_id == user_id)
            .order_by(LessonHistory.completed_at.desc())
            .offset(skip)
            .limit(limit)
            .all()
        )

    def get_latest(self, db: Session, user_id: str) -> Optional[LessonHistory]:
        query = db.query(LessonHistory).filter(LessonHistory.user_id == user_id)
        return query.order_by(LessonHistory.completed_at.desc()).first()

    def count(self, db: Session) -> int:
        return db.query(LessonHistory).count()

exercise_history = CRUDExerciseHistory()
lesson_history = CRUDLessonHistory()
