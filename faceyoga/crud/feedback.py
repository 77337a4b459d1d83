from typing import List
from sqlalchemy.orm import Session

from faceyoga.crud.base import CRUDBase
from faceyoga.models.feedback import Feedback
from faceyoga.schemas.feedback import FeedbackCreate


class CRUDFeedback(CRUDBase[Feedback, FeedbackCreate, FeedbackCreate]):

    def get_recent(self, db: Session, *, skip: int = 0, limit: int = 100) -> List[Feedback]:
        return db.query(Feedback).order_by(Feedback.id.desc()).offset(skip).limit(limit).all()

feedback = CRUDFeedback(Feedback)
