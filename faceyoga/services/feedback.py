import logging
from typing import List

from sqlalchemy.orm import Session

from faceyoga.crud.feedback import feedback as crud_feedback
from faceyoga.models.feedback import Feedback
from faceyoga.schemas.auth import AuthSession
from faceyoga.schemas.feedback import FeedbackCreate

logger = logging.getLogger(__name__)


class FeedbackService:

    async def submit(self, db: Session, session: AuthSession, feedback_in: FeedbackCreate) -> Feedback:
        entry = crud_feedback.create(
            db,
            obj_in={"user_id": session.user_id, "rating": feedback_in.rating, "message": feedback_in.message},
        )
        logger.info(f"Feedback {entry.id} received from user {session.user_id} (rating {entry.rating})")
        return entry

    async def list_recent(self, db: Session, skip: int = 0, limit: int = 100) -> List[Feedback]:
        return crud_feedback.get_recent(db, skip=skip, limit=limit)

feedback_service = FeedbackService()
