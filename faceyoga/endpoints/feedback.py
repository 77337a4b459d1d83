from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from faceyoga.schemas.auth import AuthSession
from faceyoga.schemas.feedback import Feedback, FeedbackCreate
from faceyoga.schemas.response import APIResponse
from faceyoga.services.feedback import feedback_service
from faceyoga.utils import deps

router = APIRouter()

@router.post("", response_model=APIResponse[Feedback])
async def submit_feedback(
    *,
    db: Session = Depends(deps.get_transactional_db),
    feedback_in: FeedbackCreate,
    session: AuthSession = Depends(deps.require_session)
):
    entry = await feedback_service.submit(db, session, feedback_in)
    return APIResponse(message="Thanks for your feedback", data=Feedback.model_validate(entry))
