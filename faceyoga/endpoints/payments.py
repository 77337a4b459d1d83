from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from faceyoga.schemas.auth import AuthSession
from faceyoga.schemas.purchase import (
    CourseAccess,
    CoursePurchase,
    PaymentConfirm,
    PaymentIntentCreate,
    PaymentIntentResponse,
)
from faceyoga.schemas.response import APIResponse
from faceyoga.services.purchase import purchase_service
from faceyoga.services.stripe import stripe_service
from faceyoga.utils import deps

router = APIRouter()

@router.post("/intent", response_model=APIResponse[PaymentIntentResponse])
async def create_payment_intent(
    *,
    db: Session = Depends(deps.get_db),
    intent_in: PaymentIntentCreate,
    session: AuthSession = Depends(deps.require_session)
):
    intent = await stripe_service.create_payment_intent(db, session, intent_in.course_id, intent_in.amount)
    return APIResponse(message="Payment intent created", data=intent)


@router.post("/confirm", response_model=APIResponse[CourseAccess])
async def confirm_payment(
    *,
    db: Session = Depends(deps.get_transactional_db),
    confirm_in: PaymentConfirm,
    session: AuthSession = Depends(deps.require_session)
):
    grant = await stripe_service.confirm_payment(db, session, confirm_in.payment_intent_id, confirm_in.course_id)
    return APIResponse(message="Purchase recorded", data=CourseAccess.model_validate(grant))


@router.get("/purchases", response_model=APIResponse[List[CoursePurchase]])
async def list_purchases(
    *,
    db: Session = Depends(deps.get_db),
    session: AuthSession = Depends(deps.require_session)
):
    purchases = purchase_service.get_purchases(db, session.user_id)
    return APIResponse(
        message="Purchases retrieved successfully",
        data=[CoursePurchase.model_validate(p) for p in purchases]
    )
