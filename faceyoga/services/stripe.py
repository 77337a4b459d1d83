import logging
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import stripe
from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from faceyoga.core.config import settings
from faceyoga.core.constants import SubscriptionStatusEnum
from faceyoga.crud.course import course as crud_course
from faceyoga.crud.subscription import subscription as crud_subscription
from faceyoga.models.purchase import CourseAccess
from faceyoga.schemas.auth import AuthSession
from faceyoga.schemas.purchase import PaymentIntentResponse
from faceyoga.services.purchase import purchase_service

logger = logging.getLogger(__name__)

stripe.api_key = settings.STRIPE_SECRET_KEY

_SUBSCRIPTION_STATUS_MAP = {
    "active": SubscriptionStatusEnum.ACTIVE,
    "trialing": SubscriptionStatusEnum.TRIALING,
    "past_due": SubscriptionStatusEnum.PAST_DUE,
    "unpaid": SubscriptionStatusEnum.PAST_DUE,
    "canceled": SubscriptionStatusEnum.CANCELED,
    "incomplete_expired": SubscriptionStatusEnum.EXPIRED,
}


def to_minor_units(amount: float) -> int:
    return int(round(amount * 100))


def as_payload(obj) -> Dict[str, Any]:
    """Plain dict view of a Stripe object or of an already decoded payload."""
    if isinstance(obj, stripe.StripeObject):
        return obj.to_dict()
    return obj


def _from_timestamp(value: Optional[int]) -> Optional[datetime]:
    if not value:
        return None
    return datetime.fromtimestamp(value, tz=timezone.utc).replace(tzinfo=None)


class StripeService:

    async def _make_request(self, stripe_api_call, *args, **kwargs):
        try:
            return stripe_api_call(*args, **kwargs)
        except stripe.StripeError as e:
            logger.error(f"Stripe error: {e}")
            raise HTTPException(
                status_code=status.HTTP_502_BAD_GATEWAY,
                detail=f"Stripe error: {e.user_message or 'payment provider unavailable'}",
            )

    def _require_session(self, session: Optional[AuthSession]) -> AuthSession:
        if session is None:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
        return session

    def _get_paid_course(self, db: Session, course_id: int):
        course = crud_course.get(db, id=course_id)
        if not course:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Course not found.")
        if course.is_free:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Free courses do not require a purchase.",
            )
        return course

    async def create_payment_intent(
        self, db: Session, session: Optional[AuthSession], course_id: int, amount: float
    ) -> PaymentIntentResponse:
        session = self._require_session(session)
        course = self._get_paid_course(db, course_id)
        if round(amount, 2) != round(course.price, 2):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Amount does not match course price.")

        intent = await self._make_request(
            stripe.PaymentIntent.create,
            amount=to_minor_units(amount),
            currency=course.currency or settings.STRIPE_CURRENCY,
            automatic_payment_methods={"enabled": True},
            metadata={"user_id": session.user_id, "course_id": str(course.id)},
        )
        logger.info(f"Created payment intent {intent['id']} for course {course.id} (user {session.user_id})")
        return PaymentIntentResponse(client_secret=intent["client_secret"], payment_intent_id=intent["id"])

    async def confirm_payment(
        self, db: Session, session: Optional[AuthSession], payment_intent_id: str, course_id: int
    ) -> CourseAccess:
        session = self._require_session(session)
        course = self._get_paid_course(db, course_id)

        intent = as_payload(await self._make_request(stripe.PaymentIntent.retrieve, payment_intent_id))
        if intent["status"] != "succeeded":
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Payment has not succeeded.")

        metadata = intent.get("metadata") or {}
        if metadata.get("user_id") != session.user_id or str(metadata.get("course_id")) != str(course.id):
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Payment does not match this purchase.")

        return await purchase_service.record_purchase(
            db,
            session.user_id,
            course.id,
            self._intent_amount(intent),
            payment_intent_id,
            currency=intent.get("currency"),
            payment_method=self._payment_method(intent),
        )

    def _intent_amount(self, intent: Dict[str, Any]) -> float:
        return (intent.get("amount_received") or intent.get("amount") or 0) / 100

    def _payment_method(self, intent: Dict[str, Any]) -> str:
        types = intent.get("payment_method_types") or ["card"]
        return types[0]

    async def handle_payment_intent_succeeded_event(self, db: Session, event: stripe.Event):
        intent = as_payload(event['data']['object'])
        metadata = intent.get('metadata') or {}
        user_id = metadata.get('user_id')
        course_id = metadata.get('course_id')
        if not user_id or not course_id:
            logger.warning(f"Payment intent {intent['id']} has no course metadata, ignoring")
            return None

        try:
            return await purchase_service.record_purchase(
                db,
                user_id,
                int(course_id),
                self._intent_amount(intent),
                intent['id'],
                currency=intent.get('currency'),
                payment_method=self._payment_method(intent),
            )
        except HTTPException as e:
            if e.status_code != status.HTTP_409_CONFLICT:
                raise
            logger.warning(f"Payment intent {intent['id']} not applied: {e.detail}")
            return None

    async def handle_charge_refunded_event(self, db: Session, event: stripe.Event):
        charge = as_payload(event['data']['object'])
        if not charge.get('refunded'):
            logger.info(f"Partial refund on charge {charge['id']}, access kept")
            return None
        payment_intent_id = charge.get('payment_intent')
        if not payment_intent_id:
            return None
        return await purchase_service.mark_refunded(db, payment_intent_id)

    def _subscription_expiry(self, subscription: Dict[str, Any]) -> Optional[datetime]:
        period_end = subscription.get('current_period_end')
        if not period_end:
            items = (subscription.get('items') or {}).get('data') or []
            period_end = items[0].get('current_period_end') if items else None
        return _from_timestamp(period_end)

    async def handle_subscription_event(self, db: Session, event: stripe.Event):
        subscription = as_payload(event['data']['object'])
        user_id = (subscription.get('metadata') or {}).get('user_id')
        if not user_id:
            existing = crud_subscription.get_by_stripe_id(db, subscription['id'])
            if not existing:
                logger.warning(f"Subscription {subscription['id']} has no user metadata, ignoring")
                return None
            user_id = existing.user_id

        if event['type'] == 'customer.subscription.deleted':
            new_status = SubscriptionStatusEnum.CANCELED
        else:
            new_status = _SUBSCRIPTION_STATUS_MAP.get(subscription.get('status'), SubscriptionStatusEnum.EXPIRED)

        db_subscription = crud_subscription.upsert_from_stripe(
            db,
            user_id=user_id,
            stripe_subscription_id=subscription['id'],
            status=new_status,
            expires_at=self._subscription_expiry(subscription),
        )
        logger.info(f"Subscription {subscription['id']} for user {user_id} is now {new_status.value}")
        return db_subscription

stripe_service = StripeService()
