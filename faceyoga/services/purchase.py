import logging
from datetime import datetime
from typing import Optional

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from faceyoga.core.config import settings
from faceyoga.core.constants import PurchaseStatusEnum
from faceyoga.crud.course import course as crud_course
from faceyoga.crud.course_access import course_access as crud_course_access
from faceyoga.crud.purchase import purchase as crud_purchase
from faceyoga.models.purchase import CourseAccess, CoursePurchase
from faceyoga.utils.dates import grant_expiry

logger = logging.getLogger(__name__)


class PurchaseService:
    """Turns a confirmed payment into exactly one access grant per (user, course)."""

    def _validate(self, amount: float, payment_intent_id: str) -> None:
        if amount is None or amount < 0:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Amount must be zero or greater.")
        if not payment_intent_id or not payment_intent_id.strip():
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Payment intent id is required.")

    def _is_expired(self, grant: CourseAccess, now: datetime) -> bool:
        return grant.expires_at is not None and grant.expires_at <= now

    async def record_purchase(
        self,
        db: Session,
        user_id: str,
        course_id: int,
        amount: float,
        payment_intent_id: str,
        *,
        currency: Optional[str] = None,
        payment_method: str = "card",
        receipt_url: Optional[str] = None,
    ) -> CourseAccess:
        self._validate(amount, payment_intent_id)

        course = crud_course.get(db, id=course_id)
        if not course:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Course not found.")
        if course.is_free:
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Free courses do not require a purchase.",
            )

        existing = crud_course_access.get_active_grant(db, user_id, course_id)
        if existing:
            logger.info(f"User {user_id} already has access to course {course_id}")
            return existing

        purchase_result = crud_purchase.create_completed(
            db,
            user_id=user_id,
            course_id=course_id,
            amount=round(float(amount), 2),
            currency=currency or course.currency or settings.STRIPE_CURRENCY,
            payment_intent_id=payment_intent_id,
            payment_method=payment_method,
            receipt_url=receipt_url,
        )
        purchase = purchase_result.row
        if not purchase_result.created:
            logger.info(f"Payment {payment_intent_id} already recorded as purchase {purchase.id}")
            if purchase.user_id != user_id or purchase.course_id != course_id:
                raise HTTPException(
                    status_code=status.HTTP_409_CONFLICT,
                    detail="Payment was recorded for a different purchase.",
                )
            if purchase.status == PurchaseStatusEnum.REFUNDED:
                raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail="Payment has been refunded.")

        now = datetime.utcnow()
        expires_at = grant_expiry(
            course.access_type,
            now,
            trial_duration_days=course.trial_duration_days,
            subscription_duration_months=course.subscription_duration_months,
        )
        grant_result = crud_course_access.grant(
            db,
            user_id=user_id,
            course_id=course_id,
            purchase_id=purchase.id,
            access_type=course.access_type,
            starts_at=now,
            expires_at=expires_at,
        )
        if grant_result.created:
            logger.info(f"Granted {course.access_type.value} access to course {course_id} for user {user_id}")
            return grant_result.row

        grant = grant_result.row
        if grant is None:
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail="Access grant could not be read back.",
            )
        if self._is_expired(grant, now):
            if not purchase_result.created:
                # Each payment buys a single access period.
                raise HTTPException(
                    status_code=status.HTTP_409_CONFLICT,
                    detail="Payment has already been used for an access period that has ended.",
                )
            grant = crud_course_access.update(
                db,
                db_obj=grant,
                obj_in={
                    "purchase_id": purchase.id,
                    "access_type": course.access_type,
                    "starts_at": now,
                    "expires_at": expires_at,
                },
            )
            logger.info(f"Renewed access to course {course_id} for user {user_id}")
        else:
            logger.info(f"Concurrent grant for course {course_id} and user {user_id} already present")
        return grant

    async def mark_refunded(self, db: Session, payment_intent_id: str) -> Optional[CoursePurchase]:
        purchase = crud_purchase.get_by_payment_intent(db, payment_intent_id)
        if not purchase:
            logger.warning(f"Refund for unknown payment {payment_intent_id}")
            return None
        if purchase.status == PurchaseStatusEnum.REFUNDED:
            return purchase

        purchase = crud_purchase.mark_status(db, purchase, PurchaseStatusEnum.REFUNDED)
        grant = crud_course_access.get_by_purchase(db, purchase.id)
        if grant:
            crud_course_access.end(db, grant)
            logger.info(f"Ended access to course {grant.course_id} for user {grant.user_id} after refund")
        return purchase

    def get_purchases(self, db: Session, user_id: str):
        return crud_purchase.get_by_user(db, user_id)

purchase_service = PurchaseService()
