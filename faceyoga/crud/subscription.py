from datetime import datetime
from typing import Optional
from sqlalchemy import or_
from sqlalchemy.orm import Session

from faceyoga.core.constants import SubscriptionStatusEnum
from faceyoga.crud.base import CRUDBase
from faceyoga.models.subscription import UserSubscription
from pydantic import BaseModel


class CRUDUserSubscription(CRUDBase[UserSubscription, BaseModel, BaseModel]):

    def get_by_user(self, db: Session, user_id: str) -> Optional[UserSubscription]:
        return db.query(UserSubscription).filter(UserSubscription.user_id == user_id).first()

    def get_by_stripe_id(self, db: Session, stripe_subscription_id: str) -> Optional[UserSubscription]:
        return (
            db.query(UserSubscription)
            .filter(UserSubscription.stripe_subscription_id == stripe_subscription_id)
            .first()
        )

    def get_active(self, db: Session, user_id: str, now: Optional[datetime] = None) -> Optional[UserSubscription]:
        now = now or datetime.utcnow()
        return (
            db.query(UserSubscription)
            .filter(UserSubscription.user_id == user_id)
            .filter(UserSubscription.status == SubscriptionStatusEnum.ACTIVE)
            .filter(or_(UserSubscription.expires_at.is_(None), UserSubscription.expires_at > now))
            .first()
        )

    def upsert_from_stripe(
        self,
        db: Session,
        *,
        user_id: str,
        stripe_subscription_id: str,
        status: SubscriptionStatusEnum,
        expires_at: Optional[datetime],
    ) -> UserSubscription:
        db_obj = self.get_by_stripe_id(db, stripe_subscription_id) or self.get_by_user(db, user_id)
        if db_obj is None:
            db_obj = UserSubscription(user_id=user_id)
        db_obj.stripe_subscription_id = stripe_subscription_id
        db_obj.status = status
        db_obj.expires_at = expires_at
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def expire_lapsed(self, db: Session, now: Optional[datetime] = None) -> int:
        now = now or datetime.utcnow()
        updated = (
            db.query(UserSubscription)
            .filter(UserSubscription.status == SubscriptionStatusEnum.ACTIVE)
            .filter(UserSubscription.expires_at.isnot(None))
            .filter(UserSubscription.expires_at <= now)
            .update({UserSubscription.status: SubscriptionStatusEnum.EXPIRED}, synchronize_session=False)
        )
        db.commit()
        return updated

subscription = CRUDUserSubscription(UserSubscription)
