from sqlalchemy import Column, Integer, String, DateTime, Enum
from sqlalchemy.sql import func
from faceyoga.core.database import Base
from faceyoga.core.constants import SubscriptionStatusEnum

class UserSubscription(Base):
    __tablename__ = "user_subscriptions"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, unique=True, index=True, nullable=False)
    stripe_subscription_id = Column(String, unique=True, index=True, nullable=True)
    status = Column(Enum(SubscriptionStatusEnum), nullable=False, default=SubscriptionStatusEnum.ACTIVE)
    expires_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
