from sqlalchemy import Column, Integer, String, Float, DateTime, ForeignKey, Enum, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from faceyoga.core.database import Base
from faceyoga.core.constants import AccessTypeEnum, PurchaseStatusEnum
from faceyoga.models.course import Course

class CoursePurchase(Base):
    __tablename__ = "course_purchases"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, index=True, nullable=False)
    course_id = Column(Integer, ForeignKey("courses.id"), nullable=False, index=True)
    amount = Column(Float, nullable=False)
    currency = Column(String, nullable=False, default="usd")
    status = Column(Enum(PurchaseStatusEnum), nullable=False, default=PurchaseStatusEnum.PENDING)
    payment_intent_id = Column(String, unique=True, index=True, nullable=False)
    payment_method = Column(String, nullable=False, default="card")
    receipt_url = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    course = relationship(Course)
    access = relationship("CourseAccess", back_populates="purchase", uselist=False)


class CourseAccess(Base):
    """Access grant. ``expires_at`` of ``None`` means lifetime access."""
    __tablename__ = "course_access"
    __table_args__ = (
        UniqueConstraint("user_id", "course_id", name="uq_course_access_user_course"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, index=True, nullable=False)
    course_id = Column(Integer, ForeignKey("courses.id"), nullable=False, index=True)
    purchase_id = Column(Integer, ForeignKey("course_purchases.id"), nullable=True)
    access_type = Column(Enum(AccessTypeEnum), nullable=False, default=AccessTypeEnum.LIFETIME)
    starts_at = Column(DateTime, nullable=False)
    expires_at = Column(DateTime, nullable=True)
    last_accessed_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    course = relationship(Course)
    purchase = relationship("CoursePurchase", back_populates="access")
