from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional
from datetime import datetime

from faceyoga.core.constants import AccessTypeEnum, PurchaseStatusEnum
from faceyoga.schemas.validators import require_text


class PaymentIntentCreate(BaseModel):
    course_id: int
    amount: float = Field(..., ge=0)


class PaymentIntentResponse(BaseModel):
    client_secret: str
    payment_intent_id: str


class PaymentConfirm(BaseModel):
    course_id: int
    payment_intent_id: str

    @field_validator("payment_intent_id")
    @classmethod
    def intent_required(cls, v):
        return require_text(v, "Payment intent id")


class CoursePurchase(BaseModel):
    id: int
    user_id: str
    course_id: int
    amount: float
    currency: str
    status: PurchaseStatusEnum
    payment_intent_id: str
    payment_method: str
    receipt_url: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class CourseAccess(BaseModel):
    id: int
    user_id: str
    course_id: int
    purchase_id: Optional[int] = None
    access_type: AccessTypeEnum
    starts_at: datetime
    expires_at: Optional[datetime] = None
    last_accessed_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
