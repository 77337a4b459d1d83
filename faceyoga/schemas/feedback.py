from pydantic import BaseModel, ConfigDict, Field
from typing import Optional
from datetime import datetime


class FeedbackCreate(BaseModel):
    rating: int = Field(..., ge=1, le=5)
    message: Optional[str] = None


class Feedback(BaseModel):
    id: int
    user_id: str
    rating: int
    message: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
