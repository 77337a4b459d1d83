from pydantic import BaseModel, ConfigDict
from typing import Optional
from datetime import datetime


class ProgressPhoto(BaseModel):
    id: int
    user_id: str
    image_url: str
    notes: Optional[str] = None
    created_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)
