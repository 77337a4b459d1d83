from typing import List
from sqlalchemy.orm import Session
from pydantic import BaseModel

from faceyoga.crud.base import CRUDBase
from faceyoga.models.progress_photo import ProgressPhoto


class CRUDProgressPhoto(CRUDBase[ProgressPhoto, BaseModel, BaseModel]):

    def get_by_user(self, db: Session, user_id: str) -> List[ProgressPhoto]:
        return (
            db.query(ProgressPhoto)
            .filter(ProgressPhoto.user_id == user_id)
            .order_by(ProgressPhoto.id.desc())
            .all()
        )

progress_photo = CRUDProgressPhoto(ProgressPhoto)
