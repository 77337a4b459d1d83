from typing import Optional
from sqlalchemy.orm import Session

from faceyoga.crud.base import CRUDBase
from faceyoga.models.profile import Profile
from faceyoga.schemas.profile import ProfileUpdate


class CRUDProfile(CRUDBase[Profile, ProfileUpdate, ProfileUpdate]):

    def get_by_user_id(self, db: Session, user_id: str) -> Optional[Profile]:
        return db.query(Profile).filter(Profile.user_id == user_id).first()

    def increment_practice(self, db: Session, db_obj: Profile, *, exercises: int = 0, seconds: int = 0) -> Profile:
        db_obj.exercises_done = (db_obj.exercises_done or 0) + exercises
        db_obj.practice_time = (db_obj.practice_time or 0) + seconds
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

profile = CRUDProfile(Profile)
