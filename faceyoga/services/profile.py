import logging
from typing import Optional

from fastapi import HTTPException, UploadFile, status
from sqlalchemy.orm import Session

from faceyoga.core.constants import RoleEnum
from faceyoga.crud.profile import profile as crud_profile
from faceyoga.models.profile import Profile
from faceyoga.schemas.auth import AuthSession
from faceyoga.schemas.profile import ProfileUpdate
from faceyoga.services.cloudinary import cloudinary_service

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_TYPES = {"image/jpeg", "image/png", "image/webp", "image/gif"}


def default_username(email: Optional[str]) -> Optional[str]:
    if not email or "@" not in email:
        return None
    return email.split("@", 1)[0]


async def read_image(file: UploadFile) -> bytes:
    if file.content_type not in ALLOWED_IMAGE_TYPES:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Only image uploads are allowed.")
    content = await file.read()
    if not content:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Uploaded file is empty.")
    return content


class ProfileService:

    def get_or_create(self, db: Session, session: AuthSession) -> Profile:
        profile = crud_profile.get_by_user_id(db, session.user_id)
        if profile:
            return profile

        result = crud_profile.insert_ignore_conflict(
            db,
            values={
                "user_id": session.user_id,
                "email": session.email or "",
                "username": default_username(session.email),
                "role": RoleEnum.USER,
                "streak": 0,
                "exercises_done": 0,
                "practice_time": 0,
                "onboarding_completed": False,
            },
            conflict_columns=["user_id"],
        )
        if result.created:
            logger.info(f"Created default profile for user {session.user_id}")
        return result.row

    async def update_profile(self, db: Session, session: AuthSession, profile_in: ProfileUpdate) -> Profile:
        profile = self.get_or_create(db, session)
        return crud_profile.update(db, db_obj=profile, obj_in=profile_in)

    async def update_avatar(self, db: Session, session: AuthSession, file: UploadFile) -> Profile:
        content = await read_image(file)
        profile = self.get_or_create(db, session)
        previous_url = profile.avatar_url

        new_url = cloudinary_service.upload_image(content, folder="avatars")
        profile = crud_profile.update(db, db_obj=profile, obj_in={"avatar_url": new_url})

        if previous_url and previous_url != new_url:
            cloudinary_service.delete_image(previous_url)
        return profile

profile_service = ProfileService()
