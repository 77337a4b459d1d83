from typing import List, Optional

from fastapi import UploadFile
from sqlalchemy.orm import Session

from faceyoga.crud.progress_photo import progress_photo as crud_progress_photo
from faceyoga.models.progress_photo import ProgressPhoto
from faceyoga.schemas.auth import AuthSession
from faceyoga.services.cloudinary import cloudinary_service
from faceyoga.services.profile import read_image


class ProgressPhotoService:

    async def upload(
        self, db: Session, session: AuthSession, file: UploadFile, notes: Optional[str] = None
    ) -> ProgressPhoto:
        content = await read_image(file)
        image_url = cloudinary_service.upload_image(content, folder=f"progress/{session.user_id}")
        return crud_progress_photo.create(
            db, obj_in={"user_id": session.user_id, "image_url": image_url, "notes": notes}
        )

    async def list_photos(self, db: Session, session: AuthSession) -> List[ProgressPhoto]:
        return crud_progress_photo.get_by_user(db, session.user_id)

progress_photo_service = ProgressPhotoService()
