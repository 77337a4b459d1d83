from typing import List, Optional
from fastapi import APIRouter, Depends, File, Form, UploadFile
from sqlalchemy.orm import Session

from faceyoga.schemas.auth import AuthSession
from faceyoga.schemas.progress_photo import ProgressPhoto
from faceyoga.schemas.response import APIResponse
from faceyoga.services.progress_photo import progress_photo_service
from faceyoga.utils import deps

router = APIRouter()

@router.post("", response_model=APIResponse[ProgressPhoto])
async def upload_progress_photo(
    *,
    db: Session = Depends(deps.get_transactional_db),
    file: UploadFile = File(...),
    notes: Optional[str] = Form(None),
    session: AuthSession = Depends(deps.require_session)
):
    photo = await progress_photo_service.upload(db, session, file, notes)
    return APIResponse(message="Progress photo uploaded", data=ProgressPhoto.model_validate(photo))


@router.get("", response_model=APIResponse[List[ProgressPhoto]])
async def list_progress_photos(
    *,
    db: Session = Depends(deps.get_db),
    session: AuthSession = Depends(deps.require_session)
):
    photos = await progress_photo_service.list_photos(db, session)
    return APIResponse(
        message="Progress photos retrieved successfully",
        data=[ProgressPhoto.model_validate(p) for p in photos]
    )
