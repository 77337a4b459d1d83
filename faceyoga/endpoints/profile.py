from fastapi import APIRouter, Depends, File, UploadFile
from sqlalchemy.orm import Session

from faceyoga.schemas.auth import AuthSession
from faceyoga.schemas.profile import Profile, ProfileUpdate
from faceyoga.schemas.response import APIResponse
from faceyoga.services.profile import profile_service
from faceyoga.utils import deps

router = APIRouter()

@router.get("/me", response_model=APIResponse[Profile])
async def get_my_profile(
    *,
    db: Session = Depends(deps.get_db),
    session: AuthSession = Depends(deps.require_session)
):
    profile = profile_service.get_or_create(db, session)
    return APIResponse(message="Profile retrieved successfully", data=Profile.model_validate(profile))


@router.put("/me", response_model=APIResponse[Profile])
async def update_my_profile(
    *,
    db: Session = Depends(deps.get_transactional_db),
    profile_in: ProfileUpdate,
    session: AuthSession = Depends(deps.require_session)
):
    profile = await profile_service.update_profile(db, session, profile_in)
    return APIResponse(message="Profile updated successfully", data=Profile.model_validate(profile))


@router.post("/me/avatar", response_model=APIResponse[Profile])
async def upload_avatar(
    *,
    db: Session = Depends(deps.get_transactional_db),
    file: UploadFile = File(...),
    session: AuthSession = Depends(deps.require_session)
):
    profile = await profile_service.update_avatar(db, session, file)
    return APIResponse(message="Avatar updated successfully", data=Profile.model_validate(profile))
