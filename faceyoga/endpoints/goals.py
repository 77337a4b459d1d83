from typing import List
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from faceyoga.crud.goal import goal as crud_goal
from faceyoga.schemas.auth import AuthSession
from faceyoga.schemas.goal import (
    ContributionIn,
    Goal,
    GoalAnalytics,
    GoalMilestone,
    GoalProgress,
    GoalStatusUpdate,
)
from faceyoga.schemas.response import APIResponse
from faceyoga.services.goal_progress import goal_progress_service
from faceyoga.utils import deps

router = APIRouter()

@router.get("", response_model=APIResponse[List[Goal]])
async def list_goals(*, db: Session = Depends(deps.get_db)):
    goals = crud_goal.get_multi(db)
    return APIResponse(message="Goals retrieved successfully", data=[Goal.model_validate(g) for g in goals])


@router.get("/progress", response_model=APIResponse[List[GoalProgress]])
async def get_goal_progress(
    *,
    db: Session = Depends(deps.get_db),
    session: AuthSession = Depends(deps.require_session)
):
    rows = await goal_progress_service.get_goal_progress(db, session)
    return APIResponse(message="Goal progress retrieved successfully", data=[GoalProgress.model_validate(r) for r in rows])


@router.get("/{goal_id}/milestones", response_model=APIResponse[List[GoalMilestone]])
async def get_goal_milestones(*, db: Session = Depends(deps.get_db), goal_id: int):
    milestones = await goal_progress_service.get_goal_milestones(db, goal_id)
    return APIResponse(
        message="Milestones retrieved successfully",
        data=[GoalMilestone.model_validate(m) for m in milestones]
    )


@router.post("/{goal_id}/contributions", response_model=APIResponse[GoalProgress])
async def apply_contribution(
    *,
    db: Session = Depends(deps.get_transactional_db),
    goal_id: int,
    contribution_in: ContributionIn,
    session: AuthSession = Depends(deps.require_session)
):
    progress = await goal_progress_service.apply_contribution(db, session, goal_id, contribution_in.weight)
    return APIResponse(message="Progress updated", data=GoalProgress.model_validate(progress))


@router.put("/{goal_id}/status", response_model=APIResponse[GoalProgress])
async def update_goal_status(
    *,
    db: Session = Depends(deps.get_transactional_db),
    goal_id: int,
    status_in: GoalStatusUpdate,
    session: AuthSession = Depends(deps.require_session)
):
    progress = await goal_progress_service.update_goal_status(db, session, goal_id, status_in.status)
    return APIResponse(message="Goal status updated", data=GoalProgress.model_validate(progress))


@router.get("/{goal_id}/analytics", response_model=APIResponse[GoalAnalytics])
async def get_goal_analytics(
    *,
    db: Session = Depends(deps.get_db),
    goal_id: int,
    _: AuthSession = Depends(deps.require_admin)
):
    analytics = await goal_progress_service.get_goal_analytics(db, goal_id)
    return APIResponse(message="Goal analytics retrieved successfully", data=analytics)
