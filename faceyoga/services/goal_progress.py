import logging
from typing import List, Optional, Sequence

from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from faceyoga.core.constants import GoalStatusEnum
from faceyoga.crud.goal import goal as crud_goal
from faceyoga.crud.goal_progress import goal_progress as crud_goal_progress
from faceyoga.models.goal import GoalMilestone, GoalProgress
from faceyoga.schemas.auth import AuthSession
from faceyoga.schemas.goal import GoalAnalytics

logger = logging.getLogger(__name__)


def count_reached(milestones: Sequence[GoalMilestone], value: float) -> int:
    return sum(1 for m in milestones if m.target_value <= value)


def next_status(
    current: Optional[GoalStatusEnum], value: float, reached: int, total: int
) -> GoalStatusEnum:
    if current == GoalStatusEnum.COMPLETED:
        return GoalStatusEnum.COMPLETED
    if reached == total:
        return GoalStatusEnum.COMPLETED
    if current == GoalStatusEnum.PAUSED:
        return GoalStatusEnum.PAUSED
    if value > 0:
        return GoalStatusEnum.IN_PROGRESS
    return current or GoalStatusEnum.NOT_STARTED


class GoalProgressService:
    """Accumulates weighted lesson contributions into per-user goal progress.

    Contributions are not deduplicated; callers apply each completion event once.
    """

    def _require_session(self, session: Optional[AuthSession]) -> AuthSession:
        if session is None:
            raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Not authenticated")
        return session

    def _get_goal_or_404(self, db: Session, goal_id: int):
        goal = crud_goal.get(db, id=goal_id)
        if not goal:
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Goal not found.")
        return goal

    async def apply_contribution(
        self, db: Session, session: Optional[AuthSession], goal_id: int, weight: float
    ) -> GoalProgress:
        session = self._require_session(session)
        if weight is None or weight < 0:
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Contribution weight must be zero or greater.")
        goal = self._get_goal_or_404(db, goal_id)

        row = crud_goal_progress.get_by_user_and_goal(db, session.user_id, goal_id)
        current_value = row.progress_value if row else 0.0
        current_status = row.status if row else None

        new_value = current_value + weight
        reached = count_reached(goal.milestones, new_value)
        new_status = next_status(current_status, new_value, reached, len(goal.milestones))

        progress = crud_goal_progress.upsert(
            db,
            user_id=session.user_id,
            goal_id=goal_id,
            progress_value=new_value,
            milestone_reached=reached,
            status=new_status,
        )
        if new_status == GoalStatusEnum.COMPLETED and current_status != GoalStatusEnum.COMPLETED:
            logger.info(f"User {session.user_id} completed goal {goal_id}")
        return progress

    async def track_lesson_completion(
        self, db: Session, session: Optional[AuthSession], lesson_id: int
    ) -> List[GoalProgress]:
        session = self._require_session(session)
        results = []
        for mapping in crud_goal.get_mappings_for_lesson(db, lesson_id):
            results.append(
                await self.apply_contribution(db, session, mapping.goal_id, mapping.contribution_weight)
            )
        return results

    async def update_goal_status(
        self, db: Session, session: Optional[AuthSession], goal_id: int, new_status: GoalStatusEnum
    ) -> GoalProgress:
        session = self._require_session(session)
        if new_status not in (GoalStatusEnum.IN_PROGRESS, GoalStatusEnum.PAUSED):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="Goals can only be paused or resumed.",
            )
        goal = self._get_goal_or_404(db, goal_id)

        row = crud_goal_progress.get_by_user_and_goal(db, session.user_id, goal_id)
        value = row.progress_value if row else 0.0
        reached = count_reached(goal.milestones, value)
        if new_status == GoalStatusEnum.IN_PROGRESS:
            total = len(goal.milestones)
            new_status = GoalStatusEnum.COMPLETED if total > 0 and reached == total else GoalStatusEnum.IN_PROGRESS

        return crud_goal_progress.upsert(
            db,
            user_id=session.user_id,
            goal_id=goal_id,
            progress_value=value,
            milestone_reached=reached,
            status=new_status,
        )

    async def get_goal_progress(self, db: Session, session: Optional[AuthSession]) -> List[GoalProgress]:
        session = self._require_session(session)
        return crud_goal_progress.get_by_user(db, session.user_id)

    async def get_goal_milestones(self, db: Session, goal_id: int) -> List[GoalMilestone]:
        self._get_goal_or_404(db, goal_id)
        return crud_goal.get_milestones(db, goal_id)

    async def get_goal_analytics(self, db: Session, goal_id: int) -> GoalAnalytics:
        goal = self._get_goal_or_404(db, goal_id)
        rows = crud_goal_progress.get_by_goal(db, goal_id)
        total_milestones = len(goal.milestones)

        if not rows:
            return GoalAnalytics(
                goal_id=goal_id, participants=0, completion_rate=0.0, average_progress=0.0, time_spent_hours=0.0
            )

        possible = total_milestones * len(rows)
        completion_rate = sum(r.milestone_reached for r in rows) / possible if possible else 0.0
        average_progress = sum(r.progress_value for r in rows) / len(rows)
        seconds = sum(max((r.last_updated - r.created_at).total_seconds(), 0) for r in rows)

        return GoalAnalytics(
            goal_id=goal_id,
            participants=len(rows),
            completion_rate=round(completion_rate, 4),
            average_progress=round(average_progress, 2),
            time_spent_hours=round(seconds / 3600, 2),
        )

goal_progress_service = GoalProgressService()
