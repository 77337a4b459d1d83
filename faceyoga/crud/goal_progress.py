from datetime import datetime
from typing import List, Optional
from sqlalchemy.orm import Session
from pydantic import BaseModel

from faceyoga.core.constants import GoalStatusEnum
from faceyoga.crud.base import CRUDBase
from faceyoga.models.goal import GoalProgress


class CRUDGoalProgress(CRUDBase[GoalProgress, BaseModel, BaseModel]):

    def get_by_user_and_goal(self, db: Session, user_id: str, goal_id: int) -> Optional[GoalProgress]:
        return (
            db.query(GoalProgress)
            .filter(GoalProgress.user_id == user_id)
            .filter(GoalProgress.goal_id == goal_id)
            .first()
        )

    def get_by_user(self, db: Session, user_id: str) -> List[GoalProgress]:
        return (
            db.query(GoalProgress)
            .filter(GoalProgress.user_id == user_id)
            .order_by(GoalProgress.goal_id)
            .all()
        )

    def get_by_goal(self, db: Session, goal_id: int) -> List[GoalProgress]:
        return db.query(GoalProgress).filter(GoalProgress.goal_id == goal_id).all()

    def upsert(
        self,
        db: Session,
        *,
        user_id: str,
        goal_id: int,
        progress_value: float,
        milestone_reached: int,
        status: GoalStatusEnum,
        now: Optional[datetime] = None,
    ) -> GoalProgress:
        """Write the row keyed on (user_id, goal_id), creating it on first use."""
        now = now or datetime.utcnow()
        db_obj = self.get_by_user_and_goal(db, user_id, goal_id)
        if db_obj is None:
            result = self.insert_ignore_conflict(
                db,
                values={
                    "user_id": user_id,
                    "goal_id": goal_id,
                    "progress_value": progress_value,
                    "milestone_reached": milestone_reached,
                    "status": status,
                    "created_at": now,
                    "last_updated": now,
                },
                conflict_columns=["user_id", "goal_id"],
            )
            if result.created:
                return result.row
            db_obj = result.row

        db_obj.progress_value = progress_value
        db_obj.milestone_reached = milestone_reached
        db_obj.status = status
        db_obj.last_updated = now
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

goal_progress = CRUDGoalProgress(GoalProgress)
