from typing import List
from sqlalchemy.orm import Session, selectinload

from faceyoga.crud.base import CRUDBase
from faceyoga.models.goal import Goal, GoalMilestone, LessonGoalMapping
from faceyoga.schemas.goal import GoalCreate


class CRUDGoal(CRUDBase[Goal, GoalCreate, GoalCreate]):

    def _query_with_relationships(self, db: Session):
        return db.query(Goal).options(
            selectinload(Goal.milestones),
            selectinload(Goal.lesson_mappings),
        )

    def get(self, db: Session, id: int):
        return self._query_with_relationships(db).filter(Goal.id == id).first()

    def get_multi(self, db: Session, *, skip: int = 0, limit: int = 100) -> List[Goal]:
        return self._query_with_relationships(db).order_by(Goal.id).offset(skip).limit(limit).all()

    def get_milestones(self, db: Session, goal_id: int) -> List[GoalMilestone]:
        return (
            db.query(GoalMilestone)
            .filter(GoalMilestone.goal_id == goal_id)
            .order_by(GoalMilestone.target_value)
            .all()
        )

    def get_mappings_for_lesson(self, db: Session, lesson_id: int) -> List[LessonGoalMapping]:
        return (
            db.query(LessonGoalMapping)
            .filter(LessonGoalMapping.lesson_id == lesson_id)
            .order_by(LessonGoalMapping.goal_id)
            .all()
        )

    def create_with_children(self, db: Session, *, obj_in: GoalCreate) -> Goal:
        db_obj = Goal(label=obj_in.label, description=obj_in.description)
        db_obj.milestones = [GoalMilestone(**m.model_dump()) for m in obj_in.milestones]
        db_obj.lesson_mappings = [LessonGoalMapping(**m.model_dump()) for m in obj_in.lesson_mappings]
        db.add(db_obj)
        db.commit()
        return self.get(db, id=db_obj.id)

    def update_with_children(self, db: Session, *, db_obj: Goal, obj_in: GoalCreate) -> Goal:
        db_obj.label = obj_in.label
        db_obj.description = obj_in.description
        db_obj.milestones = []
        db_obj.lesson_mappings = []
        db.flush()
        db_obj.milestones = [GoalMilestone(**m.model_dump()) for m in obj_in.milestones]
        db_obj.lesson_mappings = [LessonGoalMapping(**m.model_dump()) for m in obj_in.lesson_mappings]
        db.add(db_obj)
        db.commit()
        db.expire_all()
        return self.get(db, id=db_obj.id)

goal = CRUDGoal(Goal)
