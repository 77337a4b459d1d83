from sqlalchemy import Column, Integer, String, Float, DateTime, ForeignKey, Enum, Text, UniqueConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from faceyoga.core.database import Base
from faceyoga.core.constants import GoalStatusEnum
from faceyoga.models.lesson import Lesson

class Goal(Base):
    __tablename__ = "goals"

    id = Column(Integer, primary_key=True, index=True)
    label = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    milestones = relationship(
        "GoalMilestone",
        back_populates="goal",
        order_by="GoalMilestone.target_value",
        cascade="all, delete-orphan",
    )
    lesson_mappings = relationship("LessonGoalMapping", back_populates="goal", cascade="all, delete-orphan")


class GoalMilestone(Base):
    __tablename__ = "goal_milestones"

    id = Column(Integer, primary_key=True, index=True)
    goal_id = Column(Integer, ForeignKey("goals.id", ondelete="CASCADE"), nullable=False, index=True)
    label = Column(String, nullable=True)
    target_value = Column(Float, nullable=False)
    reward_points = Column(Integer, nullable=False, default=0)

    goal = relationship("Goal", back_populates="milestones")


class LessonGoalMapping(Base):
    __tablename__ = "lesson_goal_mapping"
    __table_args__ = (
        UniqueConstraint("lesson_id", "goal_id", name="uq_lesson_goal_mapping"),
    )

    id = Column(Integer, primary_key=True, index=True)
    lesson_id = Column(Integer, ForeignKey("lessons.id", ondelete="CASCADE"), nullable=False, index=True)
    goal_id = Column(Integer, ForeignKey("goals.id", ondelete="CASCADE"), nullable=False, index=True)
    contribution_weight = Column(Float, nullable=False, default=1.0)

    lesson = relationship(Lesson)
    goal = relationship("Goal", back_populates="lesson_mappings")


class GoalProgress(Base):
    __tablename__ = "goal_progress"
    __table_args__ = (
        UniqueConstraint("user_id", "goal_id", name="uq_goal_progress_user_goal"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, index=True, nullable=False)
    goal_id = Column(Integer, ForeignKey("goals.id", ondelete="CASCADE"), nullable=False, index=True)
    progress_value = Column(Float, nullable=False, default=0.0)
    milestone_reached = Column(Integer, nullable=False, default=0)
    status = Column(Enum(GoalStatusEnum), nullable=False, default=GoalStatusEnum.NOT_STARTED)
    created_at = Column(DateTime, nullable=False)
    last_updated = Column(DateTime, nullable=False)

    goal = relationship("Goal")
