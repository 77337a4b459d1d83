from sqlalchemy import Column, Integer, String, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from faceyoga.core.database import Base
from faceyoga.models.exercise import Exercise
from faceyoga.models.lesson import Lesson


class ExerciseHistory(Base):
    __tablename__ = "exercise_history"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, index=True, nullable=False)
    exercise_id = Column(Integer, ForeignKey("exercises.id", ondelete="CASCADE"), nullable=False)
    duration = Column(Integer, nullable=False, default=0)  # seconds
    completed_at = Column(DateTime, nullable=False)

    exercise = relationship(Exercise)


class LessonHistory(Base):
    __tablename__ = "lesson_history"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String, index=True, nullable=False)
    lesson_id = Column(Integer, ForeignKey("lessons.id", ondelete="CASCADE"), nullable=False)
    practice_time = Column(Integer, nullable=False, default=0)  # seconds
    completed_at = Column(DateTime, nullable=False)

    lesson = relationship(Lesson)
