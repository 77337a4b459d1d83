from sqlalchemy import Column, Integer, String, Float, DateTime, ForeignKey, Enum, Text, CheckConstraint
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func
from faceyoga.core.database import Base
from faceyoga.core.constants import AccessTypeEnum
from faceyoga.models.exercise import Exercise
from faceyoga.models.lesson import Lesson

class Course(Base):
    __tablename__ = "courses"

    id = Column(Integer, primary_key=True, index=True)
    title = Column(String, index=True, nullable=False)
    description = Column(Text, nullable=True)
    image_url = Column(String, nullable=True)
    welcome_video = Column(String, nullable=True)
    difficulty = Column(String, nullable=True)
    duration = Column(String, nullable=True)
    price = Column(Float, nullable=False, default=0.0)
    currency = Column(String, nullable=False, default="usd")
    access_type = Column(Enum(AccessTypeEnum), nullable=False, default=AccessTypeEnum.LIFETIME)
    trial_duration_days = Column(Integer, nullable=True)
    subscription_duration_months = Column(Integer, nullable=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    sections = relationship(
        "CourseSection",
        back_populates="course",
        order_by="CourseSection.order_index",
        cascade="all, delete-orphan",
    )

    @property
    def is_free(self) -> bool:
        return (self.price or 0) == 0


class CourseSection(Base):
    __tablename__ = "course_sections"

    id = Column(Integer, primary_key=True, index=True)
    course_id = Column(Integer, ForeignKey("courses.id", ondelete="CASCADE"), nullable=False, index=True)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    order_index = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())

    course = relationship("Course", back_populates="sections")
    items = relationship(
        "SectionExercise",
        back_populates="section",
        order_by="SectionExercise.order_index",
        cascade="all, delete-orphan",
    )


class SectionExercise(Base):
    """Ordered link between a section and one exercise or one lesson."""
    __tablename__ = "section_exercises"
    __table_args__ = (
        CheckConstraint(
            "(exercise_id IS NULL) <> (lesson_id IS NULL)",
            name="ck_section_exercises_single_item",
        ),
    )

    id = Column(Integer, primary_key=True, index=True)
    section_id = Column(Integer, ForeignKey("course_sections.id", ondelete="CASCADE"), nullable=False, index=True)
    exercise_id = Column(Integer, ForeignKey("exercises.id", ondelete="CASCADE"), nullable=True, index=True)
    lesson_id = Column(Integer, ForeignKey("lessons.id", ondelete="CASCADE"), nullable=True, index=True)
    order_index = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now())

    section = relationship("CourseSection", back_populates="items")
    exercise = relationship(Exercise)
    lesson = relationship(Lesson)
