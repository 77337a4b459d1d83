from typing import List
from sqlalchemy.orm import Session, selectinload

from faceyoga.core.constants import ContentKindEnum
from faceyoga.crud.base import CRUDBase
from faceyoga.models.course import Course, CourseSection, SectionExercise
from faceyoga.schemas.course import CourseCreate, CourseUpdate, SectionIn


class CRUDCourse(CRUDBase[Course, CourseCreate, CourseUpdate]):

    def _query_with_sections(self, db: Session):
        return db.query(Course).options(
            selectinload(Course.sections).selectinload(CourseSection.items).selectinload(SectionExercise.exercise),
            selectinload(Course.sections).selectinload(CourseSection.items).selectinload(SectionExercise.lesson),
        )

    def get(self, db: Session, id: int):
        return self._query_with_sections(db).filter(Course.id == id).first()

    def get_multi(self, db: Session, *, skip: int = 0, limit: int = 100) -> List[Course]:
        return self._query_with_sections(db).order_by(Course.id).offset(skip).limit(limit).all()

    def get_owning_course_ids(self, db: Session, kind: ContentKindEnum, item_id: int) -> List[int]:
        """Ids of every course whose sections contain the given exercise or lesson."""
        column = SectionExercise.exercise_id if kind == ContentKindEnum.EXERCISE else SectionExercise.lesson_id
        rows = (
            db.query(CourseSection.course_id)
            .join(SectionExercise, SectionExercise.section_id == CourseSection.id)
            .filter(column == item_id)
            .distinct()
            .all()
        )
        return [row[0] for row in rows]

    def get_by_ids(self, db: Session, ids: List[int]) -> List[Course]:
        if not ids:
            return []
        return db.query(Course).filter(Course.id.in_(ids)).all()

    def _build_sections(self, sections: List[SectionIn]) -> List[CourseSection]:
        built = []
        for section_index, section_in in enumerate(sections):
            section = CourseSection(
                title=section_in.title,
                description=section_in.description,
                order_index=section_index,
            )
            order = 0
            for exercise_id in section_in.exercises:
                section.items.append(SectionExercise(exercise_id=exercise_id, order_index=order))
                order += 1
            for lesson_id in section_in.lessons:
                section.items.append(SectionExercise(lesson_id=lesson_id, order_index=order))
                order += 1
            built.append(section)
        return built

    def create_with_sections(self, db: Session, *, obj_in: CourseCreate) -> Course:
        data = obj_in.model_dump(exclude={"sections"})
        db_obj = Course(**data)
        db_obj.sections = self._build_sections(obj_in.sections)
        db.add(db_obj)
        db.commit()
        return self.get(db, id=db_obj.id)

    def update_with_sections(self, db: Session, *, db_obj: Course, obj_in: CourseUpdate) -> Course:
        for field, value in obj_in.model_dump(exclude={"sections"}).items():
            setattr(db_obj, field, value)
        # delete-orphan cascade drops the old sections and their items
        db_obj.sections = []
        db.flush()
        db_obj.sections = self._build_sections(obj_in.sections)
        db.add(db_obj)
        db.commit()
        db.expire_all()
        return self.get(db, id=db_obj.id)

course = CRUDCourse(Course)
