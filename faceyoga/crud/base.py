import enum
from dataclasses import dataclass
from typing import Any, Dict, Generic, List, Optional, Sequence, Type, TypeVar, Union
from pydantic import BaseModel
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from faceyoga.core.database import Base

ModelType = TypeVar("ModelType", bound=Base)
CreateSchemaType = TypeVar("CreateSchemaType", bound=BaseModel)
UpdateSchemaType = TypeVar("UpdateSchemaType", bound=BaseModel)


class UpsertStatus(str, enum.Enum):
    CREATED = "created"
    CONFLICT = "conflict"


@dataclass
class UpsertResult(Generic[ModelType]):
    """Outcome of an insert that ignores duplicates.

    ``CONFLICT`` means another writer got there first; ``row`` is then the
    surviving row, re-read from the store.
    """
    status: UpsertStatus
    row: Optional[ModelType]

    @property
    def created(self) -> bool:
        return self.status == UpsertStatus.CREATED


class CRUDBase(Generic[ModelType, CreateSchemaType, UpdateSchemaType]):
    def __init__(self, model: Type[ModelType]):
        self.model = model

    def get(self, db: Session, id: Any) -> Optional[ModelType]:
        return db.query(self.model).filter(self.model.id == id).first()

    def get_multi(
        self, db: Session, *, skip: int = 0, limit: int = 100
    ) -> List[ModelType]:
        return db.query(self.model).order_by(self.model.id).offset(skip).limit(limit).all()

    def count(self, db: Session) -> int:
        return db.query(self.model).count()

    def create(self, db: Session, *, obj_in: Union[CreateSchemaType, Dict[str, Any]], commit: bool = True) -> ModelType:
        obj_in_data = obj_in if isinstance(obj_in, dict) else obj_in.model_dump()
        db_obj = self.model(**obj_in_data)
        db.add(db_obj)
        db.flush()
        db.refresh(db_obj)
        if commit:
            db.commit()
        return db_obj

    def update(
        self, db: Session, *, db_obj: ModelType, obj_in: Union[UpdateSchemaType, Dict[str, Any]]
    ) -> ModelType:
        if isinstance(obj_in, dict):
            update_data = obj_in
        else:
            update_data = obj_in.model_dump(exclude_unset=True)
        columns = {c.key for c in self.model.__table__.columns}
        for field, value in update_data.items():
            if field in columns:
                setattr(db_obj, field, value)
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def delete(self, db: Session, *, id: int) -> Optional[ModelType]:
        obj = db.get(self.model, id)
        if not obj:
            return None
        db.delete(obj)
        db.commit()
        return obj

    def _get_by_columns(self, db: Session, values: Dict[str, Any], columns: Sequence[str]) -> Optional[ModelType]:
        return db.query(self.model).filter_by(**{c: values[c] for c in columns}).first()

    def insert_ignore_conflict(
        self, db: Session, *, values: Dict[str, Any], conflict_columns: Sequence[str]
    ) -> UpsertResult[ModelType]:
        """Insert ``values`` unless a row with the same ``conflict_columns`` exists.

        Never raises on a duplicate key; the caller inspects the returned status.
        """
        dialect = db.get_bind().dialect.name
        if dialect in ("postgresql", "sqlite"):
            insert = postgresql.insert if dialect == "postgresql" else sqlite.insert
            stmt = insert(self.model).values(**values).on_conflict_do_nothing(
                index_elements=list(conflict_columns)
            )
            result = db.execute(stmt)
            db.commit()
            status = UpsertStatus.CREATED if result.rowcount else UpsertStatus.CONFLICT
            return UpsertResult(status=status, row=self._get_by_columns(db, values, conflict_columns))

        try:
            with db.begin_nested():
                db.add(self.model(**values))
            db.commit()
            status = UpsertStatus.CREATED
        except IntegrityError:
            status = UpsertStatus.CONFLICT
        return UpsertResult(status=status, row=self._get_by_columns(db, values, conflict_columns))
