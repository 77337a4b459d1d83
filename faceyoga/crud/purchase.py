from datetime import datetime
from typing import List, Optional
from sqlalchemy import func
from sqlalchemy.orm import Session

from faceyoga.core.constants import PurchaseStatusEnum
from faceyoga.crud.base import CRUDBase, UpsertResult
from faceyoga.models.purchase import CoursePurchase
from faceyoga.schemas.purchase import CoursePurchase as CoursePurchaseSchema


class CRUDCoursePurchase(CRUDBase[CoursePurchase, CoursePurchaseSchema, CoursePurchaseSchema]):

    def get_by_payment_intent(self, db: Session, payment_intent_id: str) -> Optional[CoursePurchase]:
        return db.query(CoursePurchase).filter(CoursePurchase.payment_intent_id == payment_intent_id).first()

    def get_by_user(self, db: Session, user_id: str) -> List[CoursePurchase]:
        return (
            db.query(CoursePurchase)
            .filter(CoursePurchase.user_id == user_id)
            .order_by(CoursePurchase.id.desc())
            .all()
        )

    def create_completed(
        self,
        db: Session,
        *,
        user_id: str,
        course_id: int,
        amount: float,
        currency: str,
        payment_intent_id: str,
        payment_method: str = "card",
        receipt_url: Optional[str] = None,
    ) -> UpsertResult[CoursePurchase]:
        values = {
            "user_id": user_id,
            "course_id": course_id,
            "amount": amount,
            "currency": currency,
            "status": PurchaseStatusEnum.COMPLETED,
            "payment_intent_id": payment_intent_id,
            "payment_method": payment_method,
            "receipt_url": receipt_url,
            "created_at": datetime.utcnow(),
        }
        return self.insert_ignore_conflict(db, values=values, conflict_columns=["payment_intent_id"])

    def exists_for_course(self, db: Session, course_id: int) -> bool:
        return db.query(CoursePurchase.id).filter(CoursePurchase.course_id == course_id).first() is not None

    def mark_status(self, db: Session, db_obj: CoursePurchase, status: PurchaseStatusEnum) -> CoursePurchase:
        db_obj.status = status
        db.add(db_obj)
        db.commit()
        db.refresh(db_obj)
        return db_obj

    def total_revenue(self, db: Session) -> float:
        total = (
            db.query(func.coalesce(func.sum(CoursePurchase.amount), 0.0))
            .filter(CoursePurchase.status == PurchaseStatusEnum.COMPLETED)
            .scalar()
        )
        return float(total or 0)

purchase = CRUDCoursePurchase(CoursePurchase)
