from datetime import datetime

from sqlalchemy import update
from sqlalchemy.orm import joinedload

from school_portal.extensions import db
from school_portal.models.borrow_request import ACTIVE_STATUSES, BorrowRequest, BorrowStatus


class BorrowRequestRepo:
    @staticmethod
    def get(request_id: int):
        return db.session.get(BorrowRequest, request_id)

    @staticmethod
    def list_all(status: str | None = None):
        q = BorrowRequest.query.options(
            joinedload(BorrowRequest.book), joinedload(BorrowRequest.student)
        )
        if status:
            q = q.filter(BorrowRequest.status == status)
        return q.order_by(BorrowRequest.request_date.desc(), BorrowRequest.id.desc()).all()

    @staticmethod
    def list_active_by_student(student_id: int):
        return (
            BorrowRequest.query.options(joinedload(BorrowRequest.book))
            .filter(
                BorrowRequest.student_id == student_id,
                BorrowRequest.status.in_(ACTIVE_STATUSES),
            )
            .order_by(BorrowRequest.request_date.desc(), BorrowRequest.id.desc())
            .all()
        )

    @staticmethod
    def find_active(book_id: int, student_id: int):
        return BorrowRequest.query.filter(
            BorrowRequest.book_id == book_id,
            BorrowRequest.student_id == student_id,
            BorrowRequest.status.in_(ACTIVE_STATUSES),
        ).first()

    @staticmethod
    def count_active_for_book(book_id: int) -> int:
        return BorrowRequest.query.filter(
            BorrowRequest.book_id == book_id,
            BorrowRequest.status.in_(ACTIVE_STATUSES),
        ).count()

    @staticmethod
    def find_overdue(now: datetime):
        return (
            BorrowRequest.query.options(
                joinedload(BorrowRequest.book), joinedload(BorrowRequest.student)
            )
            .filter(
                BorrowRequest.status == BorrowStatus.APPROVED.value,
                BorrowRequest.actual_return_date.is_(None),
                BorrowRequest.return_date < now,
            )
            .order_by(BorrowRequest.return_date.asc())
            .all()
        )

    @staticmethod
    def add(borrow_request: BorrowRequest):
        db.session.add(borrow_request)
        db.session.flush()
        return borrow_request

    @staticmethod
    def update_status(request_id: int, expected: str, **values) -> bool:
        """Compare-and-swap on status; False when the row is no longer in `expected`."""
        stmt = (
            update(BorrowRequest)
            .where(BorrowRequest.id == request_id, BorrowRequest.status == expected)
            .values(**values)
            .execution_options(synchronize_session=False)
        )
        result = db.session.execute(stmt)
        return result.rowcount == 1

    @staticmethod
    def refresh(borrow_request: BorrowRequest):
        db.session.refresh(borrow_request)
        return borrow_request
