from enum import Enum

from school_portal.extensions import db
from school_portal.utils.clock import utcnow


class BorrowStatus(str, Enum):
    PENDING = "pending"
    APPROVED = "approved"
    REJECTED = "rejected"
    COMPLETED = "completed"


# pending -> approved | rejected, approved -> completed
TRANSITIONS = {
    BorrowStatus.PENDING: {BorrowStatus.APPROVED, BorrowStatus.REJECTED},
    BorrowStatus.APPROVED: {BorrowStatus.COMPLETED},
    BorrowStatus.REJECTED: set(),
    BorrowStatus.COMPLETED: set(),
}

ACTIVE_STATUSES = (BorrowStatus.PENDING.value, BorrowStatus.APPROVED.value)


class BorrowRequest(db.Model):
    __tablename__ = "borrow_requests"
    __table_args__ = (
        # at most one pending or approved request per (book, student)
        db.Index(
            "uq_borrow_active_pair",
            "book_id",
            "student_id",
            unique=True,
            postgresql_where=db.text("status IN ('pending', 'approved')"),
            sqlite_where=db.text("status IN ('pending', 'approved')"),
        ),
    )

    id = db.Column(db.Integer, primary_key=True)

    book_id = db.Column(
        db.Integer, db.ForeignKey("books.id", ondelete="CASCADE"), nullable=False, index=True
    )
    student_id = db.Column(db.Integer, db.ForeignKey("students.id"), nullable=False, index=True)

    status = db.Column(db.String(20), nullable=False, default=BorrowStatus.PENDING.value, index=True)

    request_date = db.Column(db.DateTime, nullable=False, default=utcnow)
    issue_date = db.Column(db.DateTime, nullable=True)
    return_date = db.Column(db.DateTime, nullable=True)
    actual_return_date = db.Column(db.DateTime, nullable=True)

    notes = db.Column(db.String(1000), nullable=False, default="")

    book = db.relationship("Book", back_populates="requests")
    student = db.relationship("Student", backref="borrow_requests")

    def can_move_to(self, target: BorrowStatus) -> bool:
        return target in TRANSITIONS[BorrowStatus(self.status)]

    def to_dict(self, with_book=False, with_student=False):
        data = {
            "id": self.id,
            "book_id": self.book_id,
            "student_id": self.student_id,
            "status": self.status,
            "request_date": _iso(self.request_date),
            "issue_date": _iso(self.issue_date),
            "return_date": _iso(self.return_date),
            "actual_return_date": _iso(self.actual_return_date),
            "notes": self.notes,
        }
        if with_book:
            data["book"] = self.book.to_dict() if self.book else None
        if with_student:
            data["student"] = self.student.to_dict() if self.student else None
        return data


def _iso(value):
    return value.isoformat() if value else None
