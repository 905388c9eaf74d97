from school_portal.extensions import db
from school_portal.utils.clock import utcnow


class NotificationLog(db.Model):
    __tablename__ = "notification_logs"

    id = db.Column(db.Integer, primary_key=True)

    borrow_request_id = db.Column(
        db.Integer, db.ForeignKey("borrow_requests.id", ondelete="CASCADE"), nullable=False, index=True
    )

    # only "overdue" for now
    type = db.Column(db.String(50), nullable=False, default="overdue")

    email = db.Column(db.String(255), nullable=True)
    message = db.Column(db.String(1000), nullable=True)

    sent_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    success = db.Column(db.Boolean, nullable=False, default=True)
    error_message = db.Column(db.String(500), nullable=True)

    borrow_request = db.relationship(
        "BorrowRequest", backref=db.backref("notifications", cascade="all, delete-orphan")
    )
