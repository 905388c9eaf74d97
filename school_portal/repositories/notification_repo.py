from school_portal.extensions import db
from school_portal.models.notification_log import NotificationLog


class NotificationRepo:
    @staticmethod
    def already_sent(borrow_request_id: int, notif_type: str = "overdue") -> bool:
        return (
            NotificationLog.query.filter_by(borrow_request_id=borrow_request_id, type=notif_type).first()
            is not None
        )

    @staticmethod
    def log(entry: NotificationLog):
        db.session.add(entry)
        return entry
