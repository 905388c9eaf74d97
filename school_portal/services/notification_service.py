from datetime import datetime

from flask import current_app

from school_portal.repositories.base import unit_of_work
from school_portal.repositories.borrow_request_repo import BorrowRequestRepo
from school_portal.repositories.notification_repo import NotificationRepo
from school_portal.services.mail_service import MailService
from school_portal.utils.clock import utcnow


class NotificationService:
    @staticmethod
    def run_overdue_check(now: datetime | None = None) -> dict:
        """Remind students whose approved loans are past return_date.

        Reminder only: request status and copy counts are left alone.
        Each request gets at most one overdue notification.
        """
        now = now or utcnow()
        stats = {"overdue": 0, "notified": 0, "failed": 0, "skipped": 0}

        with unit_of_work():
            overdue = BorrowRequestRepo.find_overdue(now)
            stats["overdue"] = len(overdue)

            for req in overdue:
                if NotificationRepo.already_sent(req.id, "overdue"):
                    stats["skipped"] += 1
                    continue

                if MailService.send_overdue_mail(req):
                    stats["notified"] += 1
                else:
                    stats["failed"] += 1

        current_app.logger.info(
            f"[overdue_check] overdue={stats['overdue']} notified={stats['notified']} "
            f"failed={stats['failed']} skipped={stats['skipped']}"
        )
        return stats
