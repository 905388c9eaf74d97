from __future__ import annotations

from flask import current_app
from flask_mail import Message

from school_portal.extensions import mail
from school_portal.models.notification_log import NotificationLog
from school_portal.repositories.notification_repo import NotificationRepo
from school_portal.utils.clock import utcnow


class MailService:
    @staticmethod
    def send_email(to_email: str, subject: str, body: str) -> tuple[bool, str | None]:
        """
        return: (success, error_text)
        """
        try:
            msg = Message(subject=subject, recipients=[to_email], body=body)
            mail.send(msg)
            return True, None
        except Exception as e:
            # SMTP failures are recorded in notification_logs, not raised
            current_app.logger.warning(f"[MailService] Could not send mail to {to_email}: {e}")
            return False, str(e)

    @staticmethod
    def log_notification(
        borrow_request_id: int,
        notif_type: str,
        to_email: str | None,
        message: str,
        success: bool,
        error: str | None = None,
    ) -> NotificationLog:
        return NotificationRepo.log(NotificationLog(
            borrow_request_id=borrow_request_id,
            type=notif_type,
            email=to_email,
            message=message[:1000] if message else message,
            success=bool(success),
            error_message=error[:500] if error else error,
            sent_at=utcnow(),
        ))

    @staticmethod
    def send_overdue_mail(borrow_request) -> bool:
        """
        Mails the student about an overdue book and logs the attempt.
        The caller commits.
        """
        student = borrow_request.student
        book = borrow_request.book

        to_email = student.email if student else None
        name = student.name if student else "Student"
        book_title = book.title if book else f"Book #{borrow_request.book_id}"
        due = borrow_request.return_date.date() if borrow_request.return_date else "-"

        subject = "Library: overdue book"
        body = (
            f"Hello {name},\n\n"
            f"'{book_title}' was due back on {due}.\n"
            f"Please return it to the library as soon as possible.\n"
        )

        if not to_email:
            MailService.log_notification(
                borrow_request_id=borrow_request.id,
                notif_type="overdue",
                to_email=None,
                message="Student has no email address",
                success=False,
                error="missing_email",
            )
            return False

        ok, err = MailService.send_email(to_email, subject, body)

        MailService.log_notification(
            borrow_request_id=borrow_request.id,
            notif_type="overdue",
            to_email=to_email,
            message=body,
            success=ok,
            error=err,
        )
        return ok
