from datetime import datetime, timedelta

from flask import current_app

from school_portal.errors import (
    DuplicateRequest,
    InvalidTransition,
    NotFound,
    OutOfStock,
    ValidationError,
)
from school_portal.models.borrow_request import BorrowRequest, BorrowStatus
from school_portal.repositories.base import unit_of_work
from school_portal.repositories.book_repo import BookRepo
from school_portal.repositories.borrow_request_repo import BorrowRequestRepo
from school_portal.repositories.student_repo import StudentRepo
from school_portal.services.book_service import BookService
from school_portal.utils.clock import utcnow


class BorrowService:
    """Borrow request lifecycle.

    Every transition that reserves or frees a copy moves the book's
    available_copies in the same transaction:

        create             (-1)
        pending  -> approved   (no change, reserved at creation)
        pending  -> rejected   (+1)
        approved -> completed  (+1)
    """

    @staticmethod
    def _get_request(request_id: int) -> BorrowRequest:
        req = BorrowRequestRepo.get(request_id)
        if not req:
            raise NotFound("Borrow request not found")
        return req

    @staticmethod
    def _move(req: BorrowRequest, target: BorrowStatus, **values):
        current = req.status
        if not req.can_move_to(target):
            current_app.logger.warning(
                f"[borrow] Request #{req.id}: {current} -> {target.value} refused"
            )
            raise InvalidTransition(f"Cannot move a {current} request to {target.value}")

        if not BorrowRequestRepo.update_status(req.id, current, status=target.value, **values):
            # lost the race against another admin action
            raise InvalidTransition("Request was changed by someone else, reload and try again")
        BorrowRequestRepo.refresh(req)

    @staticmethod
    def create_request(book_id: int, student_id: int, notes: str = "", now: datetime | None = None):
        now = now or utcnow()

        with unit_of_work():
            book = BookRepo.get(book_id)
            if not book:
                raise NotFound("Book not found")
            if not StudentRepo.get(student_id):
                raise NotFound("Student not found")

            if BorrowRequestRepo.find_active(book_id, student_id):
                raise DuplicateRequest("You already have an active request for this book")

            if book.available_copies < 1:
                raise OutOfStock(f"'{book.title}' has no copies available")

            # guarded decrement; a concurrent request may have taken the last copy
            if BookRepo.adjust_available(book_id, -1) is None:
                raise OutOfStock(f"'{book.title}' has no copies available")

            req = BorrowRequestRepo.add(BorrowRequest(
                book_id=book_id,
                student_id=student_id,
                status=BorrowStatus.PENDING.value,
                request_date=now,
                notes=str(notes or "").strip(),
            ))

        current_app.logger.info(
            f"[borrow] Request #{req.id} created: book #{book_id} student #{student_id}"
        )
        return req

    @staticmethod
    def approve_request(request_id: int, loan_days: int | None = None, now: datetime | None = None):
        now = now or utcnow()
        if loan_days is None:
            loan_days = current_app.config.get("BORROW_LOAN_DAYS", 14)
        if loan_days <= 0:
            raise ValidationError("loan_days must be positive")

        with unit_of_work():
            req = BorrowService._get_request(request_id)
            BorrowService._move(
                req,
                BorrowStatus.APPROVED,
                issue_date=now,
                return_date=now + timedelta(days=loan_days),
            )

        current_app.logger.info(f"[borrow] Request #{req.id} approved, due {req.return_date}")
        return req

    @staticmethod
    def reject_request(request_id: int, notes: str | None = None):
        notes = str(notes).strip() if notes is not None else ""
        extra = {"notes": notes} if notes else {}

        with unit_of_work():
            req = BorrowService._get_request(request_id)
            BorrowService._move(req, BorrowStatus.REJECTED, **extra)
            BookService.adjust_availability(req.book_id, +1)

        current_app.logger.info(f"[borrow] Request #{req.id} rejected, copy released")
        return req

    @staticmethod
    def complete_return(request_id: int, now: datetime | None = None):
        now = now or utcnow()

        with unit_of_work():
            req = BorrowService._get_request(request_id)
            BorrowService._move(req, BorrowStatus.COMPLETED, actual_return_date=now)
            BookService.adjust_availability(req.book_id, +1)

        current_app.logger.info(f"[borrow] Request #{req.id} returned")
        return req

    @staticmethod
    def get_request(request_id: int):
        return BorrowService._get_request(request_id)

    @staticmethod
    def list_requests(status: str | None = None):
        if status:
            try:
                status = BorrowStatus(status).value
            except ValueError:
                raise ValidationError(f"Unknown status '{status}'")
        return BorrowRequestRepo.list_all(status)

    @staticmethod
    def list_active_for_student(student_id: int):
        return BorrowRequestRepo.list_active_by_student(student_id)

    @staticmethod
    def list_overdue(now: datetime | None = None):
        return BorrowRequestRepo.find_overdue(now or utcnow())
