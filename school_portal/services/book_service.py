from flask import current_app

from school_portal.errors import (
    AlreadyExists,
    BookInUse,
    InvariantViolation,
    NotFound,
    ValidationError,
)
from school_portal.models.book import Book
from school_portal.repositories.base import unit_of_work
from school_portal.repositories.book_repo import BookRepo
from school_portal.repositories.borrow_request_repo import BorrowRequestRepo

EDITABLE_FIELDS = ("title", "author", "subject", "isbn", "description", "pdf_url", "cover_image")


def _parse_copies(value, field: str = "total_copies") -> int:
    try:
        copies = int(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field} must be an integer")
    if copies < 0:
        raise ValidationError(f"{field} cannot be negative")
    return copies


def _clean(value):
    if value is None:
        return None
    value = str(value).strip()
    return value or None


class BookService:
    @staticmethod
    def list_books(search: str | None = None, subject: str | None = None):
        return BookRepo.list_all(search=_clean(search), subject=_clean(subject))

    @staticmethod
    def list_subjects():
        return BookRepo.list_subjects()

    @staticmethod
    def get_book(book_id: int):
        book = BookRepo.get(book_id)
        if not book:
            raise NotFound("Book not found")
        return book

    @staticmethod
    def create_book(data: dict):
        title = _clean(data.get("title"))
        author = _clean(data.get("author"))
        if not title or not author:
            raise ValidationError("title and author are required")

        total = _parse_copies(data.get("total_copies", 1))

        book = Book(
            title=title,
            author=author,
            subject=_clean(data.get("subject")),
            isbn=_clean(data.get("isbn")),
            description=_clean(data.get("description")),
            pdf_url=_clean(data.get("pdf_url")),
            cover_image=_clean(data.get("cover_image")),
            total_copies=total,
            available_copies=total,
        )
        with unit_of_work():
            BookService._check_isbn(book.isbn)
            BookRepo.add(book)

        current_app.logger.info(f"[catalog] Book #{book.id} created ({total} copies)")
        return book

    @staticmethod
    def _check_isbn(isbn):
        if isbn and BookRepo.get_by_isbn(isbn):
            raise AlreadyExists(f"A book with ISBN {isbn} already exists")

    @staticmethod
    def update_book(book_id: int, data: dict):
        if "available_copies" in data:
            raise ValidationError("available_copies is managed by the borrow workflow")

        with unit_of_work():
            book = BookService.get_book(book_id)
            for k in EDITABLE_FIELDS:
                if k in data:
                    value = _clean(data[k])
                    if k in ("title", "author") and not value:
                        raise ValidationError(f"{k} cannot be empty")
                    if k == "isbn" and value and value != book.isbn:
                        BookService._check_isbn(value)
                    setattr(book, k, value)

            if "total_copies" in data:
                BookService._set_total(book_id, _parse_copies(data["total_copies"]))

        return book

    @staticmethod
    def update_total_copies(book_id: int, new_total: int) -> int:
        """Change the pool size, shifting available_copies by the same delta.

        Refused when the new total is smaller than the number of copies
        currently held by pending or approved requests.
        """
        new_total = _parse_copies(new_total)
        with unit_of_work():
            available = BookService._set_total(book_id, new_total)
        return available

    @staticmethod
    def _set_total(book_id: int, new_total: int) -> int:
        available = BookRepo.set_total(book_id, new_total)
        if available is None:
            book = BookRepo.get(book_id)
            if book is None:
                raise NotFound("Book not found")
            reserved = book.total_copies - book.available_copies
            raise ValidationError(
                f"total_copies cannot go below {reserved}, the copies held by pending or approved requests"
            )
        current_app.logger.info(
            f"[catalog] Book #{book_id} total_copies={new_total} available_copies={available}"
        )
        return available

    @staticmethod
    def adjust_availability(book_id: int, delta: int) -> int:
        """Move available_copies by delta inside the caller's transaction.

        Raises InvariantViolation rather than clamping when the result would
        leave [0, total_copies].
        """
        available = BookRepo.adjust_available(book_id, delta)
        if available is not None:
            return available

        book = BookRepo.get(book_id)
        if book is None:
            raise NotFound("Book not found")
        current_app.logger.error(
            f"[catalog] Refused availability change on book #{book_id}: "
            f"{book.available_copies}{delta:+d} outside [0, {book.total_copies}]"
        )
        raise InvariantViolation(
            f"Copy accounting error for '{book.title}': "
            f"{book.available_copies}{delta:+d} is outside 0..{book.total_copies}"
        )

    @staticmethod
    def delete_book(book_id: int):
        with unit_of_work():
            book = BookService.get_book(book_id)
            if BorrowRequestRepo.count_active_for_book(book_id):
                raise BookInUse("Book has pending or issued requests and cannot be deleted")
            BookRepo.delete(book)
        current_app.logger.info(f"[catalog] Book #{book_id} deleted")
