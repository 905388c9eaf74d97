from contextlib import contextmanager

from flask import current_app
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from school_portal.errors import (
    AlreadyExists,
    BackendUnavailable,
    DuplicateRequest,
    InvariantViolation,
)
from school_portal.extensions import db

# constraint names (Postgres) or column lists (SQLite) -> user-facing error
CONSTRAINT_ERRORS = (
    (("uq_borrow_active_pair", "borrow_requests.book_id, borrow_requests.student_id"),
     DuplicateRequest, "You already have an active request for this book"),
    (("ix_books_isbn", "books.isbn"), AlreadyExists, "A book with this ISBN already exists"),
    (("ix_students_student_code", "students.student_code"), AlreadyExists, "A student with this ID already exists"),
    (("ix_admins_email", "admins.email"), AlreadyExists, "An admin with this email already exists"),
    (("ck_books_",), InvariantViolation, "Copy counts would leave the allowed range"),
)


def integrity_error(e: IntegrityError):
    text = str(e.orig)
    for markers, error_cls, message in CONSTRAINT_ERRORS:
        if any(m in text for m in markers):
            return error_cls(message)
    return AlreadyExists("The change conflicts with existing data")


@contextmanager
def unit_of_work():
    """Single commit point for a mutating operation.

    Everything done inside the block is committed together or rolled back
    together. Constraint violations map to their LibraryError; any other
    database failure comes out as BackendUnavailable.
    """
    try:
        yield db.session
        db.session.commit()
    except IntegrityError as e:
        db.session.rollback()
        current_app.logger.warning(f"[db] Constraint violation: {e.orig}")
        raise integrity_error(e) from e
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.exception(f"[db] Transaction failed: {e}")
        raise BackendUnavailable("Database is unavailable, please try again later") from e
    except Exception:
        db.session.rollback()
        raise
