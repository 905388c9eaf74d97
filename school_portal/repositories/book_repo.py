from sqlalchemy import func, update

from school_portal.extensions import db
from school_portal.models.book import Book


class BookRepo:
    @staticmethod
    def list_all(search: str | None = None, subject: str | None = None):
        q = Book.query
        if search:
            pattern = f"%{search.lower()}%"
            q = q.filter(
                db.or_(func.lower(Book.title).like(pattern), func.lower(Book.author).like(pattern))
            )
        if subject:
            q = q.filter(Book.subject == subject)
        return q.order_by(Book.title.asc(), Book.id.asc()).all()

    @staticmethod
    def list_subjects():
        rows = (
            db.session.query(Book.subject)
            .filter(Book.subject.isnot(None), Book.subject != "")
            .distinct()
            .order_by(Book.subject.asc())
            .all()
        )
        return [r[0] for r in rows]

    @staticmethod
    def get(book_id: int):
        return db.session.get(Book, book_id)

    @staticmethod
    def add(book: Book):
        db.session.add(book)
        db.session.flush()
        return book

    @staticmethod
    def delete(book: Book):
        db.session.delete(book)

    @staticmethod
    def adjust_available(book_id: int, delta: int):
        """Guarded in-place update of available_copies.

        The bound check sits in the WHERE clause so concurrent writers are
        serialized by the row lock. Returns the new count, or None when no
        row matched (missing book or bound violated).
        """
        new_value = Book.available_copies + delta
        stmt = (
            update(Book)
            .where(Book.id == book_id)
            .where(new_value >= 0)
            .where(new_value <= Book.total_copies)
            .values(available_copies=new_value)
            .execution_options(synchronize_session=False)
        )
        result = db.session.execute(stmt)
        if result.rowcount != 1:
            return None
        return BookRepo.refresh_counts(book_id)

    @staticmethod
    def set_total(book_id: int, new_total: int):
        delta = new_total - Book.total_copies
        stmt = (
            update(Book)
            .where(Book.id == book_id)
            # copies already reserved must still fit in the new pool
            .where(Book.total_copies - Book.available_copies <= new_total)
            # available first: its expression must see the old total_copies
            .ordered_values(
                (Book.available_copies, Book.available_copies + delta),
                (Book.total_copies, new_total),
            )
            .execution_options(synchronize_session=False)
        )
        result = db.session.execute(stmt)
        if result.rowcount != 1:
            return None
        return BookRepo.refresh_counts(book_id)

    @staticmethod
    def refresh_counts(book_id: int):
        book = db.session.get(Book, book_id)
        if book is None:
            return None
        db.session.refresh(book, attribute_names=["total_copies", "available_copies"])
        return book.available_copies

    @staticmethod
    def get_by_isbn(isbn: str):
        return Book.query.filter_by(isbn=isbn).first()
