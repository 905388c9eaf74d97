from school_portal.extensions import db
from school_portal.utils.clock import utcnow


class Book(db.Model):
    __tablename__ = "books"
    __table_args__ = (
        db.CheckConstraint("total_copies >= 0", name="ck_books_total_copies"),
        db.CheckConstraint(
            "available_copies >= 0 AND available_copies <= total_copies",
            name="ck_books_available_copies",
        ),
    )

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(200), nullable=False, index=True)
    author = db.Column(db.String(200), nullable=False, index=True)
    subject = db.Column(db.String(100), nullable=True, index=True)
    isbn = db.Column(db.String(32), unique=True, nullable=True, index=True)
    description = db.Column(db.Text, nullable=True)
    pdf_url = db.Column(db.String(500), nullable=True)
    cover_image = db.Column(db.String(500), nullable=True)

    total_copies = db.Column(db.Integer, nullable=False, default=1)
    available_copies = db.Column(db.Integer, nullable=False, default=1)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    requests = db.relationship(
        "BorrowRequest",
        back_populates="book",
        cascade="all, delete-orphan",
    )

    def to_dict(self):
        return {
            "id": self.id,
            "title": self.title,
            "author": self.author,
            "subject": self.subject,
            "isbn": self.isbn,
            "description": self.description,
            "pdf_url": self.pdf_url,
            "cover_image": self.cover_image,
            "total_copies": self.total_copies,
            "available_copies": self.available_copies,
            "created_at": self.created_at.isoformat() if self.created_at else None,
        }
