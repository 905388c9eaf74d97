import pytest

from school_portal import create_app
from school_portal.config import Config
from school_portal.extensions import db
from school_portal.services.auth_service import AuthService
from school_portal.services.book_service import BookService


class TestingConfig(Config):
    TESTING = True
    SECRET_KEY = "test-secret-key"
    JWT_SECRET_KEY = "test-jwt-secret-key-that-is-long-enough-for-hs256"
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    SQLALCHEMY_ENGINE_OPTIONS = {}
    SCHEDULER_ENABLED = False
    MAIL_SUPPRESS_SEND = True
    BORROW_LOAN_DAYS = 14


@pytest.fixture
def app():
    app = create_app(TestingConfig)
    with app.app_context():
        db.create_all()
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def admin(app):
    return AuthService.create_admin("librarian@school.test", "Librarian", "s3cret-pass")


@pytest.fixture
def student(app):
    return AuthService.create_student("S001", "Asha Rao", "2010-04-12", email="asha@school.test")


@pytest.fixture
def other_student(app):
    return AuthService.create_student("S002", "Ravi Kumar", "2010-09-30")


@pytest.fixture
def make_book(app):
    def _make(title="Wings of Fire", author="A. P. J. Abdul Kalam", total_copies=3, **extra):
        data = {"title": title, "author": author, "total_copies": total_copies}
        data.update(extra)
        return BookService.create_book(data)
    return _make


def _login(client, url, payload):
    resp = client.post(url, json=payload)
    assert resp.status_code == 200, resp.get_json()
    return {"Authorization": f"Bearer {resp.get_json()['access_token']}"}


@pytest.fixture
def admin_headers(client, admin):
    return _login(client, "/auth/admin/login", {"email": "librarian@school.test", "password": "s3cret-pass"})


@pytest.fixture
def student_headers(client, student):
    return _login(client, "/auth/student/login", {"student_code": "S001", "dob": "2010-04-12"})
