from datetime import date

from flask import current_app
from flask_jwt_extended import create_access_token
from werkzeug.security import check_password_hash, generate_password_hash

from school_portal.errors import AuthenticationError, AlreadyExists, ValidationError
from school_portal.models.admin import Admin
from school_portal.models.student import Student
from school_portal.repositories.admin_repo import AdminRepo
from school_portal.repositories.base import unit_of_work
from school_portal.repositories.student_repo import StudentRepo
from school_portal.utils.auth import AuthContext, Role
from school_portal.utils.clock import utcnow


def parse_dob(value) -> date:
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value).strip())
    except ValueError:
        raise ValidationError("dob must be YYYY-MM-DD")


class AuthService:
    @staticmethod
    def _issue(ctx: AuthContext) -> str:
        return create_access_token(identity=str(ctx.user_id), additional_claims=ctx.claims())

    @staticmethod
    def login_student(student_code: str, dob):
        dob = parse_dob(dob)
        with unit_of_work():
            student = StudentRepo.get_by_code(student_code)
            if not student or student.dob != dob:
                raise AuthenticationError("Invalid Student ID or Date of Birth")
            if not student.is_active:
                raise AuthenticationError("Account is inactive. Please contact administration.")
            student.last_login = utcnow()

        ctx = AuthContext(user_id=student.id, role=Role.STUDENT, name=student.name)
        current_app.logger.info(f"[auth] Student #{student.id} signed in")
        return AuthService._issue(ctx), student

    @staticmethod
    def login_admin(email: str, password: str):
        with unit_of_work():
            admin = AdminRepo.get_by_email(email)
            if not admin or not check_password_hash(admin.password_hash, password):
                raise AuthenticationError("Invalid email or password")
            if not admin.is_active:
                raise AuthenticationError("Account is inactive. Please contact system administrator.")
            admin.last_login = utcnow()

        ctx = AuthContext(user_id=admin.id, role=Role.ADMIN, name=admin.name)
        current_app.logger.info(f"[auth] Admin #{admin.id} signed in")
        return AuthService._issue(ctx), admin

    @staticmethod
    def profile(ctx: AuthContext):
        if ctx.role is Role.ADMIN:
            user = AdminRepo.get(ctx.user_id)
        elif ctx.role is Role.STUDENT:
            user = StudentRepo.get(ctx.user_id)
        else:
            raise AuthenticationError(f"Unknown role '{ctx.role}'")
        if not user:
            raise AuthenticationError("Account no longer exists")
        return user

    @staticmethod
    def create_admin(email: str, name: str, password: str):
        email = (email or "").strip().lower()
        if not email or not name or not password:
            raise ValidationError("email, name and password are required")
        with unit_of_work():
            if AdminRepo.get_by_email(email):
                raise AlreadyExists("An admin with this email already exists")
            admin = AdminRepo.add(Admin(
                email=email,
                name=name.strip(),
                password_hash=generate_password_hash(password),
            ))
        return admin

    @staticmethod
    def create_student(student_code: str, name: str, dob, email: str | None = None):
        student_code = (student_code or "").strip()
        if not student_code or not name:
            raise ValidationError("student_code and name are required")
        dob = parse_dob(dob)
        with unit_of_work():
            if StudentRepo.get_by_code(student_code):
                raise AlreadyExists("A student with this ID already exists")
            student = StudentRepo.add(Student(
                student_code=student_code,
                name=name.strip(),
                dob=dob,
                email=(email or "").strip() or None,
            ))
        return student
