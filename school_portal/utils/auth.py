from dataclasses import dataclass
from enum import Enum

from flask_jwt_extended import get_jwt, get_jwt_identity

from school_portal.errors import AuthenticationError, Forbidden


class Role(str, Enum):
    STUDENT = "student"
    ADMIN = "admin"


def parse_role(value) -> Role:
    try:
        return Role(value)
    except ValueError:
        raise AuthenticationError(f"Unknown role '{value}'")


@dataclass(frozen=True)
class AuthContext:
    """Who is calling. Built per request from the verified token."""

    user_id: int
    role: Role
    name: str = ""

    @property
    def is_admin(self) -> bool:
        return self.role is Role.ADMIN

    @property
    def student_id(self) -> int:
        if self.role is not Role.STUDENT:
            raise Forbidden("Only students can do this")
        return self.user_id

    def claims(self) -> dict:
        return {"role": self.role.value, "name": self.name}


def current_context() -> AuthContext:
    """Must run after verify_jwt_in_request()."""
    claims = get_jwt() or {}
    return AuthContext(
        user_id=int(get_jwt_identity()),
        role=parse_role(claims.get("role")),
        name=claims.get("name", ""),
    )
