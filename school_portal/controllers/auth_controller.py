from flask import Blueprint, request, jsonify

from school_portal.errors import LibraryError
from school_portal.services.auth_service import AuthService
from school_portal.utils.decorators import role_required

auth_bp = Blueprint("auth", __name__)


@auth_bp.post("/student/login")
def student_login():
    data = request.get_json(silent=True) or {}
    student_code = str(data.get("student_code") or "").strip()
    dob = str(data.get("dob") or "").strip()

    if not student_code or not dob:
        return jsonify({"success": False, "message": "student_code and dob are required"}), 400

    try:
        token, student = AuthService.login_student(student_code, dob)
        return jsonify({
            "success": True,
            "access_token": token,
            "user_type": "student",
            "user": student.to_dict(),
        })
    except LibraryError as e:
        return jsonify({"success": False, "message": e.message}), e.status_code


@auth_bp.post("/admin/login")
def admin_login():
    data = request.get_json(silent=True) or {}
    email = str(data.get("email") or "").strip()
    password = str(data.get("password") or "")

    if not email or not password:
        return jsonify({"success": False, "message": "email and password are required"}), 400

    try:
        token, admin = AuthService.login_admin(email, password)
        return jsonify({
            "success": True,
            "access_token": token,
            "user_type": "admin",
            "user": admin.to_dict(),
        })
    except LibraryError as e:
        return jsonify({"success": False, "message": e.message}), e.status_code


@auth_bp.get("/me")
@role_required()
def me(ctx):
    try:
        user = AuthService.profile(ctx)
    except LibraryError as e:
        return jsonify({"success": False, "message": e.message}), e.status_code
    return jsonify({"success": True, "user_type": ctx.role.value, "user": user.to_dict()})
