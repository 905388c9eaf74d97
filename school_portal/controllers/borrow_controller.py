from flask import Blueprint, request, jsonify

from school_portal.errors import LibraryError
from school_portal.services.borrow_service import BorrowService
from school_portal.utils.auth import Role
from school_portal.utils.decorators import role_required

borrow_bp = Blueprint("borrow", __name__)


def _json_error(e: LibraryError):
    return jsonify({"success": False, "message": e.message}), e.status_code


@borrow_bp.post("/requests")
@role_required(Role.STUDENT)
def create_request(ctx):
    data = request.get_json(silent=True) or {}
    try:
        book_id = int(data["book_id"])
    except (KeyError, TypeError, ValueError):
        return jsonify({"success": False, "message": "book_id is required"}), 400

    try:
        r = BorrowService.create_request(book_id, ctx.student_id, notes=data.get("notes") or "")
        return jsonify({"success": True, "data": r.to_dict(with_book=True)}), 201
    except LibraryError as e:
        return _json_error(e)


@borrow_bp.get("/requests/my")
@role_required(Role.STUDENT)
def my_requests(ctx):
    rows = BorrowService.list_active_for_student(ctx.student_id)
    return jsonify({"success": True, "data": [r.to_dict(with_book=True) for r in rows]})


@borrow_bp.get("/requests")
@role_required(Role.ADMIN)
def all_requests(ctx):
    try:
        rows = BorrowService.list_requests(request.args.get("status"))
    except LibraryError as e:
        return _json_error(e)
    return jsonify({"success": True, "data": [
        r.to_dict(with_book=True, with_student=True) for r in rows
    ]})


@borrow_bp.post("/requests/<int:request_id>/approve")
@role_required(Role.ADMIN)
def approve_request(request_id: int, ctx):
    data = request.get_json(silent=True) or {}
    try:
        loan_days = int(data["loan_days"]) if data.get("loan_days") is not None else None
    except (TypeError, ValueError):
        return jsonify({"success": False, "message": "loan_days must be an integer"}), 400

    try:
        r = BorrowService.approve_request(request_id, loan_days=loan_days)
        return jsonify({"success": True, "data": r.to_dict()})
    except LibraryError as e:
        return _json_error(e)


@borrow_bp.post("/requests/<int:request_id>/reject")
@role_required(Role.ADMIN)
def reject_request(request_id: int, ctx):
    data = request.get_json(silent=True) or {}
    try:
        r = BorrowService.reject_request(request_id, notes=data.get("notes"))
        return jsonify({"success": True, "data": r.to_dict()})
    except LibraryError as e:
        return _json_error(e)


@borrow_bp.post("/requests/<int:request_id>/complete")
@role_required(Role.ADMIN)
def complete_request(request_id: int, ctx):
    try:
        r = BorrowService.complete_return(request_id)
        return jsonify({"success": True, "data": r.to_dict()})
    except LibraryError as e:
        return _json_error(e)


@borrow_bp.get("/requests/<int:request_id>")
@role_required()
def get_request(request_id: int, ctx):
    try:
        r = BorrowService.get_request(request_id)
    except LibraryError as e:
        return _json_error(e)
    # students only see their own requests
    if not ctx.is_admin and r.student_id != ctx.user_id:
        return jsonify({"success": False, "message": "Forbidden"}), 403
    return jsonify({"success": True, "data": r.to_dict(with_book=True, with_student=ctx.is_admin)})
