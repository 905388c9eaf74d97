from flask import Blueprint, request, jsonify

from school_portal.errors import LibraryError
from school_portal.services.book_service import BookService
from school_portal.utils.auth import Role
from school_portal.utils.decorators import role_required

book_bp = Blueprint("books", __name__)


def _json_error(e: LibraryError):
    return jsonify({"success": False, "message": e.message}), e.status_code


@book_bp.get("/")
@role_required()
def list_books(ctx):
    books = BookService.list_books(
        search=request.args.get("search"),
        subject=request.args.get("subject"),
    )
    return jsonify({"success": True, "data": [b.to_dict() for b in books]})


@book_bp.get("/subjects")
@role_required()
def list_subjects(ctx):
    return jsonify({"success": True, "data": BookService.list_subjects()})


@book_bp.get("/<int:book_id>")
@role_required()
def get_book(book_id: int, ctx):
    try:
        b = BookService.get_book(book_id)
        return jsonify({"success": True, "data": b.to_dict()})
    except LibraryError as e:
        return _json_error(e)


@book_bp.post("/")
@role_required(Role.ADMIN)
def create_book(ctx):
    data = request.get_json(silent=True) or {}
    try:
        b = BookService.create_book(data)
        return jsonify({"success": True, "data": b.to_dict()}), 201
    except LibraryError as e:
        return _json_error(e)


@book_bp.put("/<int:book_id>")
@role_required(Role.ADMIN)
def update_book(book_id: int, ctx):
    data = request.get_json(silent=True) or {}
    try:
        b = BookService.update_book(book_id, data)
        return jsonify({"success": True, "data": b.to_dict()})
    except LibraryError as e:
        return _json_error(e)


@book_bp.delete("/<int:book_id>")
@role_required(Role.ADMIN)
def delete_book(book_id: int, ctx):
    try:
        BookService.delete_book(book_id)
        return jsonify({"success": True})
    except LibraryError as e:
        return _json_error(e)
