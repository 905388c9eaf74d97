from functools import wraps

from flask import jsonify
from flask_jwt_extended import verify_jwt_in_request

from school_portal.errors import LibraryError
from school_portal.utils.auth import current_context


def role_required(*roles):
    """Verify the token and hand the caller's AuthContext to the view as `ctx`."""
    def decorator(fn):
        @wraps(fn)
        def wrapper(*args, **kwargs):
            verify_jwt_in_request()
            try:
                ctx = current_context()
            except LibraryError as e:
                return jsonify({"success": False, "message": e.message}), e.status_code
            if roles and ctx.role not in roles:
                return jsonify({"success": False, "message": "Forbidden"}), 403
            return fn(*args, ctx=ctx, **kwargs)
        return wrapper
    return decorator
