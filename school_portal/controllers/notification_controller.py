from flask import Blueprint, jsonify

from school_portal.errors import LibraryError
from school_portal.services.notification_service import NotificationService
from school_portal.utils.auth import Role
from school_portal.utils.decorators import role_required

notif_bp = Blueprint("notifications", __name__)


@notif_bp.post("/run-overdue-check")
@role_required(Role.ADMIN)
def run_overdue_check(ctx):
    try:
        stats = NotificationService.run_overdue_check()
    except LibraryError as e:
        return jsonify({"success": False, "message": e.message}), e.status_code
    return jsonify({"success": True, "data": stats})
