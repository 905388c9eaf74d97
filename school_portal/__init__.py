from flask import Flask, jsonify
from sqlalchemy.exc import SQLAlchemyError

from school_portal.config import Config
from school_portal.errors import LibraryError
from school_portal.extensions import db, migrate, jwt, mail


def create_app(config_object=Config):
    app = Flask(__name__)
    app.config.from_object(config_object)

    # models must be imported before migrate/create_all see the metadata
    from school_portal.models import admin, book, borrow_request, notification_log, student  # noqa: F401

    db.init_app(app)
    migrate.init_app(app, db)
    jwt.init_app(app)
    mail.init_app(app)

    from school_portal.controllers.auth_controller import auth_bp
    from school_portal.controllers.book_controller import book_bp
    from school_portal.controllers.borrow_controller import borrow_bp
    from school_portal.controllers.notification_controller import notif_bp
    app.register_blueprint(auth_bp, url_prefix="/auth")
    app.register_blueprint(book_bp, url_prefix="/books")
    app.register_blueprint(borrow_bp, url_prefix="/borrow")
    app.register_blueprint(notif_bp, url_prefix="/notifications")

    @app.errorhandler(LibraryError)
    def handle_library_error(e):
        return jsonify({"success": False, "message": e.message}), e.status_code

    @app.errorhandler(SQLAlchemyError)
    def handle_db_error(e):
        db.session.rollback()
        app.logger.exception(f"[db] Unhandled database error: {e}")
        return jsonify({"success": False, "message": "Database is unavailable, please try again later"}), 503

    @app.get("/health")
    def health():
        return jsonify({"ok": True})

    from school_portal.cli import register_cli
    register_cli(app)

    # overdue reminders
    from school_portal.tasks.scheduler import start_scheduler
    start_scheduler(app)

    return app
