from school_portal.services.notification_service import NotificationService


def run_overdue_check_job(app):
    with app.app_context():
        try:
            NotificationService.run_overdue_check()
        except Exception as e:
            # keep the scheduler thread alive; the next run retries
            app.logger.exception(f"[overdue_check] Error: {e}")
