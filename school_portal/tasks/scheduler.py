from __future__ import annotations

import atexit
import os

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger

from school_portal.tasks.overdue_check import run_overdue_check_job


def start_scheduler(app):
    """
    Starts the overdue reminder job when SCHEDULER_ENABLED is set.
    - Skips the reloader's watcher process in debug mode.
    - Shuts the scheduler down at interpreter exit.
    """
    if not app.config.get("SCHEDULER_ENABLED"):
        app.logger.info("[scheduler] Disabled by config.")
        return None

    # Werkzeug reloader runs two processes; only the one with WERKZEUG_RUN_MAIN=true serves
    if app.debug and os.environ.get("WERKZEUG_RUN_MAIN") != "true":
        app.logger.info("[scheduler] Debug reloader secondary process: scheduler skipped.")
        return None

    minutes = int(app.config.get("OVERDUE_CHECK_MINUTES", 60))
    scheduler = BackgroundScheduler(timezone="UTC")
    scheduler.add_job(
        func=run_overdue_check_job,
        args=[app],
        trigger=IntervalTrigger(minutes=minutes),
        id="overdue_check_job",
        replace_existing=True,
        max_instances=1,
        coalesce=True,
        misfire_grace_time=120,
    )
    scheduler.start()
    app.logger.info(f"[scheduler] Overdue check job started (every {minutes} minutes).")

    app.extensions["apscheduler"] = scheduler
    atexit.register(_shutdown, app)
    return scheduler


def _shutdown(app):
    sch = app.extensions.get("apscheduler")
    if sch and sch.running:
        sch.shutdown(wait=False)
        app.logger.info("[scheduler] Scheduler shutdown.")
