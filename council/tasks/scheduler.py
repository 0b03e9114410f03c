# council/tasks/scheduler.py
from __future__ import annotations

import os

from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.interval import IntervalTrigger


def start_scheduler(app):
    """
    Optional interval job running the overdue sweep (which also drains the
    notification outbox). Off unless PENALTY_SWEEP_INTERVAL_MINUTES > 0.
    - Skips the debug reloader's secondary process.
    - Shuts down with the interpreter.
    """
    minutes = int(app.config.get("PENALTY_SWEEP_INTERVAL_MINUTES") or 0)
    if minutes <= 0:
        app.logger.info("[scheduler] Penalty sweep job disabled; use the admin sweep endpoint.")
        return None

    # the Werkzeug reloader runs two processes; only the real one sets WERKZEUG_RUN_MAIN
    if app.debug and os.environ.get("WERKZEUG_RUN_MAIN") != "true":
        app.logger.info("[scheduler] Debug reloader secondary process: scheduler skipped.")
        return None

    from council.tasks.overdue_sweep import run_overdue_sweep

    scheduler = BackgroundScheduler(timezone="UTC")

    def _job_wrapper():
        try:
            run_overdue_sweep(app)
        except Exception as ex:
            app.logger.exception(f"[scheduler] overdue sweep job error: {ex}")

    scheduler.add_job(
        func=_job_wrapper,
        trigger=IntervalTrigger(minutes=minutes),
        id="overdue_sweep_job",
        replace_existing=True,
        max_instances=1,        # never overlap sweeps
        coalesce=True,          # collapse missed runs into one
        misfire_grace_time=120,
    )
    scheduler.start()
    app.logger.info(f"[scheduler] Overdue sweep job started (every {minutes} minutes).")

    app.extensions["apscheduler"] = scheduler

    import atexit
    atexit.register(lambda: scheduler.running and scheduler.shutdown(wait=False))
    return scheduler
