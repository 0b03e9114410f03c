# council/tasks/overdue_sweep.py
from __future__ import annotations

import threading
from collections import Counter
from dataclasses import dataclass, field

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from council.extensions import db
from council.models.enums import PenaltyType, RentalStatus
from council.repositories.item_repo import ItemRepo
from council.repositories.rental_repo import RentalRepo
from council.repositories.user_repo import UserRepo
from council.services import rental_lifecycle as lifecycle
from council.services.penalty_rules import elapsed_overdue_days, points_for
from council.utils.timeutil import utcnow, iso


# one sweep at a time per process
_SWEEP_LOCK = threading.Lock()


@dataclass
class SweepReport:
    total_processed: int = 0
    new_overdue_items: list = field(default_factory=list)
    penalties_applied: list = field(default_factory=list)
    notifications_sent: int = 0
    errors: list = field(default_factory=list)
    overdue_event_ids: set = field(default_factory=set, repr=False)

    def to_dict(self):
        return {
            "total_processed": self.total_processed,
            "new_overdue_items": list(self.new_overdue_items),
            "penalties_applied": list(self.penalties_applied),
            "notifications_sent": self.notifications_sent,
            "errors": list(self.errors),
        }


class OverdueSweep:
    """
    One pass over active rentals: charges newly elapsed overdue days,
    flags borrowers with several overdue items, then drains notifications.
    Safe to re-run; each rental is charged only for days not yet charged.
    """

    def __init__(self, penalty_service, outbox, clock=utcnow):
        self.penalties = penalty_service
        self.outbox = outbox
        self.clock = clock

    def run(self, now=None) -> SweepReport:
        report = SweepReport()
        if not _SWEEP_LOCK.acquire(blocking=False):
            report.errors.append("A penalty sweep is already running")
            return report
        try:
            self._run(now or self.clock(), report)
        finally:
            _SWEEP_LOCK.release()

        current_app.logger.info(
            f"[sweep] processed={report.total_processed} new_overdue={len(report.new_overdue_items)} "
            f"penalties={len(report.penalties_applied)} notified={report.notifications_sent} "
            f"errors={len(report.errors)}"
        )
        return report

    def _run(self, now, report: SweepReport):
        try:
            rentals = RentalRepo.find_active()
        except SQLAlchemyError as e:
            current_app.logger.exception(f"[sweep] could not load active rentals: {e}")
            report.errors.append(f"Could not load active rentals: {e}")
            return

        for rental in rentals:
            report.total_processed += 1
            rental_id = rental.id
            try:
                self._process_rental(rental, now, report)
            except (ValueError, SQLAlchemyError) as e:
                db.session.rollback()
                current_app.logger.warning(f"[sweep] rental={rental_id} skipped: {e}")
                report.errors.append(f"Rental {rental_id} could not be processed: {e}")

        self._charge_multiple_overdue(report)

        drained = self.outbox.drain()
        # other pending events may go out in the same drain
        report.notifications_sent = len(report.overdue_event_ids.intersection(drained.sent_ids))
        report.errors.extend(drained.errors)

    def _process_rental(self, rental, now, report: SweepReport):
        overdue_days = elapsed_overdue_days(rental.due_date, now)
        if overdue_days <= 0:
            return

        charged = rental.overdue_days or 0
        if overdue_days <= charged:
            return

        user = UserRepo.get_by_id(rental.user_id)
        item = ItemRepo.get(rental.item_id)
        if not user or not item:
            raise ValueError(f"user or item not found for rental {rental.id}")

        state = lifecycle.mark_overdue(lifecycle.state_of(rental), overdue_days, now)

        # another sweep may have charged these days already
        if not RentalRepo.advance_overdue_days(rental.id, charged, overdue_days, now):
            db.session.rollback()
            return

        lifecycle.apply_state(rental, state)

        delta = overdue_days - charged
        points = points_for(PenaltyType.OVERDUE, delta)
        reason = f"{item.name} overdue {delta} more day(s)"
        self.penalties.apply_penalty(
            user.id, points, PenaltyType.OVERDUE, reason,
            rental_id=rental.id, commit=False,
        )
        rental.penalty_points = (rental.penalty_points or 0) + points

        event = self.outbox.enqueue("rental_overdue", {
            "rental_id": rental.id,
            "user_id": user.id,
            "user_name": user.name or user.username,
            "student_id": user.student_id,
            "email": user.email,
            "item_name": item.name,
            "due_date": iso(rental.due_date),
            "overdue_days": overdue_days,
            "penalty_points": points,
            "phone_number": rental.phone_number or user.phone,
        })
        db.session.commit()
        report.overdue_event_ids.add(event.id)

        report.penalties_applied.append({"user_id": user.id, "points": points, "reason": reason})
        report.new_overdue_items.append({
            "rental_id": rental.id,
            "user_id": user.id,
            "item_name": item.name,
            "overdue_days": overdue_days,
            "penalty_points": points,
            "status": RentalStatus.OVERDUE.value,
        })

    def _charge_multiple_overdue(self, report: SweepReport):
        counts = Counter(entry["user_id"] for entry in report.new_overdue_items)
        for user_id, count in counts.items():
            if count < 2:
                continue
            points = points_for(PenaltyType.MULTIPLE_OVERDUE)
            reason = f"{count} items overdue at the same time"
            try:
                self.penalties.apply_penalty(user_id, points, PenaltyType.MULTIPLE_OVERDUE, reason)
            except (ValueError, SQLAlchemyError) as e:
                db.session.rollback()
                report.errors.append(f"Multiple-overdue penalty failed for user {user_id}: {e}")
                continue
            report.penalties_applied.append({"user_id": user_id, "points": points, "reason": reason})


def run_overdue_sweep(app):
    """Scheduler entry point: sweep inside an app context."""
    from council.services.context import get_services

    with app.app_context():
        return get_services().sweep.run()
