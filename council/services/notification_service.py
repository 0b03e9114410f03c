from __future__ import annotations

from dataclasses import dataclass, field

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from council.extensions import db
from council.models.enums import OutboxStatus, RentalStatus
from council.models.outbox_event import OutboxEvent
from council.repositories.outbox_repo import OutboxRepo
from council.repositories.rental_repo import RentalRepo
from council.services.discord_service import DiscordService
from council.services.mail_service import MailService
from council.utils.timeutil import utcnow


@dataclass
class DrainResult:
    sent: int = 0
    failed: int = 0
    skipped: int = 0
    errors: list = field(default_factory=list)
    sent_ids: list = field(default_factory=list, repr=False)

    def to_dict(self):
        return {"sent": self.sent, "failed": self.failed, "skipped": self.skipped, "errors": list(self.errors)}


class NotificationOutbox:
    """
    Business code only enqueues events inside its own transaction; drain()
    delivers them later, so a webhook outage never touches rental or
    penalty state.
    """

    _BUILDERS = {
        "rental_created": DiscordService.new_rental_message,
        "rental_returned": DiscordService.return_completed_message,
        "rental_overdue": DiscordService.overdue_message,
        "rental_lost": DiscordService.incident_message,
        "rental_damaged": DiscordService.incident_message,
        "sanction_applied": DiscordService.sanction_message,
        "daily_summary": DiscordService.daily_summary_message,
    }

    def __init__(self, discord: DiscordService, mail_borrowers: bool = False, clock=utcnow):
        self.discord = discord
        self.mail_borrowers = mail_borrowers
        self.clock = clock

    def enqueue(self, event_type: str, payload: dict) -> OutboxEvent:
        # not committed here: lands with the caller's transaction
        return OutboxRepo.add(OutboxEvent(event_type=event_type, payload=dict(payload)))

    def _render(self, event: OutboxEvent) -> dict:
        if event.event_type == "test":
            return DiscordService.test_message()
        builder = self._BUILDERS.get(event.event_type)
        if builder is None:
            raise ValueError(f"Unknown notification type: {event.event_type}")
        return builder(event.payload or {})

    def _dispatch(self, event: OutboxEvent, result: DrainResult):
        event.attempts = (event.attempts or 0) + 1
        event.processed_at = self.clock()

        if event.event_type == "rental_overdue" and self.mail_borrowers:
            mail_ok, mail_err = MailService.send_overdue_mail(event.payload or {})
            if not mail_ok:
                current_app.logger.info(f"[outbox] borrower mail skipped for event {event.id}: {mail_err}")

        if not self.discord.is_configured:
            event.status = OutboxStatus.SKIPPED.value
            event.last_error = "webhook_not_configured"
            result.skipped += 1
            return

        try:
            message = self._render(event)
        except ValueError as e:
            ok, err = False, str(e)
        else:
            ok, err = self.discord.deliver(message)

        if ok:
            event.status = OutboxStatus.SENT.value
            event.last_error = None
            result.sent += 1
            result.sent_ids.append(event.id)
        else:
            event.status = OutboxStatus.FAILED.value
            event.last_error = (err or "unknown error")[:500]
            result.failed += 1
            result.errors.append(f"Notification {event.event_type} #{event.id} failed: {event.last_error}")

    def drain(self, limit: int | None = None) -> DrainResult:
        result = DrainResult()
        if limit is None:
            limit = current_app.config.get("OUTBOX_BATCH_SIZE", 50)

        try:
            events = OutboxRepo.pending(limit)
        except SQLAlchemyError as e:
            current_app.logger.exception(f"[outbox] could not load pending events: {e}")
            result.errors.append(f"Outbox read failed: {e}")
            return result

        for event in events:
            self._dispatch(event, result)

        try:
            OutboxRepo.commit()
        except SQLAlchemyError as e:
            db.session.rollback()
            current_app.logger.exception(f"[outbox] could not persist delivery state: {e}")
            result.errors.append(f"Outbox write failed: {e}")

        if events:
            current_app.logger.info(
                f"[outbox] drained={len(events)} sent={result.sent} failed={result.failed} skipped={result.skipped}"
            )
        return result

    def retry_failed(self) -> int:
        rows = OutboxRepo.failed()
        for row in rows:
            row.status = OutboxStatus.PENDING.value
        OutboxRepo.commit()
        return len(rows)

    def send_test(self) -> bool:
        """Synchronous test message for the admin button; bypasses the queue."""
        return self.discord.send_message(DiscordService.test_message())

    def enqueue_daily_summary(self) -> OutboxEvent:
        now = self.clock()
        start_of_day = now.replace(hour=0, minute=0, second=0, microsecond=0)
        event = self.enqueue("daily_summary", {
            "date": now.strftime("%Y-%m-%d"),
            "active_rentals": RentalRepo.count_by_status(RentalStatus.RENTED.value),
            "overdue_rentals": RentalRepo.count_by_status(RentalStatus.OVERDUE.value),
            "completed_returns": RentalRepo.count_returned_since(start_of_day),
        })
        OutboxRepo.commit()
        return event
