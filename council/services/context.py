from __future__ import annotations

from dataclasses import dataclass

from flask import current_app

from council.services.discord_service import DiscordService
from council.services.notification_service import NotificationOutbox
from council.services.penalty_service import PenaltyService
from council.services.rental_service import RentalService
from council.services.storage_service import LocalBlobStore
from council.utils.timeutil import utcnow


@dataclass
class Services:
    discord: DiscordService
    outbox: NotificationOutbox
    penalties: PenaltyService
    rentals: RentalService
    sweep: "OverdueSweep"
    storage: LocalBlobStore


def build_services(config, clock=utcnow, http_client=None) -> Services:
    """Wire explicit service instances; the app keeps them in app.extensions."""
    from council.tasks.overdue_sweep import OverdueSweep

    discord = DiscordService(
        config.get("DISCORD_WEBHOOK_URL"),
        username=config.get("DISCORD_USERNAME", "Student Council Rentals"),
        timeout=config.get("DISCORD_TIMEOUT_SECONDS", 10.0),
        client=http_client,
    )
    outbox = NotificationOutbox(
        discord, mail_borrowers=config.get("MAIL_NOTIFY_BORROWERS", False), clock=clock
    )
    penalties = PenaltyService(outbox, clock=clock)
    return Services(
        discord=discord,
        outbox=outbox,
        penalties=penalties,
        rentals=RentalService(penalties, outbox, clock=clock),
        sweep=OverdueSweep(penalties, outbox, clock=clock),
        storage=LocalBlobStore(config["UPLOAD_FOLDER"], config.get("UPLOAD_URL_PREFIX", "/uploads")),
    )


def get_services() -> Services:
    return current_app.extensions["council.services"]
