"""
Tests for the webhook client and the notification outbox, using an
httpx MockTransport in place of Discord.
"""

import json
from datetime import timedelta

import httpx
import pytest

from council.config import TestConfig
from council.extensions import db, mail
from council.models.enums import OutboxStatus, RentalStatus
from council.models.outbox_event import OutboxEvent
from council.services.discord_service import DiscordService
from council.services.notification_service import NotificationOutbox

WEBHOOK_URL = "https://discord.test/api/webhooks/1/token"


class FakeWebhook:
    def __init__(self):
        self.bodies = []
        self.status = 204
        self.error = None

    def __call__(self, request):
        if self.error:
            raise httpx.ConnectError(self.error, request=request)
        self.bodies.append(json.loads(request.content))
        return httpx.Response(self.status)


@pytest.fixture
def webhook():
    return FakeWebhook()


@pytest.fixture
def http_client(webhook):
    client = httpx.Client(transport=httpx.MockTransport(webhook))
    yield client
    client.close()


@pytest.fixture
def app_config(tmp_path):
    class _Config(TestConfig):
        UPLOAD_FOLDER = str(tmp_path / "uploads")
        DISCORD_WEBHOOK_URL = WEBHOOK_URL

    return _Config


def _enqueue(services, event_type, **payload):
    event = services.outbox.enqueue(event_type, payload)
    db.session.commit()
    return event


class TestDiscordService:
    def test_unconfigured_is_a_soft_no_op(self, app):
        service = DiscordService(None)

        assert service.is_configured is False
        assert service.deliver({"content": "hi"}) == (False, "webhook_not_configured")
        assert service.send_message({"content": "hi"}) is False

    def test_posts_with_username(self, services, webhook):
        ok, err = services.discord.deliver(DiscordService.test_message())

        assert (ok, err) == (True, None)
        body = webhook.bodies[0]
        assert body["username"] == "Student Council Rentals"
        assert body["embeds"][0]["title"] == "Test complete"

    def test_rejected_status(self, services, webhook):
        webhook.status = 500
        assert services.discord.deliver({"content": "x"}) == (False, "HTTP 500")

    def test_transport_error_is_returned_not_raised(self, services, webhook):
        webhook.error = "connection refused"
        ok, err = services.discord.deliver({"content": "x"})

        assert ok is False
        assert "connection refused" in err

    def test_overdue_message_fields(self):
        message = DiscordService.overdue_message({
            "user_name": "Kim", "student_id": "2024001", "item_name": "Umbrella",
            "due_date": "2025-03-09T09:00:00", "overdue_days": 2, "penalty_points": 2,
            "rental_id": 7,
        })

        fields = {f["name"]: f["value"] for f in message["embeds"][0]["fields"]}
        assert fields["Borrower"] == "Kim (2024001)"
        assert fields["Overdue days"] == "2 days"
        assert fields["Phone"] == "no contact"
        assert message["embeds"][0]["color"] == 0xFF0000


class TestOutbox:
    def test_enqueue_waits_for_the_callers_commit(self, services):
        services.outbox.enqueue("rental_created", {"user_name": "Kim"})
        db.session.rollback()

        assert OutboxEvent.query.count() == 0

    def test_drain_marks_sent(self, services, webhook):
        first = _enqueue(services, "rental_created", user_name="Kim", item_name="Umbrella")
        second = _enqueue(services, "rental_returned", user_name="Kim", item_name="Umbrella")

        result = services.outbox.drain()

        assert result.to_dict() == {"sent": 2, "failed": 0, "skipped": 0, "errors": []}
        for event in (first, second):
            assert event.status == OutboxStatus.SENT.value
            assert event.attempts == 1
        assert [b["embeds"][0]["title"] for b in webhook.bodies] == ["New rental", "Return completed"]

    def test_failed_delivery_is_recorded_and_retried(self, services, webhook):
        webhook.status = 502
        event = _enqueue(services, "sanction_applied", user_name="Kim", sanction_type="warning")

        result = services.outbox.drain()

        assert result.failed == 1
        assert result.errors == [f"Notification sanction_applied #{event.id} failed: HTTP 502"]
        assert event.status == OutboxStatus.FAILED.value

        webhook.status = 204
        assert services.outbox.retry_failed() == 1
        result = services.outbox.drain()

        assert result.sent == 1
        assert event.status == OutboxStatus.SENT.value
        assert event.attempts == 2

    def test_unknown_event_type_fails(self, services, webhook):
        event = _enqueue(services, "mystery")

        result = services.outbox.drain()

        assert result.failed == 1
        assert event.last_error == "Unknown notification type: mystery"
        assert webhook.bodies == []

    def test_drain_respects_limit(self, services):
        for _ in range(3):
            _enqueue(services, "rental_created", user_name="Kim")

        assert services.outbox.drain(limit=2).sent == 2
        assert OutboxEvent.query.filter_by(status=OutboxStatus.PENDING.value).count() == 1

    def test_unconfigured_webhook_skips(self, services):
        outbox = NotificationOutbox(DiscordService(""))
        event = _enqueue(services, "rental_created", user_name="Kim")

        result = outbox.drain()

        assert result.skipped == 1
        assert result.errors == []
        assert event.status == OutboxStatus.SKIPPED.value

    def test_overdue_mail_to_borrower(self, services, webhook):
        outbox = NotificationOutbox(services.discord, mail_borrowers=True)
        _enqueue(services, "rental_overdue", user_name="Kim", email="kim@example.com",
                 item_name="Umbrella", overdue_days=1, penalty_points=1)

        with mail.record_messages() as outbox_mail:
            outbox.drain()

        assert len(outbox_mail) == 1
        assert outbox_mail[0].recipients == ["kim@example.com"]
        assert "Umbrella" in outbox_mail[0].body

    def test_daily_summary(self, services, webhook, make_user, make_item, make_rental):
        make_rental(make_user(), make_item())

        event = services.outbox.enqueue_daily_summary()
        services.outbox.drain()

        assert event.payload == {
            "date": "2025-03-10", "active_rentals": 1, "overdue_rentals": 0, "completed_returns": 0,
        }
        fields = {f["name"]: f["value"] for f in webhook.bodies[0]["embeds"][0]["fields"]}
        assert fields["Active rentals"] == "1"

    def test_send_test(self, services, webhook):
        assert services.outbox.send_test() is True
        assert webhook.bodies[0]["content"] == "Notification system test message."


class TestSweepNotifications:
    def test_sweep_counts_sent_notifications(self, services, webhook, make_user, make_item, make_rental):
        make_rental(make_user(), make_item(), due_in=timedelta(days=-1))

        report = services.sweep.run()

        assert report.notifications_sent == 1
        assert webhook.bodies[0]["embeds"][0]["title"] == "Rental overdue"

    def test_webhook_outage_does_not_undo_penalties(self, services, webhook, make_user, make_item,
                                                    make_rental):
        webhook.status = 500
        user = make_user()
        rental = make_rental(user, make_item(), due_in=timedelta(days=-2))

        report = services.sweep.run()

        db.session.refresh(rental)
        assert rental.status == RentalStatus.OVERDUE.value
        assert user.penalty_points == 2
        assert report.notifications_sent == 0
        assert len(report.errors) == 1
        assert report.errors[0].endswith("failed: HTTP 500")

    def test_sweep_counts_only_its_overdue_notifications(self, services, webhook, make_user, make_item,
                                                         make_rental):
        _enqueue(services, "rental_created", user_name="Kim", item_name="Umbrella")
        make_rental(make_user(), make_item(), due_in=timedelta(days=-1))

        report = services.sweep.run()

        assert len(webhook.bodies) == 2
        assert report.notifications_sent == 1
        assert "overdue_event_ids" not in report.to_dict()
