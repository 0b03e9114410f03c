# council/services/discord_service.py
from __future__ import annotations

import httpx
from flask import current_app

from council.utils.timeutil import utcnow

COLORS = {
    "SUCCESS": 0x00FF00,  # approved, returned
    "WARNING": 0xFF9900,  # new rental, return requested
    "ERROR": 0xFF0000,    # overdue, sanctions, loss
    "INFO": 0x0099FF,
}

FOOTER_TEXT = "Student Council Equipment Rental"


def field(name: str, value, inline: bool = True) -> dict:
    return {"name": name, "value": str(value), "inline": inline}


def embed(title: str, description: str, color: int, fields=None, footer: str = FOOTER_TEXT) -> dict:
    return {
        "title": title,
        "description": description,
        "color": color,
        "fields": list(fields or []),
        "timestamp": utcnow().isoformat() + "Z",
        "footer": {"text": footer},
    }


class DiscordService:
    """
    Fire-and-forget webhook client. Nothing here raises: an unset webhook
    URL is a logged no-op and transport errors come back as (False, error).
    """

    def __init__(self, webhook_url: str | None, username: str = "Student Council Rentals",
                 timeout: float = 10.0, client: httpx.Client | None = None):
        self.webhook_url = (webhook_url or "").strip()
        self.username = username
        self.timeout = timeout
        self._client = client

    @property
    def is_configured(self) -> bool:
        return bool(self.webhook_url)

    def deliver(self, message: dict) -> tuple[bool, str | None]:
        if not self.is_configured:
            current_app.logger.warning("[discord] Webhook URL is not configured; message dropped.")
            return False, "webhook_not_configured"

        body = {"username": self.username, **message}
        try:
            if self._client is not None:
                response = self._client.post(self.webhook_url, json=body)
            else:
                with httpx.Client(timeout=self.timeout) as client:
                    response = client.post(self.webhook_url, json=body)
        except httpx.HTTPError as e:
            current_app.logger.error(f"[discord] Webhook request failed: {e}")
            return False, str(e)

        if response.status_code >= 300:
            current_app.logger.error(
                f"[discord] Webhook rejected message: {response.status_code} {response.text[:200]}"
            )
            return False, f"HTTP {response.status_code}"
        return True, None

    def send_message(self, message: dict) -> bool:
        ok, _err = self.deliver(message)
        return ok

    # ----- message builders -----

    @staticmethod
    def new_rental_message(data: dict) -> dict:
        return {"embeds": [embed(
            "New rental",
            f"**{data.get('user_name')}** checked out an item.",
            COLORS["WARNING"],
            [
                field("Borrower", f"{data.get('user_name')} ({data.get('student_id') or '-'})"),
                field("Item", data.get("item_name")),
                field("Due", data.get("due_date"), inline=False),
                field("Purpose", data.get("purpose") or "-", inline=False),
            ],
        )]}

    @staticmethod
    def return_completed_message(data: dict) -> dict:
        return {"embeds": [embed(
            "Return completed",
            f"**{data.get('user_name')}** returned an item.",
            COLORS["SUCCESS"],
            [
                field("Borrower", f"{data.get('user_name')} ({data.get('student_id') or '-'})"),
                field("Item", data.get("item_name")),
                field("Returned at", data.get("actual_return_date")),
            ],
            footer="Thanks for using the rental service",
        )]}

    @staticmethod
    def overdue_message(data: dict) -> dict:
        return {"embeds": [embed(
            "Rental overdue",
            f"**{data.get('user_name')}** has an overdue item.",
            COLORS["ERROR"],
            [
                field("Borrower", f"{data.get('user_name')} ({data.get('student_id') or '-'})"),
                field("Item", data.get("item_name")),
                field("Due date", data.get("due_date")),
                field("Overdue days", f"{data.get('overdue_days')} days"),
                field("Penalty", f"{data.get('penalty_points')} points"),
                field("Phone", data.get("phone_number") or "no contact"),
                field("Rental", data.get("rental_id")),
            ],
            footer="Please return the item immediately",
        )]}

    @staticmethod
    def sanction_message(data: dict) -> dict:
        return {"embeds": [embed(
            "Sanction applied",
            f"A sanction was applied to **{data.get('user_name')}** ({data.get('student_id') or '-'}).",
            COLORS["ERROR"],
            [
                field("Sanction", data.get("sanction_type")),
                field("Points", data.get("total_points")),
                field("Ends", data.get("sanction_end_date") or "indefinite", inline=False),
            ],
            footer="Admin review required",
        )]}

    @staticmethod
    def incident_message(data: dict) -> dict:
        kind = data.get("kind", "incident")
        return {"embeds": [embed(
            f"Item {kind}",
            f"**{data.get('item_name')}** was reported {kind}.",
            COLORS["ERROR"],
            [
                field("Borrower", f"{data.get('user_name')} ({data.get('student_id') or '-'})"),
                field("Reason", data.get("reason") or "-", inline=False),
                field("Penalty", f"{data.get('penalty_points')} points"),
            ],
        )]}

    @staticmethod
    def daily_summary_message(data: dict) -> dict:
        return {"embeds": [embed(
            "Daily rental summary",
            f"Rental status for **{data.get('date')}**.",
            COLORS["INFO"],
            [
                field("Active rentals", data.get("active_rentals")),
                field("Overdue", data.get("overdue_rentals")),
                field("Returned", data.get("completed_returns")),
            ],
        )]}

    @staticmethod
    def test_message() -> dict:
        return {
            "content": "Notification system test message.",
            "embeds": [embed("Test complete", "The webhook is working.", COLORS["SUCCESS"])],
        }
