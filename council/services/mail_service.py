# council/services/mail_service.py
from __future__ import annotations

from flask import current_app
from flask_mail import Message

from council.extensions import mail


class MailService:
    @staticmethod
    def send_email(to_email: str, subject: str, body: str) -> tuple[bool, str | None]:
        """
        return: (success, error_text)
        """
        try:
            msg = Message(subject=subject, recipients=[to_email], body=body)
            mail.send(msg)
            return True, None
        except Exception as e:
            current_app.logger.warning(f"[mail] Could not send mail to {to_email}: {e}")
            return False, str(e)

    @staticmethod
    def send_overdue_mail(payload: dict) -> tuple[bool, str | None]:
        to_email = payload.get("email")
        if not to_email:
            return False, "missing_email"

        subject = "Student Council: overdue rental"
        body = (
            f"Hello {payload.get('user_name') or 'borrower'},\n\n"
            f"'{payload.get('item_name') or 'Item'}' is past its due date.\n"
            f"Due date: {payload.get('due_date')}\n"
            f"Overdue days: {payload.get('overdue_days')}\n"
            f"Penalty points added: {payload.get('penalty_points')}\n\n"
            f"Please return it to the lockbox as soon as possible.\n"
        )
        return MailService.send_email(to_email, subject, body)
