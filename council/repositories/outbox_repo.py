from council.extensions import db
from council.models.enums import OutboxStatus
from council.models.outbox_event import OutboxEvent


class OutboxRepo:
    @staticmethod
    def add(event: OutboxEvent):
        db.session.add(event)
        return event

    @staticmethod
    def pending(limit: int):
        return (
            OutboxEvent.query.filter_by(status=OutboxStatus.PENDING.value)
            .order_by(OutboxEvent.id.asc())
            .limit(limit)
            .all()
        )

    @staticmethod
    def failed():
        return OutboxEvent.query.filter_by(status=OutboxStatus.FAILED.value).all()

    @staticmethod
    def count_by_status(status: str) -> int:
        return OutboxEvent.query.filter_by(status=status).count()

    @staticmethod
    def commit():
        db.session.commit()
