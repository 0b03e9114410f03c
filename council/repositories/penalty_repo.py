from sqlalchemy import func

from council.extensions import db
from council.models.penalty_record import PenaltyRecord


class PenaltyRepo:
    @staticmethod
    def add(record: PenaltyRecord):
        db.session.add(record)
        db.session.flush()
        return record

    @staticmethod
    def list_by_user(user_id: int):
        return (
            PenaltyRecord.query.filter_by(user_id=user_id)
            .order_by(PenaltyRecord.id.desc())
            .all()
        )

    @staticmethod
    def sum_points(user_id: int) -> int:
        total = (
            db.session.query(func.coalesce(func.sum(PenaltyRecord.points), 0))
            .filter(PenaltyRecord.user_id == user_id, PenaltyRecord.status == "active")
            .scalar()
        )
        return int(total or 0)
