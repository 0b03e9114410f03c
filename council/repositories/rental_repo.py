from datetime import datetime

from sqlalchemy import update

from council.extensions import db
from council.models.enums import ACTIVE_RENTAL_STATUSES, RentalStatus
from council.models.rental_application import RentalApplication


class RentalRepo:
    @staticmethod
    def get(rental_id: int):
        return db.session.get(RentalApplication, rental_id)

    @staticmethod
    def list_by_user(user_id: int):
        return (
            RentalApplication.query.filter_by(user_id=user_id)
            .order_by(RentalApplication.id.desc())
            .all()
        )

    @staticmethod
    def list_all(status: str = None):
        q = RentalApplication.query
        if status:
            q = q.filter_by(status=status)
        return q.order_by(RentalApplication.id.desc()).all()

    @staticmethod
    def find_active():
        return (
            RentalApplication.query.filter(RentalApplication.status.in_(ACTIVE_RENTAL_STATUSES))
            .order_by(RentalApplication.id.asc())
            .all()
        )

    @staticmethod
    def find_user_overdue(user_id: int):
        return RentalApplication.query.filter_by(
            user_id=user_id, status=RentalStatus.OVERDUE.value
        ).all()

    @staticmethod
    def count_by_status(status: str) -> int:
        return RentalApplication.query.filter_by(status=status).count()

    @staticmethod
    def count_returned_since(since: datetime) -> int:
        return RentalApplication.query.filter(
            RentalApplication.status == RentalStatus.RETURNED.value,
            RentalApplication.actual_return_date >= since,
        ).count()

    @staticmethod
    def find_active_for_item(item_id: int):
        return RentalApplication.query.filter(
            RentalApplication.item_id == item_id,
            RentalApplication.status.in_(ACTIVE_RENTAL_STATUSES),
        ).all()

    @staticmethod
    def advance_overdue_days(rental_id: int, expected: int, new_days: int, checked_at: datetime) -> bool:
        """
        Compare-and-swap on overdue_days: only moves expected -> new_days.
        False means another sweep already advanced this rental.
        """
        result = db.session.execute(
            update(RentalApplication)
            .where(
                RentalApplication.id == rental_id,
                RentalApplication.overdue_days == expected,
                RentalApplication.status.in_(ACTIVE_RENTAL_STATUSES),
            )
            .values(overdue_days=new_days, last_overdue_check=checked_at)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    @staticmethod
    def add(rental: RentalApplication):
        db.session.add(rental)
        db.session.flush()
        return rental

    @staticmethod
    def commit():
        db.session.commit()
