from council.extensions import db
from council.models.lockbox_password import LockboxPassword


class LockboxRepo:
    @staticmethod
    def get(campus: str, location: str):
        return LockboxPassword.query.filter_by(campus=campus, location=location).first()

    @staticmethod
    def latest_for_campus(campus: str):
        return (
            LockboxPassword.query.filter_by(campus=campus)
            .order_by(LockboxPassword.last_changed_at.desc(), LockboxPassword.id.desc())
            .first()
        )

    @staticmethod
    def list_all():
        return LockboxPassword.query.order_by(LockboxPassword.campus.asc(), LockboxPassword.location.asc()).all()

    @staticmethod
    def save(row: LockboxPassword):
        db.session.add(row)
        db.session.commit()
        return row
