from sqlalchemy import select

from council.models.user import User
from council.extensions import db


class UserRepo:
    @staticmethod
    def get_by_username(username: str):
        return User.query.filter_by(username=username).first()

    @staticmethod
    def get_by_email(email: str):
        return User.query.filter_by(email=email).first()

    @staticmethod
    def get_by_student_id(student_id: str):
        return User.query.filter_by(student_id=student_id).first()

    @staticmethod
    def get_by_id(user_id: int):
        return db.session.get(User, user_id)

    @staticmethod
    def get_for_update(user_id: int):
        # row lock where the backend supports it (no-op on SQLite)
        return db.session.execute(
            select(User).where(User.id == user_id).with_for_update()
        ).scalar_one_or_none()

    @staticmethod
    def list_all():
        return User.query.order_by(User.id.asc()).all()

    @staticmethod
    def create(user: User):
        db.session.add(user)
        db.session.commit()
        return user
