from council.extensions import db
from council.models.content import Event, Notice
from council.models.enums import EventStatus


class NoticeRepo:
    @staticmethod
    def list_all():
        return Notice.query.order_by(Notice.created_at.desc(), Notice.id.desc()).all()

    @staticmethod
    def list_important():
        return (
            Notice.query.filter_by(important=True)
            .order_by(Notice.created_at.desc(), Notice.id.desc())
            .all()
        )

    @staticmethod
    def get(notice_id: int):
        return db.session.get(Notice, notice_id)

    @staticmethod
    def create(notice: Notice):
        db.session.add(notice)
        db.session.commit()
        return notice

    @staticmethod
    def update():
        db.session.commit()

    @staticmethod
    def delete(notice: Notice):
        db.session.delete(notice)
        db.session.commit()


class EventRepo:
    @staticmethod
    def list_all():
        return Event.query.order_by(Event.date.desc(), Event.id.desc()).all()

    @staticmethod
    def list_upcoming(limit: int):
        return (
            Event.query.filter(
                Event.status.in_((EventStatus.UPCOMING.value, EventStatus.ONGOING.value))
            )
            .order_by(Event.date.asc(), Event.id.asc())
            .limit(limit)
            .all()
        )

    @staticmethod
    def list_featured():
        return Event.query.filter_by(featured=True).order_by(Event.date.desc()).all()

    @staticmethod
    def get(event_id: int):
        return db.session.get(Event, event_id)

    @staticmethod
    def create(event: Event):
        db.session.add(event)
        db.session.commit()
        return event

    @staticmethod
    def update():
        db.session.commit()

    @staticmethod
    def delete(event: Event):
        db.session.delete(event)
        db.session.commit()
