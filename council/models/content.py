from council.extensions import db
from council.models.enums import EventStatus
from council.utils.timeutil import utcnow, iso


class Notice(db.Model):
    __tablename__ = "notices"

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(200), nullable=False)
    category = db.Column(db.String(50), nullable=False, default="general")
    content = db.Column(db.Text, nullable=False)
    preview = db.Column(db.String(300), nullable=False, default="")
    important = db.Column(db.Boolean, nullable=False, default=False)
    views = db.Column(db.Integer, nullable=False, default=0)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "title": self.title,
            "category": self.category,
            "content": self.content,
            "preview": self.preview,
            "important": self.important,
            "views": self.views,
            "created_at": iso(self.created_at),
            "updated_at": iso(self.updated_at),
        }


class Event(db.Model):
    __tablename__ = "events"

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(200), nullable=False)
    category = db.Column(db.String(50), nullable=False, default="general")
    description = db.Column(db.String(500), nullable=False, default="")
    content = db.Column(db.Text, nullable=True)
    date = db.Column(db.String(20), nullable=False)  # as entered by admins, e.g. 2025-03-02
    time = db.Column(db.String(40), nullable=True)
    location = db.Column(db.String(200), nullable=True)
    image = db.Column(db.String(500), nullable=True)
    status = db.Column(db.String(20), nullable=False, default=EventStatus.UPCOMING.value)
    organizer = db.Column(db.String(100), nullable=True)
    contact = db.Column(db.String(100), nullable=True)
    registration_required = db.Column(db.Boolean, nullable=False, default=False)
    registration_deadline = db.Column(db.String(20), nullable=True)
    featured = db.Column(db.Boolean, nullable=False, default=False)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "title": self.title,
            "category": self.category,
            "description": self.description,
            "content": self.content,
            "date": self.date,
            "time": self.time,
            "location": self.location,
            "image": self.image,
            "status": self.status,
            "organizer": self.organizer,
            "contact": self.contact,
            "registration_required": self.registration_required,
            "registration_deadline": self.registration_deadline,
            "featured": self.featured,
        }
