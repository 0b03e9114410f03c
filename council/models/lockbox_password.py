from council.extensions import db
from council.utils.timeutil import utcnow, iso


class LockboxPassword(db.Model):
    __tablename__ = "lockbox_passwords"
    __table_args__ = (db.UniqueConstraint("campus", "location", name="uq_lockbox_campus_location"),)

    id = db.Column(db.Integer, primary_key=True)
    campus = db.Column(db.String(20), nullable=False, index=True)
    location = db.Column(db.String(200), nullable=False)
    current_password = db.Column(db.String(32), nullable=False)
    previous_password = db.Column(db.String(32), nullable=True)
    last_changed_by = db.Column(db.String(100), nullable=False)
    last_changed_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "campus": self.campus,
            "location": self.location,
            "current_password": self.current_password,
            "previous_password": self.previous_password,
            "last_changed_by": self.last_changed_by,
            "last_changed_at": iso(self.last_changed_at),
        }
