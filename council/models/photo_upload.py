from council.extensions import db
from council.utils.timeutil import utcnow, iso


class PhotoUpload(db.Model):
    __tablename__ = "photo_uploads"

    id = db.Column(db.Integer, primary_key=True)

    rental_id = db.Column(db.Integer, db.ForeignKey("rental_applications.id"), nullable=False, index=True)
    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)

    type = db.Column(db.String(30), nullable=False)
    url = db.Column(db.String(500), nullable=False)
    path = db.Column(db.String(500), nullable=False)
    size = db.Column(db.Integer, nullable=False, default=0)
    content_type = db.Column(db.String(100), nullable=True)

    verified = db.Column(db.Boolean, nullable=False, default=False)
    verified_by = db.Column(db.String(64), nullable=True)
    verified_at = db.Column(db.DateTime, nullable=True)
    notes = db.Column(db.String(500), nullable=True)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "rental_id": self.rental_id,
            "user_id": self.user_id,
            "type": self.type,
            "url": self.url,
            "size": self.size,
            "content_type": self.content_type,
            "verified": self.verified,
            "verified_by": self.verified_by,
            "verified_at": iso(self.verified_at),
            "notes": self.notes,
            "created_at": iso(self.created_at),
        }
