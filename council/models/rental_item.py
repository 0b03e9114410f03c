from council.extensions import db
from council.models.enums import ItemStatus
from council.utils.timeutil import utcnow, iso


class RentalItem(db.Model):
    __tablename__ = "rental_items"

    id = db.Column(db.Integer, primary_key=True)
    unique_id = db.Column(db.String(64), unique=True, nullable=False, index=True)  # sticker tag

    name = db.Column(db.String(200), nullable=False, index=True)
    category = db.Column(db.String(100), nullable=False, default="")
    description = db.Column(db.Text, nullable=True)
    image = db.Column(db.String(500), nullable=True)
    condition = db.Column(db.String(50), nullable=False, default="good")
    status = db.Column(db.String(20), nullable=False, default=ItemStatus.AVAILABLE.value, index=True)
    location = db.Column(db.String(200), nullable=False, default="")
    contact = db.Column(db.String(100), nullable=True)
    campus = db.Column(db.String(20), nullable=False, index=True)

    current_rental_id = db.Column(db.Integer, nullable=True)
    last_rented_at = db.Column(db.DateTime, nullable=True)
    total_rent_count = db.Column(db.Integer, nullable=False, default=0)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    def to_dict(self):
        return {
            "id": self.id,
            "unique_id": self.unique_id,
            "name": self.name,
            "category": self.category,
            "description": self.description,
            "image": self.image,
            "condition": self.condition,
            "status": self.status,
            "location": self.location,
            "contact": self.contact,
            "campus": self.campus,
            "current_rental_id": self.current_rental_id,
            "last_rented_at": iso(self.last_rented_at),
            "total_rent_count": self.total_rent_count,
        }
