from council.extensions import db
from council.models.enums import RentalStatus
from council.utils.timeutil import utcnow, iso


class RentalApplication(db.Model):
    __tablename__ = "rental_applications"

    id = db.Column(db.Integer, primary_key=True)

    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    item_id = db.Column(db.Integer, db.ForeignKey("rental_items.id"), nullable=False, index=True)

    status = db.Column(db.String(20), nullable=False, default=RentalStatus.RENTED.value, index=True)

    rent_date = db.Column(db.DateTime, nullable=False, default=utcnow)
    due_date = db.Column(db.DateTime, nullable=False)
    actual_return_date = db.Column(db.DateTime, nullable=True)

    purpose = db.Column(db.String(500), nullable=True)
    phone_number = db.Column(db.String(32), nullable=True)

    # overdue days already charged; only the delta is charged on later sweeps
    overdue_days = db.Column(db.Integer, nullable=False, default=0)
    penalty_points = db.Column(db.Integer, nullable=False, default=0)
    last_overdue_check = db.Column(db.DateTime, nullable=True)

    lost_reason = db.Column(db.String(500), nullable=True)
    damage_reason = db.Column(db.String(500), nullable=True)

    rating = db.Column(db.Integer, nullable=True)
    feedback = db.Column(db.Text, nullable=True)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    user = db.relationship("User", backref="rental_applications")
    item = db.relationship("RentalItem", backref="rental_applications")

    def to_dict(self):
        return {
            "id": self.id,
            "user_id": self.user_id,
            "item_id": self.item_id,
            "item_name": self.item.name if self.item else None,
            "status": self.status,
            "rent_date": iso(self.rent_date),
            "due_date": iso(self.due_date),
            "actual_return_date": iso(self.actual_return_date),
            "purpose": self.purpose,
            "phone_number": self.phone_number,
            "overdue_days": self.overdue_days,
            "penalty_points": self.penalty_points,
            "lost_reason": self.lost_reason,
            "damage_reason": self.damage_reason,
            "rating": self.rating,
            "feedback": self.feedback,
        }
