from council.extensions import db
from council.utils.timeutil import utcnow, iso


class PenaltyRecord(db.Model):
    """Append-only ledger entry. The user's cached total is the sum of these."""

    __tablename__ = "penalty_records"

    id = db.Column(db.Integer, primary_key=True)

    user_id = db.Column(db.Integer, db.ForeignKey("users.id"), nullable=False, index=True)
    rental_id = db.Column(db.Integer, db.ForeignKey("rental_applications.id"), nullable=True, index=True)

    type = db.Column(db.String(30), nullable=False)
    points = db.Column(db.Integer, nullable=False)  # negative for reductions
    reason = db.Column(db.String(500), nullable=False, default="")
    applied_by = db.Column(db.String(64), nullable=False, default="system")
    status = db.Column(db.String(20), nullable=False, default="active")

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)

    user = db.relationship("User", backref="penalty_records")

    def to_dict(self):
        return {
            "id": self.id,
            "user_id": self.user_id,
            "rental_id": self.rental_id,
            "type": self.type,
            "points": self.points,
            "reason": self.reason,
            "applied_by": self.applied_by,
            "status": self.status,
            "created_at": iso(self.created_at),
        }
