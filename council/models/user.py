from council.extensions import db
from council.models.enums import UserRole
from council.utils.timeutil import utcnow, iso


class User(db.Model):
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(80), unique=True, nullable=False, index=True)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)
    password_hash = db.Column(db.String(255), nullable=False)
    role = db.Column(db.String(20), nullable=False, default=UserRole.STUDENT.value)

    name = db.Column(db.String(100), nullable=False, default="")
    student_id = db.Column(db.String(32), unique=True, nullable=True, index=True)
    phone = db.Column(db.String(32), nullable=True)
    campus = db.Column(db.String(20), nullable=True)
    department = db.Column(db.String(100), nullable=True)
    is_active = db.Column(db.Boolean, nullable=False, default=True)

    # cached sum of the penalty ledger
    penalty_points = db.Column(db.Integer, nullable=False, default=0)

    sanction_type = db.Column(db.String(30), nullable=True)
    sanction_end_date = db.Column(db.DateTime, nullable=True)  # null = indefinite
    sanction_applied_at = db.Column(db.DateTime, nullable=True)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
    updated_at = db.Column(db.DateTime, nullable=False, default=utcnow, onupdate=utcnow)

    def clear_sanction(self):
        self.sanction_type = None
        self.sanction_end_date = None
        self.sanction_applied_at = None

    def to_dict(self):
        return {
            "id": self.id,
            "username": self.username,
            "email": self.email,
            "role": self.role,
            "name": self.name,
            "student_id": self.student_id,
            "phone": self.phone,
            "campus": self.campus,
            "department": self.department,
            "penalty_points": self.penalty_points,
            "sanction_type": self.sanction_type,
            "sanction_end_date": iso(self.sanction_end_date),
            "sanction_applied_at": iso(self.sanction_applied_at),
        }
