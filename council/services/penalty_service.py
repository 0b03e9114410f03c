# council/services/penalty_service.py
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime

from flask import current_app
from sqlalchemy.exc import SQLAlchemyError

from council.extensions import db
from council.models.enums import PenaltyType, RentalStatus, SanctionType
from council.models.penalty_record import PenaltyRecord
from council.repositories.penalty_repo import PenaltyRepo
from council.repositories.rental_repo import RentalRepo
from council.repositories.user_repo import UserRepo
from council.services.penalty_rules import (
    PENALTY_THRESHOLDS,
    classify_sanction,
    penalty_type_of,
    points_for,
)
from council.utils.timeutil import utcnow, iso


@dataclass
class EligibilityResult:
    eligible: bool
    reason: str | None = None
    sanction_end_date: datetime | None = None

    def to_dict(self):
        data = {"eligible": self.eligible}
        if self.reason:
            data["reason"] = self.reason
        if self.sanction_end_date:
            data["sanction_end_date"] = iso(self.sanction_end_date)
        return data


DAMAGE_TYPES = {
    "minor": PenaltyType.DAMAGE_MINOR,
    "major": PenaltyType.DAMAGE_MAJOR,
    "loss": PenaltyType.LOSS,
}


class PenaltyService:
    """
    Ledger-backed penalty accounting.

    The PenaltyRecord ledger is authoritative: after every write the user's
    cached `penalty_points` is recomputed as the ledger sum in the same
    transaction, under a row lock on the user.
    """

    def __init__(self, outbox, clock=utcnow):
        self.outbox = outbox
        self.clock = clock

    # ----- internals -----

    def _load_user(self, user_id: int):
        user = UserRepo.get_for_update(user_id)
        if not user:
            raise ValueError(f"User not found: {user_id}")
        return user

    def _apply_sanction(self, user, total: int):
        """
        Recompute the tier from the total. Every penalty that reaches a tier
        restarts its end date; the notification only goes out on a tier change.
        """
        now = self.clock()
        decision = classify_sanction(total, now)
        if decision.tier is None:
            return None

        changed = user.sanction_type != decision.tier_value
        user.sanction_type = decision.tier_value
        user.sanction_end_date = decision.end_date
        user.sanction_applied_at = now
        if not changed:
            return decision

        self.outbox.enqueue("sanction_applied", {
            "user_id": user.id,
            "user_name": user.name or user.username,
            "student_id": user.student_id,
            "sanction_type": decision.tier_value,
            "sanction_end_date": iso(decision.end_date),
            "total_points": total,
        })
        current_app.logger.info(
            f"[penalty] user={user.id} sanction={decision.tier_value} points={total}"
        )
        return decision

    # ----- writes -----

    def apply_penalty(self, user_id: int, points: int, penalty_type, reason: str,
                      rental_id: int | None = None, applied_by: str = "system",
                      commit: bool = True) -> PenaltyRecord:
        penalty_type = penalty_type_of(penalty_type)
        if penalty_type == PenaltyType.REDUCTION:
            raise ValueError("Use reduce_penalty for reductions")
        if points is None or int(points) <= 0:
            raise ValueError("points must be positive")

        user = self._load_user(user_id)

        record = PenaltyRepo.add(PenaltyRecord(
            user_id=user.id,
            rental_id=rental_id,
            type=penalty_type.value,
            points=int(points),
            reason=reason,
            applied_by=str(applied_by),
            status="active",
            created_at=self.clock(),
        ))

        total = PenaltyRepo.sum_points(user.id)
        user.penalty_points = total
        self._apply_sanction(user, total)

        if commit:
            db.session.commit()
        return record

    def apply_damage_penalty(self, user_id: int, damage_type: str, item_name: str,
                             description: str, rental_id: int | None = None,
                             commit: bool = True) -> PenaltyRecord:
        if damage_type not in DAMAGE_TYPES:
            raise ValueError("damage_type must be one of: minor, major, loss")
        penalty_type = DAMAGE_TYPES[damage_type]
        return self.apply_penalty(
            user_id,
            points_for(penalty_type),
            penalty_type,
            f"{item_name} {description}".strip(),
            rental_id=rental_id,
            commit=commit,
        )

    def apply_return_delay_penalty(self, user_id: int, item_name: str, delay_days: int,
                                   rental_id: int | None = None) -> PenaltyRecord:
        if int(delay_days) <= 0:
            raise ValueError("delay_days must be positive")
        return self.apply_penalty(
            user_id,
            points_for(PenaltyType.RETURN_DELAY, int(delay_days)),
            PenaltyType.RETURN_DELAY,
            f"{item_name} not picked up for {delay_days} day(s)",
            rental_id=rental_id,
        )

    def reduce_penalty(self, user_id: int, points: int, reason: str, admin_id) -> PenaltyRecord:
        if points is None or int(points) <= 0:
            raise ValueError("points must be positive")

        user = self._load_user(user_id)
        current_total = PenaltyRepo.sum_points(user.id)
        # floor at zero: the ledger entry only removes what exists
        actual = min(int(points), current_total)

        record = PenaltyRepo.add(PenaltyRecord(
            user_id=user.id,
            type=PenaltyType.REDUCTION.value,
            points=-actual,
            reason=reason,
            applied_by=str(admin_id),
            status="active",
            created_at=self.clock(),
        ))

        total = PenaltyRepo.sum_points(user.id)
        user.penalty_points = total
        if total < PENALTY_THRESHOLDS["WARNING"]:
            user.clear_sanction()

        db.session.commit()
        current_app.logger.info(
            f"[penalty] user={user.id} reduced by {actual} (requested {points}) by admin={admin_id}"
        )
        return record

    def reconcile(self, user_id: int) -> int:
        """Rewrite the cached total from the ledger; returns the drift that was fixed."""
        user = self._load_user(user_id)
        total = PenaltyRepo.sum_points(user.id)
        drift = (user.penalty_points or 0) - total
        user.penalty_points = total
        db.session.commit()
        if drift:
            current_app.logger.warning(f"[penalty] user={user.id} cached total drifted by {drift}")
        return drift

    # ----- reads -----

    def ledger_for(self, user_id: int):
        return PenaltyRepo.list_by_user(user_id)

    def check_eligibility(self, user_id: int) -> EligibilityResult:
        try:
            user = UserRepo.get_by_id(user_id)
            if not user:
                return EligibilityResult(False, "User information could not be found.")

            if user.sanction_type == SanctionType.PERMANENT_BAN.value:
                return EligibilityResult(
                    False, "Rentals are permanently suspended. Please contact the student council."
                )

            if user.sanction_type and user.sanction_end_date:
                now = self.clock()
                if now < user.sanction_end_date:
                    return EligibilityResult(
                        False,
                        f"Rentals are suspended until {user.sanction_end_date.strftime('%Y-%m-%d')}.",
                        user.sanction_end_date,
                    )
                # expired: lift it and keep evaluating
                user.clear_sanction()
                db.session.commit()
                current_app.logger.info(f"[penalty] user={user.id} expired sanction cleared")

            overdue = RentalRepo.find_user_overdue(user.id)
            if overdue:
                return EligibilityResult(
                    False, f"You have {len(overdue)} overdue item(s). Please return them first."
                )

            return EligibilityResult(True)
        except SQLAlchemyError as e:
            db.session.rollback()
            current_app.logger.exception(f"[penalty] eligibility check failed for user={user_id}: {e}")
            return EligibilityResult(False, "A system error occurred. Please try again later.")

    def statistics(self) -> dict:
        users = UserRepo.list_all()
        points = [u.penalty_points or 0 for u in users]
        penalized = [p for p in points if p > 0]

        t = PENALTY_THRESHOLDS
        return {
            "total_users": len(users),
            "users_with_penalties": len(penalized),
            "average_penalty_points": round(sum(penalized) / len(penalized), 2) if penalized else 0,
            "sanction_counts": {
                "warning": sum(1 for p in points if t["WARNING"] <= p < t["SUSPENSION_1"]),
                "suspension_1": sum(1 for p in points if t["SUSPENSION_1"] <= p < t["SUSPENSION_3"]),
                "suspension_3": sum(1 for p in points if t["SUSPENSION_3"] <= p < t["PERMANENT_BAN"]),
                "permanent_ban": sum(1 for p in points if p >= t["PERMANENT_BAN"]),
            },
            "overdue_items_count": RentalRepo.count_by_status(RentalStatus.OVERDUE.value),
        }
