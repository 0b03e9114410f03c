from dataclasses import replace
from datetime import timedelta

from flask import current_app

from council.extensions import db
from council.models.enums import ItemStatus, PenaltyType
from council.models.rental_application import RentalApplication
from council.repositories.item_repo import ItemRepo
from council.repositories.lockbox_repo import LockboxRepo
from council.repositories.rental_repo import RentalRepo
from council.services import rental_lifecycle as lifecycle
from council.services.penalty_rules import elapsed_overdue_days, points_for
from council.utils.timeutil import utcnow, iso


def _borrower_fields(rental: RentalApplication) -> dict:
    user = rental.user
    return {
        "rental_id": rental.id,
        "user_id": rental.user_id,
        "user_name": (user.name or user.username) if user else None,
        "student_id": user.student_id if user else None,
        "email": user.email if user else None,
        "item_name": rental.item.name if rental.item else f"Item #{rental.item_id}",
    }


class RentalService:
    def __init__(self, penalty_service, outbox, clock=utcnow):
        self.penalties = penalty_service
        self.outbox = outbox
        self.clock = clock

    def get(self, rental_id: int) -> RentalApplication:
        rental = RentalRepo.get(rental_id)
        if not rental:
            raise ValueError("Rental not found")
        return rental

    def list_for_user(self, user_id: int):
        return RentalRepo.list_by_user(user_id)

    def list_all(self, status: str = None):
        return RentalRepo.list_all(status)

    def checkout(self, user_id: int, item_id: int, purpose: str = "", phone_number: str = None):
        """
        Self-service checkout. Returns (rental, lockbox) where lockbox is the
        campus lockbox row whose password the borrower needs, or None.
        """
        verdict = self.penalties.check_eligibility(user_id)
        if not verdict.eligible:
            raise ValueError(verdict.reason)

        item = ItemRepo.get(item_id)
        if not item:
            raise ValueError("Item not found")
        if item.status != ItemStatus.AVAILABLE.value:
            raise ValueError("This item is not available right now")

        now = self.clock()
        hours = current_app.config.get("RENTAL_PERIOD_HOURS", 24)
        rental = RentalRepo.add(RentalApplication(
            user_id=user_id,
            item_id=item.id,
            status=lifecycle.Rented.status.value,
            rent_date=now,
            due_date=now + timedelta(hours=hours),
            purpose=purpose,
            phone_number=phone_number,
        ))

        item.status = ItemStatus.RENTED.value
        item.current_rental_id = rental.id
        item.last_rented_at = now
        item.total_rent_count = (item.total_rent_count or 0) + 1

        payload = _borrower_fields(rental)
        payload.update({"due_date": iso(rental.due_date), "purpose": purpose})
        self.outbox.enqueue("rental_created", payload)

        db.session.commit()
        current_app.logger.info(f"[rental] user={user_id} item={item.id} rental={rental.id} checked out")

        lockbox = LockboxRepo.latest_for_campus(item.campus)
        return rental, lockbox

    def _settle_overdue(self, rental: RentalApplication, now):
        """Charge any overdue days the sweep has not charged yet."""
        observed = elapsed_overdue_days(rental.due_date, now)
        charged = rental.overdue_days or 0
        if observed <= charged:
            return 0
        if not RentalRepo.advance_overdue_days(rental.id, charged, observed, now):
            # a sweep moved overdue_days after this rental was loaded
            db.session.refresh(rental)
            charged = rental.overdue_days or 0
            if observed <= charged:
                return 0
            if not RentalRepo.advance_overdue_days(rental.id, charged, observed, now):
                raise ValueError("Rental is being updated, please try again")

        delta = observed - charged
        points = points_for(PenaltyType.OVERDUE, delta)
        item_name = rental.item.name if rental.item else f"Item #{rental.item_id}"
        self.penalties.apply_penalty(
            rental.user_id, points, PenaltyType.OVERDUE,
            f"{item_name} returned {delta} more day(s) late",
            rental_id=rental.id, commit=False,
        )
        rental.overdue_days = observed
        rental.last_overdue_check = now
        rental.penalty_points = (rental.penalty_points or 0) + points
        return points

    def process_return(self, rental_id: int, user_id: int, is_admin: bool = False,
                       rating: int = None, feedback: str = None) -> RentalApplication:
        rental = self.get(rental_id)
        if not is_admin and rental.user_id != user_id:
            raise ValueError("This rental does not belong to you")
        if rating is not None and not 1 <= int(rating) <= 5:
            raise ValueError("rating must be between 1 and 5")

        now = self.clock()
        state = lifecycle.mark_returned(lifecycle.state_of(rental), now)

        self._settle_overdue(rental, now)
        state = replace(state, overdue_days=rental.overdue_days or 0)
        lifecycle.apply_state(rental, state)
        rental.rating = int(rating) if rating is not None else None
        rental.feedback = feedback

        item = rental.item
        if item:
            item.status = ItemStatus.AVAILABLE.value
            item.current_rental_id = None

        payload = _borrower_fields(rental)
        payload["actual_return_date"] = iso(now)
        self.outbox.enqueue("rental_returned", payload)

        db.session.commit()
        return rental

    def _close_with_incident(self, rental, state, item_status: str, damage_type: str,
                             reason: str, event_type: str):
        lifecycle.apply_state(rental, state)

        item = rental.item
        item_name = item.name if item else f"Item #{rental.item_id}"
        if item:
            item.status = item_status
            item.current_rental_id = None

        record = self.penalties.apply_damage_penalty(
            rental.user_id, damage_type, item_name, reason,
            rental_id=rental.id, commit=False,
        )
        rental.penalty_points = (rental.penalty_points or 0) + record.points

        payload = _borrower_fields(rental)
        payload.update({
            "kind": event_type.replace("rental_", ""),
            "reason": reason,
            "penalty_points": record.points,
        })
        self.outbox.enqueue(event_type, payload)
        db.session.commit()
        return rental

    def mark_lost(self, rental_id: int, reason: str) -> RentalApplication:
        rental = self.get(rental_id)
        state = lifecycle.mark_lost(lifecycle.state_of(rental), reason)
        return self._close_with_incident(
            rental, state, ItemStatus.LOST.value, "loss", reason, "rental_lost"
        )

    def mark_damaged(self, rental_id: int, reason: str, severity: str = "minor") -> RentalApplication:
        if severity not in ("minor", "major"):
            raise ValueError("severity must be minor or major")
        rental = self.get(rental_id)
        state = lifecycle.mark_damaged(lifecycle.state_of(rental), reason)
        return self._close_with_incident(
            rental, state, ItemStatus.DAMAGED.value, severity, reason, "rental_damaged"
        )
