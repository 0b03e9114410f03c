"""
Tests for checkout, returns, incidents and the rental state variants.
"""

from dataclasses import FrozenInstanceError
from datetime import datetime, timedelta

import pytest

from council.extensions import db
from council.models.enums import ItemStatus, PenaltyType, RentalStatus
from council.models.lockbox_password import LockboxPassword
from council.models.outbox_event import OutboxEvent
from council.models.penalty_record import PenaltyRecord
from council.repositories.rental_repo import RentalRepo
from council.services import rental_lifecycle as lifecycle

T0 = datetime(2025, 3, 10, 9, 0, 0)


def _event_types():
    return [e.event_type for e in OutboxEvent.query.order_by(OutboxEvent.id.asc()).all()]


class TestCheckout:
    def test_creates_rental_and_marks_item(self, services, make_user, make_item, clock):
        user = make_user()
        item = make_item()

        rental, lockbox = services.rentals.checkout(user.id, item.id, purpose="rain", phone_number="010")

        assert rental.status == RentalStatus.RENTED.value
        assert rental.rent_date == clock()
        assert rental.due_date == clock() + timedelta(hours=24)
        assert rental.overdue_days == 0
        assert item.status == ItemStatus.RENTED.value
        assert item.current_rental_id == rental.id
        assert item.total_rent_count == 1
        assert lockbox is None
        assert _event_types() == ["rental_created"]

    def test_returns_campus_lockbox(self, services, make_user, make_item, clock):
        db.session.add(LockboxPassword(
            campus="yangsan", location="Student hall", current_password="4321",
            last_changed_by="admin", last_changed_at=clock(), created_at=clock(),
        ))
        db.session.commit()

        _rental, lockbox = services.rentals.checkout(make_user().id, make_item(campus="yangsan").id)

        assert lockbox.current_password == "4321"

    def test_ineligible_user_is_refused(self, services, make_user, make_item):
        user = make_user()
        services.penalties.apply_penalty(user.id, 20, PenaltyType.LOSS, "x")

        with pytest.raises(ValueError, match="suspended until"):
            services.rentals.checkout(user.id, make_item().id)

    def test_unavailable_item(self, services, make_user, make_item):
        item = make_item(status=ItemStatus.MAINTENANCE.value)
        with pytest.raises(ValueError, match="not available"):
            services.rentals.checkout(make_user().id, item.id)

    def test_missing_item(self, services, make_user):
        with pytest.raises(ValueError, match="Item not found"):
            services.rentals.checkout(make_user().id, 404)


class TestProcessReturn:
    def test_on_time_return(self, services, make_user, make_item, clock):
        user = make_user()
        item = make_item()
        rental, _ = services.rentals.checkout(user.id, item.id)

        clock.advance(hours=5)
        returned = services.rentals.process_return(rental.id, user.id, rating=5, feedback="great")

        assert returned.status == RentalStatus.RETURNED.value
        assert returned.actual_return_date == clock()
        assert returned.rating == 5
        assert item.status == ItemStatus.AVAILABLE.value
        assert item.current_rental_id is None
        assert user.penalty_points == 0
        assert _event_types() == ["rental_created", "rental_returned"]

    def test_late_return_settles_uncharged_days(self, services, make_user, make_item, clock):
        user = make_user()
        rental, _ = services.rentals.checkout(user.id, make_item().id)

        # one day charged by a sweep, then returned two more days later
        clock.advance(days=2)
        services.sweep.run()
        assert user.penalty_points == 1
        clock.advance(days=2)

        returned = services.rentals.process_return(rental.id, user.id)

        assert returned.overdue_days == 3
        assert returned.penalty_points == 3
        assert user.penalty_points == 3
        overdue = PenaltyRecord.query.filter_by(user_id=user.id, type="OVERDUE").count()
        assert overdue == 2

    def test_days_charged_by_a_concurrent_sweep_are_not_charged_again(
            self, services, make_user, make_item, clock):
        user = make_user()
        rental, _ = services.rentals.checkout(user.id, make_item().id)
        clock.advance(days=3)

        # a sweep in another transaction charges the two overdue days
        assert RentalRepo.advance_overdue_days(rental.id, 0, 2, clock())
        services.penalties.apply_penalty(user.id, 2, PenaltyType.OVERDUE, "sweep",
                                         rental_id=rental.id, commit=False)
        assert rental.overdue_days == 0

        returned = services.rentals.process_return(rental.id, user.id)

        assert returned.status == RentalStatus.RETURNED.value
        assert returned.overdue_days == 2
        assert user.penalty_points == 2
        overdue = PenaltyRecord.query.filter_by(user_id=user.id, type="OVERDUE").all()
        assert [r.points for r in overdue] == [2]

    def test_someone_elses_rental(self, services, make_user, make_item):
        owner = make_user()
        other = make_user()
        rental, _ = services.rentals.checkout(owner.id, make_item().id)

        with pytest.raises(ValueError, match="does not belong"):
            services.rentals.process_return(rental.id, other.id)

    def test_admin_can_return_for_borrower(self, services, make_user, make_item):
        owner = make_user()
        admin = make_user(role="admin")
        rental, _ = services.rentals.checkout(owner.id, make_item().id)

        returned = services.rentals.process_return(rental.id, admin.id, is_admin=True)

        assert returned.status == RentalStatus.RETURNED.value

    def test_rating_range(self, services, make_user, make_item):
        user = make_user()
        rental, _ = services.rentals.checkout(user.id, make_item().id)

        with pytest.raises(ValueError, match="rating"):
            services.rentals.process_return(rental.id, user.id, rating=6)

    def test_cannot_return_twice(self, services, make_user, make_item):
        user = make_user()
        rental, _ = services.rentals.checkout(user.id, make_item().id)
        services.rentals.process_return(rental.id, user.id)

        with pytest.raises(lifecycle.InvalidTransition):
            services.rentals.process_return(rental.id, user.id)


class TestIncidents:
    def test_mark_lost(self, services, make_user, make_item):
        user = make_user()
        item = make_item()
        rental, _ = services.rentals.checkout(user.id, item.id)

        lost = services.rentals.mark_lost(rental.id, "left on the bus")

        assert lost.status == RentalStatus.LOST.value
        assert lost.lost_reason == "left on the bus"
        assert lost.penalty_points == 30
        assert item.status == ItemStatus.LOST.value
        assert user.penalty_points == 30
        assert user.sanction_type == "suspension_3_months"
        assert "rental_lost" in _event_types()

    @pytest.mark.parametrize("severity, points", [("minor", 5), ("major", 15)])
    def test_mark_damaged(self, services, make_user, make_item, severity, points):
        user = make_user()
        item = make_item()
        rental, _ = services.rentals.checkout(user.id, item.id)

        damaged = services.rentals.mark_damaged(rental.id, "torn", severity)

        assert damaged.status == RentalStatus.DAMAGED.value
        assert damaged.damage_reason == "torn"
        assert item.status == ItemStatus.DAMAGED.value
        assert user.penalty_points == points

    def test_unknown_severity(self, services, make_user, make_item):
        user = make_user()
        rental, _ = services.rentals.checkout(user.id, make_item().id)
        with pytest.raises(ValueError, match="severity"):
            services.rentals.mark_damaged(rental.id, "torn", "catastrophic")

    def test_closed_rental_cannot_be_lost(self, services, make_user, make_item):
        user = make_user()
        rental, _ = services.rentals.checkout(user.id, make_item().id)
        services.rentals.process_return(rental.id, user.id)

        with pytest.raises(lifecycle.InvalidTransition):
            services.rentals.mark_lost(rental.id, "gone")
        assert user.penalty_points == 0


class TestRentalStates:
    def test_rented_to_overdue_to_returned(self):
        rented = lifecycle.Rented(T0, T0 + timedelta(days=1))
        overdue = lifecycle.mark_overdue(rented, 2, T0 + timedelta(days=3))
        returned = lifecycle.mark_returned(overdue, T0 + timedelta(days=4))

        assert overdue.status == RentalStatus.OVERDUE
        assert returned.overdue_days == 2
        assert returned.actual_return_date == T0 + timedelta(days=4)

    def test_overdue_days_cannot_go_backwards(self):
        overdue = lifecycle.Overdue(T0, T0 + timedelta(days=1), 3, T0)
        with pytest.raises(lifecycle.InvalidTransition):
            lifecycle.mark_overdue(overdue, 2, T0)

    @pytest.mark.parametrize(
        "terminal",
        [
            lifecycle.Returned(T0, T0, T0),
            lifecycle.Lost(T0, T0, "gone"),
            lifecycle.Damaged(T0, T0, "torn"),
        ],
    )
    def test_terminal_states_are_final(self, terminal):
        with pytest.raises(lifecycle.InvalidTransition):
            lifecycle.mark_overdue(terminal, 1, T0)
        with pytest.raises(lifecycle.InvalidTransition):
            lifecycle.mark_returned(terminal, T0)
        with pytest.raises(lifecycle.InvalidTransition):
            lifecycle.mark_lost(terminal, "again")

    def test_variants_are_immutable(self):
        with pytest.raises(FrozenInstanceError):
            lifecycle.Rented(T0, T0).due_date = T0

    def test_apply_state_clears_stale_fields(self, make_user, make_item, make_rental):
        rental = make_rental(make_user(), make_item(), damage_reason="leftover")

        lifecycle.apply_state(rental, lifecycle.mark_lost(lifecycle.state_of(rental), "gone"))

        assert rental.status == "lost"
        assert rental.lost_reason == "gone"
        assert rental.damage_reason is None
        assert rental.actual_return_date is None
