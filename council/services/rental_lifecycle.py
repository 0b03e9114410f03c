"""
Rental state as tagged variants.

Each variant carries only the fields that make sense in that state, and
transitions are plain functions from one variant to the next. The flat
RentalApplication row is read with `state_of` and written back with
`apply_state`, which also clears fields left over from earlier states.
"""
from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Union

from council.models.enums import RentalStatus


class InvalidTransition(ValueError):
    pass


@dataclass(frozen=True)
class Rented:
    rent_date: datetime
    due_date: datetime
    status = RentalStatus.RENTED


@dataclass(frozen=True)
class Overdue:
    rent_date: datetime
    due_date: datetime
    overdue_days: int
    checked_at: datetime
    status = RentalStatus.OVERDUE


@dataclass(frozen=True)
class Returned:
    rent_date: datetime
    due_date: datetime
    actual_return_date: datetime
    overdue_days: int = 0
    status = RentalStatus.RETURNED


@dataclass(frozen=True)
class Lost:
    rent_date: datetime
    due_date: datetime
    reason: str
    overdue_days: int = 0
    status = RentalStatus.LOST


@dataclass(frozen=True)
class Damaged:
    rent_date: datetime
    due_date: datetime
    reason: str
    overdue_days: int = 0
    status = RentalStatus.DAMAGED


RentalState = Union[Rented, Overdue, Returned, Lost, Damaged]
ActiveState = (Rented, Overdue)


def state_of(application) -> RentalState:
    status = RentalStatus(application.status)
    if status == RentalStatus.RENTED:
        return Rented(application.rent_date, application.due_date)
    if status == RentalStatus.OVERDUE:
        return Overdue(
            application.rent_date,
            application.due_date,
            application.overdue_days or 0,
            application.last_overdue_check,
        )
    if status == RentalStatus.RETURNED:
        return Returned(
            application.rent_date,
            application.due_date,
            application.actual_return_date,
            application.overdue_days or 0,
        )
    if status == RentalStatus.LOST:
        return Lost(application.rent_date, application.due_date, application.lost_reason or "",
                    application.overdue_days or 0)
    return Damaged(application.rent_date, application.due_date, application.damage_reason or "",
                   application.overdue_days or 0)


def _require_active(state: RentalState, target: RentalStatus):
    if not isinstance(state, ActiveState):
        raise InvalidTransition(
            f"Cannot move a {state.status.value} rental to {target.value}"
        )


def _charged_days(state: RentalState) -> int:
    return state.overdue_days if isinstance(state, Overdue) else 0


def mark_overdue(state: RentalState, overdue_days: int, checked_at: datetime) -> Overdue:
    _require_active(state, RentalStatus.OVERDUE)
    if overdue_days < _charged_days(state):
        raise InvalidTransition("Charged overdue days cannot go backwards")
    return Overdue(state.rent_date, state.due_date, overdue_days, checked_at)


def mark_returned(state: RentalState, returned_at: datetime) -> Returned:
    _require_active(state, RentalStatus.RETURNED)
    return Returned(state.rent_date, state.due_date, returned_at, _charged_days(state))


def mark_lost(state: RentalState, reason: str) -> Lost:
    _require_active(state, RentalStatus.LOST)
    return Lost(state.rent_date, state.due_date, reason, _charged_days(state))


def mark_damaged(state: RentalState, reason: str) -> Damaged:
    _require_active(state, RentalStatus.DAMAGED)
    return Damaged(state.rent_date, state.due_date, reason, _charged_days(state))


def apply_state(application, state: RentalState):
    application.status = state.status.value
    application.rent_date = state.rent_date
    application.due_date = state.due_date

    application.actual_return_date = getattr(state, "actual_return_date", None)
    application.lost_reason = state.reason if isinstance(state, Lost) else None
    application.damage_reason = state.reason if isinstance(state, Damaged) else None

    if isinstance(state, Overdue):
        application.overdue_days = state.overdue_days
        application.last_overdue_check = state.checked_at
    elif not isinstance(state, Rented):
        application.overdue_days = state.overdue_days
    return application
