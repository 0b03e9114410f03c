"""
Shared fixtures: an app on in-memory SQLite with a controllable clock,
plus small factories for users, items and rentals.
"""

import itertools
from datetime import datetime, timedelta

import pytest
from flask_jwt_extended import create_access_token

from council import create_app
from council.config import TestConfig
from council.extensions import db
from council.models.enums import ItemStatus, RentalStatus
from council.models.rental_application import RentalApplication
from council.models.rental_item import RentalItem
from council.models.user import User
from council.services.context import get_services


START = datetime(2025, 3, 10, 9, 0, 0)


class FakeClock:
    def __init__(self, now):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)
        return self.now


@pytest.fixture
def clock():
    return FakeClock(START)


@pytest.fixture
def app_config(tmp_path):
    class _Config(TestConfig):
        UPLOAD_FOLDER = str(tmp_path / "uploads")

    return _Config


@pytest.fixture
def http_client():
    """Override in a test module to hand the webhook client a MockTransport."""
    return None


@pytest.fixture
def app(app_config, clock, http_client):
    app = create_app(app_config, clock=clock, http_client=http_client)
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def services(app):
    return get_services()


@pytest.fixture
def make_user(app):
    counter = itertools.count(1)

    def _make(role="student", **fields):
        n = next(counter)
        user = User(
            username=fields.pop("username", f"user{n}"),
            email=fields.pop("email", f"user{n}@example.com"),
            password_hash="not-a-real-hash",
            role=role,
            name=fields.pop("name", f"User {n}"),
            student_id=fields.pop("student_id", f"2024{n:04d}"),
            **fields,
        )
        db.session.add(user)
        db.session.commit()
        return user

    return _make


@pytest.fixture
def make_item(app):
    counter = itertools.count(1)

    def _make(**fields):
        n = next(counter)
        item = RentalItem(
            unique_id=fields.pop("unique_id", f"TAG-{n:03d}"),
            name=fields.pop("name", f"Umbrella {n}"),
            campus=fields.pop("campus", "yangsan"),
            category=fields.pop("category", "umbrella"),
            status=fields.pop("status", ItemStatus.AVAILABLE.value),
            **fields,
        )
        db.session.add(item)
        db.session.commit()
        return item

    return _make


@pytest.fixture
def make_rental(app, clock):
    """Insert an active rental directly, e.g. one that is already past due."""

    def _make(user, item, due_in=timedelta(hours=24), **fields):
        rent_date = fields.pop("rent_date", clock() + due_in - timedelta(hours=24))
        rental = RentalApplication(
            user_id=user.id,
            item_id=item.id,
            status=fields.pop("status", RentalStatus.RENTED.value),
            rent_date=rent_date,
            due_date=clock() + due_in,
            **fields,
        )
        db.session.add(rental)
        item.status = ItemStatus.RENTED.value
        db.session.flush()
        item.current_rental_id = rental.id
        db.session.commit()
        return rental

    return _make


@pytest.fixture
def auth_headers(app):
    def _headers(user):
        token = create_access_token(
            identity=str(user.id),
            additional_claims={"role": user.role, "username": user.username},
        )
        return {"Authorization": f"Bearer {token}"}

    return _headers
