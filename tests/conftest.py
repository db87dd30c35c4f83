"""Shared fixtures: an in-memory MongoDB, a fake payment gateway and a test client."""

import mongomock
import pytest
from fastapi.testclient import TestClient

from auth import create_token
from config import Settings
from main import create_app

ADMIN_EMAIL = "admin@decor.com"
CUSTOMER_EMAIL = "self@x.com"


class FakeGateway:
    """Stands in for Stripe; remembers the amounts it was asked to charge."""

    def __init__(self):
        self.calls = []

    def create_payment_intent(self, amount, currency=None):
        self.calls.append(amount)
        return f"pi_test_{amount}_secret"


@pytest.fixture
def settings():
    return Settings(
        database_url="mongodb://unused",
        database_name="styleDecorTest",
        token_secret="test-secret",
        token_expire_minutes=60,
        stripe_secret_key="sk_test",
        payment_currency="usd",
        log_level="WARNING",
        log_file="",
        port=8000,
    )


@pytest.fixture
def db():
    return mongomock.MongoClient()["styleDecorTest"]


@pytest.fixture
def gateway():
    return FakeGateway()


@pytest.fixture
def app(settings, db, gateway):
    return create_app(settings=settings, db=db, gateway=gateway)


@pytest.fixture
def client(app):
    return TestClient(app)


@pytest.fixture
def make_headers(settings):
    def _make(email):
        return {"Authorization": f"Bearer {create_token({'email': email}, settings)}"}
    return _make


@pytest.fixture
def admin_headers(db, make_headers):
    db["users"].insert_one({"email": ADMIN_EMAIL, "role": "admin"})
    return make_headers(ADMIN_EMAIL)


@pytest.fixture
def customer_headers(db, make_headers):
    db["users"].insert_one({"email": CUSTOMER_EMAIL})
    return make_headers(CUSTOMER_EMAIL)
