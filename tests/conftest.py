import asyncio
import os
import tempfile

# Settings are read at import time, so the environment is prepared first
_TEST_DIR = tempfile.mkdtemp(prefix="storefront-tests-")
DB_PATH = os.path.join(_TEST_DIR, "test.db")

os.environ["DATABASE_URL"] = f"sqlite+aiosqlite:///{DB_PATH}"
os.environ["JWT_SECRET"] = "test-secret-key-with-enough-length-for-hs256"
os.environ["TWILIO_ACCOUNT_SID"] = "ACtest"
os.environ["TWILIO_AUTH_TOKEN"] = "test-token"
os.environ["TWILIO_PHONE_NUMBER"] = "+15005550006"
os.environ["ENVIRONMENT"] = "test"
os.environ.pop("FLUTTERWAVE_SECRET_KEY", None)

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine

from models import Base
from fakes import RecordingNotifier
from support import PASSWORD, auth_header, last_code


@pytest.fixture
def reset_db():
    engine = create_engine(f"sqlite:///{DB_PATH}")
    Base.metadata.drop_all(engine)
    Base.metadata.create_all(engine)
    engine.dispose()


@pytest.fixture
def sms_outbox():
    return RecordingNotifier()


@pytest.fixture
def client(reset_db, sms_outbox):
    from main import app
    from dependencies.services import get_notifier

    app.dependency_overrides[get_notifier] = lambda: sms_outbox
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def register(client):
    def _register(email: str, phone: str, password: str = PASSWORD, **extra):
        payload = {"email": email, "phone": phone, "password": password, **extra}
        response = client.post("/register", json=payload)
        assert response.status_code == 201, response.text
        body = response.json()
        return body["user"], body["token"]
    return _register


@pytest.fixture
def verify(client, sms_outbox):
    def _verify(token: str):
        assert client.get("/users/verify", headers=auth_header(token)).status_code == 200
        response = client.post("/users/verify", json={"code": last_code(sms_outbox)}, headers=auth_header(token))
        assert response.status_code == 200, response.text
    return _verify


@pytest.fixture
def make_seller(client, register, verify):
    """Register, verify and upgrade a user; returns (user, seller token)"""
    def _make_seller(email: str, phone: str):
        _, token = register(email, phone)
        verify(token)
        response = client.post(
            "/become-seller",
            json={
                "first_name": "Ada",
                "last_name": "Seller",
                "phone_number": phone,
                "bank_account_number": "0690000031",
                "bank_code": "044",
                "payment_type": "Access Bank",
            },
            headers=auth_header(token),
        )
        assert response.status_code == 200, response.text
        body = response.json()
        return body["user"], body["token"]
    return _make_seller


@pytest.fixture
def bank_account_count(client):
    """Count bank_accounts rows for a user straight from the database"""
    from config import AsyncSessionLocal
    from routers.users.repository import SQLUserRepository

    async def _count(user_id: int) -> int:
        async with AsyncSessionLocal() as session:
            return await SQLUserRepository(session).count_bank_accounts(user_id)

    return lambda user_id: asyncio.run(_count(user_id))
