"""
Pytest configuration and fixtures for the SMS OTP gateway tests.

Every test gets a fresh manager with a controllable clock and a recording
sender; the API client swaps them in through dependency overrides.
"""
import sys
import os
import pathlib
import pytest

ROOT = pathlib.Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

# Must be set before smsotp.core.config is imported
os.environ.setdefault("ENV", "test")
os.environ["SMS_PROVIDER"] = "stub"
os.environ["OTP_SWEEP_INTERVAL_SECONDS"] = "0"

from smsotp.services.otp_manager import OTPManager
from smsotp.services.otp_service import OTPService
from smsotp.services.otp_store import OTPStore
from tests.helpers.otp_fakes import FakeClock, RecordingSender

VALID_PHONE = "+15551234567"


@pytest.fixture
def phone() -> str:
    return VALID_PHONE


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def store() -> OTPStore:
    return OTPStore(shards=8)


@pytest.fixture
def manager(store, clock) -> OTPManager:
    return OTPManager(store=store, clock=clock)


@pytest.fixture
def sender() -> RecordingSender:
    return RecordingSender()


@pytest.fixture
def service(manager, sender) -> OTPService:
    return OTPService(manager=manager, sender=sender, dispatch_timeout=0.2)


@pytest.fixture(scope="function")
def client(service):
    """
    Provide a FastAPI TestClient whose OTP service is the per-test one.

    raise_server_exceptions=False so unhandled errors become 500 responses.
    """
    from fastapi.testclient import TestClient
    from smsotp.main import app
    from smsotp.dependencies import get_otp_service

    app.dependency_overrides[get_otp_service] = lambda: service

    try:
        with TestClient(app, raise_server_exceptions=False) as test_client:
            yield test_client
    finally:
        app.dependency_overrides.clear()
