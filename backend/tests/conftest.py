"""
Pytest Configuration and Fixtures

Provides common fixtures and test utilities for relay tests.
"""

import os
from typing import Dict, Optional
from unittest.mock import patch

import pytest

from tests.factories import TEST_WEBHOOK_SECRET, FakeFirestoreService, sign

# Settings are read at import time
os.environ["RAZORPAY_WEBHOOK_SECRET"] = TEST_WEBHOOK_SECRET
os.environ["APP_ID"] = "securascan-test"
os.environ["EXECUTION_MODE"] = "server"
os.environ["ENVIRONMENT"] = "development"
os.environ.pop("FIREBASE_SERVICE_ACCOUNT_KEY", None)
os.environ.pop("AWS_LAMBDA_FUNCTION_NAME", None)

from fastapi.testclient import TestClient  # noqa: E402

from app.handlers.payment_link_handler import payment_link_handler  # noqa: E402
from app.main import app  # noqa: E402
from app.services.razorpay_service import razorpay_service  # noqa: E402


@pytest.fixture
def webhook_secret():
    return TEST_WEBHOOK_SECRET


@pytest.fixture
def test_client():
    """FastAPI test client (lifespan not run)"""
    return TestClient(app)


@pytest.fixture
def fake_store():
    """Fake Firestore with one starter user, wired into the payment link handler"""
    store = FakeFirestoreService(
        users={"u1": {"subscription": "starter", "scansRemaining": 3, "email": "u1@example.com"}}
    )
    with patch.object(payment_link_handler, "store", store):
        yield store


@pytest.fixture
def configured_secret():
    """Ensure the global Razorpay service holds the test secret"""
    with patch.object(razorpay_service, "webhook_secret", TEST_WEBHOOK_SECRET):
        yield TEST_WEBHOOK_SECRET


@pytest.fixture
def post_webhook(test_client, configured_secret):
    """Post a body with a valid (or supplied) signature"""

    def _post(body: bytes, signature: Optional[str] = "valid", headers: Optional[Dict[str, str]] = None):
        request_headers = {"Content-Type": "application/json"}
        if signature == "valid":
            request_headers["x-razorpay-signature"] = sign(body)
        elif signature is not None:
            request_headers["x-razorpay-signature"] = signature
        request_headers.update(headers or {})
        return test_client.post("/razorpay-webhook", content=body, headers=request_headers)

    return _post
