import json
import os

import pytest
from fastapi.testclient import TestClient

# Set test environment variables
os.environ.update(
    {
        "WEBHOOK_SECRET": "s3cr3t",
        "FIREBASE_DB_URL": "https://test-db.firebaseio.com/",
    }
)

from payhook.core.config import Settings, get_settings
from payhook.main import create_app
from payhook.services.razorpay_verify import compute_signature

SECRET = "s3cr3t"
STORE_URL = "https://test-db.firebaseio.com"

# Exact bytes from the payment.captured example, signed as-is
PAYMENT_BODY = (
    b'{"payload":{"payment":{"entity":{"amount":50000,"notes":{"device":"dev-42"}}}}}'
)


def make_body(amount=50000, notes=None, event="payment.captured") -> bytes:
    if notes is None:
        notes = {"device": "dev-42"}
    payload = {
        "entity": "event",
        "event": event,
        "payload": {
            "payment": {
                "entity": {
                    "id": "pay_29QQoUBi66xm2f",
                    "amount": amount,
                    "currency": "INR",
                    "notes": notes,
                }
            }
        },
    }
    return json.dumps(payload).encode()


@pytest.fixture
def sign():
    def _sign(body: bytes, secret: str = SECRET) -> str:
        return compute_signature(body, secret)

    return _sign


@pytest.fixture
def settings():
    return Settings(webhook_secret=SECRET, firebase_db_url=STORE_URL, _env_file=None)


@pytest.fixture
def app(settings):
    return create_app(settings)


@pytest.fixture
def client(app):
    # Background tasks finish before TestClient returns the response
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def post_webhook(client, sign):
    def _post(body: bytes, signature: str | None = None, **headers):
        if signature is None:
            signature = sign(body)
        headers = {"Content-Type": "application/json", **headers}
        if signature:
            headers["X-Razorpay-Signature"] = signature
        return client.post("/webhook", content=body, headers=headers)

    return _post


@pytest.fixture(autouse=True)
def clear_settings_cache():
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()
