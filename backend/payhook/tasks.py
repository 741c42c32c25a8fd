import logging
import time
from decimal import Decimal
from types import SimpleNamespace
from urllib.parse import quote

import httpx

from payhook.core.config import Settings
from payhook.schemas.razorpay import ForwardRecord

logger = logging.getLogger(__name__)

PAYMENT_PATH = "/devices/{device_id}/payment.json"


def payment_url(base_url: str, device_id: str) -> str:
    # The device ID is a single path segment, so "/" must not split it
    return base_url + PAYMENT_PATH.format(device_id=quote(device_id, safe=""))


async def forward_payment(amount: Decimal, device_id: str, settings: Settings) -> int:
    """
    Write the payment amount to the device's record in the realtime database.

    Runs detached from the webhook response, so every failure ends here: it is
    logged and swallowed, never retried. Returns the store's status code, or 0
    when no response was received.
    """
    url = payment_url(settings.firebase_db_url, device_id)
    record = ForwardRecord(timestamp=int(time.time() * 1000), value=amount)

    try:
        async with httpx.AsyncClient(timeout=settings.forward_timeout) as client:
            r = await client.put(
                url,
                json=record.model_dump(mode="json"),
                headers={"Content-Type": "application/json"},
            )
        success = 200 <= r.status_code < 300
    except Exception as exc:
        success = False
        r = SimpleNamespace(status_code=0, text=repr(exc))
        if not isinstance(exc, httpx.HTTPError):
            logger.exception(f"Unexpected error forwarding payment for device {device_id}")

    if success:
        logger.info(f"Data sent to Firebase for device {device_id} successfully: {r.text}")
    else:
        logger.error(f"Error sending data to Firebase for device {device_id}: {r.text}")
    return r.status_code
