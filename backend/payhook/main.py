import logging

from fastapi import APIRouter, BackgroundTasks, Depends, FastAPI, Request, status
from fastapi.responses import PlainTextResponse

from payhook.core.config import Settings, get_settings
from payhook.core.errors import (
    AuthenticationError,
    PayloadValidationError,
    WebhookError,
    webhook_error_handler,
)
from payhook.middleware.body_size import BodySizeLimitMiddleware
from payhook.schemas.razorpay import RazorpayWebhook
from payhook.services import razorpay_verify
from payhook.tasks import forward_payment

logger = logging.getLogger(__name__)

SIGNATURE_HEADER = "x-razorpay-signature"

router = APIRouter()


# ---------- dependency ----------
def app_settings(request: Request) -> Settings:
    return request.app.state.settings


@router.get("/health", include_in_schema=False)
async def health():
    return {"status": "ok"}


# ---------- ingress ----------
@router.post("/webhook", response_class=PlainTextResponse)
async def handle_webhook(
    request: Request,
    background_tasks: BackgroundTasks,
    settings: Settings = Depends(app_settings),
):
    signature = request.headers.get(SIGNATURE_HEADER)
    if not signature:
        logger.warning("No signature provided")
        raise AuthenticationError("No signature provided")

    # Verify against the bytes on the wire, before any parsing
    raw = await request.body()
    try:
        razorpay_verify.verify(
            raw_body=raw, signature=signature, secret=settings.webhook_secret
        )
    except razorpay_verify.RazorpaySignatureError:
        logger.warning("Invalid signature")
        raise AuthenticationError("Invalid signature")

    try:
        webhook = RazorpayWebhook.model_validate_json(raw)
        logger.info(f"Received webhook event: {webhook.event}")
        notification = webhook.to_notification()
    except PayloadValidationError as exc:
        logger.warning(f"Rejected {webhook.event} webhook: {exc.detail}")
        raise
    except Exception:
        logger.exception("Error processing webhook")
        return PlainTextResponse(
            "Internal server error",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )

    logger.info(
        f"Payment amount received: {notification.amount} "
        f"for device {notification.device_id}"
    )

    # Fire-and-forget: runs after the response is sent, and forward_payment
    # handles its own failures, so the status below never reflects the store.
    background_tasks.add_task(
        forward_payment, notification.amount, notification.device_id, settings
    )
    return "Webhook received and processed successfully"


def create_app(settings: Settings | None = None) -> FastAPI:
    """Build the app around one immutable Settings instance."""
    settings = settings or get_settings()

    app = FastAPI(
        title="Payment Webhook Relay",
        description="Relays verified Razorpay payments to device records",
        version="1.0.0",
    )
    app.state.settings = settings

    app.add_middleware(BodySizeLimitMiddleware, max_body_size=settings.max_body_size)
    app.add_exception_handler(WebhookError, webhook_error_handler)
    app.include_router(router)
    return app
