from fastapi import Request, status
from fastapi.responses import PlainTextResponse


class WebhookError(Exception):
    """Failure that is answered directly with a plain-text status response."""

    status_code = status.HTTP_500_INTERNAL_SERVER_ERROR

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class AuthenticationError(WebhookError):
    status_code = status.HTTP_401_UNAUTHORIZED


class PayloadValidationError(WebhookError):
    status_code = status.HTTP_400_BAD_REQUEST


async def webhook_error_handler(request: Request, exc: WebhookError):
    return PlainTextResponse(exc.detail, status_code=exc.status_code)
