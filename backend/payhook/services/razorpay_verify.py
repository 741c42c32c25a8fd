import hashlib
import hmac


class RazorpaySignatureError(Exception):
    pass


def compute_signature(raw_body: bytes, secret: str) -> str:
    """Hex HMAC-SHA256 of the exact request bytes, as Razorpay signs them."""
    return hmac.new(secret.encode("utf-8"), raw_body, hashlib.sha256).hexdigest()


def verify(raw_body: bytes, signature: str, secret: str) -> None:
    """
    Raise RazorpaySignatureError if signature invalid.

    The body must be the bytes received on the wire. Re-serializing parsed
    JSON can reorder keys or change whitespace and will not match.
    """
    if not signature:
        raise RazorpaySignatureError("Missing X-Razorpay-Signature header")

    expected = compute_signature(raw_body, secret)
    if not hmac.compare_digest(expected.encode(), signature.encode("utf-8")):
        raise RazorpaySignatureError("Invalid signature")
