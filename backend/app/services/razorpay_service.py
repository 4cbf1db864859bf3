"""
Razorpay Service

Handles Razorpay webhook signature verification and event decoding.
"""

import hashlib
import hmac
import json
from typing import Optional

from fastapi import Request
from pydantic import ValidationError

from app.config import settings
from app.models.razorpay_events import RazorpayEvent
from app.utils.exceptions import (
    ConfigurationException,
    InvalidPayloadException,
    SignatureMismatchException,
    SignatureMissingException,
    SignatureVerificationError,
)
from app.utils.logging_config import get_logger

logger = get_logger(__name__)

SIGNATURE_HEADER = "x-razorpay-signature"
EVENT_ID_HEADER = "x-razorpay-event-id"


def compute_signature(payload: bytes, secret: str) -> str:
    """Hex HMAC-SHA256 of the raw payload under the webhook secret"""
    return hmac.new(secret.encode("utf-8"), payload, hashlib.sha256).hexdigest()


class RazorpayService:
    """Razorpay webhook service"""

    def __init__(self, webhook_secret: Optional[str] = None):
        self.webhook_secret = webhook_secret

    def ensure_configured(self) -> str:
        """
        Return the signing secret.

        Raises:
            ConfigurationException: If no secret is configured
        """
        if not self.webhook_secret:
            logger.error("RAZORPAY_WEBHOOK_SECRET is not set.")
            raise ConfigurationException()
        return self.webhook_secret

    def extract_signature(self, request: Request) -> str:
        """
        Read the signature header without touching the body.

        Raises:
            SignatureMissingException: If the header is absent or empty
        """
        signature = request.headers.get(SIGNATURE_HEADER)
        if not signature:
            logger.warning("Webhook request without signature header")
            raise SignatureMissingException()
        return signature

    def verify_webhook_signature(self, payload: bytes, signature: str) -> None:
        """
        Verify the signature over the exact bytes received.

        The comparison is exact and case-sensitive, done in constant time.

        Args:
            payload: Raw request body as bytes
            signature: x-razorpay-signature header value

        Raises:
            SignatureMismatchException: If the digest does not match
            SignatureVerificationError: If the digest cannot be computed
        """
        secret = self.ensure_configured()

        try:
            digest = compute_signature(payload, secret)
            matches = hmac.compare_digest(
                digest.encode("utf-8"), signature.encode("utf-8")
            )
        except Exception as e:
            logger.error(
                f"Error verifying webhook signature: {e}",
                extra={"error": str(e), "error_type": type(e).__name__},
            )
            raise SignatureVerificationError(details={"error": str(e)}) from e

        if not matches:
            logger.warning("Invalid webhook signature")
            raise SignatureMismatchException()

        logger.debug("Webhook signature verified successfully")

    def parse_event(self, payload: bytes) -> RazorpayEvent:
        """
        Decode a verified payload.

        Raises:
            InvalidPayloadException: If the body is not a JSON object
        """
        try:
            data = json.loads(payload)
        except (ValueError, UnicodeDecodeError) as e:
            logger.error(f"Error parsing webhook JSON: {e}")
            raise InvalidPayloadException(details={"error": str(e)}) from e

        if not isinstance(data, dict):
            logger.error(
                "Webhook JSON is not an object",
                extra={"json_type": type(data).__name__},
            )
            raise InvalidPayloadException(details={"json_type": type(data).__name__})

        try:
            return RazorpayEvent.model_validate(data)
        except ValidationError as e:
            logger.error(f"Webhook payload failed validation: {e}")
            raise InvalidPayloadException(details={"error": str(e)}) from e


# Global Razorpay service instance
razorpay_service = RazorpayService(webhook_secret=settings.razorpay_webhook_secret)
