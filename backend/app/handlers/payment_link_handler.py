"""
Payment Link Event Handler

Handles payment_link.paid: upgrades the user named in the link notes to
the purchased plan.

Anomalies the provider cannot fix by retrying (missing notes, unknown user,
unknown plan) are logged and acknowledged with 200. Store problems raise so
the webhook answers 500 and the provider redelivers.
"""

from dataclasses import dataclass
from typing import Optional

from app.models.plans import resolve_plan
from app.models.razorpay_events import RazorpayEvent
from app.services.firestore_service import (
    FirestoreService,
    firestore_service,
    is_valid_document_id,
)
from app.utils.exceptions import StoreUnavailableException, UnknownPlanException
from app.utils.logging_config import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class WebhookResult:
    """Outcome returned to the provider"""

    status: str
    message: str
    status_code: int = 200
    user_id: Optional[str] = None
    plan: Optional[str] = None


class PaymentLinkHandler:
    """Handler for payment link events"""

    def __init__(self, store: Optional[FirestoreService] = None):
        self.store = store or firestore_service

    async def handle_payment_link_paid(self, event: RazorpayEvent) -> WebhookResult:
        """
        Handle payment_link.paid event.

        Args:
            event: Verified Razorpay webhook event

        Returns:
            Processing result

        Raises:
            StoreUnavailableException: If the Firestore client is not initialized
            StoreException: If the lookup or update fails
        """
        notes = event.notes
        user_id, plan_name = notes.user_id, notes.plan

        if not notes.is_complete:
            logger.error(
                "Webhook payload missing user_id or plan in notes.",
                extra={"notes": notes.model_dump(), "event_type": event.event},
            )
            return WebhookResult(
                status="missing_notes",
                message="Payload processed but missing required notes.",
                user_id=user_id,
                plan=plan_name,
            )

        if not self.store.is_connected():
            logger.error("Firestore (db) is not initialized. Cannot process webhook.")
            raise StoreUnavailableException()

        if not is_valid_document_id(user_id) or not await self.store.user_exists(user_id):
            logger.error(
                f"User document not found for user_id: {user_id}",
                extra={"user_id": user_id, "plan": plan_name},
            )
            return WebhookResult(
                status="user_not_found",
                message="User not found, but webhook acknowledged.",
                user_id=user_id,
                plan=plan_name,
            )

        try:
            plan_details = resolve_plan(plan_name)
        except UnknownPlanException as e:
            logger.error(e.message, extra={"user_id": user_id, "plan": plan_name})
            return WebhookResult(
                status="unknown_plan",
                message="Invalid plan name, but webhook acknowledged.",
                user_id=user_id,
                plan=plan_name,
            )

        await self.store.apply_plan(user_id, plan_details)

        logger.info(
            f"Successfully upgraded user {user_id} to {plan_name} plan.",
            extra={
                "user_id": user_id,
                "plan": plan_name,
                "subscription": plan_details.subscription.value,
                "scans_remaining": plan_details.scans_remaining,
            },
        )

        return WebhookResult(
            status="success",
            message="Webhook processed successfully.",
            user_id=user_id,
            plan=plan_name,
        )


# Global payment link handler instance
payment_link_handler = PaymentLinkHandler()
