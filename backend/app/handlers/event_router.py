"""
Event Router

Routes Razorpay webhook events to the handler registered for their type.

Event types without a handler are acknowledged as no-ops so the provider
stops redelivering events this service intentionally ignores.
"""

from typing import Awaitable, Callable, Dict

from app.handlers.payment_link_handler import WebhookResult, payment_link_handler
from app.models.razorpay_events import PAYMENT_LINK_PAID, RazorpayEvent
from app.utils.logging_config import get_logger

logger = get_logger(__name__)

EventHandler = Callable[[RazorpayEvent], Awaitable[WebhookResult]]


class EventRouter:
    """
    Routes verified Razorpay events to handlers.

    Attributes:
        handlers: Event type to handler coroutine mapping
    """

    def __init__(self, handlers: Dict[str, EventHandler]):
        self.handlers = handlers

    def is_event_type_supported(self, event_type: str) -> bool:
        return event_type in self.handlers

    async def route_event(self, event: RazorpayEvent) -> WebhookResult:
        """
        Route event to its handler.

        Args:
            event: Verified Razorpay event

        Returns:
            Handler result, or an "ignored" acknowledgment for unsupported types

        Raises:
            RelayException: Propagated from the handler for retryable failures
        """
        event_type = event.event

        if not event_type or not self.is_event_type_supported(event_type):
            logger.info(
                f"Event received but not processed: {event_type}",
                extra={"event_type": event_type},
            )
            return WebhookResult(
                status="ignored",
                message="Event received but not processed.",
            )

        logger.info(
            f"Routing event: {event_type}",
            extra={"event_type": event_type},
        )

        return await self.handlers[event_type](event)


_event_router = None


def get_event_router() -> EventRouter:
    """Get or create the global event router"""
    global _event_router
    if _event_router is None:
        _event_router = EventRouter(
            handlers={
                PAYMENT_LINK_PAID: payment_link_handler.handle_payment_link_paid,
            }
        )
    return _event_router
