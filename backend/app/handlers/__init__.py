"""Event handlers for Razorpay event types"""

from app.handlers.payment_link_handler import payment_link_handler

__all__ = [
    "payment_link_handler",
]
