"""
FastAPI Webhook Relay for SecuraScan

Receives Razorpay payment link webhooks, verifies their signatures, and
upgrades the paying user's plan in Firestore.
"""

__version__ = "1.0.0"
