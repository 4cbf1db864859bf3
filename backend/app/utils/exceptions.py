"""
Custom Exception Classes

Defines application-specific exceptions for better error handling and logging.
Each exception carries the HTTP status the webhook endpoint answers with.
"""

from typing import Any, Dict, Optional


class RelayException(Exception):
    """Base exception for all relay errors"""

    status_code = 500

    def __init__(
        self,
        message: str,
        error_code: str = "RELAY_ERROR",
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.error_code = error_code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging"""
        return {
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ConfigurationException(RelayException):
    """Configuration or environment errors"""

    def __init__(
        self,
        message: str = "Internal server configuration error.",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, error_code="CONFIG_ERROR", details=details)


class SignatureException(RelayException):
    """Webhook signature rejected"""

    status_code = 400

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, error_code="SIGNATURE_ERROR", details=details)


class SignatureMissingException(SignatureException):
    """x-razorpay-signature header absent"""

    def __init__(self, message: str = "Missing Razorpay signature"):
        super().__init__(message, details={"header": "x-razorpay-signature"})


class SignatureMismatchException(SignatureException):
    """Computed digest does not match the supplied signature"""

    def __init__(self, message: str = "Invalid signature"):
        super().__init__(message, details={"verification": "failed"})


class SignatureVerificationError(RelayException):
    """Digest computation itself failed"""

    def __init__(
        self,
        message: str = "Signature verification failed",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, error_code="SIGNATURE_COMPUTATION_ERROR", details=details)


class InvalidPayloadException(RelayException):
    """Request body is not a JSON object"""

    status_code = 400

    def __init__(
        self,
        message: str = "Invalid JSON payload",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, error_code="INVALID_PAYLOAD", details=details)


class UnknownPlanException(RelayException):
    """Plan name not present in the catalog"""

    # Acknowledged so Razorpay stops redelivering
    status_code = 200

    def __init__(self, plan: str):
        super().__init__(
            f"Invalid plan name received: {plan}",
            error_code="UNKNOWN_PLAN",
            details={"plan": plan},
        )


class StoreException(RelayException):
    """Firestore read or write errors"""

    def __init__(
        self,
        message: str = "Error updating user data.",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, error_code="STORE_ERROR", details=details)


class StoreUnavailableException(StoreException):
    """Firestore client was never initialized"""

    def __init__(self, message: str = "Internal server error: DB not connected."):
        super().__init__(message, details={"connected": False})
