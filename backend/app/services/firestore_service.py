"""
Firestore Service for User Records

Holds the single Firebase Admin client built at startup and performs the
two operations the webhook needs: an existence check and a plan update on
artifacts/<app_id>/users/<user_id>.
"""

import re
from typing import Optional

import firebase_admin
from fastapi.concurrency import run_in_threadpool
from firebase_admin import credentials, firestore

from app.config import parse_service_account_key, settings
from app.models.plans import PlanDetails
from app.utils.exceptions import StoreException, StoreUnavailableException
from app.utils.logging_config import get_logger

logger = get_logger(__name__)

# Firestore limit on document ID size
MAX_DOCUMENT_ID_BYTES = 1500

_RESERVED_ID = re.compile(r"^__.*__$")


def is_valid_document_id(user_id: str) -> bool:
    """
    Check that a user ID names a single document in the users collection.

    A "/" would address a nested path instead of a users/<user_id> document.
    """
    if not user_id or "/" in user_id or user_id in (".", ".."):
        return False
    if _RESERVED_ID.match(user_id):
        return False
    return len(user_id.encode("utf-8")) <= MAX_DOCUMENT_ID_BYTES


class FirestoreService:
    """
    Firestore access for user records.

    Document structure (owned by the frontend):
    - artifacts/<app_id>/users/<user_id>
      - subscription: starter | pro | business
      - scansRemaining: int, -1 for unlimited
    """

    def __init__(self, app_id: str, service_account_key: Optional[str] = None):
        self.app_id = app_id
        self.service_account_key = service_account_key
        self.client = None
        self._connected = False

    @property
    def collection_path(self) -> str:
        return f"artifacts/{self.app_id}/users"

    def initialize(self, service_account_key: Optional[str] = None) -> bool:
        """
        Build the Firestore client from the service account JSON.

        Failures are logged and leave the service disconnected so that
        webhook requests answer 500 and the provider retries.

        Returns:
            True if the client is ready
        """
        if self._connected:
            return True

        raw_key = service_account_key or self.service_account_key
        if not raw_key:
            logger.error("Firebase Admin initialization failed: FIREBASE_SERVICE_ACCOUNT_KEY is not set")
            return False

        try:
            cred = credentials.Certificate(parse_service_account_key(raw_key))
            try:
                app = firebase_admin.get_app()
            except ValueError:
                app = firebase_admin.initialize_app(cred)
            self.client = firestore.client(app)
            self._connected = True
            logger.info(
                "Firestore client initialized",
                extra={"collection": self.collection_path},
            )
        except Exception as e:
            logger.error(
                f"Firebase Admin initialization failed: {e}",
                extra={"error": str(e), "error_type": type(e).__name__},
            )
            self.client = None
            self._connected = False

        return self._connected

    def is_connected(self) -> bool:
        """Check if the Firestore client is ready"""
        return self._connected

    def user_document(self, user_id: str):
        """Document reference for a user record"""
        if not self._connected:
            raise StoreUnavailableException()
        return self.client.collection(self.collection_path).document(user_id)

    async def user_exists(self, user_id: str) -> bool:
        """
        Check whether a user record exists.

        Raises:
            StoreUnavailableException: If the client is not initialized
            StoreException: If the read fails
        """
        try:
            doc_ref = self.user_document(user_id)
            snapshot = await run_in_threadpool(doc_ref.get)
        except StoreUnavailableException:
            raise
        except Exception as e:
            logger.error(
                f"Error reading user document: {e}",
                extra={"user_id": user_id, "error": str(e)},
            )
            raise StoreException(details={"user_id": user_id, "operation": "get"}) from e
        return bool(snapshot.exists)

    async def apply_plan(self, user_id: str, plan: PlanDetails) -> None:
        """
        Write the plan entitlements onto the user record.

        Setting the same values twice leaves the record unchanged, so
        provider redeliveries are harmless.

        Raises:
            StoreUnavailableException: If the client is not initialized
            StoreException: If the update fails
        """
        fields = plan.to_firestore()
        try:
            doc_ref = self.user_document(user_id)
            await run_in_threadpool(doc_ref.update, fields)
        except StoreUnavailableException:
            raise
        except Exception as e:
            logger.error(
                f"Error updating Firestore: {e}",
                extra={"user_id": user_id, "fields": fields, "error": str(e)},
            )
            raise StoreException(details={"user_id": user_id, "operation": "update"}) from e

        logger.info(
            "User document updated",
            extra={"user_id": user_id, "fields": fields},
        )


# Global Firestore service instance
firestore_service = FirestoreService(
    app_id=settings.app_id,
    service_account_key=settings.firebase_service_account_key,
)
