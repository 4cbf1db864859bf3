"""
Razorpay Event Models

Pydantic models for Razorpay webhook events validation.
Only the fields this service reads are modeled; everything else the
provider sends is ignored.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

PAYMENT_LINK_PAID = "payment_link.paid"


class PaymentLinkNotes(BaseModel):
    """Notes attached when the payment link was created"""

    model_config = ConfigDict(extra="allow")

    user_id: Optional[str] = Field(None, description="Firestore user document ID")
    plan: Optional[str] = Field(None, description="Plan name, e.g. 'Pro'")

    @field_validator("user_id", "plan", mode="before")
    @classmethod
    def normalize_note(cls, v: Any) -> Optional[str]:
        """Coerce numeric notes to strings, treat empty values as absent"""
        if v is None or isinstance(v, bool):
            return None
        if isinstance(v, (int, float)):
            v = str(v)
        if not isinstance(v, str) or not v:
            return None
        return v

    @property
    def is_complete(self) -> bool:
        return bool(self.user_id and self.plan)


class PaymentLinkEntity(BaseModel):
    """payload.payment_link.entity"""

    model_config = ConfigDict(extra="allow")

    notes: PaymentLinkNotes = Field(default_factory=PaymentLinkNotes)

    @field_validator("notes", mode="before")
    @classmethod
    def normalize_notes(cls, v: Any) -> Any:
        # Razorpay serializes empty notes as []
        if not isinstance(v, dict):
            return {}
        return v


class RazorpayEvent(BaseModel):
    """Razorpay webhook event envelope"""

    model_config = ConfigDict(extra="allow")

    event: Optional[str] = Field(None, description="Event type, e.g. payment_link.paid")
    account_id: Optional[str] = Field(None, description="Merchant account ID")
    created_at: Optional[int] = Field(None, description="Unix timestamp")
    payload: Dict[str, Any] = Field(default_factory=dict)

    @field_validator("event", mode="before")
    @classmethod
    def normalize_event(cls, v: Any) -> Optional[str]:
        return v if isinstance(v, str) else None

    @field_validator("created_at", mode="before")
    @classmethod
    def normalize_created_at(cls, v: Any) -> Optional[int]:
        return v if isinstance(v, int) and not isinstance(v, bool) else None

    @field_validator("account_id", mode="before")
    @classmethod
    def normalize_account_id(cls, v: Any) -> Optional[str]:
        return v if isinstance(v, str) else None

    @field_validator("payload", mode="before")
    @classmethod
    def normalize_payload(cls, v: Any) -> Dict[str, Any]:
        return v if isinstance(v, dict) else {}

    @property
    def payment_link(self) -> Optional[PaymentLinkEntity]:
        """
        Extract payload.payment_link.entity.

        Returns:
            The entity, or None when the nested structure is absent
        """
        payment_link = self.payload.get("payment_link")
        if not isinstance(payment_link, dict):
            return None
        entity = payment_link.get("entity")
        if not isinstance(entity, dict):
            return None
        return PaymentLinkEntity.model_validate(entity)

    @property
    def notes(self) -> PaymentLinkNotes:
        """Payment link notes (empty when missing)"""
        entity = self.payment_link
        return entity.notes if entity else PaymentLinkNotes()
