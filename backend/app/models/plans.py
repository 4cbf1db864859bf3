"""
Plan Catalog

Maps the plan names sold through Razorpay payment links to the
entitlements written onto a user record.
"""

from enum import Enum
from typing import Dict

from pydantic import BaseModel, ConfigDict, Field

from app.utils.exceptions import UnknownPlanException

# scansRemaining value meaning "no limit"
UNLIMITED_SCANS = -1


class Subscription(str, Enum):
    """Subscription tier stored on the user record"""
    STARTER = "starter"
    PRO = "pro"
    BUSINESS = "business"


class Plan(str, Enum):
    """Plan names as set in the payment link notes"""
    STARTER = "Starter"
    PRO = "Pro"
    BUSINESS = "Business"


class PlanDetails(BaseModel):
    """Entitlements granted by a plan"""

    model_config = ConfigDict(frozen=True)

    subscription: Subscription
    scans_remaining: int = Field(ge=UNLIMITED_SCANS)

    @property
    def is_unlimited(self) -> bool:
        return self.scans_remaining == UNLIMITED_SCANS

    def to_firestore(self) -> Dict[str, object]:
        """Field values for the user document update"""
        return {
            "subscription": self.subscription.value,
            "scansRemaining": self.scans_remaining,
        }


PLAN_CATALOG: Dict[Plan, PlanDetails] = {
    Plan.STARTER: PlanDetails(subscription=Subscription.STARTER, scans_remaining=25),
    Plan.PRO: PlanDetails(subscription=Subscription.PRO, scans_remaining=50),
    Plan.BUSINESS: PlanDetails(subscription=Subscription.BUSINESS, scans_remaining=UNLIMITED_SCANS),
}


def resolve_plan(name: str) -> PlanDetails:
    """
    Look up the entitlements for a plan name.

    Names match exactly, so "pro" or "PRO" are rejected.

    Raises:
        UnknownPlanException: If the name is not in the catalog
    """
    try:
        plan = Plan(name)
    except ValueError:
        raise UnknownPlanException(name) from None
    return PLAN_CATALOG[plan]
