"""
Payment policy decisions on top of remote verification results.

A reference rule set mapping a verification response and the payment
amount to ALLOW, HOLD or BLOCK. Institutions are expected to replace it
with their own policy engine; the rule order is significant.
"""

from dataclasses import dataclass
from enum import Enum

from .client import VerifyResponse


HIGH_VALUE_THRESHOLD_EUR = 50_000


class PolicyAction(str, Enum):
    ALLOW = "ALLOW"
    HOLD = "HOLD"
    BLOCK = "BLOCK"


@dataclass(frozen=True)
class PolicyDecision:
    action: PolicyAction
    reason: str

    def to_dict(self) -> dict[str, str]:
        return {"action": self.action.value, "reason": self.reason}


def decide(payment_amount_eur: float, response: VerifyResponse) -> PolicyDecision:
    """
    Decide what to do with a payment given its verification response.

    Rules, first match wins:
    1. IBAN_MISMATCH risk flag -> BLOCK
    2. High-value payment without L3 verification -> HOLD
    3. Offline-only (L1) verification -> HOLD
    4. Invalid verdict or modified document -> BLOCK
    5. Suspect verdict -> HOLD
    6. Otherwise -> ALLOW
    """
    if "IBAN_MISMATCH" in response.risk_flags:
        return PolicyDecision(PolicyAction.BLOCK, "IBAN_MISMATCH")

    if payment_amount_eur >= HIGH_VALUE_THRESHOLD_EUR and response.trust_level != "L3":
        return PolicyDecision(PolicyAction.HOLD, "HIGH_VALUE_REQUIRES_L3")

    if response.trust_level == "L1":
        return PolicyDecision(PolicyAction.HOLD, "OFFLINE_ONLY")

    if response.verdict == "INVALID" or response.integrity == "MODIFIED":
        return PolicyDecision(PolicyAction.BLOCK, "TAMPERED")

    if response.verdict == "SUSPECT":
        return PolicyDecision(PolicyAction.HOLD, "SUSPECT_DOCUMENT")

    return PolicyDecision(PolicyAction.ALLOW, "OK")
