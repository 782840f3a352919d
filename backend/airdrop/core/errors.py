"""
Claim error taxonomy.

Every rejected operation surfaces as one of these; none of them is ever
partially applied. The HTTP layer maps them to JSON error responses.
"""

from typing import Any, Dict, Optional


class ClaimError(Exception):
    """Base class for rejected airdrop operations."""

    code = "CLAIM_ERROR"
    status_code = 400

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class AlreadyClaimed(ClaimError):
    code = "ALREADY_CLAIMED"
    status_code = 409

    def __init__(self, identity: str):
        super().__init__("already claimed", {"identity": identity})
        self.identity = identity


class InvalidProof(ClaimError):
    code = "INVALID_PROOF"
    status_code = 400

    def __init__(self, message: str = "invalid merkle proof"):
        super().__init__(message)


class InvalidSignature(ClaimError):
    code = "INVALID_SIGNATURE"
    status_code = 401

    def __init__(self, message: str = "invalid signature"):
        super().__init__(message)


class RecipientMismatch(InvalidSignature):
    """Signature claim paying out to someone other than the caller."""

    code = "RECIPIENT_MISMATCH"

    def __init__(self, caller: str, to: str):
        super().__init__("recipient must be the caller for signature claims")
        self.details = {"caller": caller, "to": to}


class SignaturesDisabled(ClaimError):
    code = "SIGNATURES_DISABLED"
    status_code = 403

    def __init__(self):
        super().__init__("signature verification is disabled")


class PayoutFailed(ClaimError):
    code = "PAYOUT_FAILED"
    status_code = 502

    def __init__(self, to: str, amount: int):
        super().__init__("payout transfer failed", {"to": to, "amount": str(amount)})


class NotAuthorized(ClaimError):
    code = "NOT_AUTHORIZED"
    status_code = 403

    def __init__(self, caller: str):
        super().__init__("caller is not the owner", {"caller": caller})


class MalformedClaim(ClaimError):
    """Input that is not an address / uint256 at all."""

    code = "MALFORMED_CLAIM"
    status_code = 400


class AuthenticationFailed(ClaimError):
    """The caller could not prove control of its wallet."""

    code = "AUTHENTICATION_FAILED"
    status_code = 401
