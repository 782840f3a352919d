from pydantic import BaseModel, Field
from typing import Optional, Dict, Any, List, Union
from datetime import datetime


class AuthenticatedRequest(BaseModel):
    """Caller identity plus its signature over a challenge from GET /message."""
    caller: str = Field(..., description="Caller wallet address")
    auth_signature: str = Field(..., description="EIP-191 signature of the issued challenge message")


class MerkleClaimRequest(AuthenticatedRequest):
    proof: List[str] = Field(default_factory=list, description="Sibling hashes, leaf to root (0x-hex)")
    to: str = Field(..., description="Listed recipient")
    amount: Union[int, str] = Field(..., description="Amount in smallest units (uint256)")


class SignatureClaimRequest(AuthenticatedRequest):
    signature: str = Field(..., description="EIP-712 Claim signature by the trusted signer (0x-hex, 65 bytes)")
    to: str = Field(..., description="Payout recipient")
    amount: Union[int, str] = Field(..., description="Signed amount in smallest units (uint256)")


class DisableSignaturesRequest(AuthenticatedRequest):
    pass


class GetMessageResponse(BaseModel):
    message: str
    expires_at: datetime


class ClaimEventResponse(BaseModel):
    name: str
    args: Dict[str, Any]
    sequence: int
    emitted_at: datetime


class ClaimResponse(BaseModel):
    """Successful claim."""
    method: str
    recipient: str
    amount: str
    event: ClaimEventResponse


class DisableSignaturesResponse(BaseModel):
    signature_verification_disabled: bool
    event: ClaimEventResponse


class AirdropStateResponse(BaseModel):
    """Immutable configuration plus the kill-switch flag."""
    merkle_root: str
    trusted_signer: str
    owner: str
    payout_token: str
    domain_separator: str
    chain_id: int
    verifying_contract: str
    merkle_claim_key: str
    signature_verification_disabled: bool


class ClaimStatusResponse(BaseModel):
    address: str
    claimed: bool
    method: Optional[str] = None
    recipient: Optional[str] = None
    amount: Optional[str] = None
    claimed_at: Optional[datetime] = None


class EventsResponse(BaseModel):
    events: List[ClaimEventResponse]


class ErrorResponse(BaseModel):
    """Standard error response."""
    error: str
    detail: Optional[str] = None
    data: Optional[Dict[str, Any]] = None


class TransferOwnershipRequest(AuthenticatedRequest):
    new_owner: str = Field(..., description="Address taking over the owner role")


class OwnershipResponse(BaseModel):
    owner: str
    event: ClaimEventResponse
