import logging

from fastapi import APIRouter, Depends

from airdrop.api.deps import get_airdrop
from airdrop.claims.base import ClaimMethod
from airdrop.claims.engine import Airdrop
from airdrop.schemas.airdrop import (
    ClaimResponse,
    MerkleClaimRequest,
    SignatureClaimRequest,
)

from .common import authenticate_caller, event_response

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post(
    "/claim/merkle",
    response_model=ClaimResponse,
    summary="Claim with a Merkle proof",
    description="Anyone holding a valid proof may submit it; tokens go to the listed recipient.",
)
async def merkle_claim(
    body: MerkleClaimRequest,
    airdrop: Airdrop = Depends(get_airdrop),
) -> ClaimResponse:
    caller = await authenticate_caller(body.caller, body.auth_signature)
    event = await airdrop.merkle_claim(caller, body.proof, body.to, body.amount)

    return ClaimResponse(
        method=ClaimMethod.MERKLE.value,
        recipient=event.args["recipient"],
        amount=str(event.args["amount"]),
        event=event_response(event),
    )


@router.post(
    "/claim/signature",
    response_model=ClaimResponse,
    summary="Claim with a trusted-signer signature",
    description="The signature must cover Claim(claimer=caller, amount) under this airdrop's EIP-712 domain.",
)
async def signature_claim(
    body: SignatureClaimRequest,
    airdrop: Airdrop = Depends(get_airdrop),
) -> ClaimResponse:
    caller = await authenticate_caller(body.caller, body.auth_signature)
    event = await airdrop.signature_claim(caller, body.signature, body.to, body.amount)

    return ClaimResponse(
        method=ClaimMethod.SIGNATURE.value,
        recipient=event.args["recipient"],
        amount=str(event.args["amount"]),
        event=event_response(event),
    )
