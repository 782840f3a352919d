import logging

from fastapi import APIRouter, Depends

from airdrop.api.deps import get_airdrop
from airdrop.claims.engine import Airdrop
from airdrop.schemas.airdrop import (
    DisableSignaturesRequest,
    DisableSignaturesResponse,
    OwnershipResponse,
    TransferOwnershipRequest,
)

from .common import authenticate_caller, event_response

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/admin")


@router.post(
    "/disable-signatures",
    response_model=DisableSignaturesResponse,
    summary="Permanently disable signature claims",
    description="Owner only. Irreversible; Merkle claims stay available.",
)
async def disable_signatures(
    body: DisableSignaturesRequest,
    airdrop: Airdrop = Depends(get_airdrop),
) -> DisableSignaturesResponse:
    caller = await authenticate_caller(body.caller, body.auth_signature)
    event = await airdrop.disable_signature_verification(caller)

    return DisableSignaturesResponse(
        signature_verification_disabled=await airdrop.is_signature_verification_disabled(),
        event=event_response(event),
    )


@router.post(
    "/transfer-ownership",
    response_model=OwnershipResponse,
    summary="Hand the owner role to another address",
    description="Owner only. The new owner is persisted and survives restarts.",
)
async def transfer_ownership(
    body: TransferOwnershipRequest,
    airdrop: Airdrop = Depends(get_airdrop),
) -> OwnershipResponse:
    caller = await authenticate_caller(body.caller, body.auth_signature)
    event = await airdrop.transfer_ownership(caller, body.new_owner)

    return OwnershipResponse(owner=await airdrop.get_owner(), event=event_response(event))
