from typing import Optional

from fastapi import APIRouter, Depends

from airdrop.api.deps import get_airdrop
from airdrop.claims.engine import Airdrop
from airdrop.schemas.airdrop import (
    AirdropStateResponse,
    ClaimStatusResponse,
    EventsResponse,
    GetMessageResponse,
)

from .common import event_response, issue_auth_message

router = APIRouter()


@router.get(
    "/message",
    response_model=GetMessageResponse,
    summary="Get a challenge message for caller authentication",
)
async def get_message(wallet_address: str) -> GetMessageResponse:
    auth_message = await issue_auth_message(wallet_address)
    return GetMessageResponse(message=auth_message.message, expires_at=auth_message.expires_at)


@router.get(
    "/state",
    response_model=AirdropStateResponse,
    summary="Get airdrop configuration and kill-switch state",
)
async def get_state(airdrop: Airdrop = Depends(get_airdrop)) -> AirdropStateResponse:
    config = airdrop.config
    return AirdropStateResponse(
        merkle_root="0x" + config.merkle_root.hex(),
        trusted_signer=config.trusted_signer,
        owner=await airdrop.get_owner(),
        payout_token=config.payout_token.symbol,
        domain_separator="0x" + config.domain_separator.hex(),
        chain_id=config.chain_id,
        verifying_contract=config.verifying_contract,
        merkle_claim_key=airdrop.merkle_claim_key.value,
        signature_verification_disabled=await airdrop.is_signature_verification_disabled(),
    )


@router.get(
    "/claims/{address}",
    response_model=ClaimStatusResponse,
    summary="Check whether an identity has claimed",
)
async def get_claim_status(
    address: str,
    airdrop: Airdrop = Depends(get_airdrop),
) -> ClaimStatusResponse:
    entry = await airdrop.get_claim(address)
    if entry is None:
        return ClaimStatusResponse(address=address, claimed=False)

    return ClaimStatusResponse(
        address=entry.identity,
        claimed=True,
        method=entry.method.value,
        recipient=entry.recipient,
        amount=str(entry.amount),
        claimed_at=entry.claimed_at,
    )


@router.get(
    "/events",
    response_model=EventsResponse,
    summary="List emitted notifications",
)
async def get_events(
    name: Optional[str] = None,
    airdrop: Airdrop = Depends(get_airdrop),
) -> EventsResponse:
    return EventsResponse(events=[event_response(e) for e in airdrop.events.events(name)])
