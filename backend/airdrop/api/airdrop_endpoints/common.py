import logging
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any

from eth_account import Account
from eth_account.messages import encode_defunct

from airdrop.claims.base import normalize_address
from airdrop.claims.events import AirdropEvent
from airdrop.core.config import settings
from airdrop.core.errors import AuthenticationFailed
from airdrop.models.claims import AuthMessage
from airdrop.schemas.airdrop import ClaimEventResponse

logger = logging.getLogger(__name__)


def build_auth_message(wallet_address: str, nonce: str) -> str:
    """EIP-4361 inspired challenge text the caller signs with its wallet."""
    return (
        f"Airdrop claim authentication\n\n"
        f"Sign this message to prove you control this wallet.\n\n"
        f"Wallet Address: {wallet_address}\n"
        f"Nonce: {nonce}"
    )


async def issue_auth_message(wallet_address: str) -> AuthMessage:
    """Create (or replace) the outstanding challenge for a wallet."""
    wallet_address = normalize_address(wallet_address, "wallet_address")
    message = build_auth_message(wallet_address, secrets.token_hex(16))
    expires_at = datetime.now(timezone.utc) + timedelta(minutes=settings.auth_message_ttl_minutes)

    auth_message, _ = await AuthMessage.update_or_create(
        wallet_address=wallet_address,
        defaults={"message": message, "expires_at": expires_at},
    )
    return auth_message


async def authenticate_caller(caller: str, auth_signature: str) -> str:
    """
    Verify the caller signed its outstanding challenge and consume it.

    Returns the caller's checksum address.
    """
    caller = normalize_address(caller, "caller")

    auth_message = await AuthMessage.get_or_none(wallet_address=caller)
    if not auth_message:
        raise AuthenticationFailed("No outstanding challenge for caller. Request one from /message.")

    expires_at = auth_message.expires_at
    if expires_at.tzinfo is None:
        expires_at = expires_at.replace(tzinfo=timezone.utc)
    if datetime.now(timezone.utc) > expires_at:
        await auth_message.delete()
        raise AuthenticationFailed("Message has expired. Please request a new one.")

    try:
        recovered = Account.recover_message(
            encode_defunct(text=auth_message.message), signature=auth_signature
        )
    except Exception as e:
        logger.warning(f"Caller signature verification error for {caller}: {e}")
        raise AuthenticationFailed(f"Invalid signature format: {e}")

    if recovered != caller:
        raise AuthenticationFailed("Signature verification failed: recovered address does not match caller.")

    # Consume in one statement: of two requests racing on the same challenge,
    # only the one whose delete hits the row gets through
    deleted = await AuthMessage.filter(wallet_address=caller, message=auth_message.message).delete()
    if deleted != 1:
        raise AuthenticationFailed("Challenge was already used. Request a new one from /message.")
    return caller


def _json_safe(value: Any) -> Any:
    # uint256 amounts exceed JavaScript's safe integer range
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return value


def event_response(event: AirdropEvent) -> ClaimEventResponse:
    return ClaimEventResponse(
        name=event.name,
        args={k: _json_safe(v) for k, v in event.args.items()},
        sequence=event.sequence,
        emitted_at=event.emitted_at,
    )
