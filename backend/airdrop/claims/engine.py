"""
Dual-proof airdrop claim engine.

Two stateless verifiers feed one state-mutation gate:

- merkle_claim: membership proof of (recipient, amount) against the
  committed root. Recorded against the caller unless the instance is
  configured to key Merkle claims on the recipient. Never affected by the
  kill switch.
- signature_claim: EIP-712 signature by the trusted signer over
  (claimer=caller, amount). Can be permanently disabled by the owner.

Every mutating operation holds the engine lock from verification through
payout and notification, so operations never interleave. A failure at any
step leaves the claim record and the kill switch exactly as they were.
"""

import asyncio
import logging
from typing import Iterable, Optional, Union

from airdrop.claims.authority import ClaimAuthority
from airdrop.claims.base import (
    AirdropConfig,
    ClaimEntry,
    ClaimMethod,
    MerkleClaimKey,
    PayoutToken,
    normalize_address,
    normalize_amount,
)
from airdrop.claims.events import AirdropEvent, EventLog
from airdrop.claims.ledger import ClaimLedger, InMemoryClaimLedger
from airdrop.claims.merkle import MerkleVerifier, ProofNode
from airdrop.claims.signature import SignatureVerifier
from airdrop.core.constants import (
    EVENT_ECDSA_DISABLED,
    EVENT_MERKLE_CLAIM,
    EVENT_SIGNATURE_CLAIM,
)
from airdrop.core.errors import (
    AlreadyClaimed,
    InvalidProof,
    InvalidSignature,
    PayoutFailed,
    RecipientMismatch,
    SignaturesDisabled,
)

logger = logging.getLogger(__name__)


class Airdrop:
    """One airdrop instance: immutable config plus its own ledger."""

    def __init__(
        self,
        config: AirdropConfig,
        owner: str,
        ledger: Optional[ClaimLedger] = None,
        events: Optional[EventLog] = None,
        require_signature_recipient_match: bool = False,
        merkle_claim_key: MerkleClaimKey = MerkleClaimKey.CALLER,
    ):
        self._config = config
        self._ledger = ledger if ledger is not None else InMemoryClaimLedger()
        self._events = events if events is not None else EventLog()
        self._authority = ClaimAuthority(owner, self._ledger, self._events)
        self._merkle = MerkleVerifier(config.merkle_root)
        self._signatures = SignatureVerifier(config.trusted_signer, config.domain_separator)
        self._require_recipient_match = require_signature_recipient_match
        self._merkle_claim_key = MerkleClaimKey(merkle_claim_key)
        self._lock = asyncio.Lock()

    # --- Read-only state ---

    @property
    def config(self) -> AirdropConfig:
        return self._config

    @property
    def merkle_root(self) -> bytes:
        return self._config.merkle_root

    @property
    def trusted_signer(self) -> str:
        return self._config.trusted_signer

    @property
    def payout_token(self) -> PayoutToken:
        return self._config.payout_token

    @property
    def domain_separator(self) -> bytes:
        return self._config.domain_separator

    @property
    def events(self) -> EventLog:
        return self._events

    @property
    def merkle_claim_key(self) -> MerkleClaimKey:
        return self._merkle_claim_key

    async def get_owner(self) -> str:
        return await self._authority.owner()

    async def is_signature_verification_disabled(self) -> bool:
        return await self._ledger.is_signature_verification_disabled()

    async def already_claimed(self, identity: str) -> bool:
        return await self._ledger.is_claimed(normalize_address(identity, "identity"))

    async def get_claim(self, identity: str) -> Optional[ClaimEntry]:
        return await self._ledger.get_claim(normalize_address(identity, "identity"))

    # --- Claims ---

    async def merkle_claim(
        self,
        caller: str,
        proof: Iterable[ProofNode],
        to: str,
        amount: Union[int, str],
    ) -> AirdropEvent:
        """
        Claim `amount` for listed recipient `to` with a Merkle proof.

        The claim record is keyed on the caller. With
        MerkleClaimKey.RECIPIENT it is keyed on `to` instead, so a listed
        recipient is paid at most once whoever submits the proof.
        """
        caller = normalize_address(caller, "caller")
        to = normalize_address(to, "to")
        amount = normalize_amount(amount)
        proof = list(proof)
        identity = to if self._merkle_claim_key == MerkleClaimKey.RECIPIENT else caller

        async with self._lock:
            if await self._ledger.is_claimed(identity):
                logger.warning(f"merkle_claim: {identity} already claimed")
                raise AlreadyClaimed(identity)

            if not self._merkle.verify(proof, to, amount):
                logger.warning(f"merkle_claim: invalid proof for {to} amount={amount}")
                raise InvalidProof()

            async with self._ledger.claim(identity, ClaimMethod.MERKLE, to, amount):
                await self._pay(to, amount)

            logger.info(f"merkle_claim: {to} claimed {amount} (submitted by {caller})")
            return self._events.emit(EVENT_MERKLE_CLAIM, recipient=to, amount=amount, caller=caller)

    async def signature_claim(
        self,
        caller: str,
        signature: Union[str, bytes],
        to: str,
        amount: Union[int, str],
    ) -> AirdropEvent:
        """
        Claim `amount` for the caller with a trusted-signer signature.

        The signed payload names the caller as claimer; `to` only selects
        where the payout goes.
        """
        caller = normalize_address(caller, "caller")
        to = normalize_address(to, "to")
        amount = normalize_amount(amount)

        async with self._lock:
            if await self._ledger.is_signature_verification_disabled():
                logger.warning(f"signature_claim: rejected {caller}, signatures disabled")
                raise SignaturesDisabled()

            if await self._ledger.is_claimed(caller):
                logger.warning(f"signature_claim: {caller} already claimed")
                raise AlreadyClaimed(caller)

            if not self._signatures.verify(signature, caller, amount):
                logger.warning(f"signature_claim: invalid signature for {caller} amount={amount}")
                raise InvalidSignature()

            if self._require_recipient_match and to != caller:
                raise RecipientMismatch(caller, to)

            async with self._ledger.claim(caller, ClaimMethod.SIGNATURE, to, amount):
                await self._pay(to, amount)

            logger.info(f"signature_claim: {caller} claimed {amount} to {to}")
            return self._events.emit(EVENT_SIGNATURE_CLAIM, recipient=to, amount=amount, claimer=caller)

    # --- Administration ---

    async def disable_signature_verification(self, caller: str) -> AirdropEvent:
        """Owner-only, irreversible. Calling it again is harmless."""
        caller = normalize_address(caller, "caller")
        async with self._lock:
            await self._authority.require_owner(caller)
            await self._ledger.disable_signature_verification(caller)
            logger.info(f"signature verification disabled by {caller}")
            return self._events.emit(EVENT_ECDSA_DISABLED, caller=caller)

    async def transfer_ownership(self, caller: str, new_owner: str) -> AirdropEvent:
        """Owner-only: hand the privileged role to `new_owner`."""
        caller = normalize_address(caller, "caller")
        async with self._lock:
            return await self._authority.transfer_ownership(caller, new_owner)

    async def _pay(self, to: str, amount: int) -> None:
        token = self._config.payout_token
        try:
            ok = await token.transfer(to, amount)
        except Exception as e:
            logger.error(f"payout: transfer of {amount} {token.symbol} to {to} raised: {e}")
            raise PayoutFailed(to, amount) from e

        if not ok:
            logger.error(f"payout: transfer of {amount} {token.symbol} to {to} returned false")
            raise PayoutFailed(to, amount)
