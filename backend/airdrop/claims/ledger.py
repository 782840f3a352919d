"""
One-time claim record and signature kill switch.

Both verifier paths funnel into a ClaimLedger. `claim()` is the only way to
flip an identity to claimed: it checks and sets in one step and undoes the
flip if the guarded block (the payout) raises, so a failed claim leaves no
trace. The ledger also keeps the owner once it has been transferred. Each
engine instance owns its own ledger.
"""

from abc import ABC, abstractmethod
from contextlib import asynccontextmanager
from datetime import datetime, timezone
from typing import AsyncContextManager, AsyncIterator, Dict, Optional

from tortoise.exceptions import IntegrityError
from tortoise.transactions import in_transaction

from airdrop.claims.base import ClaimEntry, ClaimMethod
from airdrop.core.errors import AlreadyClaimed
from airdrop.models.claims import ClaimRecord, OwnerState, SwitchState

SIGNATURES_DISABLED_SWITCH = "signature_verification_disabled"
OWNER_STATE = "owner"


class ClaimLedger(ABC):
    """Abstract store for claim records and the kill switch."""

    @abstractmethod
    async def is_claimed(self, identity: str) -> bool:
        pass

    @abstractmethod
    async def get_claim(self, identity: str) -> Optional[ClaimEntry]:
        pass

    @abstractmethod
    def claim(
        self,
        identity: str,
        method: ClaimMethod,
        recipient: str,
        amount: int,
    ) -> AsyncContextManager[ClaimEntry]:
        """
        Mark `identity` claimed for the duration of the block.

        Raises AlreadyClaimed if it was already claimed. If the block raises,
        the mark is rolled back and the exception propagates.
        """
        pass

    @abstractmethod
    async def is_signature_verification_disabled(self) -> bool:
        pass

    @abstractmethod
    async def disable_signature_verification(self, caller: str) -> None:
        """Set the kill switch. Idempotent; there is no way back."""
        pass

    @abstractmethod
    async def get_owner(self) -> Optional[str]:
        """Owner set by the last transfer, or None if never transferred."""
        pass

    @abstractmethod
    async def set_owner(self, owner: str, changed_by: str) -> None:
        pass


class InMemoryClaimLedger(ClaimLedger):
    """Process-local ledger."""

    def __init__(self):
        self._claims: Dict[str, ClaimEntry] = {}
        self._signatures_disabled = False
        self._owner: Optional[str] = None

    async def is_claimed(self, identity: str) -> bool:
        return identity in self._claims

    async def get_claim(self, identity: str) -> Optional[ClaimEntry]:
        return self._claims.get(identity)

    @asynccontextmanager
    async def claim(
        self,
        identity: str,
        method: ClaimMethod,
        recipient: str,
        amount: int,
    ) -> AsyncIterator[ClaimEntry]:
        # No await between the check and the set
        if identity in self._claims:
            raise AlreadyClaimed(identity)
        entry = ClaimEntry(
            identity=identity,
            method=method,
            recipient=recipient,
            amount=amount,
            claimed_at=datetime.now(timezone.utc),
        )
        self._claims[identity] = entry
        try:
            yield entry
        except BaseException:
            del self._claims[identity]
            raise

    async def is_signature_verification_disabled(self) -> bool:
        return self._signatures_disabled

    async def disable_signature_verification(self, caller: str) -> None:
        self._signatures_disabled = True

    async def get_owner(self) -> Optional[str]:
        return self._owner

    async def set_owner(self, owner: str, changed_by: str) -> None:
        self._owner = owner


class TortoiseClaimLedger(ClaimLedger):
    """
    Database-backed ledger.

    The claim row is inserted inside a transaction that stays open across
    the payout; the unique claimant column makes the insert the atomic
    check-and-set, and an exception from the payout rolls the row back.
    """

    def __init__(self, connection_name: Optional[str] = None):
        self._connection_name = connection_name

    @staticmethod
    def _to_entry(record: ClaimRecord) -> ClaimEntry:
        return ClaimEntry(
            identity=record.claimant,
            method=ClaimMethod(record.method),
            recipient=record.recipient,
            amount=int(record.amount),
            claimed_at=record.claimed_at,
        )

    async def is_claimed(self, identity: str) -> bool:
        return await ClaimRecord.filter(claimant=identity).exists()

    async def get_claim(self, identity: str) -> Optional[ClaimEntry]:
        record = await ClaimRecord.get_or_none(claimant=identity)
        if record is None:
            return None
        return self._to_entry(record)

    @asynccontextmanager
    async def claim(
        self,
        identity: str,
        method: ClaimMethod,
        recipient: str,
        amount: int,
    ) -> AsyncIterator[ClaimEntry]:
        async with in_transaction(self._connection_name) as conn:
            try:
                record = await ClaimRecord.create(
                    claimant=identity,
                    method=method.value,
                    recipient=recipient,
                    amount=str(amount),
                    using_db=conn,
                )
            except IntegrityError:
                raise AlreadyClaimed(identity)
            yield self._to_entry(record)

    async def is_signature_verification_disabled(self) -> bool:
        return await SwitchState.filter(name=SIGNATURES_DISABLED_SWITCH).exists()

    async def disable_signature_verification(self, caller: str) -> None:
        await SwitchState.get_or_create(
            name=SIGNATURES_DISABLED_SWITCH,
            defaults={"changed_by": caller},
        )

    async def get_owner(self) -> Optional[str]:
        state = await OwnerState.get_or_none(name=OWNER_STATE)
        return state.address if state else None

    async def set_owner(self, owner: str, changed_by: str) -> None:
        await OwnerState.update_or_create(
            name=OWNER_STATE,
            defaults={"address": owner, "changed_by": changed_by},
        )
