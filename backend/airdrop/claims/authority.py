"""
Owner-only administrative capability.

The owner is the privileged caller allowed to disable signature claims and
to hand the role on. The configured owner applies until the first transfer;
after that the current owner is whatever the ledger has stored, so a
transfer survives a restart of a database-backed instance.
"""

import logging

from airdrop.claims.base import normalize_address
from airdrop.claims.events import AirdropEvent, EventLog
from airdrop.claims.ledger import ClaimLedger
from airdrop.core.constants import EVENT_OWNERSHIP_TRANSFERRED, ZERO_ADDRESS
from airdrop.core.errors import MalformedClaim, NotAuthorized

logger = logging.getLogger(__name__)


class ClaimAuthority:
    def __init__(self, initial_owner: str, ledger: ClaimLedger, events: EventLog):
        self._initial_owner = normalize_address(initial_owner, "owner")
        self._ledger = ledger
        self._events = events

    async def owner(self) -> str:
        stored = await self._ledger.get_owner()
        return stored or self._initial_owner

    async def is_owner(self, caller: str) -> bool:
        return caller == await self.owner()

    async def require_owner(self, caller: str) -> None:
        """Raise NotAuthorized unless `caller` is the owner."""
        if not await self.is_owner(caller):
            logger.warning(f"authority: rejected privileged call from {caller}")
            raise NotAuthorized(caller)

    async def transfer_ownership(self, caller: str, new_owner: str) -> AirdropEvent:
        caller = normalize_address(caller, "caller")
        await self.require_owner(caller)
        new_owner = normalize_address(new_owner, "new_owner")
        if new_owner == ZERO_ADDRESS:
            raise MalformedClaim("new owner is the zero address", {"new_owner": new_owner})

        await self._ledger.set_owner(new_owner, changed_by=caller)
        logger.info(f"authority: ownership transferred {caller} -> {new_owner}")
        return self._events.emit(EVENT_OWNERSHIP_TRANSFERRED, previous_owner=caller, new_owner=new_owner)
