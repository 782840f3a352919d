"""
In-process payout pool.

Holds the airdrop's funded token balance and pays claims out of it. Implements
the PayoutToken interface the claim engine calls after a successful claim;
an underfunded pool answers False, which the engine treats as a failed payout.
"""

import logging
from typing import Dict

from airdrop.claims.base import PayoutToken, normalize_address, normalize_amount

logger = logging.getLogger(__name__)


class TokenVault(PayoutToken):
    """Balance ledger for one payout asset."""

    def __init__(self, symbol: str, initial_balance: int = 0):
        self._symbol = symbol
        self._pool_balance = normalize_amount(initial_balance)
        self._balances: Dict[str, int] = {}

    @property
    def symbol(self) -> str:
        return self._symbol

    @property
    def pool_balance(self) -> int:
        return self._pool_balance

    def fund(self, amount: int) -> int:
        """Add `amount` to the pool and return the new pool balance."""
        self._pool_balance += normalize_amount(amount)
        logger.info(f"vault: funded {amount} {self._symbol}, pool={self._pool_balance}")
        return self._pool_balance

    def balance_of(self, address: str) -> int:
        return self._balances.get(normalize_address(address), 0)

    async def transfer(self, to: str, amount: int) -> bool:
        to = normalize_address(to, "to")
        if amount > self._pool_balance:
            logger.warning(
                f"vault: insufficient pool balance for {amount} {self._symbol} "
                f"(pool={self._pool_balance})"
            )
            return False

        self._pool_balance -= amount
        self._balances[to] = self._balances.get(to, 0) + amount
        logger.info(f"vault: transferred {amount} {self._symbol} to {to}")
        return True
