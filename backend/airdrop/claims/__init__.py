from airdrop.claims.base import (
    AirdropConfig,
    ClaimEntry,
    ClaimMethod,
    PayoutToken,
)
from airdrop.claims.engine import Airdrop
from airdrop.claims.ledger import ClaimLedger, InMemoryClaimLedger, TortoiseClaimLedger

__all__ = [
    "Airdrop",
    "AirdropConfig",
    "ClaimEntry",
    "ClaimMethod",
    "PayoutToken",
    "ClaimLedger",
    "InMemoryClaimLedger",
    "TortoiseClaimLedger",
]
