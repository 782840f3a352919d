"""
Process-wide airdrop instance.

Builds the claim engine from settings on first use: Tortoise-backed claim
ledger, in-process payout vault funded from PAYOUT_POOL_BALANCE.
"""

import logging
from typing import Optional

from airdrop.claims.base import AirdropConfig, MerkleClaimKey
from airdrop.claims.engine import Airdrop
from airdrop.claims.ledger import TortoiseClaimLedger
from airdrop.core.config import settings
from airdrop.core.errors import MalformedClaim
from airdrop.services.vault import TokenVault

logger = logging.getLogger(__name__)


class AirdropService:
    """Lazily constructed airdrop engine and its payout vault."""

    def __init__(self):
        self._airdrop: Optional[Airdrop] = None
        self._vault: Optional[TokenVault] = None

    def _build(self) -> None:
        for name in ("trusted_signer", "owner_address", "airdrop_address"):
            if not getattr(settings, name):
                raise ValueError(f"{name.upper()} not configured")

        self._vault = TokenVault(settings.payout_token_symbol, settings.payout_pool_balance)
        config = AirdropConfig.create(
            merkle_root=settings.merkle_root,
            trusted_signer=settings.trusted_signer,
            payout_token=self._vault,
            chain_id=settings.chain_id,
            verifying_contract=settings.airdrop_address,
            name=settings.eip712_name,
            version=settings.eip712_version,
        )
        self._airdrop = Airdrop(
            config,
            owner=settings.owner_address,
            ledger=TortoiseClaimLedger(),
            require_signature_recipient_match=settings.require_signature_recipient_match,
            merkle_claim_key=MerkleClaimKey(settings.merkle_claim_key),
        )
        logger.info(
            f"airdrop: instance {config.verifying_contract} on chain {config.chain_id}, "
            f"root=0x{config.merkle_root.hex()}, signer={config.trusted_signer}"
        )

    @property
    def airdrop(self) -> Airdrop:
        if self._airdrop is None:
            self._build()
        return self._airdrop

    @property
    def vault(self) -> TokenVault:
        if self._vault is None:
            self._build()
        return self._vault

    def is_configured(self) -> bool:
        try:
            return self.airdrop is not None
        except (ValueError, MalformedClaim):
            return False


# Singleton instance
airdrop_service = AirdropService()
