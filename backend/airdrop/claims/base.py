"""
Shared types for the claim engine.

This module defines the immutable airdrop configuration, the interface the
engine expects from the payout collaborator, and the normalization helpers
applied to every identity / amount / hash that crosses the engine boundary.

Identities are EVM addresses in EIP-55 checksum form. Amounts are uint256.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional, Union

from eth_utils import decode_hex, is_address, to_checksum_address

from airdrop.core.constants import HASH_LENGTH, MAX_UINT256, MAX_UINT256_DIGITS
from airdrop.core.errors import MalformedClaim


class ClaimMethod(str, Enum):
    """Proof mechanism used for a claim."""
    MERKLE = "merkle"
    SIGNATURE = "signature"


class MerkleClaimKey(str, Enum):
    """Which address a Merkle claim is recorded against."""
    CALLER = "caller"
    RECIPIENT = "recipient"


class PayoutToken(ABC):
    """
    External balance-transfer service paying out claimed amounts.

    The engine treats a False result, or any exception, as a failed payout.
    """

    @property
    @abstractmethod
    def symbol(self) -> str:
        """Ticker of the payout asset."""
        pass

    @abstractmethod
    async def transfer(self, to: str, amount: int) -> bool:
        """Transfer `amount` smallest units to `to`."""
        pass


@dataclass(frozen=True)
class AirdropConfig:
    """Immutable configuration of one airdrop instance."""
    merkle_root: bytes
    trusted_signer: str
    payout_token: PayoutToken
    domain_separator: bytes
    chain_id: int
    verifying_contract: str
    name: str
    version: str

    @classmethod
    def create(
        cls,
        merkle_root: Union[str, bytes],
        trusted_signer: str,
        payout_token: PayoutToken,
        chain_id: int,
        verifying_contract: str,
        name: str = "Airdrop",
        version: str = "v1",
    ) -> "AirdropConfig":
        """Normalize inputs and derive the EIP-712 domain separator."""
        from airdrop.claims.signature import build_domain_separator

        verifying_contract = normalize_address(verifying_contract, "verifying_contract")
        return cls(
            merkle_root=to_bytes32(merkle_root, "merkle_root"),
            trusted_signer=normalize_address(trusted_signer, "trusted_signer"),
            payout_token=payout_token,
            domain_separator=build_domain_separator(name, version, chain_id, verifying_contract),
            chain_id=chain_id,
            verifying_contract=verifying_contract,
            name=name,
            version=version,
        )


@dataclass(frozen=True)
class ClaimEntry:
    """A committed claim. Its existence means the identity has claimed."""
    identity: str
    method: ClaimMethod
    recipient: str
    amount: int
    claimed_at: Optional[datetime] = None


def normalize_address(value: str, field: str = "address") -> str:
    """Return the checksum form of `value`, or raise MalformedClaim."""
    if not isinstance(value, str) or not is_address(value):
        raise MalformedClaim(f"{field} is not a valid address", {field: str(value)})
    return to_checksum_address(value)


def normalize_amount(value: Union[int, str]) -> int:
    """Parse a uint256 amount given as int or decimal string."""
    if isinstance(value, bool):
        raise MalformedClaim("amount must be an integer", {"amount": str(value)})
    if isinstance(value, str):
        digits = value.strip()
        # ASCII only: str.isdigit() also accepts superscripts int() rejects
        if not (digits.isascii() and digits.isdigit()):
            raise MalformedClaim("amount must be a non-negative integer", {"amount": value[:100]})
        if len(digits) > MAX_UINT256_DIGITS:
            raise MalformedClaim("amount is out of uint256 range", {"amount": value[:100]})
        try:
            value = int(digits)
        except ValueError:
            raise MalformedClaim("amount must be a non-negative integer", {"amount": value[:100]})
    if not isinstance(value, int):
        raise MalformedClaim("amount must be an integer", {"amount": type(value).__name__})
    if value < 0 or value > MAX_UINT256:
        # str() of a huge int trips the interpreter's digit limit
        shown = str(value) if value.bit_length() <= 512 else f"{value.bit_length()}-bit integer"
        raise MalformedClaim("amount is out of uint256 range", {"amount": shown})
    return value


def to_bytes32(value: Union[str, bytes], field: str = "hash") -> bytes:
    """Decode a 32-byte hash given as raw bytes or 0x-hex."""
    if isinstance(value, (bytes, bytearray)):
        raw = bytes(value)
    else:
        try:
            raw = decode_hex(value)
        except (TypeError, ValueError):
            raise MalformedClaim(f"{field} is not hex encoded", {field: str(value)})
    if len(raw) != HASH_LENGTH:
        raise MalformedClaim(f"{field} must be {HASH_LENGTH} bytes", {field: str(value)})
    return raw
