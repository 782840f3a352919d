"""
EIP-712 typed data signatures for airdrop claims.

Signature scheme: secp256k1 ECDSA over the EIP-712 digest

    keccak256(0x19 || 0x01 || domainSeparator || hashStruct(Claim))

where

    domainSeparator = keccak256(abi.encode(
        keccak256("EIP712Domain(string name,string version,uint256 chainId,address verifyingContract)"),
        keccak256(name), keccak256(version), chainId, verifyingContract))

    hashStruct(Claim) = keccak256(abi.encode(
        keccak256("Claim(address claimer,uint256 amount)"), claimer, amount))

The domain binds a signature to exactly one airdrop instance on one chain.
Signers produce these with ``eth_account`` (``sign_typed_data``) or any
wallet implementing ``eth_signTypedData_v4``.
"""

import logging
from typing import Tuple, Union

from eth_abi import encode
from eth_account import Account
from eth_account.messages import SignableMessage
from eth_keys.exceptions import BadSignature, ValidationError
from eth_utils import decode_hex, keccak

from airdrop.claims.base import normalize_address, normalize_amount, to_bytes32
from airdrop.core.constants import (
    CLAIM_TYPE,
    EIP712_DOMAIN_TYPE,
    EIP712_VERSION_BYTE,
    SECP256K1_HALF_N,
    SIGNATURE_LENGTH,
    ZERO_ADDRESS,
)
from airdrop.core.errors import InvalidSignature

logger = logging.getLogger(__name__)

DOMAIN_TYPEHASH = keccak(EIP712_DOMAIN_TYPE)
CLAIM_TYPEHASH = keccak(CLAIM_TYPE)


def build_domain_separator(
    name: str,
    version: str,
    chain_id: int,
    verifying_contract: str,
) -> bytes:
    return keccak(
        encode(
            ["bytes32", "bytes32", "bytes32", "uint256", "address"],
            [
                DOMAIN_TYPEHASH,
                keccak(text=name),
                keccak(text=version),
                chain_id,
                normalize_address(verifying_contract, "verifying_contract"),
            ],
        )
    )


def claim_struct_hash(claimer: str, amount: int) -> bytes:
    return keccak(
        encode(
            ["bytes32", "address", "uint256"],
            [CLAIM_TYPEHASH, normalize_address(claimer, "claimer"), normalize_amount(amount)],
        )
    )


def typed_data_message(domain_separator: bytes, struct_hash: bytes) -> SignableMessage:
    """EIP-191 version 0x01 envelope around a struct hash."""
    return SignableMessage(
        version=EIP712_VERSION_BYTE,
        header=to_bytes32(domain_separator, "domain_separator"),
        body=to_bytes32(struct_hash, "struct_hash"),
    )


def typed_data_hash(domain_separator: bytes, struct_hash: bytes) -> bytes:
    message = typed_data_message(domain_separator, struct_hash)
    return keccak(b"\x19" + message.version + message.header + message.body)


def split_signature(signature: Union[str, bytes]) -> Tuple[int, int, int]:
    """
    Split a 65-byte r || s || v signature.

    Rejects anything an on-chain ECDSA.recover would reject: wrong length,
    v other than 27/28, zero r/s and the malleable high-s form.
    """
    if isinstance(signature, str):
        try:
            signature = decode_hex(signature)
        except ValueError:
            raise InvalidSignature("signature is not hex encoded")
    signature = bytes(signature)

    if len(signature) != SIGNATURE_LENGTH:
        raise InvalidSignature(f"signature must be {SIGNATURE_LENGTH} bytes, got {len(signature)}")

    r = int.from_bytes(signature[0:32], "big")
    s = int.from_bytes(signature[32:64], "big")
    v = signature[64]

    if v not in (27, 28):
        raise InvalidSignature("invalid signature 'v' value")
    if r == 0 or s == 0:
        raise InvalidSignature("invalid signature 'r' or 's' value")
    if s > SECP256K1_HALF_N:
        raise InvalidSignature("invalid signature 's' value")
    return v, r, s


def recover_signer(message: SignableMessage, signature: Union[str, bytes]) -> str:
    """Recover the signing address; raises InvalidSignature if nothing recovers."""
    vrs = split_signature(signature)
    try:
        return Account.recover_message(message, vrs=vrs)
    except (BadSignature, ValidationError, ValueError) as e:
        raise InvalidSignature(f"signature recovery failed: {e}")


class SignatureVerifier:
    """Recovers claim signers and compares them to the trusted signer."""

    def __init__(self, trusted_signer: str, domain_separator: bytes):
        self._trusted_signer = normalize_address(trusted_signer, "trusted_signer")
        self._domain_separator = to_bytes32(domain_separator, "domain_separator")

    @property
    def trusted_signer(self) -> str:
        return self._trusted_signer

    @property
    def domain_separator(self) -> bytes:
        return self._domain_separator

    def claim_message(self, claimer: str, amount: int) -> SignableMessage:
        return typed_data_message(self._domain_separator, claim_struct_hash(claimer, amount))

    def claim_digest(self, claimer: str, amount: int) -> bytes:
        return typed_data_hash(self._domain_separator, claim_struct_hash(claimer, amount))

    def recover(self, signature: Union[str, bytes], claimer: str, amount: int) -> str:
        """
        Recover the address that signed Claim(claimer, amount).

        Raises InvalidSignature when nothing can be recovered.
        """
        return recover_signer(self.claim_message(claimer, amount), signature)

    def verify(self, signature: Union[str, bytes], claimer: str, amount: int) -> bool:
        try:
            recovered = self.recover(signature, claimer, amount)
        except InvalidSignature as e:
            logger.warning(f"signature: unrecoverable signature for {claimer}: {e.message}")
            return False

        if recovered == ZERO_ADDRESS:
            return False
        return recovered == self._trusted_signer
