"""
Signature verifier tests.

Fixed vectors come from the EIP-712 "Ether Mail" example, which checks the
domain-separator composition, the 0x1901 digest and recovery independently
of the Claim type. Claim signatures are produced with eth_account's own
typed-data encoder.
"""

import pytest
from eth_account import Account
from eth_utils import keccak

from airdrop.claims.signature import (
    CLAIM_TYPEHASH,
    DOMAIN_TYPEHASH,
    SignatureVerifier,
    build_domain_separator,
    claim_struct_hash,
    recover_signer,
    split_signature,
    typed_data_hash,
    typed_data_message,
)
from airdrop.core.constants import SECP256K1_N, ZERO_ADDRESS
from airdrop.core.errors import InvalidSignature

from helpers.signing import AIRDROP_ADDRESS, CHAIN_ID, sign_claim

# EIP-712 reference example (Mail from Cow to Bob)
MAIL_VERIFYING_CONTRACT = "0x" + "cc" * 20
MAIL_DOMAIN_SEPARATOR = bytes.fromhex("f2cee375fa42b42143804025fc449deafd50cc031ca257e0b194a650a912090f")
MAIL_STRUCT_HASH = bytes.fromhex("c52c0ee5d84264471806290a3f2c4cecfc5490626bf912d01f240d7a274b371e")
MAIL_DIGEST = bytes.fromhex("be609aee343fb3c4b28e1df9e632fca64fcfaede20f02e86244efddf30957bd2")
MAIL_SIGNATURE = bytes.fromhex(
    "4355c47d63924e8a72e509b65029052eb6c299d53a04e167c5775fd466751c9d"
    "07299936d304c153f6443dfa05f40ff007d72911b6f72307f996231605b91562"
    "1c"
)
MAIL_SIGNER = "0xcd2a3d9f938e13cd947ec05abc7fe734df8dd826"


def _flip_to_high_s(signature: bytes) -> bytes:
    s = int.from_bytes(signature[32:64], "big")
    v = signature[64]
    return signature[:32] + (SECP256K1_N - s).to_bytes(32, "big") + bytes([55 - v])


class TestFixedVectors:
    def test_domain_typehash(self):
        assert DOMAIN_TYPEHASH.hex().removeprefix("0x") == (
            "8b73c3c69bb8fe3d512ecc4cf759cc79239f7b179b0ffacaa9a75d522b39400f"
        )

    def test_claim_typehash(self):
        assert CLAIM_TYPEHASH == keccak(text="Claim(address claimer,uint256 amount)")

    def test_ether_mail_domain_separator(self):
        separator = build_domain_separator("Ether Mail", "1", 1, MAIL_VERIFYING_CONTRACT)
        assert separator == MAIL_DOMAIN_SEPARATOR

    def test_ether_mail_digest(self):
        assert typed_data_hash(MAIL_DOMAIN_SEPARATOR, MAIL_STRUCT_HASH) == MAIL_DIGEST

    def test_ether_mail_signature_recovers_cow(self):
        message = typed_data_message(MAIL_DOMAIN_SEPARATOR, MAIL_STRUCT_HASH)
        assert recover_signer(message, MAIL_SIGNATURE).lower() == MAIL_SIGNER
        assert recover_signer(message, "0x" + MAIL_SIGNATURE.hex()).lower() == MAIL_SIGNER

    def test_claim_struct_hash_layout(self):
        claimer = "0x" + "22" * 20
        expected = keccak(
            CLAIM_TYPEHASH
            + bytes(12) + bytes.fromhex("22" * 20)
            + (5).to_bytes(32, "big")
        )
        assert claim_struct_hash(claimer, 5) == expected


class TestSplitSignature:
    def test_wrong_length(self):
        with pytest.raises(InvalidSignature):
            split_signature(MAIL_SIGNATURE[:64])

    def test_bad_v(self):
        with pytest.raises(InvalidSignature):
            split_signature(MAIL_SIGNATURE[:64] + b"\x01")

    def test_zero_r(self):
        with pytest.raises(InvalidSignature):
            split_signature(bytes(32) + MAIL_SIGNATURE[32:])

    def test_high_s_rejected(self):
        with pytest.raises(InvalidSignature):
            split_signature(_flip_to_high_s(MAIL_SIGNATURE))

    def test_not_hex(self):
        with pytest.raises(InvalidSignature):
            split_signature("0xzz")


class TestSignatureVerifier:
    @pytest.fixture
    def verifier(self, signer):
        separator = build_domain_separator("Airdrop", "v1", CHAIN_ID, AIRDROP_ADDRESS)
        return SignatureVerifier(signer.address, separator)

    def test_digest_matches_eth_account_encoding(self, verifier, signer, accounts):
        signed = sign_claim(signer, accounts[1].address, 10**18)
        assert verifier.claim_digest(accounts[1].address, 10**18) == bytes(signed.message_hash)

    def test_trusted_signature_verifies(self, verifier, signer, accounts):
        signed = sign_claim(signer, accounts[1].address, 10**18)

        assert verifier.recover(signed.signature, accounts[1].address, 10**18) == signer.address
        assert verifier.verify(signed.signature, accounts[1].address, 10**18)

    def test_other_signer_rejected(self, verifier, accounts):
        signed = sign_claim(accounts[2], accounts[1].address, 10**18)
        assert not verifier.verify(signed.signature, accounts[1].address, 10**18)

    def test_different_claimer_rejected(self, verifier, signer, accounts):
        signed = sign_claim(signer, accounts[1].address, 10**18)
        assert not verifier.verify(signed.signature, accounts[2].address, 10**18)

    def test_different_amount_rejected(self, verifier, signer, accounts):
        signed = sign_claim(signer, accounts[1].address, 10**18)
        assert not verifier.verify(signed.signature, accounts[1].address, 2 * 10**18)

    def test_other_chain_rejected(self, verifier, signer, accounts):
        signed = sign_claim(signer, accounts[1].address, 10**18, chain_id=1)
        assert not verifier.verify(signed.signature, accounts[1].address, 10**18)

    def test_other_instance_rejected(self, verifier, signer, accounts):
        signed = sign_claim(
            signer, accounts[1].address, 10**18, verifying_contract="0x" + "ee" * 20
        )
        assert not verifier.verify(signed.signature, accounts[1].address, 10**18)

    def test_malleable_twin_rejected(self, verifier, signer, accounts):
        signed = sign_claim(signer, accounts[1].address, 10**18)
        twin = _flip_to_high_s(bytes(signed.signature))
        assert not verifier.verify(twin, accounts[1].address, 10**18)

    def test_garbage_rejected(self, verifier, accounts):
        assert not verifier.verify(b"\x00" * 65, accounts[1].address, 1)
        assert not verifier.verify("0x1234", accounts[1].address, 1)

    def test_zero_address_recovery_never_matches(self, monkeypatch, accounts):
        separator = build_domain_separator("Airdrop", "v1", CHAIN_ID, AIRDROP_ADDRESS)
        verifier = SignatureVerifier(ZERO_ADDRESS, separator)
        monkeypatch.setattr(Account, "recover_message", lambda *args, **kwargs: ZERO_ADDRESS)

        assert not verifier.verify(MAIL_SIGNATURE, accounts[1].address, 1)
