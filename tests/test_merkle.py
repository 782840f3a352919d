"""
Merkle verifier tests.

Leaf encoding and sorted-pair folding are a frozen contract with the
off-chain tree builder, so the expected values here come from raw byte
layouts and the reference builder in tests/helpers, not from the verifier.
"""

import pytest
from eth_utils import keccak

from airdrop.claims.merkle import (
    MerkleVerifier,
    encode_leaf,
    hash_pair,
    leaf_hash,
    process_proof,
)
from airdrop.core.errors import MalformedClaim

from helpers.merkle_tree import MerkleTree, reference_leaf

ADDR_A = "0x1111111111111111111111111111111111111111"
ADDR_B = "0x2222222222222222222222222222222222222222"
ADDR_C = "0x3333333333333333333333333333333333333333"


class TestHashing:
    def test_keccak_empty_vector(self):
        assert keccak(b"").hex().removeprefix("0x") == (
            "c5d2460186f7233c927e7db2dcc703c0e500b653ca82273b7bfad8045d85a470"
        )

    def test_leaf_preimage_is_packed_address_then_uint256(self):
        preimage = encode_leaf(ADDR_A, 1000)

        assert len(preimage) == 52
        assert preimage[:20] == bytes.fromhex("11" * 20)
        assert preimage[20:] == (1000).to_bytes(32, "big")

    def test_leaf_hash_matches_reference_builder(self):
        assert leaf_hash(ADDR_B, 2500) == reference_leaf(ADDR_B, 2500)

    def test_leaf_hash_is_case_insensitive_on_address(self):
        assert leaf_hash("0x" + "AB" * 20, 7) == leaf_hash("0x" + "ab" * 20, 7)

    def test_leaf_rejects_bad_inputs(self):
        with pytest.raises(MalformedClaim):
            encode_leaf("0x1234", 1)
        with pytest.raises(MalformedClaim):
            encode_leaf(ADDR_A, -1)
        with pytest.raises(MalformedClaim):
            encode_leaf(ADDR_A, 2**256)

    def test_hash_pair_sorts_operands(self):
        low = b"\x00" * 31 + b"\x01"
        high = b"\xff" * 32

        assert hash_pair(low, high) == keccak(low + high)
        assert hash_pair(high, low) == keccak(low + high)

    def test_hash_pair_orders_numerically_not_by_first_byte_only(self):
        a = b"\x01" + b"\xff" * 31
        b = b"\x02" + b"\x00" * 31

        assert hash_pair(b, a) == keccak(a + b)

    def test_empty_proof_returns_leaf(self):
        leaf = leaf_hash(ADDR_A, 1)
        assert process_proof([], leaf) == leaf


class TestVerifier:
    @pytest.fixture
    def allocations(self):
        return [(ADDR_A, 1000), (ADDR_B, 2500), (ADDR_C, 5000)]

    @pytest.fixture
    def tree(self, allocations):
        return MerkleTree.from_allocations(allocations)

    @pytest.fixture
    def verifier(self, tree):
        return MerkleVerifier(tree.root)

    def test_every_listed_leaf_verifies(self, tree, verifier, allocations):
        for address, amount in allocations:
            proof = tree.hex_proof(reference_leaf(address, amount))
            assert verifier.verify(proof, address, amount)

    def test_two_leaf_root_is_sorted_pair_of_leaves(self):
        leaf_a = reference_leaf(ADDR_A, 1)
        leaf_b = reference_leaf(ADDR_B, 5)
        left, right = sorted([leaf_a, leaf_b])
        root = keccak(left + right)

        verifier = MerkleVerifier(root)
        assert verifier.verify([leaf_b], ADDR_A, 1)
        assert verifier.verify(["0x" + leaf_a.hex()], ADDR_B, 5)

    def test_single_leaf_tree_has_empty_proof(self):
        root = reference_leaf(ADDR_A, 42)
        assert MerkleVerifier(root).verify([], ADDR_A, 42)

    def test_wrong_amount_rejected(self, tree, verifier):
        proof = tree.hex_proof(reference_leaf(ADDR_B, 2500))
        assert not verifier.verify(proof, ADDR_B, 2501)

    def test_wrong_recipient_rejected(self, tree, verifier):
        proof = tree.hex_proof(reference_leaf(ADDR_B, 2500))
        assert not verifier.verify(proof, ADDR_C, 2500)

    def test_tampered_sibling_rejected(self, tree, verifier):
        proof = tree.proof(reference_leaf(ADDR_A, 1000))
        proof[0] = bytes([proof[0][0] ^ 0x01]) + proof[0][1:]
        assert not verifier.verify(proof, ADDR_A, 1000)

    def test_valid_proof_for_other_root_rejected(self, verifier):
        other = MerkleTree.from_allocations([(ADDR_A, 1000), (ADDR_C, 1)])
        proof = other.hex_proof(reference_leaf(ADDR_A, 1000))

        assert MerkleVerifier(other.root).verify(proof, ADDR_A, 1000)
        assert not verifier.verify(proof, ADDR_A, 1000)

    def test_malformed_proof_node_rejected(self, verifier):
        assert not verifier.verify(["0x1234"], ADDR_A, 1000)
        assert not verifier.verify(["not hex"], ADDR_A, 1000)

    def test_root_must_be_32_bytes(self):
        with pytest.raises(MalformedClaim):
            MerkleVerifier(b"\x00" * 31)


class TestPinnedDistribution:
    """
    Root and proofs for the two-recipient distribution (1 and 5 tokens to the
    first two default Hardhat accounts), as merkletreejs builds it with
    ``sortPairs: true``. Hex values are pinned, not recomputed.
    """

    HARDHAT_0 = "0xf39Fd6e51aad88F6F4ce6aB8827279cffFb92266"
    HARDHAT_1 = "0x70997970C51812dc3A010C7d01b50e0d17dc79C8"
    LEAF_0 = "0x1daab6e461c57679d093fe722a8bf8ba48798a5a9386000d2176d175bc5fae57"
    LEAF_1 = "0xd016b9dcc89d9d0ccf4f7cadc2a07e6c7d5c52f0f357b79cecc288b332952a38"
    ROOT = "0x5fc2781448d63efbbf851e739ba3b6f1f9ed6b629fed9a8f328b89dfb8952767"

    def test_leaves(self):
        assert "0x" + leaf_hash(self.HARDHAT_0, 10**18).hex() == self.LEAF_0
        assert "0x" + leaf_hash(self.HARDHAT_1, 5 * 10**18).hex() == self.LEAF_1

    def test_root(self):
        leaves = [bytes.fromhex(self.LEAF_0[2:]), bytes.fromhex(self.LEAF_1[2:])]
        assert "0x" + hash_pair(*leaves).hex() == self.ROOT

    def test_proofs_verify_against_pinned_root(self):
        verifier = MerkleVerifier(self.ROOT)

        assert verifier.verify([self.LEAF_1], self.HARDHAT_0, 10**18)
        assert verifier.verify([self.LEAF_0], self.HARDHAT_1, 5 * 10**18)
        assert not verifier.verify([self.LEAF_0], self.HARDHAT_1, 10**18)
