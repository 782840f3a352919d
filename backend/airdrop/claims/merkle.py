"""
Merkle membership proofs for airdrop claims.

Leaves are ``keccak256(abi.encodePacked(address recipient, uint256 amount))``:
the 20 raw address bytes followed by the amount as a 32-byte big-endian word.
Interior nodes hash the two children in sorted order, so a proof is just the
list of sibling hashes from leaf to root with no left/right flags. Both
conventions must match the off-chain tree builder exactly.
"""

import logging
from typing import Iterable, List, Union

from eth_abi.packed import encode_packed
from eth_utils import keccak

from airdrop.claims.base import normalize_address, normalize_amount, to_bytes32
from airdrop.core.errors import MalformedClaim

logger = logging.getLogger(__name__)

ProofNode = Union[str, bytes]


def encode_leaf(recipient: str, amount: int) -> bytes:
    """Packed 52-byte leaf preimage for (recipient, amount)."""
    return encode_packed(
        ["address", "uint256"],
        [normalize_address(recipient, "recipient"), normalize_amount(amount)],
    )


def leaf_hash(recipient: str, amount: int) -> bytes:
    return keccak(encode_leaf(recipient, amount))


def hash_pair(a: bytes, b: bytes) -> bytes:
    """Hash two nodes, smaller one first."""
    if a < b:
        return keccak(a + b)
    return keccak(b + a)


def process_proof(proof: Iterable[bytes], leaf: bytes) -> bytes:
    """Fold the proof into `leaf` and return the computed root."""
    computed = leaf
    for node in proof:
        computed = hash_pair(computed, node)
    return computed


class MerkleVerifier:
    """Checks (recipient, amount) membership against a committed root."""

    def __init__(self, merkle_root: bytes):
        self._root = to_bytes32(merkle_root, "merkle_root")

    @property
    def merkle_root(self) -> bytes:
        return self._root

    @staticmethod
    def parse_proof(proof: Iterable[ProofNode]) -> List[bytes]:
        """Decode proof nodes; raises MalformedClaim on a non-32-byte node."""
        return [to_bytes32(node, "proof") for node in proof]

    def verify(self, proof: Iterable[ProofNode], recipient: str, amount: int) -> bool:
        try:
            nodes = self.parse_proof(proof)
        except MalformedClaim as e:
            logger.warning(f"merkle: malformed proof for {recipient}: {e.message}")
            return False

        root = process_proof(nodes, leaf_hash(recipient, amount))
        return root == self._root
