"""
Pytest configuration and shared fixtures for airdrop tests.

Mirrors the reference deployment: account 0 owns the airdrop and is the
trusted signer; the tree lists account 0 for 1 token and account 1 for 5.
"""

import pytest
from eth_account import Account
from tortoise import Tortoise

from airdrop.claims.base import AirdropConfig
from airdrop.claims.engine import Airdrop
from airdrop.services.vault import TokenVault

from helpers.merkle_tree import MerkleTree
from helpers.signing import AIRDROP_ADDRESS, CHAIN_ID

ONE = 10**18

# Deterministic test keys (secp256k1 scalars 1..5)
TEST_KEYS = ["0x" + f"{i:064x}" for i in range(1, 6)]


@pytest.fixture
def accounts():
    return [Account.from_key(key) for key in TEST_KEYS]


@pytest.fixture
def owner(accounts):
    return accounts[0]


@pytest.fixture
def signer(accounts):
    return accounts[0]


@pytest.fixture
def allocations(accounts):
    return [
        (accounts[0].address, 1 * ONE),
        (accounts[1].address, 5 * ONE),
    ]


@pytest.fixture
def tree(allocations):
    return MerkleTree.from_allocations(allocations)


@pytest.fixture
def vault():
    return TokenVault("SHIP", 100_000 * ONE)


@pytest.fixture
def config(tree, signer, vault):
    return AirdropConfig.create(
        merkle_root=tree.hex_root,
        trusted_signer=signer.address,
        payout_token=vault,
        chain_id=CHAIN_ID,
        verifying_contract=AIRDROP_ADDRESS,
    )


@pytest.fixture
def airdrop(config, owner):
    return Airdrop(config, owner=owner.address)


@pytest.fixture
async def db():
    """Fresh in-memory database with the airdrop models."""
    await Tortoise.init(
        db_url="sqlite://:memory:",
        modules={"models": ["airdrop.models.claims"]},
    )
    await Tortoise.generate_schemas()
    yield
    await Tortoise.close_connections()
