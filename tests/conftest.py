"""Shared test fixtures.

Settings are read at import time, so the JWT secret has to be in the
environment before anything under src/ is imported.
"""

import os

os.environ.setdefault("JWT_SECRET", "test-secret-not-for-production")

import pytest
from eth_account import Account
from eth_account.signers.local import LocalAccount

from src.reg_delegation.domain.verifier import live_context

ALICE_KEY = "0xa453611d9419d0e56f499079478fd72c37b251a94bfde4d19872c44cf65386e3"
BOB_KEY = "0x829e924fdf021ba3dbbc4225edfece9aca04b929d6e75613329ca6f1d31c0bb4"
CAROL_KEY = "0xb0057716d5917badaf911b193b12b910811c1497b5bada8d7711f758981c3773"
RELAYER_KEY = "0x4c0883a69102937d6231471b5dbb6204fe5129617082792ae468d01a3f362318"


@pytest.fixture
def alice() -> LocalAccount:
    return Account.from_key(ALICE_KEY)


@pytest.fixture
def bob() -> LocalAccount:
    return Account.from_key(BOB_KEY)


@pytest.fixture
def carol() -> LocalAccount:
    return Account.from_key(CAROL_KEY)


@pytest.fixture
def relayer() -> LocalAccount:
    return Account.from_key(RELAYER_KEY)


@pytest.fixture
def registry_address() -> str:
    """Address deposits are escrowed to (the registry's verifying contract)."""
    return live_context().verifying_contract
