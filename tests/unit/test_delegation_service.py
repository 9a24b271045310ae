"""Tests for DelegationService — authorization and freshness."""

from dataclasses import replace

import pytest
from eth_account.signers.local import LocalAccount

from config.settings import settings
from src.reg_common.enums import ActorType
from src.reg_common.errors import (
    InvalidDomainError,
    InvalidSignatureError,
    StaleDelegationError,
)
from src.reg_delegation.application.service import DelegationService
from src.reg_delegation.domain.messages import (
    DomainContext,
    build_market_join,
    build_member_register,
)
from src.reg_delegation.domain.signer import sign_delegation
from src.reg_delegation.domain.verifier import live_context


@pytest.fixture
def svc() -> DelegationService:
    return DelegationService()


@pytest.fixture
def live() -> DomainContext:
    return live_context()


class TestClaimedContext:
    def test_defaults_to_live(self, svc: DelegationService, live: DomainContext) -> None:
        assert svc.claimed_context(live, None, None) == live

    def test_overrides(self, svc: DelegationService, live: DomainContext, bob: LocalAccount) -> None:
        claimed = svc.claimed_context(live, 42, bob.address)
        assert claimed.chain_id == 42
        assert claimed.verifying_contract == bob.address


class TestAuthorize:
    def test_accepts_member_signature(
        self, svc: DelegationService, live: DomainContext, alice: LocalAccount
    ) -> None:
        msg = build_member_register(live, alice.address, 0, settings.EULA, "")
        svc.authorize(msg, sign_delegation(alice.key, msg, live), live)

    def test_rejects_foreign_signature(
        self, svc: DelegationService, live: DomainContext, alice: LocalAccount, bob: LocalAccount
    ) -> None:
        msg = build_member_register(live, alice.address, 0, settings.EULA, "")
        with pytest.raises(InvalidSignatureError):
            svc.authorize(msg, sign_delegation(bob.key, msg, live), live)

    def test_rejects_tampered_message(
        self, svc: DelegationService, live: DomainContext, alice: LocalAccount
    ) -> None:
        msg = build_member_register(live, alice.address, 0, settings.EULA, "")
        signature = sign_delegation(alice.key, msg, live)
        with pytest.raises(InvalidSignatureError):
            svc.authorize(replace(msg, profile="changed"), signature, live)

    def test_domain_checked_before_signature(
        self, svc: DelegationService, live: DomainContext, alice: LocalAccount
    ) -> None:
        claimed = DomainContext(chain_id=live.chain_id + 1, verifying_contract=live.verifying_contract)
        msg = build_member_register(claimed, alice.address, 0, settings.EULA, "")
        # Correctly signed for the claimed domain, still refused
        signature = sign_delegation(alice.key, msg, claimed)
        with pytest.raises(InvalidDomainError):
            svc.authorize(msg, signature, live)

    @pytest.mark.parametrize("registered", [2**256, -1])
    def test_unencodable_block_is_invalid_signature(
        self, svc: DelegationService, live: DomainContext, alice: LocalAccount, registered: int
    ) -> None:
        msg = build_member_register(live, alice.address, registered, settings.EULA, "")
        with pytest.raises(InvalidSignatureError):
            svc.authorize(msg, b"\x11" * 65, live)

    def test_unencodable_join_block_is_invalid_signature(
        self, svc: DelegationService, live: DomainContext, alice: LocalAccount
    ) -> None:
        msg = build_market_join(
            live, alice.address, 2**256, bytes.fromhex("a1" * 16), ActorType.CONSUMER, ""
        )
        with pytest.raises(InvalidSignatureError):
            svc.authorize(msg, b"\x11" * 65, live)


class TestFreshness:
    def test_current_block_is_fresh(self, svc: DelegationService) -> None:
        svc.check_freshness(100, 100)

    def test_oldest_accepted_block(self, svc: DelegationService) -> None:
        current = settings.PRESIGNED_TXN_MAX_AGE + 10
        svc.check_freshness(10, current)

    def test_too_old(self, svc: DelegationService) -> None:
        current = settings.PRESIGNED_TXN_MAX_AGE + 10
        with pytest.raises(StaleDelegationError):
            svc.check_freshness(9, current)

    def test_future_block(self, svc: DelegationService) -> None:
        with pytest.raises(StaleDelegationError):
            svc.check_freshness(101, 100)

    def test_genesis(self, svc: DelegationService) -> None:
        svc.check_freshness(0, 0)
