"""DelegationService — the verification half of a delegated call.

Registries build a message from the call arguments and the domain the
submitter claims, then call ``authorize`` with the live domain inside their
write transaction, so verification and the state change it unlocks are
never split across two observable steps.
"""

import logging

from eth_abi.exceptions import EncodingError

from config.settings import settings
from src.reg_common.errors import (
    InvalidDomainError,
    InvalidSignatureError,
    StaleDelegationError,
)
from src.reg_delegation.domain.messages import DelegatedMessage, DomainContext
from src.reg_delegation.domain.verifier import DelegationVerifier

logger = logging.getLogger(__name__)


class DelegationService:
    def __init__(self, verifier: DelegationVerifier | None = None) -> None:
        self._verifier = verifier or DelegationVerifier()

    def claimed_context(
        self,
        live: DomainContext,
        chain_id: int | None,
        verifying_contract: str | None,
    ) -> DomainContext:
        """Domain the submitter says the signer used; defaults to the live one.

        The claimed domain is checked against the live one before any
        signature work, so a mismatch surfaces as InvalidDomainError.
        """
        return DomainContext(
            chain_id=live.chain_id if chain_id is None else chain_id,
            verifying_contract=(
                live.verifying_contract if verifying_contract is None else verifying_contract
            ),
        )

    def authorize(
        self,
        message: DelegatedMessage,
        signature: bytes,
        context: DomainContext,
    ) -> None:
        """Raise unless ``signature`` is the message member's over ``message``."""
        try:
            self._verifier.check_domain(message, context)
        except InvalidDomainError:
            logger.warning(
                "Rejected %s for %s: domain mismatch", message.primary_type, message.member
            )
            raise
        try:
            digest = self._verifier.struct_hash(message)
        except EncodingError:
            # Out-of-range field: no key can have signed it
            logger.warning(
                "Rejected %s for %s: unencodable field", message.primary_type, message.member
            )
            raise InvalidSignatureError(message.member) from None
        if not self._verifier.verify(digest, signature, message.member, context):
            logger.warning(
                "Rejected %s for %s: invalid signature", message.primary_type, message.member
            )
            raise InvalidSignatureError(message.member)

    def check_freshness(self, signed_block: int, current_block: int) -> None:
        """Accept blocks in [current - PRESIGNED_TXN_MAX_AGE, current]."""
        oldest = current_block - settings.PRESIGNED_TXN_MAX_AGE
        if signed_block > current_block or signed_block < oldest:
            logger.warning(
                "Rejected delegated call signed at block %d (current %d)",
                signed_block,
                current_block,
            )
            raise StaleDelegationError(signed_block, current_block)
