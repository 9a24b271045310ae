"""DelegationVerifier — EIP-712 domain binding and signer recovery.

Digest layout (EIP-712):

    digest = keccak256(0x19 0x01 ‖ domainSeparator ‖ hashStruct(message))

The domain separator binds a signature to the protocol name/version, the
live chain id and this registry's address, and is recomputed on every call
from the context the caller passes in. hashStruct binds it to one message
variant, so a signature for one action type cannot be replayed as another.
Both hashes come from eth_account's typed-data encoder, the one behind
``encode_typed_data`` and wallet eth_signTypedData_v4 support.
"""

import logging

from eth_account import Account
from eth_account.messages import (
    SignableMessage,
    encode_typed_data,
    hash_domain,
    hash_eip712_message,
)
from eth_keys.exceptions import BadSignature, ValidationError

from config.settings import settings
from src.reg_common.codecs import SIGNATURE_SIZE, normalize_address
from src.reg_common.errors import InvalidDomainError, UnsupportedMessageError
from src.reg_delegation.domain.messages import (
    EIP712_DOMAIN_FIELDS,
    SUPPORTED_MESSAGES,
    DelegatedMessage,
    DomainContext,
    message_json,
)

logger = logging.getLogger(__name__)


def _domain(context: DomainContext) -> dict[str, object]:
    return {
        "name": settings.EIP712_NAME,
        "version": settings.EIP712_VERSION,
        "chainId": context.chain_id,
        "verifyingContract": context.verifying_contract,
    }


def _message_types(message: DelegatedMessage) -> dict[str, list[dict[str, str]]]:
    if not isinstance(message, SUPPORTED_MESSAGES):
        raise UnsupportedMessageError(type(message).__name__)
    return {
        message.primary_type: [
            {"name": name, "type": type_} for name, type_ in message.struct_fields
        ]
    }


class DelegationVerifier:
    """Stateless; every method is a pure function of its arguments and settings."""

    def domain_separator(self, context: DomainContext) -> bytes:
        return bytes(hash_domain(_domain(context)))

    def struct_hash(self, message: DelegatedMessage) -> bytes:
        """hashStruct(message).

        Raises eth_abi's EncodingError when a value does not fit its field
        type, e.g. a uint256 of 2**256.
        """
        return bytes(hash_eip712_message(_message_types(message), message_json(message)))

    def signable(self, digest: bytes, context: DomainContext) -> SignableMessage:
        return SignableMessage(
            version=b"\x01",
            header=self.domain_separator(context),
            body=digest,
        )

    def check_domain(self, message: DelegatedMessage, context: DomainContext) -> None:
        """Reject a message built for another chain or registry instance."""
        if message.chain_id != context.chain_id:
            raise InvalidDomainError(
                f"chain id {message.chain_id} != {context.chain_id}"
            )
        if message.verifying_contract.lower() != context.verifying_contract.lower():
            raise InvalidDomainError(
                f"verifying contract {message.verifying_contract} "
                f"!= {context.verifying_contract}"
            )

    def verify(
        self,
        digest: bytes,
        signature: bytes,
        claimed_signer: str,
        context: DomainContext,
    ) -> bool:
        """True iff ``signature`` over (domain, digest) recovers to claimed_signer.

        Malformed signatures (wrong length, bad v, r/s out of range) yield
        False; callers turn that into InvalidSignatureError.
        """
        if len(signature) != SIGNATURE_SIZE:
            return False
        try:
            recovered = Account.recover_message(
                self.signable(digest, context), signature=signature
            )
        except (ValueError, AssertionError, BadSignature, ValidationError) as exc:
            logger.debug("Signature recovery failed: %s", exc)
            return False
        logger.debug(
            "Recovered %s for digest %s (claimed %s)",
            recovered,
            digest.hex(),
            claimed_signer,
        )
        return recovered.lower() == claimed_signer.lower()

    def typed_data(
        self, message: DelegatedMessage, context: DomainContext
    ) -> dict[str, object]:
        """Full EIP-712 document, as accepted by eth_signTypedData_v4 wallets."""
        return {
            "types": {"EIP712Domain": EIP712_DOMAIN_FIELDS, **_message_types(message)},
            "primaryType": message.primary_type,
            "domain": _domain(context),
            "message": message_json(message),
        }

    def encode(self, message: DelegatedMessage, context: DomainContext) -> SignableMessage:
        """The wallet-side encoding; equal to ``signable(struct_hash(message), context)``."""
        return encode_typed_data(full_message=self.typed_data(message, context))


def live_context() -> DomainContext:
    """Read the current chain id and registry address from settings."""
    return DomainContext(
        chain_id=settings.CHAIN_ID,
        verifying_contract=normalize_address(settings.VERIFYING_CONTRACT),
    )
