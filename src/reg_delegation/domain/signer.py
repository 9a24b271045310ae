"""Offline signing — the key holder's half of a delegated call.

Pure and stateless: produces a 65-byte r‖s‖v signature from a private key and
a message, without touching the registry or its store.
"""

from eth_account import Account

from src.reg_delegation.domain.messages import DelegatedMessage, DomainContext
from src.reg_delegation.domain.verifier import DelegationVerifier

_verifier = DelegationVerifier()


def sign_delegation(
    private_key: str | bytes, message: DelegatedMessage, context: DomainContext
) -> bytes:
    signed = Account.sign_message(_verifier.encode(message, context), private_key)
    return bytes(signed.signature)
