"""Delegated-action message variants — a closed set of EIP-712 structs.

Each variant fixes its struct name, field order and field encodings. Adding a
new delegated action means adding one variant here; the verifier's domain
binding and recovery code does not change.
"""

from dataclasses import dataclass

from src.reg_common.codecs import market_id_hex
from src.reg_common.enums import ActorType

EIP712_DOMAIN_FIELDS: list[dict[str, str]] = [
    {"name": "name", "type": "string"},
    {"name": "version", "type": "string"},
    {"name": "chainId", "type": "uint256"},
    {"name": "verifyingContract", "type": "address"},
]


@dataclass(frozen=True)
class DomainContext:
    """The live environment a signature is bound to."""

    chain_id: int
    verifying_contract: str


@dataclass(frozen=True)
class MemberRegisterMessage:
    chain_id: int
    verifying_contract: str
    member: str
    registered: int
    eula: str
    profile: str

    primary_type = "EIP712MemberRegister"
    struct_fields = (
        ("chainId", "uint256"),
        ("verifyingContract", "address"),
        ("member", "address"),
        ("registered", "uint256"),
        ("eula", "string"),
        ("profile", "string"),
    )

    def values(self) -> tuple:
        return (
            self.chain_id,
            self.verifying_contract,
            self.member,
            self.registered,
            self.eula,
            self.profile,
        )


@dataclass(frozen=True)
class MarketJoinMessage:
    chain_id: int
    verifying_contract: str
    member: str
    joined: int
    market_id: bytes
    actor_type: ActorType
    meta: str

    primary_type = "EIP712MarketJoin"
    struct_fields = (
        ("chainId", "uint256"),
        ("verifyingContract", "address"),
        ("member", "address"),
        ("joined", "uint256"),
        ("marketId", "bytes16"),
        ("actorType", "uint8"),
        ("meta", "string"),
    )

    def values(self) -> tuple:
        return (
            self.chain_id,
            self.verifying_contract,
            self.member,
            self.joined,
            self.market_id,
            self.actor_type.code,
            self.meta,
        )


DelegatedMessage = MemberRegisterMessage | MarketJoinMessage

SUPPORTED_MESSAGES: tuple[type, ...] = (MemberRegisterMessage, MarketJoinMessage)


def build_member_register(
    context: DomainContext, member: str, registered: int, eula: str, profile: str
) -> MemberRegisterMessage:
    return MemberRegisterMessage(
        chain_id=context.chain_id,
        verifying_contract=context.verifying_contract,
        member=member,
        registered=registered,
        eula=eula,
        profile=profile,
    )


def build_market_join(
    context: DomainContext,
    member: str,
    joined: int,
    market_id: bytes,
    actor_type: ActorType,
    meta: str,
) -> MarketJoinMessage:
    return MarketJoinMessage(
        chain_id=context.chain_id,
        verifying_contract=context.verifying_contract,
        member=member,
        joined=joined,
        market_id=market_id,
        actor_type=actor_type,
        meta=meta,
    )


def message_json(message: DelegatedMessage) -> dict[str, object]:
    """Wallet-facing JSON view of a message (field names as signed)."""
    out: dict[str, object] = {}
    for (name, type_), value in zip(message.struct_fields, message.values()):
        out[name] = market_id_hex(value) if type_ == "bytes16" else value
    return out
