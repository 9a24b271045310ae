"""Global enums — values must match the DB CHECK constraints exactly.

Ref: alembic/versions/001_create_registry_tables.py
"""

from enum import Enum


class MemberLevel(str, Enum):
    NULL = "NULL"
    ACTIVE = "ACTIVE"
    VERIFIED = "VERIFIED"
    RETIRED = "RETIRED"
    PENALTY = "PENALTY"
    BLOCKED = "BLOCKED"


class MarketStatus(str, Enum):
    NULL = "NULL"
    ACTIVE = "ACTIVE"
    CLOSED = "CLOSED"


class ActorType(str, Enum):
    """Role of a member inside one market.

    The numeric code is what signers put into the uint8 ``actorType`` field
    of a market-join message.
    """

    PROVIDER = "PROVIDER"
    CONSUMER = "CONSUMER"

    @property
    def code(self) -> int:
        return _ACTOR_TYPE_CODES[self]


_ACTOR_TYPE_CODES: dict[ActorType, int] = {
    ActorType.PROVIDER: 1,
    ActorType.CONSUMER: 2,
}


class RegistryEventType(str, Enum):
    MEMBER_REGISTERED = "MemberRegistered"
    MARKET_CREATED = "MarketCreated"
    ACTOR_JOINED = "ActorJoined"
