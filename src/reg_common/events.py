"""Domain events — the read-model projection surface for external indexers.

Events are appended to ``registry_events`` inside the same transaction as
the state change they describe, so an event exists iff its change committed.
"""

import json
from dataclasses import asdict, dataclass

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from src.reg_common.enums import RegistryEventType


@dataclass(frozen=True)
class MemberRegistered:
    member: str

    event_type = RegistryEventType.MEMBER_REGISTERED


@dataclass(frozen=True)
class MarketCreated:
    market_id: str
    maker: str
    token: str

    event_type = RegistryEventType.MARKET_CREATED


@dataclass(frozen=True)
class ActorJoined:
    market_id: str
    actor: str
    actor_type: str
    security: int

    event_type = RegistryEventType.ACTOR_JOINED


RegistryEvent = MemberRegistered | MarketCreated | ActorJoined


@dataclass
class EventRecord:
    id: int
    block_number: int
    event_type: str
    payload: dict[str, object]


_INSERT_EVENT_SQL = text("""
    INSERT INTO registry_events (block_number, event_type, payload)
    VALUES (:block_number, :event_type, :payload)
""")

_LIST_EVENTS_SQL = text("""
    SELECT id, block_number, event_type, payload
    FROM registry_events
    WHERE id > :after_id
    ORDER BY id ASC
    LIMIT :limit
""")


async def record_event(
    event: RegistryEvent, block_number: int, db: AsyncSession
) -> None:
    """Insert one row into registry_events within the caller's transaction."""
    await db.execute(
        _INSERT_EVENT_SQL,
        {
            "block_number": block_number,
            "event_type": event.event_type.value,
            "payload": json.dumps(asdict(event)),
        },
    )


async def list_events(
    db: AsyncSession, after_id: int, limit: int
) -> list[EventRecord]:
    result = await db.execute(_LIST_EVENTS_SQL, {"after_id": after_id, "limit": limit})
    records = []
    for row in result.fetchall():
        payload = row.payload
        # asyncpg decodes JSONB already; SQLite hands back the raw text
        if isinstance(payload, str):
            payload = json.loads(payload)
        records.append(
            EventRecord(
                id=row.id,
                block_number=int(row.block_number),
                event_type=row.event_type,
                payload=payload,
            )
        )
    return records


def event_log(event: RegistryEvent) -> dict[str, object]:
    """Receipt-log view of an event: ``{"event": name, "args": {...}}``."""
    return {"event": event.event_type.value, "args": asdict(event)}
