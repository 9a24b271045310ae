"""Block clock — the registry's monotonically increasing sequence marker.

Every committed mutating call advances the clock by exactly one block and
stamps its state changes with the new number. A call that rolls back also
rolls back its advance, so committed block numbers are gap-free.
"""

from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

_CURRENT_SQL = text("SELECT block_number FROM chain_state WHERE id = 1")

_ADVANCE_SQL = text("""
    UPDATE chain_state
    SET block_number = block_number + 1
    WHERE id = 1
    RETURNING block_number
""")

_GENESIS_SQL = text("""
    INSERT INTO chain_state (id, block_number)
    VALUES (1, 1)
    RETURNING block_number
""")


class BlockClock:
    async def current(self, db: AsyncSession) -> int:
        """Last committed block number; 0 before the first write."""
        result = await db.execute(_CURRENT_SQL)
        value = result.scalar_one_or_none()
        return int(value) if value is not None else 0

    async def advance(self, db: AsyncSession) -> int:
        """Open the next block within the caller's transaction and return it."""
        result = await db.execute(_ADVANCE_SQL)
        row = result.fetchone()
        if row is None:
            result = await db.execute(_GENESIS_SQL)
            row = result.fetchone()
        return int(row.block_number)  # type: ignore[union-attr]
