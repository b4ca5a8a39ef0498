"""Database query functions for the opportunity store."""

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from arbwatch.db.models import OpportunityRecord


async def insert_opportunity(
    session: AsyncSession,
    timestamp: str,
    profit: float,
    buy_venue: str,
    sell_venue: str,
    buy_price: float,
    sell_price: float,
) -> OpportunityRecord:
    """Append one opportunity row.

    Args:
        session: Database session.
        timestamp: Wall-clock timestamp string.
        profit: Simulated profit in quote-token units.
        buy_venue: Venue label for the first leg.
        sell_venue: Venue label for the second leg.
        buy_price: Implied buy price.
        sell_price: Implied sell price.

    Returns:
        The inserted record with its id populated.
    """
    record = OpportunityRecord(
        timestamp=timestamp,
        profit=profit,
        buy_venue=buy_venue,
        sell_venue=sell_venue,
        buy_price=buy_price,
        sell_price=sell_price,
    )
    session.add(record)
    await session.flush()
    return record


async def get_recent_opportunities(
    session: AsyncSession, limit: int = 20
) -> list[OpportunityRecord]:
    """Get the most recent opportunities, newest first.

    Args:
        session: Database session.
        limit: Maximum number of rows.

    Returns:
        List of opportunity records.
    """
    result = await session.execute(
        select(OpportunityRecord).order_by(OpportunityRecord.id.desc()).limit(limit)
    )
    return list(result.scalars().all())


async def count_opportunities(session: AsyncSession) -> int:
    """Total number of stored opportunities."""
    result = await session.execute(select(func.count()).select_from(OpportunityRecord))
    return int(result.scalar_one())
