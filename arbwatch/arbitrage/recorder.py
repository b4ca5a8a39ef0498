"""Opportunity recorder: appends accepted estimates to the store."""

import logging
from dataclasses import replace
from decimal import Decimal

from sqlalchemy.exc import SQLAlchemyError

from arbwatch.db.connection import Database
from arbwatch.db.queries import get_recent_opportunities, insert_opportunity
from arbwatch.errors import PersistenceError
from arbwatch.models import Opportunity, ProfitEstimate, local_timestamp

logger = logging.getLogger(__name__)


class OpportunityRecorder:
    """Writes one row per accepted estimate.

    No deduplication: identical opportunities seen on consecutive cycles are
    stored as separate rows.
    """

    def __init__(self, db: Database) -> None:
        self.db = db

    async def ensure_schema(self) -> None:
        """Create the opportunities table if it does not exist."""
        try:
            await self.db.create_schema()
        except (SQLAlchemyError, OSError) as e:
            raise PersistenceError(f"Could not create schema: {e}") from e
        logger.info(f"Opportunity store ready: {self.db.url}")

    async def record(
        self,
        estimate: ProfitEstimate,
        buy_venue: str,
        sell_venue: str,
    ) -> Opportunity:
        """Stamp and persist an accepted estimate.

        Args:
            estimate: Estimate already accepted by the policy
            buy_venue: Label of the leg 1 venue
            sell_venue: Label of the leg 2 venue

        Returns:
            The stored Opportunity, with its row id

        Raises:
            PersistenceError: Storage unavailable, schema mismatch, or write rejected
        """
        opportunity = Opportunity(
            timestamp=local_timestamp(),
            profit=estimate.simulated_profit,
            buy_venue=buy_venue,
            sell_venue=sell_venue,
            buy_price=estimate.implied_buy_price,
            sell_price=estimate.implied_sell_price,
        )

        try:
            async with self.db.session() as session:
                record = await insert_opportunity(
                    session,
                    timestamp=opportunity.timestamp,
                    profit=float(opportunity.profit),
                    buy_venue=opportunity.buy_venue,
                    sell_venue=opportunity.sell_venue,
                    buy_price=float(opportunity.buy_price),
                    sell_price=float(opportunity.sell_price),
                )
                row_id = record.id
        except (SQLAlchemyError, OSError) as e:
            raise PersistenceError(f"Failed to record opportunity: {e}") from e

        logger.debug(f"Opportunity persisted: row {row_id}")
        return replace(opportunity, id=row_id)

    async def recent(self, limit: int = 20) -> list[Opportunity]:
        """Read back the newest stored opportunities."""
        try:
            async with self.db.session() as session:
                records = await get_recent_opportunities(session, limit=limit)
        except (SQLAlchemyError, OSError) as e:
            raise PersistenceError(f"Failed to read opportunities: {e}") from e

        return [
            Opportunity(
                timestamp=r.timestamp,
                profit=Decimal(str(r.profit)),
                buy_venue=r.buy_venue,
                sell_venue=r.sell_venue,
                buy_price=Decimal(str(r.buy_price)),
                sell_price=Decimal(str(r.sell_price)),
                id=r.id,
            )
            for r in records
        ]
