"""Database layer for the opportunity store."""

from arbwatch.db.connection import Database, async_url
from arbwatch.db.models import Base, OpportunityRecord
from arbwatch.db.queries import (
    count_opportunities,
    get_recent_opportunities,
    insert_opportunity,
)

__all__ = [
    "Base",
    "Database",
    "OpportunityRecord",
    "async_url",
    "count_opportunities",
    "get_recent_opportunities",
    "insert_opportunity",
]
