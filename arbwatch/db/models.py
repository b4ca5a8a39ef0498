"""SQLAlchemy ORM models for the opportunity store."""

from sqlalchemy import Float, Text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column


class Base(DeclarativeBase):
    """Base class for all models."""

    pass


class OpportunityRecord(Base):
    """One detected opportunity. Rows are only ever inserted."""

    __tablename__ = "opportunities"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    timestamp: Mapped[str] = mapped_column(Text, nullable=False)
    profit: Mapped[float] = mapped_column(Float, nullable=False)
    buy_venue: Mapped[str] = mapped_column(Text, nullable=False)
    sell_venue: Mapped[str] = mapped_column(Text, nullable=False)
    buy_price: Mapped[float] = mapped_column(Float, nullable=False)
    sell_price: Mapped[float] = mapped_column(Float, nullable=False)

    def __repr__(self) -> str:
        return (
            f"<OpportunityRecord {self.id} {self.timestamp} profit={self.profit} "
            f"{self.buy_venue}->{self.sell_venue}>"
        )
