"""Quote source interface shared by the venue clients."""

import logging
from abc import ABC, abstractmethod


class BaseQuoteSource(ABC):
    """A venue that can price a swap along a token path.

    Subclasses set ``name`` to the label used in logs, reports and stored
    opportunities.
    """

    name: str = "base"

    def __init__(self) -> None:
        self._connected = False
        self.logger = logging.getLogger(f"{__name__}.{self.name}")

    @property
    def connected(self) -> bool:
        return self._connected

    @abstractmethod
    async def connect(self) -> None:
        """Bind whatever the source needs before it can quote."""
        ...

    @abstractmethod
    async def disconnect(self) -> None:
        """Unbind. Shared connections stay open for their owner to close."""
        ...

    @abstractmethod
    async def get_amounts_out(self, amount_in: int, path: list[str]) -> list[int]:
        """Raw amounts at each hop of ``path`` for ``amount_in`` of ``path[0]``.

        One entry per token in ``path``; the last entry is the realized
        output of the whole swap, in base units of ``path[-1]``.
        """
        ...

    async def __aenter__(self) -> "BaseQuoteSource":
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.disconnect()

    def __repr__(self) -> str:
        state = "bound" if self._connected else "unbound"
        return f"<{self.__class__.__name__} {self.name!r} {state}>"
