"""Shared lifecycle for inventory sources and the advisor client."""

from abc import ABC, abstractmethod
from typing import Any, Dict, Optional
import structlog

logger = structlog.get_logger(__name__)


class BaseClient(ABC):
    """Something the inventory talks to: a snapshot source or a remote API.

    Subclasses open their transport in ``connect``. Callers may skip the
    explicit connect; ``ensure_connected`` opens it on first use.
    """

    def __init__(self, config: Dict[str, Any], name: Optional[str] = None):
        self.config = config
        self.name = name or self.__class__.__name__
        self._connected = False
        self.logger = logger.bind(client=self.name)

    @abstractmethod
    async def connect(self) -> None:
        ...

    @abstractmethod
    async def disconnect(self) -> None:
        ...

    @abstractmethod
    async def health_check(self) -> bool:
        ...

    @property
    def is_connected(self) -> bool:
        return self._connected

    async def ensure_connected(self) -> None:
        if not self._connected:
            self.logger.debug("Connecting on first use")
            await self.connect()

    async def __aenter__(self):
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.disconnect()
        return False
