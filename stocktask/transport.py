from abc import ABC, abstractmethod
from typing import Any, Mapping, Optional


class ResourceTransport(ABC):
    """Contract shared by the in-memory endpoint and the HTTP client.

    Every verb takes a resource path (``/tasks``, ``/tasks/{id}``) and
    returns the decoded payload directly, without an envelope. Failures are
    raised as :class:`stocktask.errors.StockTaskError` subclasses.
    """

    # True when the transport fills ids, creation defaults and timestamps
    assigns_defaults: bool = False

    @abstractmethod
    async def get(self, url: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        """Fetch a collection or a single record."""

    @abstractmethod
    async def post(self, url: str, body: Optional[Mapping[str, Any]] = None) -> Any:
        """Create a record from a partial body."""

    @abstractmethod
    async def put(self, url: str, body: Mapping[str, Any]) -> Any:
        """Merge a partial body into an existing record."""

    @abstractmethod
    async def delete(self, url: str) -> Any:
        """Remove a record and return an acknowledgment."""
