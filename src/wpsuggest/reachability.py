"""Connectivity check consulted before falling back to the network."""

import logging
from typing import Protocol

import httpx

logger = logging.getLogger(__name__)


class Reachability(Protocol):
    def is_reachable(self) -> bool: ...


class StaticReachability:
    """Fixed answer; flip .reachable to simulate going offline."""

    def __init__(self, reachable: bool = True) -> None:
        self.reachable = reachable

    def is_reachable(self) -> bool:
        return self.reachable


class HttpReachability:
    """Reachable when a HEAD to the API host gets any HTTP response."""

    def __init__(
        self,
        url: str,
        timeout_seconds: float = 2.0,
        transport: httpx.BaseTransport | None = None,
    ) -> None:
        self.url = url
        self.timeout = timeout_seconds
        self._transport = transport

    def is_reachable(self) -> bool:
        try:
            with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                client.head(self.url)
        except httpx.TransportError as e:
            logger.info("%s unreachable: %s", self.url, e)
            return False
        return True
