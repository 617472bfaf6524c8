"""Upstream adapter that forwards proxied requests to the sheet gateway."""

import abc
import logging
from dataclasses import dataclass
from typing import Optional

import requests

import config

logger = logging.getLogger(__name__)


@dataclass
class RelayedResponse:
    """Upstream response passed back to the caller verbatim."""
    status_code: int
    content: bytes
    media_type: str = "application/json"


class AbstractGatewayRelay(abc.ABC):
    """Abstract base class for forwarding requests to the gateway."""

    @abc.abstractmethod
    def forward(self, method: str, sheet: Optional[str], body: Optional[bytes] = None) -> RelayedResponse:
        """
        Forward a request to the gateway.

        Raises:
            GatewayRelayError: If the gateway cannot be reached
        """
        raise NotImplementedError


class HTTPGatewayRelay(AbstractGatewayRelay):
    """Forwards requests to the single configured gateway address."""

    def __init__(self, upstream_url: Optional[str] = None, timeout: Optional[float] = None):
        self.upstream_url = upstream_url or config.get_gateway_upstream_url()
        self.timeout = timeout or config.get_request_timeout()

    def forward(self, method: str, sheet: Optional[str], body: Optional[bytes] = None) -> RelayedResponse:
        params = {"sheet": sheet} if sheet is not None else None
        headers = {"Content-Type": "application/json"} if body is not None else None

        logger.info(f"Forwarding {method} for sheet {sheet} to {self.upstream_url}")

        try:
            response = requests.request(
                method,
                self.upstream_url,
                params=params,
                data=body,
                headers=headers,
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"Network error forwarding {method} to gateway: {e}")
            raise GatewayRelayError(str(e)) from e

        logger.info(f"Gateway responded with {response.status_code}")
        return RelayedResponse(
            status_code=response.status_code,
            content=response.content,
            media_type=response.headers.get("Content-Type", "application/json"),
        )


class GatewayRelayError(Exception):
    """Exception raised when the gateway cannot be reached."""
    pass
