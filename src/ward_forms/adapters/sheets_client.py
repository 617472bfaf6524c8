"""Sheets API Client - Adapter for reading and appending sheet records through the proxy."""

import abc
import logging
from typing import Any, Dict, List, Optional

import requests

import config
from shared.domain.sheets import SheetName

logger = logging.getLogger(__name__)


class AbstractSheetsClient(abc.ABC):
    """Abstract base class for sheet client implementations."""

    @abc.abstractmethod
    def read_sheet(self, sheet: SheetName) -> List[Dict[str, Any]]:
        """
        Fetch every row of a sheet.

        Raises:
            SheetsClientError: If the request fails or the response is unusable
        """
        raise NotImplementedError

    @abc.abstractmethod
    def append_record(self, sheet: SheetName, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        Append one record to a sheet and return the gateway's result.

        Raises:
            SheetsClientError: If the request fails or the gateway reports an error
        """
        raise NotImplementedError


class HTTPSheetsClient(AbstractSheetsClient):
    """HTTP-based client for the proxy relay."""

    def __init__(self, base_url: Optional[str] = None, timeout: Optional[float] = None):
        """
        Args:
            base_url: Proxy API URL. If None, uses config.
            timeout: Request timeout in seconds
        """
        self.base_url = base_url or config.get_api_url()
        self.timeout = timeout or config.get_request_timeout()

    def read_sheet(self, sheet: SheetName) -> List[Dict[str, Any]]:
        data = self._request("GET", sheet)

        # The gateway may answer a bad selector with an error object
        if isinstance(data, dict) and data.get("error"):
            raise SheetsClientError(data["error"])
        if not isinstance(data, list):
            raise SheetsClientError("Malformed response from server")

        logger.info(f"Fetched {len(data)} rows from {sheet.value}")
        return data

    def append_record(self, sheet: SheetName, payload: Dict[str, Any]) -> Dict[str, Any]:
        result = self._request("POST", sheet, payload)

        if not isinstance(result, dict):
            raise SheetsClientError("Malformed response from server")
        if not result.get("success"):
            raise SheetsClientError(result.get("error") or "Failed to save data")

        logger.info(f"Saved record to {sheet.value}")
        return result

    def _request(self, method: str, sheet: SheetName, payload: Optional[Dict[str, Any]] = None) -> Any:
        logger.info(f"{method} {self.base_url}?sheet={sheet.selector}")

        try:
            response = requests.request(
                method,
                self.base_url,
                params={"sheet": sheet.selector},
                json=payload,
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"Network error on {method} for {sheet.value}: {e}")
            raise SheetsClientError(f"Network error: {e}") from e

        if not response.ok:
            message = _error_message(response)
            logger.error(f"{method} for {sheet.value} failed: {message}")
            raise SheetsClientError(message)

        try:
            return response.json()
        except ValueError as e:
            logger.error(f"Malformed response body for {sheet.value}: {e}")
            raise SheetsClientError("Malformed response from server") from e


def _error_message(response) -> str:
    """Most specific reason a failed response offers, falling back to its status."""
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("error"):
        return body["error"]
    return f"Server responded with {response.status_code}"


class SheetsClientError(Exception):
    """Exception raised for errors in the sheets client."""
    pass
