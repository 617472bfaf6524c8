"""Unit tests for the HTTP relay to the sheet gateway."""

import pytest
import requests
from unittest.mock import Mock, patch

from proxy_relay.adapters.gateway_relay import GatewayRelayError, HTTPGatewayRelay

UPSTREAM = "http://gateway.test/"


@patch("proxy_relay.adapters.gateway_relay.requests.request")
def test_forward_passes_method_selector_and_body(mock_request):
    mock_request.return_value = Mock(
        status_code=200,
        content=b'{"success": true}',
        headers={"Content-Type": "application/json"},
    )
    relay = HTTPGatewayRelay(upstream_url=UPSTREAM, timeout=5)

    relayed = relay.forward("POST", "patients", b'{"Age": "45"}')

    mock_request.assert_called_once_with(
        "POST",
        UPSTREAM,
        params={"sheet": "patients"},
        data=b'{"Age": "45"}',
        headers={"Content-Type": "application/json"},
        timeout=5,
    )
    assert relayed.status_code == 200
    assert relayed.content == b'{"success": true}'


@patch("proxy_relay.adapters.gateway_relay.requests.request")
def test_forward_keeps_upstream_error_status(mock_request):
    mock_request.return_value = Mock(status_code=400, content=b'{"error": "x"}', headers={})
    relay = HTTPGatewayRelay(upstream_url=UPSTREAM)

    relayed = relay.forward("GET", "foo")

    assert relayed.status_code == 400
    assert relayed.media_type == "application/json"
    assert mock_request.call_args[1]["data"] is None


@patch("proxy_relay.adapters.gateway_relay.requests.request")
def test_network_failure_raises_relay_error(mock_request):
    mock_request.side_effect = requests.exceptions.ConnectionError("Connection refused")
    relay = HTTPGatewayRelay(upstream_url=UPSTREAM)

    with pytest.raises(GatewayRelayError, match="Connection refused"):
        relay.forward("GET", "patients")


def test_upstream_defaults_to_config(monkeypatch):
    monkeypatch.setenv("GATEWAY_UPSTREAM_URL", "http://sheets.internal/exec")

    assert HTTPGatewayRelay().upstream_url == "http://sheets.internal/exec"
