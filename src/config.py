"""Configuration settings for the ward records services."""

import os


def get_app_env():
    """Get the deployment environment (development or production)."""
    return os.environ.get("APP_ENV", "development").lower()


def get_api_url():
    """Get the proxy API URL the record forms talk to."""
    if get_app_env() == "production":
        return os.environ.get("WARD_API_URL", "https://gynacology-proxy.onrender.com/api")
    return f"http://localhost:{get_proxy_port()}/api"


def get_sheets_db_uri():
    """Get the row store connection URI from environment variables."""
    return os.environ.get("SHEETS_DB_URI", "sqlite:///ward_sheets.db")


def get_gateway_upstream_url():
    """Get the sheet gateway address the proxy forwards to."""
    host = os.environ.get("GATEWAY_HOST", "localhost")
    return os.environ.get("GATEWAY_UPSTREAM_URL", f"http://{host}:{get_gateway_port()}/")


def get_gateway_port():
    return int(os.environ.get("GATEWAY_PORT", "8001"))


def get_proxy_port():
    return int(os.environ.get("PROXY_PORT", "10000"))


def is_gateway_debug():
    """Whether gateway error responses may carry diagnostic traces."""
    return os.environ.get("GATEWAY_DEBUG", "false").lower() == "true"


def get_request_timeout():
    """Get the HTTP timeout in seconds for outbound requests."""
    return float(os.environ.get("REQUEST_TIMEOUT", "30"))


def get_log_level():
    return os.environ.get("LOG_LEVEL", "INFO").upper()
