"""Factory function for the HTTP client used against the school API."""

from typing import Optional

import httpx

import config
from utils.logger import get_logger
from utils.error_handler import ConfigError

logger = get_logger()

def build_http_client(
    timeout: float = config.REQUEST_TIMEOUT,
    connect_timeout: float = config.CONNECT_TIMEOUT,
    transport: Optional[httpx.AsyncBaseTransport] = None,
) -> httpx.AsyncClient:
    """Builds the async HTTP client shared by every task call.

    The caller owns the client and must close it, usually with
    ``async with build_http_client() as client:``.

    Args:
        timeout: Overall request timeout in seconds.
        connect_timeout: Connection timeout in seconds.
        transport: Optional transport override (tests pass an httpx.MockTransport).

    Returns:
        httpx.AsyncClient: A client configured for JSON requests.

    Raises:
        ConfigError: If no API URL is configured.
    """
    if not config.API_BASE_URL:
        raise ConfigError("MARKENTRY_API_URL is empty. Set it to the school's api.php endpoint.")

    logger.debug(f"Building HTTP client (timeout={timeout}s, connect={connect_timeout}s)")
    return httpx.AsyncClient(
        timeout=httpx.Timeout(timeout, connect=connect_timeout),
        headers={"Content-Type": "application/json", "Accept": "application/json"},
        transport=transport,
    )
