"""
Provider connection test
"""

from typing import Optional

import httpx

from castengine.config import CONNECTION_TEST_TIMEOUT
from castengine.core import get_logger
from castengine.core.exceptions import InvalidApiKeyError, NetworkTimeoutError
from castengine.models import ApiConfig, ApiProvider

logger = get_logger(__name__, component="connection_test")


def connection_test_url(config: ApiConfig) -> str:
    base = config.base_url.rstrip("/")
    if config.provider == ApiProvider.OLLAMA:
        return f"{base}/api/tags"
    return f"{base}/models"


async def test_api_connection(
    config: ApiConfig,
    http_client: Optional[httpx.AsyncClient] = None,
) -> bool:
    """
    Check that an endpoint is reachable and accepts the key.

    Ollama is checked with `/api/tags`, every other provider with `/models`.

    Returns:
        True when the endpoint answers 2xx

    Raises:
        InvalidApiKeyError: On 401
        NetworkTimeoutError: On any other status or a transport failure
    """
    url = connection_test_url(config)
    headers = {"Authorization": f"Bearer {config.api_key}"} if config.api_key else {}

    try:
        if http_client is not None:
            response = await http_client.get(url, headers=headers)
        else:
            async with httpx.AsyncClient(timeout=CONNECTION_TEST_TIMEOUT) as client:
                response = await client.get(url, headers=headers)
    except httpx.HTTPError as exc:
        logger.warning("Connection test failed", extra={"url": url, "error": str(exc)})
        raise NetworkTimeoutError(f"Connection failed: {exc}") from exc

    if response.is_success:
        logger.info("Connection test succeeded", extra={"url": url, "provider": config.provider.value})
        return True
    if response.status_code == 401:
        raise InvalidApiKeyError("Authentication failed")
    raise NetworkTimeoutError(f"Unexpected status: {response.status_code}")
