"""HTTP helpers that classify upstream failures as transient or fatal."""

import logging
from typing import Any, Optional

import httpx

from contract_feed.errors import FetchError, TransientFetchError

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 30.0
DEFAULT_HEADERS = {
    "User-Agent": "contract-feed/0.1 (government contract opportunity aggregator)",
    "Accept": "application/json",
}


def build_client(timeout: float = DEFAULT_TIMEOUT, headers: Optional[dict[str, str]] = None) -> httpx.Client:
    """Client used by connectors when none is injected."""
    merged = dict(DEFAULT_HEADERS)
    merged.update(headers or {})
    return httpx.Client(timeout=timeout, follow_redirects=True, headers=merged)


def is_transient_status(status_code: int) -> bool:
    """Rate limiting and upstream server errors stop pagination without failing the run."""
    return status_code == 429 or status_code >= 500


def get_json(
    client: httpx.Client,
    url: str,
    params: Optional[dict[str, Any]] = None,
    headers: Optional[dict[str, str]] = None,
) -> Any:
    """
    GET url and decode JSON.
    Raises TransientFetchError on 429, 5xx or timeout; FetchError on anything else.
    Messages carry the bare url only, never query params (they may hold API keys).
    """
    try:
        resp = client.get(url, params=params, headers=headers)
        resp.raise_for_status()
    except httpx.TimeoutException as e:
        raise TransientFetchError(f"Request to {url} timed out: {e.__class__.__name__}") from e
    except httpx.HTTPStatusError as e:
        status = e.response.status_code
        if is_transient_status(status):
            raise TransientFetchError(f"HTTP {status} from {url}", status_code=status) from e
        raise FetchError(f"HTTP {status} from {url}", status_code=status) from e
    except httpx.RequestError as e:
        raise FetchError(f"Request to {url} failed: {e.__class__.__name__}: {e}") from e

    try:
        return resp.json()
    except ValueError as e:
        content_type = resp.headers.get("content-type", "")
        logger.warning("Non-JSON response from %s (content-type=%s)", url, content_type)
        raise FetchError(f"Response from {url} is not valid JSON (content-type={content_type})") from e
