"""Shared HTTP helper for upstream adapters.

All adapters talk to their upstream through one httpx.AsyncClient owned by the
application lifespan. Any transport failure, non-2xx status or non-JSON body is
reported as UpstreamUnavailable so callers handle a single error type.
"""

import logging
from typing import Any

import httpx

from jobsearch_bot.core.errors import UpstreamUnavailable

logger = logging.getLogger(__name__)


async def request_json(
    client: httpx.AsyncClient,
    method: str,
    url: str,
    *,
    service: str,
    **kwargs: Any,
) -> Any:
    """Send a request and decode the JSON body.

    Args:
        client: Shared async HTTP client.
        method: HTTP method.
        url: Absolute URL.
        service: Collaborator name used in errors and logs.
        **kwargs: Passed through to httpx (params, json, headers, timeout).

    Returns:
        Decoded JSON body.

    Raises:
        UpstreamUnavailable: On network error, non-2xx status or invalid JSON.
    """
    try:
        response = await client.request(method, url, **kwargs)
        response.raise_for_status()
    except httpx.HTTPStatusError as e:
        logger.warning(
            "%s returned %d for %s %s",
            service,
            e.response.status_code,
            method,
            url,
        )
        raise UpstreamUnavailable(
            service, f"HTTP {e.response.status_code} from {url}"
        ) from e
    except httpx.HTTPError as e:
        logger.warning("%s unreachable (%s %s): %s", service, method, url, e)
        raise UpstreamUnavailable(service, f"{type(e).__name__} for {url}") from e

    try:
        return response.json()
    except ValueError as e:
        raise UpstreamUnavailable(service, f"invalid JSON from {url}") from e
