"""HTTP fetch collaborator.

Kept apart from the extractors: extraction never performs I/O, it only
receives the text this module returns.  No retries are attempted.
"""

import logging

import httpx

from .config import DEFAULT_FETCH_CONFIG, FetchConfig
from .exceptions import FetchError, FetchErrorKind

logger = logging.getLogger(__name__)


def _headers(config: FetchConfig) -> dict[str, str]:
    return {
        "User-Agent": config.user_agent,
        "Accept-Language": config.accept_language,
        "Accept": (
            "text/html,application/xhtml+xml,application/xml;q=0.9,"
            "image/webp,*/*;q=0.8"
        ),
    }


def fetch_page(url: str, config: FetchConfig = DEFAULT_FETCH_CONFIG) -> str:
    """GET *url* with browser-like headers and return the decoded body.

    Raises FetchError with ``kind`` TIMEOUT, NETWORK or STATUS.
    """
    logger.debug("Fetching %s (timeout=%ss)", url, config.timeout)
    try:
        resp = httpx.get(
            url,
            headers=_headers(config),
            follow_redirects=True,
            timeout=config.timeout,
        )
    except httpx.TimeoutException as exc:
        raise FetchError(url, 0, FetchErrorKind.TIMEOUT) from exc
    except httpx.RequestError as exc:
        raise FetchError(url, 0, FetchErrorKind.NETWORK) from exc
    if resp.status_code != 200:
        raise FetchError(url, resp.status_code, FetchErrorKind.STATUS)
    return resp.text
