"""Lightweight HTTP client util with optional retry.

Uses stdlib urllib; callers that live on the event loop run it through
``asyncio.to_thread``. Focus: GET JSON with limited retries.
"""

from __future__ import annotations

import http.client
import json
import logging
import time
import urllib.parse
import urllib.request
from typing import Any, Dict, Mapping, Optional

logger = logging.getLogger("fxboard.http")


class HttpError(Exception):
    pass


def build_url(base_url: str, params: Mapping[str, Optional[str]]) -> str:
    query = urllib.parse.urlencode({k: v for k, v in params.items() if v is not None})
    if not query:
        return base_url
    sep = "&" if "?" in base_url else "?"
    return f"{base_url}{sep}{query}"


def get_json(
    url: str, *, timeout: float = 5.0, retries: int = 0, backoff: float = 0.5
) -> Dict[str, Any]:
    last_err: Optional[Exception] = None
    for attempt in range(retries + 1):
        try:
            with urllib.request.urlopen(url, timeout=timeout) as resp:  # nosec B310
                if resp.status >= 400:
                    raise HttpError(f"HTTP {resp.status} for {url}")
                data = json.loads(resp.read().decode("utf-8"))
                if not isinstance(data, dict):
                    raise HttpError(f"Expected a JSON object from {url}")
                return data
        except (
            OSError,  # URLError, timeouts, connection resets
            http.client.HTTPException,  # RemoteDisconnected, IncompleteRead
            HttpError,
            ValueError,  # JSON / UTF-8 decode
        ) as e:
            last_err = e
            logger.warning(
                "GET failed",
                extra={"url": url, "attempt": attempt + 1, "error": str(e)},
            )
            if attempt == retries:
                break
            time.sleep(backoff * (2**attempt))
    raise HttpError(f"Failed to fetch JSON from {url}: {last_err}")
