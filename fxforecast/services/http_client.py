from __future__ import annotations

"""Lightweight async HTTP helper around httpx.

Focus: GET JSON with a per-call timeout and no retries. Callers decide what
an HttpError means for them; retry/backoff is deliberately not done here.
"""
from typing import Any, Dict, Optional

import httpx


class HttpError(Exception):
    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class HttpTimeoutError(HttpError):
    pass


async def get_json(
    client: httpx.AsyncClient, url: str, *, timeout: Optional[float] = None
) -> Dict[str, Any]:
    try:
        resp = await client.get(
            url, timeout=httpx.USE_CLIENT_DEFAULT if timeout is None else timeout
        )
    except httpx.TimeoutException as e:
        raise HttpTimeoutError(f"timed out fetching {url}: {e}") from e
    except httpx.HTTPError as e:
        raise HttpError(f"failed to fetch {url}: {e}") from e

    if resp.status_code != httpx.codes.OK:
        raise HttpError(
            f"{url} returned status {resp.status_code}: {resp.text}",
            status_code=resp.status_code,
        )
    try:
        data = resp.json()
    except ValueError as e:  # JSON decode
        raise HttpError(f"invalid JSON from {url}: {e}") from e
    if not isinstance(data, dict):
        raise HttpError(f"expected a JSON object from {url}")
    return data
