"""Client for the OpenAI-compatible ``GET /models`` listing."""

from __future__ import annotations

import logging
from typing import Any

import httpx

logger = logging.getLogger(__name__)


class FetchError(RuntimeError):
    pass


class NetworkError(FetchError):
    pass


class EndpointError(FetchError):
    def __init__(self, url: str, status_code: int, body: str) -> None:
        super().__init__(f"GET {url} failed: {status_code} {body}".rstrip())
        self.url = url
        self.status_code = status_code
        self.body = body


class ParseError(FetchError):
    pass


def models_url(base_url: str) -> str:
    return f"{base_url.rstrip('/')}/models"


def fetch_model_ids(
    base_url: str,
    api_key: str | None = None,
    *,
    client: httpx.Client | None = None,
    timeout: float | None = None,
) -> list[str]:
    """Return the model ids served at ``{base_url}/models`` in server order.

    An empty list means the server answered but lists no models. ``timeout``
    is only applied when this function creates its own client; ``None``
    waits indefinitely.
    """
    url = models_url(base_url)
    headers: dict[str, str] = {}
    if api_key:
        headers["Authorization"] = f"Bearer {api_key}"

    logger.debug("GET %s (auth=%s)", url, bool(api_key))
    try:
        if client is None:
            with httpx.Client(timeout=timeout) as owned_client:
                response = owned_client.get(url, headers=headers)
        else:
            response = client.get(url, headers=headers)
    except (httpx.RequestError, httpx.InvalidURL) as exc:
        raise NetworkError(f"GET {url} failed: {exc}") from exc

    if not response.is_success:
        raise EndpointError(url, response.status_code, response.text)

    try:
        body = response.json()
    except ValueError as exc:
        raise ParseError(f"Response from {url} is not valid JSON: {exc}") from exc

    return extract_model_ids(body, url)


def extract_model_ids(body: Any, url: str = "models endpoint") -> list[str]:
    data = body.get("data") if isinstance(body, dict) else None
    if not isinstance(data, list):
        raise ParseError(f"Response from {url} has no 'data' array")

    ids: list[str] = []
    for entry in data:
        model_id = entry.get("id") if isinstance(entry, dict) else None
        if isinstance(model_id, str) and model_id:
            ids.append(model_id)
        else:
            logger.debug("Skipping model entry without id: %r", entry)

    logger.debug("Found %d model ids at %s", len(ids), url)
    return ids
