"""HTTP client layer for downloading the web-features dataset."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from contextvars import ContextVar
import json
from typing import Any

import httpx

from ._version import __version__
from .constants import DEFAULT_TIMEOUT_SECONDS
from .exceptions import ContentError, HttpStatusError, NetworkError, RequestTimeoutError

_SHARED_CLIENT: ContextVar[httpx.Client | None] = ContextVar(
    "pybaseline_shared_client", default=None
)


def _build_headers() -> dict[str, str]:
    return {
        "User-Agent": f"pybaseline/{__version__}",
        "Accept": "application/json",
    }


@contextmanager
def use_shared_client(
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
) -> Iterator[httpx.Client]:
    """Provide a reusable HTTP client for all fetches within a CLI run."""
    with httpx.Client(timeout=timeout, follow_redirects=True, headers=_build_headers()) as client:
        token = _SHARED_CLIENT.set(client)
        try:
            yield client
        finally:
            _SHARED_CLIENT.reset(token)


def fetch_text(url: str, timeout: float = DEFAULT_TIMEOUT_SECONDS) -> str:
    """Fetch a text document with deterministic behavior and friendly failures."""
    shared_client = _SHARED_CLIENT.get()
    retry_once = True
    while True:
        try:
            if shared_client is None or timeout != DEFAULT_TIMEOUT_SECONDS:
                with httpx.Client(
                    timeout=timeout, follow_redirects=True, headers=_build_headers()
                ) as client:
                    response = client.get(url)
            else:
                response = shared_client.get(url)
        except httpx.TimeoutException as exc:
            raise RequestTimeoutError(url) from exc
        except httpx.ConnectError as exc:
            if retry_once:
                retry_once = False
                continue
            raise NetworkError(url, cause=exc.__class__.__name__) from exc
        except httpx.RequestError as exc:
            raise NetworkError(url, cause=exc.__class__.__name__) from exc

        if response.status_code != 200:
            raise HttpStatusError(response.status_code, str(response.url))

        body = response.text
        if not body.strip():
            raise ContentError(str(response.url))
        return body


def fetch_json(url: str, timeout: float = DEFAULT_TIMEOUT_SECONDS) -> Any:
    """Fetch and decode a JSON document."""
    raw = fetch_text(url, timeout=timeout)
    try:
        return json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ContentError(url) from exc
