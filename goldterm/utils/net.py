# goldterm/utils/net.py
# -*- coding: utf-8 -*-
"""
Network utilities:
- CancelToken: one-shot cancellation flag that can close an in-flight response
- default_headers: JSON request headers
- get_json_bounded: GET + JSON decode under a wall-clock deadline

get_json_bounded raises goldterm.core.errors.PriceFetchError subclasses; it
never returns a partial body.
"""

from __future__ import annotations
import json
import logging
import threading
import time
from typing import Any, Callable, Dict, List, Optional

import requests

from goldterm.config.constants import USER_AGENT, API_TIMEOUT_MS, READ_CHUNK_SIZE
from goldterm.core.errors import (
    PriceFetchError,
    FetchCancelled,
    FetchTimeout,
    HttpStatusError,
    InvalidPayload,
    NetworkFailure,
)

log = logging.getLogger(__name__)

Clock = Callable[[], float]


class CancelToken:
    """Thread-safe, one-shot cancellation flag.

    Callbacks registered with on_cancel() run once, on the cancelling thread
    (or immediately if the token is already cancelled).
    """

    def __init__(self) -> None:
        self._event = threading.Event()
        self._lock = threading.Lock()
        self._callbacks: List[Callable[[], None]] = []

    @property
    def cancelled(self) -> bool:
        return self._event.is_set()

    def cancel(self) -> None:
        with self._lock:
            if self._event.is_set():
                return
            self._event.set()
            callbacks, self._callbacks = self._callbacks, []
        for cb in callbacks:
            try:
                cb()
            except Exception:
                log.debug("cancel callback %r failed", cb, exc_info=True)

    def on_cancel(self, cb: Callable[[], None]) -> None:
        with self._lock:
            if not self._event.is_set():
                self._callbacks.append(cb)
                return
        cb()


def default_headers(user_agent: Optional[str] = None) -> Dict[str, str]:
    """Headers for a JSON API request."""
    return {
        "User-Agent": user_agent or USER_AGENT,
        "Accept": "application/json",
        "Cache-Control": "no-cache",
    }


def get_json_bounded(
    url: str,
    *,
    timeout_ms: int = API_TIMEOUT_MS,
    session: Optional[requests.Session] = None,
    headers: Optional[Dict[str, str]] = None,
    cancel: Optional[CancelToken] = None,
    clock: Clock = time.monotonic,
) -> Any:
    """GET `url` and return the decoded JSON body.

    - The whole exchange (connect, headers, body) must finish within
      `timeout_ms` of the call; otherwise the response is closed and
      FetchTimeout is raised.
    - Cancelling `cancel` closes the response and raises FetchCancelled.
    - Non-2xx -> HttpStatusError(status); transport errors -> NetworkFailure;
      body that is not JSON -> InvalidPayload.
    """
    deadline = clock() + timeout_ms / 1000.0

    def remaining() -> float:
        return deadline - clock()

    if cancel is not None and cancel.cancelled:
        raise FetchCancelled()

    http = session if session is not None else requests
    try:
        resp = http.get(url, headers=headers or default_headers(), timeout=max(0.001, remaining()), stream=True)
    except requests.Timeout as e:
        raise FetchTimeout(str(e)) from e
    except requests.RequestException as e:
        if cancel is not None and cancel.cancelled:
            raise FetchCancelled() from e
        raise NetworkFailure(str(e)) from e

    expired = threading.Event()

    def _expire() -> None:
        expired.set()
        resp.close()

    watchdog = threading.Timer(max(0.0, remaining()), _expire)
    watchdog.daemon = True
    try:
        if cancel is not None:
            cancel.on_cancel(resp.close)
            if cancel.cancelled:
                raise FetchCancelled()
        if remaining() <= 0:
            raise FetchTimeout("deadline exceeded before response headers")
        if not 200 <= resp.status_code < 300:
            raise HttpStatusError(resp.status_code)

        watchdog.start()
        body = bytearray()
        for chunk in resp.iter_content(chunk_size=READ_CHUNK_SIZE):
            if cancel is not None and cancel.cancelled:
                raise FetchCancelled()
            if expired.is_set() or remaining() <= 0:
                raise FetchTimeout("deadline exceeded while reading body")
            body.extend(chunk)
        if cancel is not None and cancel.cancelled:
            raise FetchCancelled()
        if expired.is_set() or remaining() <= 0:
            raise FetchTimeout("deadline exceeded while reading body")
    except PriceFetchError:
        raise
    except Exception as e:
        # a close() from the watchdog or the token surfaces as an arbitrary read error
        if cancel is not None and cancel.cancelled:
            raise FetchCancelled() from e
        if expired.is_set() or remaining() <= 0:
            raise FetchTimeout(str(e)) from e
        raise NetworkFailure(str(e)) from e
    finally:
        watchdog.cancel()
        resp.close()

    try:
        return json.loads(bytes(body).decode(resp.encoding or "utf-8"))
    except (UnicodeDecodeError, ValueError) as e:
        raise InvalidPayload(f"response is not JSON: {e}") from e
