"""
HTTP transport with rate limiting and retries.

The exchange client talks to the network exclusively through a
:class:`Transport`: ``send(method, path, headers, body)`` returns the
status code and the body text, or raises if no response was observed.
Two implementations are provided:

* :class:`HttpTransport` issues requests with ``aiohttp``.  bitFlyer
  limits each client to ``max_requests`` calls in any ``period_seconds``
  window (500 per 5 minutes for the private API), so the transport keeps
  the send times of that window and waits for the oldest to expire.
* :class:`RetryingTransport` wraps another transport and retries
  failures with exponential backoff using ``tenacity``.  Only the
  methods listed in ``retry_methods`` are retried; order submission is a
  ``POST`` and is therefore sent exactly once unless the caller opts in.
"""

from __future__ import annotations

import asyncio
import logging
import time
from collections import deque
from enum import Enum
from typing import Callable, Deque, Dict, FrozenSet, Iterable, NamedTuple, Optional, Tuple, Type

import aiohttp
from tenacity import (
    AsyncRetrying,
    before_sleep_log,
    retry_if_exception_type,
    retry_if_result,
    stop_after_attempt,
    wait_exponential,
)


logger = logging.getLogger(__name__)

BITFLYER_REST_URL = "https://api.bitflyer.jp"


class Method(str, Enum):
    GET = "GET"
    POST = "POST"


class HttpResponse(NamedTuple):
    status: int
    body: str


class Transport:
    """Abstract transport capability."""

    async def send(self, method: Method, path: str, headers: Dict[str, str], body: str) -> HttpResponse:
        """Send one request and return the raw response.

        Subclasses must implement this method.  Failures that prevent a
        response from being observed are raised.
        """
        raise NotImplementedError


class HttpTransport(Transport):
    """``aiohttp`` transport that stays inside bitFlyer's request window."""

    def __init__(
        self,
        base_url: str = BITFLYER_REST_URL,
        *,
        timeout_seconds: float = 10.0,
        max_requests: int = 500,
        period_seconds: float = 300.0,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if max_requests <= 0 or period_seconds <= 0:
            raise ValueError("request window must be positive")
        self.base_url = base_url.rstrip("/")
        self.timeout = aiohttp.ClientTimeout(total=timeout_seconds)
        self.max_requests = max_requests
        self.period_seconds = period_seconds
        self.clock = clock
        self._sent: Deque[float] = deque()
        self._window_lock = asyncio.Lock()

    def _delay(self, now: float) -> float:
        """Seconds until another request fits in the window."""
        while self._sent and now - self._sent[0] >= self.period_seconds:
            self._sent.popleft()
        if len(self._sent) < self.max_requests:
            return 0.0
        return self.period_seconds - (now - self._sent[0])

    async def _acquire_slot(self) -> None:
        async with self._window_lock:
            delay = self._delay(self.clock())
            while delay > 0:
                logger.info("bitFlyer request window full, waiting %.1fs", delay)
                await asyncio.sleep(delay)
                delay = self._delay(self.clock())
            self._sent.append(self.clock())

    async def send(self, method: Method, path: str, headers: Dict[str, str], body: str) -> HttpResponse:
        await self._acquire_slot()
        url = f"{self.base_url}{path}"
        data = body.encode("utf-8") if body else None
        async with aiohttp.ClientSession(timeout=self.timeout) as session:
            async with session.request(method.value, url, headers=headers, data=data) as resp:
                text = await resp.text()
                if resp.status >= 400:
                    logger.warning("bitFlyer %s %s returned %s: %s", method.value, path, resp.status, text[:200])
                return HttpResponse(resp.status, text)


RETRYABLE_EXCEPTIONS: Tuple[Type[BaseException], ...] = (aiohttp.ClientError, asyncio.TimeoutError)


def _is_server_error(response: Optional[HttpResponse]) -> bool:
    return response is not None and response.status >= 500


class RetryingTransport(Transport):
    """Retry decorator around another :class:`Transport`.

    Connection errors, timeouts and 5xx responses are retried for the
    methods in ``retry_methods``.  When attempts are exhausted the last
    response is returned, or the last exception re-raised.
    """

    def __init__(
        self,
        inner: Transport,
        *,
        attempts: int = 3,
        retry_methods: Iterable[Method] = (Method.GET,),
        backoff_seconds: float = 1.0,
        max_backoff_seconds: float = 8.0,
    ) -> None:
        self.inner = inner
        self.attempts = attempts
        self.retry_methods: FrozenSet[Method] = frozenset(retry_methods)
        self.backoff_seconds = backoff_seconds
        self.max_backoff_seconds = max_backoff_seconds

    def _retrying(self) -> AsyncRetrying:
        return AsyncRetrying(
            stop=stop_after_attempt(self.attempts),
            wait=wait_exponential(multiplier=self.backoff_seconds, max=self.max_backoff_seconds),
            retry=retry_if_exception_type(RETRYABLE_EXCEPTIONS) | retry_if_result(_is_server_error),
            before_sleep=before_sleep_log(logger, logging.WARNING),
            retry_error_callback=lambda state: state.outcome.result(),
        )

    async def send(self, method: Method, path: str, headers: Dict[str, str], body: str) -> HttpResponse:
        if method not in self.retry_methods:
            return await self.inner.send(method, path, headers, body)
        return await self._retrying()(self.inner.send, method, path, headers, body)
