"""
Signed request pipeline.

Public calls go straight to the transport.  Private calls are signed by
the auth provider over the exact path and body passed in, and the same
two strings are then handed to the transport unchanged.  Any exception
raised by the transport is converted into a :class:`~broker.errors.Timeout`
record; the pipeline never raises for network failures.
"""

from __future__ import annotations

import logging
import time
from typing import Dict, Union

from ..errors import Timeout
from ..metrics import REQUEST_LATENCY, REQUESTS, TRANSPORT_FAILURES, endpoint
from .auth_providers import AuthProvider
from .transport import HttpResponse, Method, Transport


logger = logging.getLogger(__name__)

RawResult = Union[HttpResponse, Timeout]


class RequestPipeline:
    def __init__(self, transport: Transport, auth_provider: AuthProvider) -> None:
        self.transport = transport
        self.auth_provider = auth_provider

    async def call_public(self, method: Method, path: str, body: str = "") -> RawResult:
        return await self._dispatch(method, path, {}, body)

    async def call_private(self, method: Method, path: str, body: str = "") -> RawResult:
        headers = await self.auth_provider.get_headers(method.value, path, body)
        return await self._dispatch(method, path, headers, body)

    async def _dispatch(self, method: Method, path: str, headers: Dict[str, str], body: str) -> RawResult:
        label = endpoint(path)
        started = time.monotonic()
        try:
            response = await self.transport.send(method, path, headers, body)
        except Exception as exc:
            logger.error("Transport failure on %s %s: %s", method.value, label, exc)
            TRANSPORT_FAILURES.labels(method=method.value, path=label).inc()
            return Timeout(str(exc))
        REQUEST_LATENCY.labels(method=method.value, path=label).observe(time.monotonic() - started)
        REQUESTS.labels(method=method.value, path=label, status=str(response.status)).inc()
        logger.debug("%s %s -> %s", method.value, label, response.status)
        return response
