"""
Error taxonomy for exchange calls.

Outcomes observed on the wire are *returned* to the caller as
:class:`ClientError` instances so that every operation yields either its
value or one of these records:

* ``Timeout`` – the transport failed before any response was observed.
* ``ErrorResponse`` – the exchange answered with a non-200 status.  The
  body is kept verbatim for diagnostics.
* ``InvalidResponse`` – status 200 but the body does not match the
  expected schema.
* ``UnsupportedOrderKind`` – the exchange reported a parent order type
  this client cannot rebuild.

Caller mistakes are *raised*: :class:`InvalidParameter` for values that
cannot be encoded for this exchange, and ``NotImplementedError`` for
order shapes the encoder does not support.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TypeVar, Union

T = TypeVar("T")


class ClientError:
    """Base class of all returned error records."""

    kind = "client_error"

    def detail(self) -> str:
        raise NotImplementedError


@dataclass(frozen=True)
class Timeout(ClientError):
    message: str

    kind = "timeout"

    def detail(self) -> str:
        return self.message


@dataclass(frozen=True)
class ErrorResponse(ClientError):
    body: str

    kind = "error_response"

    def detail(self) -> str:
        return self.body


@dataclass(frozen=True)
class InvalidResponse(ClientError):
    body: str

    kind = "invalid_response"

    def detail(self) -> str:
        return self.body


@dataclass(frozen=True)
class UnsupportedOrderKind(ClientError):
    order_type: str
    body: str

    kind = "unsupported_order_kind"

    def detail(self) -> str:
        return f"{self.order_type}: {self.body}"


class InvalidParameter(ValueError):
    """Raised when a value cannot be encoded for this exchange."""


Result = Union[T, ClientError]


__all__ = [
    "ClientError",
    "Timeout",
    "ErrorResponse",
    "InvalidResponse",
    "UnsupportedOrderKind",
    "InvalidParameter",
    "Result",
]
