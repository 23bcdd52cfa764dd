"""
Broker package for the bitFlyer Lightning REST API.

This package translates exchange-agnostic order descriptions (single
orders and conditional "parent" orders) into the wire format expected by
bitFlyer, signs every private request with the account's API secret and
decodes responses into typed results.  The public entry point is
:class:`broker.clients.bitflyer.BitFlyerClient`.
"""

from .clients.bitflyer import BitFlyerClient  # noqa: F401
from .errors import (  # noqa: F401
    ClientError,
    ErrorResponse,
    InvalidParameter,
    InvalidResponse,
    Timeout,
    UnsupportedOrderKind,
)
from .orders import OrderSetting, Position, ProductCode, Side, TimeInForce  # noqa: F401
