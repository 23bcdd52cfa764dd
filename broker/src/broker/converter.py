"""
Parameter conversion between the order model and bitFlyer vocabulary.

All functions are pure.  Unsupported inputs raise
:class:`~broker.errors.InvalidParameter`; nothing here touches the
network.
"""

from __future__ import annotations

from typing import Dict, NamedTuple

from .errors import InvalidParameter
from .orders.enums import ProductCode, Side, TimeInForce
from .orders.logic import IFD, IFO, OCO, OrderWithLogic, Stop
from .orders.models import OrderSetting

_PRODUCT_CODES: Dict[ProductCode, str] = {
    ProductCode.FX_BTC_JPY: "FX_BTC_JPY",
    ProductCode.BTC_JPY: "BTC_JPY",
    ProductCode.ETH_JPY: "ETH_JPY",
    ProductCode.ETH_BTC: "ETH_BTC",
    ProductCode.BCH_BTC: "BCH_BTC",
}

_SIDES: Dict[Side, str] = {
    Side.BUY: "BUY",
    Side.SELL: "SELL",
}

_TIME_IN_FORCE: Dict[TimeInForce, str] = {
    TimeInForce.GTC: "GTC",
    TimeInForce.IOC: "IOC",
    TimeInForce.FOK: "FOK",
}


class SpecificOrderSetting(NamedTuple):
    expire_minutes: int
    time_in_force: str


def product_code(code: ProductCode) -> str:
    try:
        return _PRODUCT_CODES[code]
    except KeyError:
        raise InvalidParameter(f"invalid product code for bitflyer: {code!r}") from None


def side(value: Side) -> str:
    return _SIDES[value]


def parse_side(value: str) -> Side:
    """Map ``"BUY"``/``"SELL"`` from a response back onto :class:`Side`."""
    for member, wire in _SIDES.items():
        if wire == value:
            return member
    raise InvalidParameter(f"invalid side from bitflyer: {value!r}")


def time_in_force(value: TimeInForce) -> str:
    try:
        return _TIME_IN_FORCE[value]
    except KeyError:
        raise InvalidParameter(f"invalid time in force for bitflyer: {value!r}") from None


def order_setting(setting: OrderSetting) -> SpecificOrderSetting:
    return SpecificOrderSetting(
        expire_minutes=setting.expire_minutes,
        time_in_force=time_in_force(setting.time_in_force),
    )


def order_method(logic: OrderWithLogic) -> str:
    """Return the ``order_method`` tag for a conditional order."""
    if isinstance(logic, IFD):
        return "IFD"
    if isinstance(logic, OCO):
        return "OCO"
    if isinstance(logic, IFO):
        return "IFDOCO"
    if isinstance(logic, Stop):
        return "SIMPLE"
    raise NotImplementedError(f"order method for {type(logic).__name__} is not implemented")
