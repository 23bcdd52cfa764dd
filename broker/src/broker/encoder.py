"""
Request body encoding for the bitFlyer order endpoints.

Bodies are returned as JSON *strings* rather than dictionaries.  The
request signature covers the exact body bytes, so the string produced
here is the one that is both signed and sent.  Keys keep insertion order
and the separators are compact, which makes the output deterministic
for a given input.

Endpoints:

* ``/v1/me/sendchildorder`` – :func:`single_order_body`
* ``/v1/me/sendparentorder`` – :func:`parent_order_body`
* ``/v1/me/cancelallchildorders`` – :func:`cancel_all_body`
"""

from __future__ import annotations

import json
from typing import Any, Dict, List

from . import converter
from .orders import logic, single
from .orders.enums import ProductCode
from .orders.logic import Order, OrderWithLogic
from .orders.models import OrderSetting
from .orders.single import SingleOrder


def dumps(payload: Any) -> str:
    return json.dumps(payload, separators=(",", ":"), ensure_ascii=False)


def single_order_body(order: SingleOrder, setting: OrderSetting, product_code: ProductCode) -> str:
    specific = converter.order_setting(setting)
    payload: Dict[str, Any] = {
        "product_code": converter.product_code(product_code),
        "child_order_type": _child_order_type(order),
        "side": converter.side(order.side),
    }
    if isinstance(order, single.Stop):
        payload["trigger_price"] = order.trigger_price
    else:
        # MARKET orders still send a price field
        payload["price"] = getattr(order, "price", 0)
    payload["size"] = order.size
    payload["minute_to_expire"] = specific.expire_minutes
    payload["time_in_force"] = specific.time_in_force
    return dumps(payload)


def parent_order_body(order: OrderWithLogic, setting: OrderSetting, product_code: ProductCode) -> str:
    specific = converter.order_setting(setting)
    payload = {
        "order_method": converter.order_method(order),
        "minute_to_expire": specific.expire_minutes,
        "time_in_force": specific.time_in_force,
        "parameters": parent_order_parameters(order, product_code),
    }
    return dumps(payload)


def parent_order_parameters(order: OrderWithLogic, product_code: ProductCode) -> List[Dict[str, Any]]:
    """Flatten the legs of a conditional order in wire order."""
    code = converter.product_code(product_code)
    return [_leg(leg, code) for leg in order.legs()]


def cancel_all_body(product_code: ProductCode) -> str:
    return dumps({"product_code": converter.product_code(product_code)})


def _child_order_type(order: SingleOrder) -> str:
    if isinstance(order, single.Market):
        return "MARKET"
    if isinstance(order, single.Limit):
        return "LIMIT"
    if isinstance(order, single.Stop):
        return "STOP"
    raise NotImplementedError(f"{type(order).__name__} is not accepted by sendchildorder")


def _leg(order: Order, code: str) -> Dict[str, Any]:
    leg: Dict[str, Any] = {"product_code": code}
    if isinstance(order, single.Market):
        leg["condition_type"] = "MARKET"
        leg["side"] = converter.side(order.side)
        leg["price"] = 0
    elif isinstance(order, single.Limit):
        leg["condition_type"] = "LIMIT"
        leg["side"] = converter.side(order.side)
        leg["price"] = order.price
    elif isinstance(order, (single.Stop, logic.Stop)):
        leg["condition_type"] = "STOP"
        leg["side"] = converter.side(order.side)
        leg["trigger_price"] = order.trigger_price
    elif isinstance(order, single.StopLimit):
        leg["condition_type"] = "STOP_LIMIT"
        leg["side"] = converter.side(order.side)
        leg["price"] = order.price
        leg["trigger_price"] = order.trigger_price
    else:
        raise NotImplementedError(f"{type(order).__name__} cannot be a leg of a parent order")
    leg["size"] = order.size
    return leg
