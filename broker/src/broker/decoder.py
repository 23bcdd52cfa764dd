"""
Response decoding and error classification.

:func:`classify` turns a raw pipeline result into either a typed value
or a :class:`~broker.errors.ClientError`:

1. ``Timeout`` records from the pipeline pass through unchanged.
2. Any status other than 200 becomes ``ErrorResponse(body)``.
3. A 200 body is parsed as JSON and handed to an operation specific
   parser.  Malformed JSON or a schema mismatch becomes
   ``InvalidResponse(body)``.

Parsers validate against the Pydantic schemas below and raise
``ValueError`` (or ``KeyError``/``TypeError``/``IndexError``) on
mismatch.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Callable, Dict, List, TypeVar

from pydantic import BaseModel, TypeAdapter

from . import converter
from .clients.pipeline import RawResult
from .errors import ClientError, ErrorResponse, InvalidResponse, Result
from .orders import logic, single
from .orders.logic import OCO
from .orders.models import Position
from .orders.single import SingleOrder


logger = logging.getLogger(__name__)

T = TypeVar("T")

SCHEMA_ERRORS = (ValueError, KeyError, TypeError, IndexError)


class Balance(BaseModel):
    currency_code: str
    amount: float
    available: float


class Collateral(BaseModel):
    collateral: float
    open_position_pnl: float


class Board(BaseModel):
    mid_price: float


class RawPosition(BaseModel):
    side: str
    size: float
    price: float


class ParentOrderSummary(BaseModel):
    parent_order_id: str
    parent_order_type: str
    side: str
    price: float
    size: float


class ParentOrderParameter(BaseModel):
    condition_type: str
    side: str
    size: float
    price: float = 0
    trigger_price: float = 0


class ParentOrderDetail(BaseModel):
    parameters: List[ParentOrderParameter]


_BALANCES = TypeAdapter(List[Balance])
_POSITIONS = TypeAdapter(List[RawPosition])
_PARENT_ORDERS = TypeAdapter(List[ParentOrderSummary])


def classify(result: RawResult, parse: Callable[[Any], T]) -> Result[T]:
    if isinstance(result, ClientError):
        return result
    if result.status != 200:
        return ErrorResponse(result.body)
    try:
        return parse(json.loads(result.body))
    except SCHEMA_ERRORS as exc:
        logger.warning("Unexpected response schema: %s", exc)
        return InvalidResponse(result.body)


def raw_body(result: RawResult) -> Result[str]:
    """Classify without parsing; the body is returned verbatim."""
    if isinstance(result, ClientError):
        return result
    if result.status != 200:
        return ErrorResponse(result.body)
    return result.body


def parse_balance(data: Any) -> float:
    balances = _BALANCES.validate_python(data)
    if not balances:
        raise ValueError("balance list is empty")
    return balances[0].amount


def parse_collateral(data: Any) -> float:
    collateral = Collateral.model_validate(data)
    return collateral.collateral + collateral.open_position_pnl


def parse_mid_price(data: Any) -> float:
    return Board.model_validate(data).mid_price


def parse_positions(data: Any) -> List[Position]:
    return [
        Position(side=converter.parse_side(raw.side), size=raw.size, price=raw.price)
        for raw in _POSITIONS.validate_python(data)
    ]


def parse_active_prices(data: Any) -> List[float]:
    """Collect ``price`` from each parent order, skipping entries without one."""
    if not isinstance(data, list):
        raise TypeError("expected a list of parent orders")
    prices: List[float] = []
    for entry in data:
        if not isinstance(entry, dict):
            continue
        price = entry.get("price")
        if isinstance(price, (int, float)) and not isinstance(price, bool):
            prices.append(float(price))
    return prices


def parse_acceptance_id(key: str) -> Callable[[Any], str]:
    def parse(data: Any) -> str:
        value = data[key]
        if not isinstance(value, str):
            raise TypeError(f"{key} is not a string")
        return value

    return parse


def parse_parent_orders(data: Any) -> List[ParentOrderSummary]:
    return _PARENT_ORDERS.validate_python(data)


def resolve_trigger_price(detail: RawResult, default: float) -> float:
    """Return the first leg's ``trigger_price`` from a parent order detail.

    Falls back to ``default`` when the detail request failed or its body
    does not carry a trigger price.
    """
    if isinstance(detail, ClientError) or detail.status != 200:
        return default
    try:
        parameters = json.loads(detail.body)["parameters"]
        price = parameters[0]["trigger_price"]
    except SCHEMA_ERRORS:
        return default
    if not isinstance(price, (int, float)) or isinstance(price, bool):
        return default
    return price


def rebuild_stop(summary: ParentOrderSummary, trigger_price: float) -> logic.Stop:
    """Rebuild a ``STOP`` parent order from its summary.

    The trigger price is taken as the exchange reports it.  A price of 0
    (market-style stops, or a summary used as fallback) fails the order
    model's submission checks, so such orders are constructed without
    validating that one field.
    """
    side = converter.parse_side(summary.side)
    if trigger_price > 0:
        return logic.Stop(side=side, trigger_price=trigger_price, size=summary.size)
    logger.warning(
        "Parent order %s has non-positive trigger price %s", summary.parent_order_id, trigger_price
    )
    # side and size are still checked; only the price is copied in as reported
    return logic.Stop(side=side, trigger_price=1, size=summary.size).model_copy(
        update={"trigger_price": trigger_price}
    )


def rebuild_oco(data: Any) -> OCO:
    """Rebuild an OCO from the two legs of a parent order detail."""
    detail = ParentOrderDetail.model_validate(data)
    if len(detail.parameters) != 2:
        raise ValueError(f"OCO detail carries {len(detail.parameters)} legs")
    order, other_order = (_rebuild_leg(p) for p in detail.parameters)
    return OCO(order=order, other_order=other_order)


def _rebuild_leg(parameter: ParentOrderParameter) -> SingleOrder:
    fields: Dict[str, Any] = {"side": converter.parse_side(parameter.side), "size": parameter.size}
    kind = parameter.condition_type
    if kind == "MARKET":
        return single.Market(**fields)
    if kind == "LIMIT":
        return single.Limit(price=parameter.price, **fields)
    if kind == "STOP":
        return single.Stop(trigger_price=parameter.trigger_price, **fields)
    if kind == "STOP_LIMIT":
        return single.StopLimit(price=parameter.price, trigger_price=parameter.trigger_price, **fields)
    raise ValueError(f"unsupported condition type {kind!r}")
