"""
Single orders: one leg sent directly to the exchange.

``Market`` and ``Stop`` carry no limit price; encoders that need a price
field for them send ``0``.
"""

from __future__ import annotations

from typing import Union

from pydantic import BaseModel, ConfigDict, Field, PositiveFloat, PositiveInt

from .enums import Side

Price = Union[PositiveInt, PositiveFloat]


class SingleOrder(BaseModel):
    model_config = ConfigDict(frozen=True)

    side: Side
    size: PositiveFloat = Field(..., description="Order quantity in base currency")


class Market(SingleOrder):
    pass


class Limit(SingleOrder):
    price: Price


class Stop(SingleOrder):
    trigger_price: Price


class StopLimit(SingleOrder):
    trigger_price: Price
    price: Price
