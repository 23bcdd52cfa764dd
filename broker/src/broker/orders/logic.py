"""
Conditional ("parent") orders composed of one to three legs.

The exchange activates the legs server side:

* ``IFD`` submits ``post`` once ``pre`` has filled.
* ``OCO`` cancels the remaining leg once either leg fills.
* ``IFO`` is an ``IFD`` whose second half is an ``OCO`` (three legs).
* ``Stop`` is a single stop leg routed through the parent order endpoint.

``legs()`` returns the legs in the order they must appear on the wire.
"""

from __future__ import annotations

from typing import Tuple, Union

from pydantic import BaseModel, ConfigDict, PositiveFloat

from .enums import Side
from .single import Price, SingleOrder


class OrderWithLogic(BaseModel):
    model_config = ConfigDict(frozen=True)

    def legs(self) -> Tuple["Order", ...]:
        raise NotImplementedError


Order = Union[SingleOrder, OrderWithLogic]


class IFD(OrderWithLogic):
    pre: Order
    post: Order

    def legs(self) -> Tuple[Order, ...]:
        return (self.pre, self.post)


class OCO(OrderWithLogic):
    order: Order
    other_order: Order

    def legs(self) -> Tuple[Order, ...]:
        return (self.order, self.other_order)


class IFO(OrderWithLogic):
    pre_order: Order
    post_order: OCO

    def legs(self) -> Tuple[Order, ...]:
        return (self.pre_order, self.post_order.order, self.post_order.other_order)


class Stop(OrderWithLogic):
    side: Side
    trigger_price: Price
    size: PositiveFloat

    def legs(self) -> Tuple[Order, ...]:
        return (self,)
