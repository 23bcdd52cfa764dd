"""
Order settings and account snapshots using Pydantic.

These models carry no exchange-specific vocabulary; the parameter
converter maps them onto the wire format.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from .enums import Side, TimeInForce


class OrderSetting(BaseModel):
    """Per-submission settings attached when an order is sent."""

    model_config = ConfigDict(frozen=True)

    expire_minutes: int = Field(..., ge=1, description="Minutes until the order expires")
    time_in_force: TimeInForce = Field(TimeInForce.GTC, description="Execution condition")


class Position(BaseModel):
    """Open position as reported by the exchange."""

    model_config = ConfigDict(frozen=True)

    side: Side
    size: float
    price: float
