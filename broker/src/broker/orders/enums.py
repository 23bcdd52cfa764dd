"""Enumerations shared by the order model.

Values use the upper-case spelling exchanges print, so ``Side("SELL")``
and ``ProductCode("FX_BTC_JPY")`` accept what operators type.
"""

from __future__ import annotations

from enum import Enum


class Side(str, Enum):
    BUY = "BUY"
    SELL = "SELL"


class TimeInForce(str, Enum):
    GTC = "GTC"
    IOC = "IOC"
    FOK = "FOK"


class ProductCode(str, Enum):
    """Instruments known to the code base.

    Not every venue trades every instrument; the parameter converter of
    each exchange decides which members it can encode.
    """

    FX_BTC_JPY = "FX_BTC_JPY"
    BTC_JPY = "BTC_JPY"
    ETH_JPY = "ETH_JPY"
    ETH_BTC = "ETH_BTC"
    BCH_BTC = "BCH_BTC"
    XBT_USD = "XBT_USD"
