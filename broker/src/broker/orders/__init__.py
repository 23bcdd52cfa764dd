"""
Exchange-agnostic order model.

Single orders live in :mod:`broker.orders.single` and conditional orders
in :mod:`broker.orders.logic`; both modules define a ``Stop`` so callers
normally import the modules rather than the classes.
"""

from . import logic, single  # noqa: F401
from .enums import ProductCode, Side, TimeInForce  # noqa: F401
from .logic import Order, OrderWithLogic  # noqa: F401
from .models import OrderSetting, Position  # noqa: F401
from .single import SingleOrder  # noqa: F401
