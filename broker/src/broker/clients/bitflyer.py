"""
bitFlyer Lightning REST client.

:class:`BitFlyerClient` composes the order encoder, the signed request
pipeline and the response decoder into the public operations.  Every
operation is a coroutine that performs one round trip (``get_orders``
performs one more per reconstructed parent order) and returns either its
value or a :class:`~broker.errors.ClientError`.  Nothing is cached; each
query reads fresh state from the exchange.

Example::

    client = BitFlyerClient.from_config(load_config())
    setting = OrderSetting(expire_minutes=1, time_in_force=TimeInForce.GTC)
    result = await client.post_single_order(single.Limit(side=Side.BUY, price=500000, size=0.01), setting)
    if isinstance(result, ClientError):
        ...
"""

from __future__ import annotations

import json
import logging
from typing import List, Optional

from .. import converter, decoder, encoder
from ..config import BrokerConfig
from ..errors import ClientError, InvalidResponse, Result, UnsupportedOrderKind
from ..orders.enums import ProductCode
from ..orders.logic import OrderWithLogic
from ..orders.models import OrderSetting, Position
from ..orders.single import SingleOrder
from .auth_providers import ApiKeyProvider, AuthProvider
from .pipeline import RequestPipeline
from .transport import HttpTransport, Method, RetryingTransport, Transport


logger = logging.getLogger(__name__)


class BitFlyerClient:
    """Asynchronous bitFlyer client bound to one product code."""

    def __init__(
        self,
        transport: Transport,
        auth_provider: AuthProvider,
        product_code: ProductCode = ProductCode.FX_BTC_JPY,
    ) -> None:
        # Fail before any request if the product is not traded on bitFlyer
        converter.product_code(product_code)
        self.product_code = product_code
        self.pipeline = RequestPipeline(transport, auth_provider)

    @classmethod
    def from_config(cls, config: BrokerConfig) -> "BitFlyerClient":
        transport = RetryingTransport(
            HttpTransport(
                config.base_url,
                timeout_seconds=config.timeout_seconds,
                max_requests=config.rate_limit_requests,
                period_seconds=config.rate_limit_period_seconds,
            ),
            attempts=config.retry_attempts,
        )
        return cls(transport, ApiKeyProvider(config.api_key, config.api_secret), config.product_code)

    @property
    def product_code_str(self) -> str:
        return converter.product_code(self.product_code)

    async def get_permissions(self) -> Result[str]:
        return decoder.raw_body(await self.pipeline.call_private(Method.GET, "/v1/me/getpermissions"))

    async def get_markets(self) -> Result[str]:
        return decoder.raw_body(await self.pipeline.call_public(Method.GET, "/v1/getmarkets"))

    async def get_balance(self) -> Result[float]:
        result = await self.pipeline.call_private(Method.GET, "/v1/me/getbalance")
        return decoder.classify(result, decoder.parse_balance)

    async def post_single_order(self, order: SingleOrder, setting: OrderSetting) -> Result[str]:
        """Submit a child order and return its acceptance id."""
        body = encoder.single_order_body(order, setting, self.product_code)
        result = await self.pipeline.call_private(Method.POST, "/v1/me/sendchildorder", body)
        return decoder.classify(result, decoder.parse_acceptance_id("child_order_acceptance_id"))

    async def post_order_with_logic(self, logic: OrderWithLogic, setting: OrderSetting) -> Result[str]:
        """Submit a parent order and return its acceptance id."""
        body = encoder.parent_order_body(logic, setting, self.product_code)
        result = await self.pipeline.call_private(Method.POST, "/v1/me/sendparentorder", body)
        return decoder.classify(result, decoder.parse_acceptance_id("parent_order_acceptance_id"))

    async def get_single_orders(self) -> Result[str]:
        return decoder.raw_body(await self.pipeline.call_private(Method.GET, "/v1/me/getchildorders"))

    async def cancel_all_orders(self, product_code: Optional[ProductCode] = None) -> Optional[ClientError]:
        """Cancel every child order of ``product_code`` (defaults to the client's product)."""
        body = encoder.cancel_all_body(product_code or self.product_code)
        result = decoder.raw_body(await self.pipeline.call_private(Method.POST, "/v1/me/cancelallchildorders", body))
        return result if isinstance(result, ClientError) else None

    async def get_collateral(self) -> Result[float]:
        result = await self.pipeline.call_private(Method.GET, "/v1/me/getcollateral")
        return decoder.classify(result, decoder.parse_collateral)

    async def get_orders_with_logic(self) -> Result[List[float]]:
        """Prices of the active parent orders."""
        result = await self.pipeline.call_private(Method.GET, self._active_parent_orders_path())
        return decoder.classify(result, decoder.parse_active_prices)

    async def get_orders(self) -> Result[List[OrderWithLogic]]:
        """Rebuild the active parent orders from server state.

        ``STOP`` orders take their trigger price from the detail endpoint
        and keep the summary price if that lookup fails.  ``OCO`` orders
        are rebuilt from the detail legs; a failed lookup is returned as
        the error.  Other parent order types yield ``UnsupportedOrderKind``.
        """
        result = await self.pipeline.call_private(Method.GET, self._active_parent_orders_path())
        summaries = decoder.classify(result, decoder.parse_parent_orders)
        if isinstance(summaries, ClientError):
            return summaries

        orders: List[OrderWithLogic] = []
        for summary in summaries:
            if summary.parent_order_type not in ("STOP", "OCO"):
                logger.warning(
                    "Cannot rebuild parent order %s of type %s",
                    summary.parent_order_id,
                    summary.parent_order_type,
                )
                return UnsupportedOrderKind(summary.parent_order_type, json.dumps(summary.model_dump()))
            detail = await self.pipeline.call_private(
                Method.GET, f"/v1/me/getparentorder?parent_order_id={summary.parent_order_id}"
            )
            if summary.parent_order_type == "STOP":
                trigger_price = decoder.resolve_trigger_price(detail, summary.price)
                try:
                    rebuilt = decoder.rebuild_stop(summary, trigger_price)
                except ValueError:
                    return InvalidResponse(result.body)
            else:
                rebuilt = decoder.classify(detail, decoder.rebuild_oco)
                if isinstance(rebuilt, ClientError):
                    return rebuilt
            orders.append(rebuilt)
        return orders

    async def get_positions(self) -> Result[List[Position]]:
        path = f"/v1/me/getpositions?product_code={self.product_code_str}"
        result = await self.pipeline.call_private(Method.GET, path)
        return decoder.classify(result, decoder.parse_positions)

    async def get_board(self) -> Result[float]:
        """Mid price of the order book."""
        path = f"/v1/board?product_code={self.product_code_str}"
        result = await self.pipeline.call_private(Method.GET, path)
        return decoder.classify(result, decoder.parse_mid_price)

    def _active_parent_orders_path(self) -> str:
        return f"/v1/me/getparentorders?parent_order_state=ACTIVE&product_code={self.product_code_str}"
