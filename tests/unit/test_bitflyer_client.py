"""Tests for the BitFlyerClient facade against the in-memory transport.

These tests check which endpoint each operation calls, that private
calls are signed, and how responses are turned into results.
"""

from __future__ import annotations

import json

import pytest  # type: ignore

from broker.clients.auth_providers import ApiKeyProvider
from broker.clients.bitflyer import BitFlyerClient
from broker.clients.transport import Method
from broker.config import BrokerConfig
from broker.errors import ErrorResponse, InvalidParameter, InvalidResponse, Timeout, UnsupportedOrderKind
from broker.orders import OrderSetting, Position, ProductCode, Side, logic, single
from tests.helpers.fake_transport import FakeTransport

ACTIVE_PARENT_ORDERS = "/v1/me/getparentorders?parent_order_state=ACTIVE&product_code=FX_BTC_JPY"


def test_unsupported_product_code_is_rejected_at_construction(
    transport: FakeTransport, auth_provider: ApiKeyProvider
) -> None:
    with pytest.raises(InvalidParameter):
        BitFlyerClient(transport, auth_provider, ProductCode.XBT_USD)
    assert transport.requests == []


def test_from_config_builds_default_stack() -> None:
    config = BrokerConfig(api_key="k", api_secret="s", product_code=ProductCode.BTC_JPY)
    client = BitFlyerClient.from_config(config)
    assert client.product_code_str == "BTC_JPY"


@pytest.mark.asyncio  # type: ignore
async def test_get_markets_is_public(client: BitFlyerClient, transport: FakeTransport) -> None:
    transport.reply(200, '[{"product_code":"BTC_JPY"}]')
    assert await client.get_markets() == '[{"product_code":"BTC_JPY"}]'
    sent = transport.requests[0]
    assert (sent.method, sent.path, sent.headers) == (Method.GET, "/v1/getmarkets", {})


@pytest.mark.asyncio  # type: ignore
async def test_get_permissions_is_signed(client: BitFlyerClient, transport: FakeTransport) -> None:
    transport.reply(200, '["/v1/me/getbalance"]')
    assert await client.get_permissions() == '["/v1/me/getbalance"]'
    assert "ACCESS-SIGN" in transport.requests[0].headers


@pytest.mark.asyncio  # type: ignore
async def test_get_balance(client: BitFlyerClient, transport: FakeTransport) -> None:
    transport.reply(200, '[{"currency_code":"JPY","amount":1000.0,"available":900.0}]')
    assert await client.get_balance() == 1000.0
    assert transport.requests[0].path == "/v1/me/getbalance"


@pytest.mark.asyncio  # type: ignore
async def test_get_collateral(client: BitFlyerClient, transport: FakeTransport) -> None:
    transport.reply(200, '{"collateral":100.0,"open_position_pnl":-5.0,"require_collateral":0}')
    assert await client.get_collateral() == 95.0


@pytest.mark.asyncio  # type: ignore
async def test_transport_failure_is_a_timeout_result(client: BitFlyerClient, transport: FakeTransport) -> None:
    transport.fail(OSError("network unreachable"))
    assert await client.get_collateral() == Timeout("network unreachable")


@pytest.mark.asyncio  # type: ignore
async def test_post_single_order_sends_encoded_body(
    client: BitFlyerClient, transport: FakeTransport, setting: OrderSetting
) -> None:
    transport.reply(200, '{"child_order_acceptance_id":"JRF20150707-050237-639234"}')
    order = single.Limit(side=Side.BUY, price=500000, size=0.01)
    assert await client.post_single_order(order, setting) == "JRF20150707-050237-639234"
    sent = transport.requests[0]
    assert (sent.method, sent.path) == (Method.POST, "/v1/me/sendchildorder")
    assert sent.body == (
        '{"product_code":"FX_BTC_JPY","child_order_type":"LIMIT","side":"BUY",'
        '"price":500000,"size":0.01,"minute_to_expire":1,"time_in_force":"GTC"}'
    )


@pytest.mark.asyncio  # type: ignore
async def test_rejected_order_returns_error_response(
    client: BitFlyerClient, transport: FakeTransport, setting: OrderSetting
) -> None:
    body = '{"status":-205,"error_message":"Margin amount is insufficient for this order."}'
    transport.reply(400, body)
    result = await client.post_single_order(single.Market(side=Side.SELL, size=1), setting)
    assert result == ErrorResponse(body)


@pytest.mark.asyncio  # type: ignore
async def test_post_order_with_logic(client: BitFlyerClient, transport: FakeTransport, setting: OrderSetting) -> None:
    transport.reply(200, '{"parent_order_acceptance_id":"JRF20150925-060559-396699"}')
    ifd = logic.IFD(
        pre=single.Limit(side=Side.BUY, price=30000, size=0.1),
        post=single.Limit(side=Side.SELL, price=32000, size=0.1),
    )
    assert await client.post_order_with_logic(ifd, setting) == "JRF20150925-060559-396699"
    sent = transport.requests[0]
    assert sent.path == "/v1/me/sendparentorder"
    assert json.loads(sent.body)["order_method"] == "IFD"


@pytest.mark.asyncio  # type: ignore
async def test_cancel_all_orders(client: BitFlyerClient, transport: FakeTransport) -> None:
    transport.reply(200, "")
    assert await client.cancel_all_orders() is None
    assert transport.requests[0].body == '{"product_code":"FX_BTC_JPY"}'

    transport.reply(500, "maintenance")
    assert await client.cancel_all_orders(ProductCode.BTC_JPY) == ErrorResponse("maintenance")
    assert transport.requests[1].body == '{"product_code":"BTC_JPY"}'


@pytest.mark.asyncio  # type: ignore
async def test_get_single_orders_returns_raw_body(client: BitFlyerClient, transport: FakeTransport) -> None:
    transport.reply(200, "[]")
    assert await client.get_single_orders() == "[]"
    assert transport.requests[0].path == "/v1/me/getchildorders"


@pytest.mark.asyncio  # type: ignore
async def test_get_positions_and_board_use_product_code(client: BitFlyerClient, transport: FakeTransport) -> None:
    transport.reply(200, '[{"side":"BUY","price":36640.0,"size":5.0}]')
    transport.reply(200, '{"mid_price":36650}')
    assert await client.get_positions() == [Position(side=Side.BUY, size=5.0, price=36640.0)]
    assert await client.get_board() == 36650.0
    assert [r.path for r in transport.requests] == [
        "/v1/me/getpositions?product_code=FX_BTC_JPY",
        "/v1/board?product_code=FX_BTC_JPY",
    ]


@pytest.mark.asyncio  # type: ignore
async def test_get_orders_with_logic(client: BitFlyerClient, transport: FakeTransport) -> None:
    transport.reply(200, '[{"price":30000},{"parent_order_id":"JCP1"}]')
    assert await client.get_orders_with_logic() == [30000.0]
    assert transport.requests[0].path == ACTIVE_PARENT_ORDERS


def _summary(order_id: str, order_type: str, price: float = 30000) -> dict:
    return {
        "parent_order_id": order_id,
        "parent_order_type": order_type,
        "side": "SELL",
        "price": price,
        "size": 0.1,
    }


@pytest.mark.asyncio  # type: ignore
async def test_get_orders_rebuilds_stop_with_detail_trigger_price(
    client: BitFlyerClient, transport: FakeTransport
) -> None:
    transport.reply(200, json.dumps([_summary("JCP1", "STOP")]))
    transport.reply(200, '{"parameters":[{"condition_type":"STOP","side":"SELL","size":0.1,"trigger_price":29000}]}')
    orders = await client.get_orders()
    assert orders == [logic.Stop(side=Side.SELL, trigger_price=29000, size=0.1)]
    assert transport.requests[1].path == "/v1/me/getparentorder?parent_order_id=JCP1"
    assert "ACCESS-SIGN" in transport.requests[1].headers


@pytest.mark.asyncio  # type: ignore
async def test_get_orders_keeps_summary_price_when_detail_fails(
    client: BitFlyerClient, transport: FakeTransport
) -> None:
    transport.reply(200, json.dumps([_summary("JCP1", "STOP")]))
    transport.fail(ConnectionError("reset"))
    orders = await client.get_orders()
    assert orders == [logic.Stop(side=Side.SELL, trigger_price=30000.0, size=0.1)]


@pytest.mark.asyncio  # type: ignore
async def test_get_orders_rebuilds_oco(client: BitFlyerClient, transport: FakeTransport) -> None:
    transport.reply(200, json.dumps([_summary("JCP2", "OCO")]))
    transport.reply(
        200,
        json.dumps(
            {
                "parameters": [
                    {"condition_type": "LIMIT", "side": "SELL", "price": 31000, "size": 0.1, "trigger_price": 0},
                    {"condition_type": "STOP", "side": "SELL", "price": 0, "size": 0.1, "trigger_price": 29000},
                ]
            }
        ),
    )
    orders = await client.get_orders()
    assert orders == [
        logic.OCO(
            order=single.Limit(side=Side.SELL, price=31000.0, size=0.1),
            other_order=single.Stop(side=Side.SELL, trigger_price=29000.0, size=0.1),
        )
    ]


@pytest.mark.asyncio  # type: ignore
async def test_get_orders_returns_oco_detail_failure(client: BitFlyerClient, transport: FakeTransport) -> None:
    transport.reply(200, json.dumps([_summary("JCP2", "OCO")]))
    transport.reply(404, "not found")
    assert await client.get_orders() == ErrorResponse("not found")


@pytest.mark.asyncio  # type: ignore
async def test_get_orders_reports_unsupported_kinds(client: BitFlyerClient, transport: FakeTransport) -> None:
    transport.reply(200, json.dumps([_summary("JCP3", "IFDOCO")]))
    result = await client.get_orders()
    assert isinstance(result, UnsupportedOrderKind)
    assert result.order_type == "IFDOCO"
    assert len(transport.requests) == 1


@pytest.mark.asyncio  # type: ignore
async def test_get_orders_with_malformed_list(client: BitFlyerClient, transport: FakeTransport) -> None:
    transport.reply(200, '[{"parent_order_id":"JCP1"}]')
    assert await client.get_orders() == InvalidResponse('[{"parent_order_id":"JCP1"}]')


@pytest.mark.asyncio  # type: ignore
async def test_get_orders_keeps_zero_summary_price_without_dropping_the_list(
    client: BitFlyerClient, transport: FakeTransport
) -> None:
    transport.reply(200, json.dumps([_summary("JCP1", "STOP", price=0), _summary("JCP2", "STOP")]))
    transport.fail(ConnectionError("reset"))
    transport.reply(200, '{"parameters":[{"condition_type":"STOP","side":"SELL","size":0.1,"trigger_price":29000}]}')
    orders = await client.get_orders()
    assert isinstance(orders, list)
    assert [order.trigger_price for order in orders] == [0, 29000]
    assert all(isinstance(order, logic.Stop) for order in orders)


@pytest.mark.asyncio  # type: ignore
async def test_get_orders_fetches_one_detail_per_order_in_list_order(
    client: BitFlyerClient, transport: FakeTransport
) -> None:
    transport.reply(
        200,
        json.dumps([_summary("JCP1", "STOP"), _summary("JCP2", "OCO"), _summary("JCP3", "STOP", price=32000)]),
    )
    transport.reply(200, '{"parameters":[{"condition_type":"STOP","side":"SELL","size":0.1,"trigger_price":29000}]}')
    transport.reply(
        200,
        json.dumps(
            {
                "parameters": [
                    {"condition_type": "LIMIT", "side": "BUY", "price": 28000, "size": 0.2, "trigger_price": 0},
                    {"condition_type": "MARKET", "side": "SELL", "price": 0, "size": 0.2, "trigger_price": 0},
                ]
            }
        ),
    )
    transport.reply(503, "maintenance")

    orders = await client.get_orders()

    assert orders == [
        logic.Stop(side=Side.SELL, trigger_price=29000, size=0.1),
        logic.OCO(
            order=single.Limit(side=Side.BUY, price=28000, size=0.2),
            other_order=single.Market(side=Side.SELL, size=0.2),
        ),
        logic.Stop(side=Side.SELL, trigger_price=32000.0, size=0.1),
    ]
    assert [request.path for request in transport.requests] == [
        ACTIVE_PARENT_ORDERS,
        "/v1/me/getparentorder?parent_order_id=JCP1",
        "/v1/me/getparentorder?parent_order_id=JCP2",
        "/v1/me/getparentorder?parent_order_id=JCP3",
    ]
