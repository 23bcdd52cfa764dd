#!/usr/bin/env python
"""Print a JSON snapshot of the bitFlyer account.

Queries balance, collateral, open positions and the board mid price
through :class:`broker.clients.bitflyer.BitFlyerClient`.  Failed queries
are reported in place as ``{"error": <kind>, "detail": <body or message>}``
so operators can see every field even when one endpoint is down.

Credentials are read from ``BITFLYER_API_KEY`` / ``BITFLYER_API_SECRET``
(or their ``*_FILE`` variants).
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import os
from typing import Any, Dict

from broker.clients.bitflyer import BitFlyerClient
from broker.config import load_config
from broker.errors import ClientError


def _render(value: Any) -> Any:
    if isinstance(value, ClientError):
        return {"error": value.kind, "detail": value.detail()}
    if isinstance(value, list):
        return [_render(v) for v in value]
    if hasattr(value, "model_dump"):
        return value.model_dump(mode="json")
    return value


async def snapshot(client: BitFlyerClient) -> Dict[str, Any]:
    return {
        "product_code": client.product_code_str,
        "balance": _render(await client.get_balance()),
        "collateral": _render(await client.get_collateral()),
        "positions": _render(await client.get_positions()),
        "mid_price": _render(await client.get_board()),
    }


def main() -> None:
    parser = argparse.ArgumentParser(description="Print a bitFlyer account snapshot.")
    parser.add_argument("--indent", type=int, default=2, help="JSON indentation.")
    args = parser.parse_args()
    logging.basicConfig(level=os.environ.get("LOG_LEVEL", "INFO"))
    client = BitFlyerClient.from_config(load_config())
    result = asyncio.run(snapshot(client))
    print(json.dumps(result, indent=args.indent))


if __name__ == "__main__":
    main()
