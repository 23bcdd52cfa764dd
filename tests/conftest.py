"""Pytest configuration for path setup and shared fixtures.

The test suite imports the ``broker`` package from ``broker/src`` and the
helpers under ``tests/``.  When pytest is executed as an installed script
the repository root is not automatically on ``sys.path``, so both
locations are added here before collection.
"""

from __future__ import annotations

import sys
from pathlib import Path

import pytest


ROOT = Path(__file__).resolve().parents[1]

for path in (ROOT, ROOT / "broker" / "src"):
    path_str = str(path)
    if path_str not in sys.path:
        sys.path.insert(0, path_str)

from broker.clients.auth_providers import ApiKeyProvider  # noqa: E402
from broker.clients.bitflyer import BitFlyerClient  # noqa: E402
from broker.orders import OrderSetting, TimeInForce  # noqa: E402
from tests.helpers.credentials import API_KEY, API_SECRET, FIXED_TIME  # noqa: E402
from tests.helpers.fake_transport import FakeTransport  # noqa: E402


@pytest.fixture
def transport() -> FakeTransport:
    return FakeTransport()


@pytest.fixture
def auth_provider() -> ApiKeyProvider:
    return ApiKeyProvider(API_KEY, API_SECRET, clock=lambda: FIXED_TIME)


@pytest.fixture
def client(transport: FakeTransport, auth_provider: ApiKeyProvider) -> BitFlyerClient:
    return BitFlyerClient(transport, auth_provider)


@pytest.fixture
def setting() -> OrderSetting:
    return OrderSetting(expire_minutes=1, time_in_force=TimeInForce.GTC)
