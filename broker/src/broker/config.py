"""
Client configuration.

Credentials come from a secrets manager; the remaining settings come from
environment variables:

* ``BITFLYER_API_KEY`` / ``BITFLYER_API_SECRET`` (or their ``*_FILE``
  variants) – API credentials.
* ``BITFLYER_BASE_URL`` – REST host, defaults to ``https://api.bitflyer.jp``.
* ``BITFLYER_PRODUCT_CODE`` – instrument traded by the client, defaults
  to ``FX_BTC_JPY``.
* ``BITFLYER_TIMEOUT_SECONDS`` – total request timeout.
* ``BITFLYER_RATE_LIMIT_REQUESTS`` / ``BITFLYER_RATE_LIMIT_PERIOD_SECONDS`` –
  client side request window, defaults to 500 requests per 300 seconds.
* ``BITFLYER_RETRY_ATTEMPTS`` – attempts for retryable (GET) requests.
"""

from __future__ import annotations

import os
from typing import Optional

from pydantic import BaseModel, Field

from .clients.transport import BITFLYER_REST_URL
from .orders.enums import ProductCode
from .secrets_manager import BaseSecretsManager, get_default_secrets_manager


class BrokerConfig(BaseModel):
    api_key: str = Field(..., min_length=1)
    api_secret: str = Field(..., min_length=1)
    base_url: str = BITFLYER_REST_URL
    product_code: ProductCode = ProductCode.FX_BTC_JPY
    timeout_seconds: float = Field(10.0, gt=0)
    rate_limit_requests: int = Field(500, gt=0)
    rate_limit_period_seconds: float = Field(300.0, gt=0)
    retry_attempts: int = Field(3, ge=1)


def load_config(secrets: Optional[BaseSecretsManager] = None) -> BrokerConfig:
    """Build a :class:`BrokerConfig` from secrets and the environment.

    Raises ``pydantic.ValidationError`` when credentials are missing or a
    numeric setting is malformed.
    """
    secrets = secrets or get_default_secrets_manager()
    return BrokerConfig(
        api_key=secrets.get_secret("BITFLYER_API_KEY") or "",
        api_secret=secrets.get_secret("BITFLYER_API_SECRET") or "",
        base_url=os.environ.get("BITFLYER_BASE_URL", BITFLYER_REST_URL),
        product_code=os.environ.get("BITFLYER_PRODUCT_CODE", ProductCode.FX_BTC_JPY.value),
        timeout_seconds=os.environ.get("BITFLYER_TIMEOUT_SECONDS", "10"),
        rate_limit_requests=os.environ.get("BITFLYER_RATE_LIMIT_REQUESTS", "500"),
        rate_limit_period_seconds=os.environ.get("BITFLYER_RATE_LIMIT_PERIOD_SECONDS", "300"),
        retry_attempts=os.environ.get("BITFLYER_RETRY_ATTEMPTS", "3"),
    )
