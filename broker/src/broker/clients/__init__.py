"""
Client utilities for interacting with the exchange.

This package provides the bitFlyer client facade, the signed request
pipeline and its authentication provider, and the HTTP transport with
rate limiting and retry logic.
"""

from .auth_providers import ApiKeyProvider, AuthProvider  # noqa: F401
from .bitflyer import BitFlyerClient  # noqa: F401
from .pipeline import RequestPipeline  # noqa: F401
from .transport import HttpResponse, HttpTransport, Method, RetryingTransport, Transport  # noqa: F401
