"""
ShopSavvy - Python client for the ShopSavvy Data API

Typed access to product details, current offers, price history and
price-monitoring schedules across thousands of retailers.

Usage:
------
    from shopsavvy import ShopSavvyClient, RateLimitError

    with ShopSavvyClient("ss_live_your_api_key_here") as client:
        result = client.get_product_details("012345678901")
        print(result.data[0].title, result.credits_remaining)

Errors:
-------
Every failure raises a ShopSavvyError subclass:

    ConfigurationError   - malformed API key or option (raised at construction)
    AuthenticationError  - HTTP 401
    NotFoundError        - HTTP 404
    APIValidationError   - HTTP 422
    RateLimitError       - HTTP 429
    APIError             - any other non-2xx response
    NetworkError         - no response received
    RequestTimeout       - request deadline exceeded

Nothing is retried automatically; branch on the error type to apply your
own retry policy.
"""

# -----------------------------------------------------------------------------
# Client
# -----------------------------------------------------------------------------
from .client import ShopSavvyClient
from .client_base import BaseAPIClient

# -----------------------------------------------------------------------------
# Configuration
# -----------------------------------------------------------------------------
from .config import (
    __version__,
    ClientConfig,
    DEFAULT_BASE_URL,
    DEFAULT_TIMEOUT,
    validate_api_key,
)

# -----------------------------------------------------------------------------
# Errors
# -----------------------------------------------------------------------------
from .errors import (
    ShopSavvyError,
    ConfigurationError,
    APIError,
    AuthenticationError,
    NotFoundError,
    APIValidationError,
    RateLimitError,
    NetworkError,
    RequestTimeout,
    map_http_error,
    resolve_error_message,
)

# -----------------------------------------------------------------------------
# Response models
# -----------------------------------------------------------------------------
from .schema import (
    APIErrorResponse,
    APIMeta,
    APIResponse,
    Frequency,
    Offer,
    OfferWithHistory,
    PaginationInfo,
    PriceHistoryEntry,
    ProductDetails,
    ProductSearchResult,
    ProductWithOffers,
    RemoveBatchResponse,
    RemoveResponse,
    ScheduleBatchResponse,
    ScheduledProduct,
    ScheduleResponse,
    UsageInfo,
    UsagePeriod,
    index_by_identifier,
)


__all__ = [
    "__version__",
    # Client
    "ShopSavvyClient",
    "BaseAPIClient",
    # Configuration
    "ClientConfig",
    "DEFAULT_BASE_URL",
    "DEFAULT_TIMEOUT",
    "validate_api_key",
    # Errors
    "ShopSavvyError",
    "ConfigurationError",
    "APIError",
    "AuthenticationError",
    "NotFoundError",
    "APIValidationError",
    "RateLimitError",
    "NetworkError",
    "RequestTimeout",
    "map_http_error",
    "resolve_error_message",
    # Models
    "APIErrorResponse",
    "APIMeta",
    "APIResponse",
    "Frequency",
    "Offer",
    "OfferWithHistory",
    "PaginationInfo",
    "PriceHistoryEntry",
    "ProductDetails",
    "ProductSearchResult",
    "ProductWithOffers",
    "RemoveBatchResponse",
    "RemoveResponse",
    "ScheduleBatchResponse",
    "ScheduledProduct",
    "ScheduleResponse",
    "UsageInfo",
    "UsagePeriod",
    "index_by_identifier",
]
