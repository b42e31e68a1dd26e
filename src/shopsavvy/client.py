from __future__ import annotations

import logging
from datetime import timedelta
from typing import Any, List, Optional, Sequence, Type, TypeVar, Union

from pydantic import BaseModel, ValidationError

from . import params as p
from .client_base import BaseAPIClient
from .config import ClientConfig
from .errors import APIError
from .schema import (
    APIResponse,
    Frequency,
    OfferWithHistory,
    ProductDetails,
    ProductSearchResult,
    ProductWithOffers,
    RemoveBatchResponse,
    RemoveResponse,
    ScheduleBatchResponse,
    ScheduledProduct,
    ScheduleResponse,
    UsageInfo,
)


logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


class ShopSavvyClient(BaseAPIClient):
    """
    Client for the ShopSavvy Data API.

    Every method issues exactly one request and returns the response envelope
    typed for that endpoint. Failures raise a ShopSavvyError subclass; nothing
    is retried or cached.

        with ShopSavvyClient("ss_live_your_api_key_here") as client:
            result = client.get_product_details("012345678901")
            print(result.data[0].title)
    """

    def __init__(
        self,
        api_key: str,
        base_url: Optional[str] = None,
        timeout: Optional[Union[float, timedelta]] = None,
        max_retries: Optional[int] = None,
        user_agent: Optional[str] = None,
    ) -> None:
        config = ClientConfig.create(
            api_key,
            base_url=base_url,
            timeout=timeout,
            max_retries=max_retries,
            user_agent=user_agent,
        )
        super().__init__(config)
        logger.info(
            "ShopSavvyClient initialized (%s key, base_url=%s).",
            config.environment,
            config.base_url,
        )

    @classmethod
    def from_config(cls, config: ClientConfig) -> "ShopSavvyClient":
        return cls(
            config.api_key,
            base_url=config.base_url,
            timeout=config.timeout,
            max_retries=config.max_retries,
            user_agent=config.user_agent,
        )

    # -------------------------------------------------
    # Search and product lookup
    # -------------------------------------------------
    def search_products(
        self, query: str, limit: Optional[int] = None, offset: Optional[int] = None
    ) -> ProductSearchResult:
        """Keyword search, paginated with limit/offset."""
        data = self.get("/products/search", p.search_params(query, limit, offset))
        return self._parse(ProductSearchResult, data)

    def get_product_details(
        self, identifier: str, format: Optional[str] = None
    ) -> APIResponse[List[ProductDetails]]:
        """
        Look up a product by barcode, ASIN, URL, model number or ShopSavvy ID.

        `format` is forwarded as-is (e.g. "csv"); the body is still parsed
        as JSON, so non-JSON formats end in an APIError.
        """
        data = self.get("/products", p.lookup_params(identifier, format=format))
        return self._parse(APIResponse[List[ProductDetails]], data)

    def get_product_details_batch(
        self, identifiers: Sequence[str], format: Optional[str] = None
    ) -> APIResponse[List[ProductDetails]]:
        ids = p.join_identifiers(identifiers)
        data = self.get("/products", p.lookup_params(ids, format=format))
        return self._parse(APIResponse[List[ProductDetails]], data)

    # -------------------------------------------------
    # Offers and price history
    # -------------------------------------------------
    def get_current_offers(
        self,
        identifier: str,
        retailer: Optional[str] = None,
        format: Optional[str] = None,
    ) -> APIResponse[List[ProductWithOffers]]:
        """Current offers across retailers, optionally for a single retailer."""
        data = self.get(
            "/products/offers",
            p.lookup_params(identifier, retailer=retailer, format=format),
        )
        return self._parse(APIResponse[List[ProductWithOffers]], data)

    def get_current_offers_batch(
        self,
        identifiers: Sequence[str],
        retailer: Optional[str] = None,
        format: Optional[str] = None,
    ) -> APIResponse[List[ProductWithOffers]]:
        ids = p.join_identifiers(identifiers)
        data = self.get(
            "/products/offers", p.lookup_params(ids, retailer=retailer, format=format)
        )
        return self._parse(APIResponse[List[ProductWithOffers]], data)

    def get_price_history(
        self,
        identifier: str,
        start_date: p.DateLike,
        end_date: p.DateLike,
        retailer: Optional[str] = None,
        format: Optional[str] = None,
    ) -> APIResponse[List[OfferWithHistory]]:
        """Offer history between two dates (YYYY-MM-DD strings or date objects)."""
        data = self.get(
            "/products/offers/history",
            p.history_params(
                identifier, start_date, end_date, retailer=retailer, format=format
            ),
        )
        return self._parse(APIResponse[List[OfferWithHistory]], data)

    # -------------------------------------------------
    # Monitoring schedule
    # -------------------------------------------------
    def schedule_product_monitoring(
        self,
        identifier: str,
        frequency: Union[Frequency, str],
        retailer: Optional[str] = None,
    ) -> APIResponse[ScheduleResponse]:
        body = p.schedule_body(frequency, identifier=identifier, retailer=retailer)
        data = self.post("/products/schedule", body)
        return self._parse(APIResponse[ScheduleResponse], data)

    def schedule_product_monitoring_batch(
        self,
        identifiers: Sequence[str],
        frequency: Union[Frequency, str],
        retailer: Optional[str] = None,
    ) -> APIResponse[List[ScheduleBatchResponse]]:
        body = p.schedule_body(
            frequency, identifiers=p.join_identifiers(identifiers), retailer=retailer
        )
        data = self.post("/products/schedule", body)
        return self._parse(APIResponse[List[ScheduleBatchResponse]], data)

    def get_scheduled_products(self) -> APIResponse[List[ScheduledProduct]]:
        data = self.get("/products/scheduled")
        return self._parse(APIResponse[List[ScheduledProduct]], data)

    def remove_product_from_schedule(
        self, identifier: str
    ) -> APIResponse[RemoveResponse]:
        data = self.delete("/products/schedule", p.removal_body(identifier=identifier))
        return self._parse(APIResponse[RemoveResponse], data)

    def remove_products_from_schedule(
        self, identifiers: Sequence[str]
    ) -> APIResponse[List[RemoveBatchResponse]]:
        body = p.removal_body(identifiers=p.join_identifiers(identifiers))
        data = self.delete("/products/schedule", body)
        return self._parse(APIResponse[List[RemoveBatchResponse]], data)

    # -------------------------------------------------
    # Account
    # -------------------------------------------------
    def get_usage(self) -> APIResponse[UsageInfo]:
        """Credit usage for the current billing period."""
        data = self.get("/usage")
        return self._parse(APIResponse[UsageInfo], data)

    # -------------------------------------------------
    # Helpers
    # -------------------------------------------------
    @staticmethod
    def _parse(model: Type[M], data: Any) -> M:
        """Validate a 2xx body into its envelope; a wrong shape is an APIError."""
        if not isinstance(data, dict):
            raise APIError(
                f"Unexpected response shape; expected a JSON object, got {type(data).__name__}."
            )
        try:
            return model.model_validate(data)
        except ValidationError as e:
            raise APIError(f"Unexpected response shape: {e}") from e
