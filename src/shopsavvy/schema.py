from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Generic, Iterable, List, Optional, TypeVar, get_origin

from pydantic import BaseModel, ConfigDict, Field, field_validator


T = TypeVar("T")


class Frequency(str, Enum):
    """Refresh frequencies accepted by the scheduling endpoints."""

    HOURLY = "hourly"
    DAILY = "daily"
    WEEKLY = "weekly"


class WireModel(BaseModel):
    """
    Base for every payload returned by the ShopSavvy Data API.

    - Unknown fields sent by the API are ignored
    - Fields can be populated by Python name or by wire alias
    - to_wire() gives back the JSON shape the API uses
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    def to_wire(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# ------------------------------
# Envelope
# ------------------------------


class APIMeta(WireModel):
    """Credit usage reported alongside every response."""

    credits_used: int = 0
    credits_remaining: int = 0
    rate_limit_remaining: Optional[int] = None


class APIResponse(WireModel, Generic[T]):
    """Envelope wrapping every API payload: APIResponse[List[ProductDetails]] etc."""

    success: bool
    data: T
    message: Optional[str] = None
    meta: Optional[APIMeta] = None

    @field_validator("data", mode="before")
    @classmethod
    def validate_data(cls, v):
        # List endpoints send "data": null when there is nothing to return.
        if v is None and get_origin(cls.model_fields["data"].annotation) is list:
            return []
        return v

    @property
    def credits_used(self) -> int:
        return self.meta.credits_used if self.meta else 0

    @property
    def credits_remaining(self) -> int:
        return self.meta.credits_remaining if self.meta else 0

    @property
    def rate_limit_remaining(self) -> Optional[int]:
        return self.meta.rate_limit_remaining if self.meta else None


class APIErrorResponse(WireModel):
    error: Optional[str] = None


# ------------------------------
# Products
# ------------------------------


class ProductDetails(WireModel):
    title: str = Field(..., description="Product title")
    shopsavvy: str = Field(..., description="ShopSavvy product ID")
    brand: Optional[str] = None
    category: Optional[str] = None
    images: List[str] = Field(default_factory=list, description="Image URLs")
    barcode: Optional[str] = None
    amazon: Optional[str] = Field(None, description="Amazon ASIN")
    model: Optional[str] = None
    mpn: Optional[str] = None
    color: Optional[str] = None

    @field_validator("images", mode="before")
    @classmethod
    def validate_images(cls, v):
        if v is None:
            return []
        return v


class PaginationInfo(WireModel):
    total: int = 0
    limit: int = 0
    offset: int = 0
    returned: int = 0


class ProductSearchResult(APIResponse[List[ProductDetails]]):
    """Search envelope: the usual fields plus pagination."""

    pagination: Optional[PaginationInfo] = None


# ------------------------------
# Offers and history
# ------------------------------


class PriceHistoryEntry(WireModel):
    date: str
    price: float
    availability: str


class Offer(WireModel):
    id: str = Field(..., description="Offer ID")
    retailer: Optional[str] = None
    price: Optional[float] = None
    currency: Optional[str] = None
    availability: Optional[str] = None
    condition: Optional[str] = None
    # The API sends the offer link under an upper-case key.
    url: Optional[str] = Field(None, alias="URL")
    seller: Optional[str] = None
    timestamp: Optional[str] = None
    history: List[PriceHistoryEntry] = Field(default_factory=list)

    @field_validator("history", mode="before")
    @classmethod
    def validate_history(cls, v):
        if v is None:
            return []
        return v


class ProductWithOffers(ProductDetails):
    offers: List[Offer] = Field(default_factory=list)


class OfferWithHistory(Offer):
    price_history: List[PriceHistoryEntry] = Field(default_factory=list)


# ------------------------------
# Scheduling
# ------------------------------


class ScheduledProduct(WireModel):
    product_id: str
    identifier: str
    frequency: str
    retailer: Optional[str] = None
    created_at: str
    last_refreshed: Optional[str] = None


class ScheduleResponse(WireModel):
    scheduled: bool
    product_id: str


class ScheduleBatchResponse(WireModel):
    identifier: str
    scheduled: bool
    product_id: str


class RemoveResponse(WireModel):
    removed: bool


class RemoveBatchResponse(WireModel):
    identifier: str
    removed: bool


# ------------------------------
# Usage
# ------------------------------


class UsagePeriod(WireModel):
    start_date: str
    end_date: str
    credits_used: int = 0
    credits_limit: int = 0
    credits_remaining: int = 0
    requests_made: int = 0


class UsageInfo(WireModel):
    current_period: UsagePeriod
    usage_percentage: float = 0.0


IDENTIFIER_FIELDS = ("identifier", "shopsavvy", "barcode", "amazon", "mpn", "model")


def index_by_identifier(items: Iterable[Any]) -> Dict[str, Any]:
    """
    Key batch results by every identifier they carry.

    Schedule/removal results are keyed by "identifier"; products (and
    products with offers) by their ShopSavvy ID, barcode, ASIN, MPN and
    model, so a result can be found with whichever of those was requested.

    The API does not promise one result per requested identifier, nor the
    request order, so batch results must not be matched by position.
    When two results share a key the first one wins. Items carrying none
    of these fields (price-history offers) are skipped.
    """
    indexed: Dict[str, Any] = {}
    for item in items:
        for field in IDENTIFIER_FIELDS:
            value = getattr(item, field, None)
            if isinstance(value, str) and value:
                indexed.setdefault(value, item)
    return indexed
