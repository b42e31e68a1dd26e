from datetime import date
from unittest.mock import MagicMock

import pytest

from shopsavvy import (
    APIError,
    APIValidationError,
    Frequency,
    NetworkError,
    NotFoundError,
    OfferWithHistory,
    ProductDetails,
    ProductSearchResult,
    ProductWithOffers,
    RateLimitError,
    ShopSavvyClient,
    index_by_identifier,
)

from conftest import FakeResponse, envelope


BASE = "https://api.shopsavvy.com/v1"

PRODUCT = {
    "title": "Echo Dot (4th Gen)",
    "shopsavvy": "ss_prod_123",
    "brand": "Amazon",
    "barcode": "840080528349",
    "amazon": "B08N5WRWNW",
    "images": ["https://img.example.com/1.jpg"],
}

OFFER = {
    "id": "off_1",
    "retailer": "Amazon",
    "price": 29.99,
    "currency": "USD",
    "availability": "in_stock",
    "URL": "https://amazon.com/dp/B08N5WRWNW",
}


def stub(client, body, status=200):
    client.session.request = MagicMock(return_value=FakeResponse(status, body))
    return client.session.request


def sent(mock):
    """(method, url, params, json) of the single request made."""
    mock.assert_called_once()
    call = mock.call_args
    return call.args[0], call.args[1], call.kwargs["params"], call.kwargs["json"]


@pytest.mark.unit
def test_default_client_scenario():
    client = ShopSavvyClient("ss_live_abc123")
    assert client.base_url == BASE
    assert client.timeout == 30.0
    assert client.config.environment == "live"
    client.close()


# -------------------------------------------------
# Search and lookup
# -------------------------------------------------


@pytest.mark.unit
def test_search_products(client):
    mock = stub(
        client,
        envelope(
            [PRODUCT],
            pagination={"total": 40, "limit": 10, "offset": 20, "returned": 1},
        ),
    )

    result = client.search_products("echo dot", limit=10, offset=20)

    assert sent(mock) == (
        "GET",
        f"{BASE}/products/search",
        {"q": "echo dot", "limit": 10, "offset": 20},
        None,
    )
    assert isinstance(result, ProductSearchResult)
    assert result.pagination.total == 40
    assert result.data[0].title == "Echo Dot (4th Gen)"


@pytest.mark.unit
def test_search_products_omits_unset_paging(client):
    mock = stub(client, envelope([]))
    client.search_products("echo dot")
    assert sent(mock)[2] == {"q": "echo dot"}


@pytest.mark.unit
def test_get_product_details(client):
    mock = stub(client, envelope([PRODUCT]))

    result = client.get_product_details("840080528349")

    assert sent(mock) == ("GET", f"{BASE}/products", {"ids": "840080528349"}, None)
    assert isinstance(result.data[0], ProductDetails)
    assert result.data[0].amazon == "B08N5WRWNW"
    assert result.credits_used == 1
    assert result.credits_remaining == 99


@pytest.mark.unit
def test_format_is_passed_through(client):
    mock = stub(client, envelope([PRODUCT]))
    client.get_product_details("840080528349", format="json")
    assert sent(mock)[2] == {"ids": "840080528349", "format": "json"}


@pytest.mark.unit
def test_non_json_format_response_raises_api_error(client):
    client.session.request = MagicMock(return_value=FakeResponse(200, json_raises=True))
    with pytest.raises(APIError):
        client.get_product_details("840080528349", format="csv")


@pytest.mark.unit
def test_get_product_details_batch_joins_identifiers(client):
    mock = stub(client, envelope([PRODUCT]))

    client.get_product_details_batch(["840080528349", "B08N5WRWNW", "ss_prod_9"])

    assert sent(mock)[2] == {"ids": "840080528349,B08N5WRWNW,ss_prod_9"}


# -------------------------------------------------
# Offers and history
# -------------------------------------------------


@pytest.mark.unit
def test_get_current_offers(client):
    mock = stub(client, envelope([dict(PRODUCT, offers=[OFFER])]))

    result = client.get_current_offers("840080528349", retailer="amazon")

    assert sent(mock) == (
        "GET",
        f"{BASE}/products/offers",
        {"ids": "840080528349", "retailer": "amazon"},
        None,
    )
    item = result.data[0]
    assert isinstance(item, ProductWithOffers)
    assert item.title == "Echo Dot (4th Gen)"
    assert item.offers[0].price == 29.99
    assert item.offers[0].url == "https://amazon.com/dp/B08N5WRWNW"


@pytest.mark.unit
def test_get_current_offers_batch(client):
    mock = stub(client, envelope([]))
    client.get_current_offers_batch(["1", "2"], format="csv")
    assert sent(mock)[2] == {"ids": "1,2", "format": "csv"}


@pytest.mark.unit
def test_get_price_history(client):
    history = [{"date": "2024-01-01", "price": 31.5, "availability": "in_stock"}]
    mock = stub(client, envelope([dict(OFFER, price_history=history)]))

    result = client.get_price_history(
        "840080528349", date(2024, 1, 1), "2024-01-31", retailer="amazon"
    )

    assert sent(mock) == (
        "GET",
        f"{BASE}/products/offers/history",
        {
            "ids": "840080528349",
            "retailer": "amazon",
            "start_date": "2024-01-01",
            "end_date": "2024-01-31",
        },
        None,
    )
    assert isinstance(result.data[0], OfferWithHistory)
    assert result.data[0].price_history[0].price == 31.5


# -------------------------------------------------
# Scheduling
# -------------------------------------------------


@pytest.mark.unit
def test_schedule_product_monitoring(client):
    mock = stub(client, envelope({"scheduled": True, "product_id": "ss_prod_123"}))

    result = client.schedule_product_monitoring("840080528349", Frequency.DAILY)

    assert sent(mock) == (
        "POST",
        f"{BASE}/products/schedule",
        None,
        {"identifier": "840080528349", "frequency": "daily"},
    )
    assert result.data.scheduled is True
    assert result.data.product_id == "ss_prod_123"


@pytest.mark.unit
def test_schedule_product_monitoring_batch(client):
    mock = stub(
        client,
        envelope(
            [
                {"identifier": "2", "scheduled": True, "product_id": "p2"},
                {"identifier": "1", "scheduled": False, "product_id": ""},
            ]
        ),
    )

    result = client.schedule_product_monitoring_batch(["1", "2", "3"], "weekly", retailer="bestbuy")

    assert sent(mock)[3] == {
        "identifiers": "1,2,3",
        "frequency": "weekly",
        "retailer": "bestbuy",
    }
    by_id = index_by_identifier(result.data)
    assert by_id["1"].scheduled is False
    assert by_id["2"].product_id == "p2"
    assert "3" not in by_id


@pytest.mark.unit
def test_get_scheduled_products(client):
    mock = stub(
        client,
        envelope(
            [
                {
                    "product_id": "ss_prod_123",
                    "identifier": "840080528349",
                    "frequency": "daily",
                    "created_at": "2024-01-01T00:00:00Z",
                }
            ]
        ),
    )

    result = client.get_scheduled_products()

    assert sent(mock) == ("GET", f"{BASE}/products/scheduled", None, None)
    assert result.data[0].retailer is None
    assert result.data[0].frequency == "daily"


@pytest.mark.unit
def test_remove_product_from_schedule(client):
    mock = stub(client, envelope({"removed": True}))

    result = client.remove_product_from_schedule("840080528349")

    assert sent(mock) == (
        "DELETE",
        f"{BASE}/products/schedule",
        None,
        {"identifier": "840080528349"},
    )
    assert result.data.removed is True


@pytest.mark.unit
def test_remove_products_from_schedule(client):
    mock = stub(client, envelope([{"identifier": "1", "removed": True}]))

    result = client.remove_products_from_schedule(["1", "2"])

    assert sent(mock)[3] == {"identifiers": "1,2"}
    assert result.data[0].removed is True


# -------------------------------------------------
# Usage
# -------------------------------------------------


@pytest.mark.unit
def test_get_usage(client):
    mock = stub(
        client,
        envelope(
            {
                "current_period": {
                    "start_date": "2024-01-01",
                    "end_date": "2024-01-31",
                    "credits_used": 120,
                    "credits_limit": 1000,
                    "credits_remaining": 880,
                    "requests_made": 95,
                },
                "usage_percentage": 12.0,
            }
        ),
    )

    result = client.get_usage()

    assert sent(mock) == ("GET", f"{BASE}/usage", None, None)
    assert result.data.current_period.credits_remaining == 880
    assert result.data.usage_percentage == 12.0


# -------------------------------------------------
# Errors
# -------------------------------------------------


@pytest.mark.unit
def test_lookup_rate_limited(client):
    stub(client, {"error": "too many requests"}, status=429)

    with pytest.raises(RateLimitError) as e:
        client.get_product_details("840080528349")

    assert e.value.message == "too many requests"
    assert e.value.status_code == 429


@pytest.mark.unit
def test_lookup_server_error_with_unparsable_body(client):
    client.session.request = MagicMock(return_value=FakeResponse(500, json_raises=True))

    with pytest.raises(APIError) as e:
        client.get_product_details("840080528349")

    assert type(e.value) is APIError
    assert e.value.message == "HTTP 500: Internal Server Error"


@pytest.mark.unit
def test_not_found_and_validation_errors(client):
    stub(client, {"error": "Product not found"}, status=404)
    with pytest.raises(NotFoundError):
        client.get_product_details("000000000000")

    stub(client, {"error": "frequency must be hourly, daily or weekly"}, status=422)
    with pytest.raises(APIValidationError) as e:
        client.schedule_product_monitoring("1", "yearly")
    assert "frequency" in e.value.message


@pytest.mark.unit
def test_network_failure_propagates(client):
    import requests

    client.session.request = MagicMock(side_effect=requests.ConnectionError("down"))
    with pytest.raises(NetworkError):
        client.get_usage()


@pytest.mark.unit
@pytest.mark.parametrize(
    "body",
    [[1, 2, 3], {"success": True}, {"success": True, "data": [{"title": "no id"}]}],
)
def test_unexpected_success_shape_raises_api_error(client, body):
    stub(client, body)
    with pytest.raises(APIError) as e:
        client.get_product_details("1")
    assert "Unexpected response shape" in str(e.value)


@pytest.mark.unit
def test_product_batch_results_matched_by_barcode(client):
    stub(
        client,
        envelope(
            [
                dict(PRODUCT, barcode="222", shopsavvy="ss_prod_2"),
                dict(PRODUCT, barcode="111", shopsavvy="ss_prod_1"),
            ]
        ),
    )

    result = client.get_product_details_batch(["111", "222", "333"])
    by_id = index_by_identifier(result.data)

    assert by_id["111"].shopsavvy == "ss_prod_1"
    assert by_id["222"].shopsavvy == "ss_prod_2"
    assert "333" not in by_id


@pytest.mark.unit
def test_search_products_skips_non_positive_paging(client):
    mock = stub(client, envelope([]))
    client.search_products("x", limit=0, offset=-5)
    assert sent(mock)[2] == {"q": "x"}


@pytest.mark.unit
def test_nothing_scheduled_returns_empty_list(client):
    stub(client, {"success": True, "data": None})
    assert client.get_scheduled_products().data == []
