import pytest

from shopsavvy import ShopSavvyClient


class FakeResponse:
    def __init__(self, status_code=200, json_data=None, json_raises=False):
        self.status_code = status_code
        self._json_data = json_data
        self._json_raises = json_raises

    def json(self):
        if self._json_raises:
            raise ValueError("Invalid JSON")
        return self._json_data


def envelope(data, **extra):
    body = {
        "success": True,
        "data": data,
        "meta": {"credits_used": 1, "credits_remaining": 99},
    }
    body.update(extra)
    return body


@pytest.fixture
def client():
    c = ShopSavvyClient("ss_test_abc123")
    yield c
    c.close()
