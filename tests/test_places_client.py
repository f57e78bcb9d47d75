import pytest
import requests

from indie_coffee import config
from indie_coffee.http import HttpClient
from indie_coffee.places_client import PlacesApiError, PlacesClient


class FakeResponse:
    def __init__(self, payload, status_code=200, headers=None):
        self._payload = payload
        self.status_code = status_code
        self.headers = headers or {}

    def json(self):
        return self._payload

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"HTTP {self.status_code}")


class FakeSession:
    def __init__(self, responses):
        self.responses = list(responses)
        self.calls = []

    def get(self, url, params=None, timeout=None):
        self.calls.append((url, dict(params or {})))
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        if isinstance(item, FakeResponse):
            return item
        return FakeResponse(item)


def make_client(responses, retry_max=1):
    http_client = HttpClient(
        timeout=1, retry_max=retry_max, backoff_base=0.0, backoff_max=0.0, sleep=lambda _: None
    )
    http_client.session = FakeSession(responses)
    sleeps = []
    client = PlacesClient(http_client, "dummy", sleep=sleeps.append)
    return client, http_client.session, sleeps


def _page(ids, token=None, status="OK"):
    payload = {
        "status": status,
        "results": [{"place_id": pid, "name": f"Cafe {pid}"} for pid in ids],
    }
    if token:
        payload["next_page_token"] = token
    return payload


def test_pagination_sleeps_before_each_continuation():
    client, session, sleeps = make_client(
        [_page(["a", "b"], token="t1"), _page(["c"], token="t2"), _page(["d"])]
    )

    places = client.search_text_all("coffee shop", 1.0, 2.0, 5000)

    assert [p.place_id for p in places] == ["a", "b", "c", "d"]
    assert sleeps == [config.PAGE_TOKEN_DELAY_SECONDS, config.PAGE_TOKEN_DELAY_SECONDS]
    assert "pagetoken" not in session.calls[0][1]
    assert session.calls[1][1]["pagetoken"] == "t1"
    assert session.calls[2][1]["pagetoken"] == "t2"
    assert session.calls[0][0] == config.PLACES_TEXT_SEARCH_URL


def test_pagination_stops_at_max_pages():
    client, session, sleeps = make_client(
        [_page(["a"], token="t1"), _page(["b"], token="t2"), _page(["c"], token="t3")]
    )

    places = client.search_text_all("coffee shop", 1.0, 2.0, 5000, max_pages=2)

    assert [p.place_id for p in places] == ["a", "b"]
    assert len(session.calls) == 2
    assert len(sleeps) == 1


def test_zero_results_is_success():
    client, _, sleeps = make_client([{"status": "ZERO_RESULTS", "results": []}])
    assert client.search_text_all("coffee shop", 1.0, 2.0, 5000) == []
    assert sleeps == []


def test_first_page_error_status_raises():
    client, _, _ = make_client(
        [{"status": "REQUEST_DENIED", "error_message": "bad key", "results": []}]
    )
    with pytest.raises(PlacesApiError) as excinfo:
        client.search_text_all("coffee shop", 1.0, 2.0, 5000)
    assert excinfo.value.status == "REQUEST_DENIED"
    assert "bad key" in str(excinfo.value)


def test_later_page_error_keeps_collected_places():
    client, _, _ = make_client([_page(["a"], token="t1"), _page([], status="INVALID_REQUEST")])
    places = client.search_text_all("coffee shop", 1.0, 2.0, 5000)
    assert [p.place_id for p in places] == ["a"]


def test_http_client_retries_server_errors():
    client, session, _ = make_client(
        [FakeResponse({}, status_code=503), _page(["a"])], retry_max=2
    )
    places = client.search_text_all("coffee shop", 1.0, 2.0, 5000)
    assert [p.place_id for p in places] == ["a"]
    assert len(session.calls) == 2


def test_http_client_raises_after_retries_exhausted():
    client, _, _ = make_client([requests.ConnectionError("down")])
    with pytest.raises(requests.RequestException):
        client.search_text_all("coffee shop", 1.0, 2.0, 5000)


def test_http_client_does_not_retry_client_errors():
    client, session, _ = make_client([FakeResponse({}, status_code=403), _page(["a"])], retry_max=3)
    with pytest.raises(requests.HTTPError):
        client.search_text_all("coffee shop", 1.0, 2.0, 5000)
    assert len(session.calls) == 1


def test_http_client_uses_injected_sleep():
    sleeps = []
    http_client = HttpClient(timeout=1, retry_max=3, backoff_base=0.5, backoff_max=4.0, sleep=sleeps.append)
    http_client.session = FakeSession(
        [
            FakeResponse({}, status_code=429, headers={"Retry-After": "3"}),
            FakeResponse({}, status_code=503),
            {"status": "OK", "results": []},
        ]
    )

    assert http_client.get_json(config.PLACES_TEXT_SEARCH_URL) == {"status": "OK", "results": []}
    assert sleeps[0] == 3.0
    assert 1.0 <= sleeps[1] <= 1.5
    assert len(sleeps) == 2
