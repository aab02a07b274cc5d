import pytest
import requests

from routing.errors import ProviderError, TransportError
from routing.geocoding import NominatimGeocoder, Place


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=""):
        self.status_code = status_code
        self.ok = 200 <= status_code < 300
        self._payload = payload
        self.text = text

    def json(self):
        return self._payload


class HtmlResponse(FakeResponse):
    """200 with an HTML error page instead of JSON."""
    def json(self):
        raise ValueError("Expecting value: line 1 column 1 (char 0)")


class FakeHttp:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.requests = []

    def get(self, url, params=None, headers=None, timeout=None):
        self.requests.append({"url": url, "params": params, "headers": headers})
        if self.error is not None:
            raise self.error
        return self.response


@pytest.fixture
def geocoder_factory():
    def build(http):
        return NominatimGeocoder(base_url="https://nominatim.example.org", user_agent="tests/1.0", session=http)
    return build


def test_search_returns_best_match(geocoder_factory):
    http = FakeHttp(FakeResponse(200, [
        {"display_name": "Bryant Park, Manhattan, New York County, New York, United States",
         "lat": "40.7536", "lon": "-73.9832"},
    ]))

    place = geocoder_factory(http).search("  bryant park ")

    assert place == Place(
        display_name="Bryant Park, Manhattan, New York County, New York, United States",
        label="Bryant Park",
        lat=40.7536,
        lng=-73.9832,
    )
    sent = http.requests[0]
    assert sent["url"] == "https://nominatim.example.org/search"
    assert sent["params"]["q"] == "bryant park"
    assert sent["params"]["limit"] == 1
    assert sent["headers"]["User-Agent"] == "tests/1.0"


def test_search_without_results_is_none(geocoder_factory):
    assert geocoder_factory(FakeHttp(FakeResponse(200, []))).search("nowhere at all") is None


def test_blank_query_skips_network(geocoder_factory):
    http = FakeHttp(FakeResponse(200, []))

    assert geocoder_factory(http).search("   ") is None
    assert http.requests == []


def test_label_falls_back_to_query(geocoder_factory):
    http = FakeHttp(FakeResponse(200, [{"display_name": "", "lat": "1", "lon": "2"}]))

    assert geocoder_factory(http).search("Somewhere").label == "Somewhere"


def test_error_status_raises_provider_error(geocoder_factory):
    with pytest.raises(ProviderError):
        geocoder_factory(FakeHttp(FakeResponse(429, text="Too Many Requests"))).search("Bryant Park")


def test_network_failure_raises_transport_error(geocoder_factory):
    with pytest.raises(TransportError):
        geocoder_factory(FakeHttp(error=requests.ConnectionError("offline"))).search("Bryant Park")


def test_non_json_body_raises_provider_error(geocoder_factory):
    http = FakeHttp(HtmlResponse(200, text="<html>maintenance</html>"))

    with pytest.raises(ProviderError):
        geocoder_factory(http).search("Bryant Park")


@pytest.mark.parametrize("result", [
    {"display_name": "Bryant Park", "lon": "-73.9832"},
    {"display_name": "Bryant Park", "lat": None, "lon": "-73.9832"},
    {"display_name": "Bryant Park", "lat": "north", "lon": "-73.9832"},
])
def test_result_without_usable_coordinates_raises_provider_error(geocoder_factory, result):
    with pytest.raises(ProviderError):
        geocoder_factory(FakeHttp(FakeResponse(200, [result]))).search("Bryant Park")
