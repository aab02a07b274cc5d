import pytest
import requests

from routing.errors import (
    MissingCredentialError,
    NoRouteFoundError,
    ProviderError,
    TransportError,
)
from routing.ors_client import ORSClient


class FakeResponse:
    def __init__(self, status_code=200, payload=None, text=""):
        self.status_code = status_code
        self.ok = 200 <= status_code < 300
        self._payload = payload
        self.text = text

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON object could be decoded")
        return self._payload


class FakeHttp:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.requests = []

    def post(self, url, headers=None, json=None, timeout=None):
        self.requests.append({"url": url, "headers": headers, "json": json, "timeout": timeout})
        if self.error is not None:
            raise self.error
        return self.response


ORS_PAYLOAD = {
    "routes": [
        {
            "summary": {"distance": 1234.5, "duration": 888.8},
            "geometry": "_p~iF~ps|U_ulLnnqC_mqNvxq`@",
            "segments": [
                {
                    "distance": 600.0,
                    "duration": 430.0,
                    "steps": [
                        {"instruction": "Head east on West 42nd Street", "name": "West 42nd Street",
                         "distance": 600.0, "duration": 430.0, "type": 11},
                        {"instruction": "Arrive at West 42nd Street", "name": "-",
                         "distance": 0.0, "duration": 0.0, "type": 10},
                    ],
                },
                {
                    "distance": 634.5,
                    "duration": 458.8,
                    "steps": [
                        {"instruction": "Turn left onto Park Avenue", "name": "Park Avenue",
                         "distance": 634.5, "duration": 458.8, "type": 0},
                        {"instruction": "Arrive at Park Avenue, on the right", "name": "-",
                         "distance": 0.0, "duration": 0.0, "type": 10},
                    ],
                },
            ],
        }
    ]
}

COORDS = [(-73.9855, 40.7580), (-73.9832, 40.7536), (-73.9772, 40.7527)]


@pytest.fixture
def client_factory():
    def build(http, api_key="test-key"):
        return ORSClient(
            api_key=api_key,
            profile="foot-walking",
            timeout=3,
            base_url="https://ors.example.org/",
            session=http,
        )
    return build


def test_compute_route_posts_lng_lat_and_credential(client_factory):
    http = FakeHttp(FakeResponse(200, ORS_PAYLOAD))
    client = client_factory(http)

    client.compute_route(COORDS)

    sent = http.requests[0]
    assert sent["url"] == "https://ors.example.org/v2/directions/foot-walking"
    assert sent["headers"]["Authorization"] == "test-key"
    assert sent["json"] == {
        "coordinates": [[-73.9855, 40.7580], [-73.9832, 40.7536], [-73.9772, 40.7527]],
        "format": "json",
    }
    assert sent["timeout"] == 3


def test_compute_route_normalizes_first_route_and_flattens_segments(client_factory):
    client = client_factory(FakeHttp(FakeResponse(200, ORS_PAYLOAD)))

    result = client.compute_route(COORDS)

    assert result["geometry"] == "_p~iF~ps|U_ulLnnqC_mqNvxq`@"
    assert result["summary"] == {"distance": 1234.5, "duration": 888.8}
    assert [s["name"] for s in result["steps"]] == ["West 42nd Street", "-", "Park Avenue", "-"]
    assert set(result["steps"][0]) == {"instruction", "name", "distance", "duration"}


def test_missing_credential_raises_before_request(client_factory):
    http = FakeHttp(FakeResponse(200, ORS_PAYLOAD))
    client = client_factory(http, api_key="")

    with pytest.raises(MissingCredentialError):
        client.compute_route(COORDS)

    assert http.requests == []
    assert client.has_credential is False


def test_credential_is_read_from_environment(monkeypatch):
    monkeypatch.setenv("OPENROUTESERVICE_API_KEY", "env-key")
    monkeypatch.setenv("ORS_PROFILE", "cycling-regular")

    client = ORSClient()

    assert client.api_key == "env-key"
    assert client.profile == "cycling-regular"
    assert client.has_credential is True


def test_error_status_becomes_provider_error(client_factory):
    client = client_factory(FakeHttp(FakeResponse(403, text='{"error": "Access to this API has been disallowed"}')))

    with pytest.raises(ProviderError) as excinfo:
        client.compute_route(COORDS)

    assert excinfo.value.status_code == 403
    assert "disallowed" in excinfo.value.body


def test_invalid_json_becomes_provider_error(client_factory):
    client = client_factory(FakeHttp(FakeResponse(200, None, text="<html>gateway</html>")))

    with pytest.raises(ProviderError):
        client.compute_route(COORDS)


def test_zero_routes_is_no_route_found(client_factory):
    client = client_factory(FakeHttp(FakeResponse(200, {"routes": []})))

    with pytest.raises(NoRouteFoundError):
        client.compute_route(COORDS)


@pytest.mark.parametrize("error", [requests.ConnectionError("refused"), requests.Timeout("read timed out")])
def test_network_errors_become_transport_failure(client_factory, error):
    client = client_factory(FakeHttp(error=error))

    with pytest.raises(TransportError):
        client.compute_route(COORDS)


def test_single_coordinate_is_rejected(client_factory):
    http = FakeHttp(FakeResponse(200, ORS_PAYLOAD))

    with pytest.raises(ValueError):
        client_factory(http).compute_route(COORDS[:1])

    assert http.requests == []
