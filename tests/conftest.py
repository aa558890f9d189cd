from typing import Callable, List

import httpx
import pytest

from app.models.map_models import PersistedRoute
from app.models.route_models import RouteGeometry, Waypoint
from app.services.directions_client import DirectionsClient

TEST_BASE_URL = "https://directions.test/directions/v5/mapbox"


def make_route(route_id: str, **overrides) -> PersistedRoute:
    data = {
        "id": route_id,
        "title": f"Route {route_id}",
        "city": "Berlin",
        "visibility": "public",
        "publication_status": "published",
        "source": "user",
        "priority_score": 15,
        "transport_mode": "walking",
    }
    data.update(overrides)
    return PersistedRoute(**data)


def line(*lonlat) -> RouteGeometry:
    return RouteGeometry(coordinates=list(lonlat))


@pytest.fixture
def berlin_waypoints() -> List[Waypoint]:
    return [Waypoint(lat=52.52, lon=13.405, title="Alexanderplatz"), Waypoint(lat=52.50, lon=13.40, title="Mitte")]


@pytest.fixture
def offline_client() -> DirectionsClient:
    return DirectionsClient(access_token="", base_url=TEST_BASE_URL)


@pytest.fixture
def mapbox_client() -> Callable[[Callable[[httpx.Request], httpx.Response]], DirectionsClient]:
    def factory(handler):
        http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        return DirectionsClient(access_token="pk.test-token", base_url=TEST_BASE_URL, http_client=http)

    return factory


@pytest.fixture
def mapbox_payload() -> dict:
    return {
        "code": "Ok",
        "routes": [
            {
                "distance": 2350.4,
                "duration": 1690.2,
                "geometry": {
                    "type": "LineString",
                    "coordinates": [[13.405, 52.52], [13.41, 52.515], [13.40, 52.50]],
                },
                "legs": [
                    {
                        "steps": [
                            {
                                "distance": 1200.0,
                                "duration": 860.0,
                                "maneuver": {"instruction": "Head south on Karl-Liebknecht-Strasse", "type": "depart"},
                            },
                            {
                                "distance": 1150.4,
                                "duration": 830.2,
                                "maneuver": {"instruction": "You have arrived", "type": "arrive"},
                            },
                        ]
                    }
                ],
            }
        ],
    }
