import asyncio
from unittest import mock

import pytest

from app.models.route_models import RouteOptions, Waypoint
from app.services.route_optimizer import greedy_reorder, optimize_route, should_reorder
from app.services.errors import InsufficientWaypointsError


def run(coro):
    return asyncio.run(coro)


def scattered(count):
    # start and end fixed, interior deliberately far-to-near from the start
    start = Waypoint(lat=52.50, lon=13.40, title="start")
    end = Waypoint(lat=52.60, lon=13.40, title="end")
    interior = [Waypoint(lat=52.50 + 0.01 * (count - 1 - i), lon=13.41, title=f"p{i}") for i in range(1, count - 1)]
    return [start, *interior, end]


def test_greedy_reorder_keeps_endpoints_and_sorts_interior():
    points = scattered(6)
    ordered = greedy_reorder(points)

    assert ordered[0] == points[0]
    assert ordered[-1] == points[-1]
    interior_lats = [p.lat for p in ordered[1:-1]]
    assert interior_lats == sorted(interior_lats)
    assert sorted(p.title for p in ordered) == sorted(p.title for p in points)


def test_greedy_reorder_ties_keep_input_order():
    start = Waypoint(lat=0.0, lon=0.0, title="s")
    east = Waypoint(lat=0.0, lon=0.01, title="east")
    west = Waypoint(lat=0.0, lon=-0.01, title="west")
    end = Waypoint(lat=1.0, lon=0.0, title="e")
    assert [p.title for p in greedy_reorder([start, east, west, end])] == ["s", "east", "west", "e"]


def test_greedy_reorder_accepts_custom_accessors():
    rows = [{"la": 0.0, "lo": 0.0}, {"la": 0.3, "lo": 0.0}, {"la": 0.1, "lo": 0.0}, {"la": 0.5, "lo": 0.0}]
    ordered = greedy_reorder(rows, lat_of=lambda r: r["la"], lon_of=lambda r: r["lo"])
    assert [r["la"] for r in ordered] == [0.0, 0.1, 0.3, 0.5]


@pytest.mark.parametrize(
    "count,expected",
    [(2, False), (3, False), (4, True), (8, True), (9, False), (12, False), (13, False), (30, False)],
)
def test_should_reorder_window(count, expected):
    assert should_reorder(count) is expected


def test_optimize_five_points_reorders_interior(offline_client):
    points = scattered(5)
    result = run(optimize_route(points, RouteOptions(), offline_client))

    assert result.optimized_points[0] == points[0]
    assert result.optimized_points[-1] == points[-1]
    assert result.reordered is True
    assert result.route.geometry.coordinates == [tuple(p.lonlat()) for p in result.optimized_points]


def test_optimize_thirteen_points_keeps_order(offline_client):
    points = scattered(13)
    result = run(optimize_route(points, RouteOptions(), offline_client))
    assert result.optimized_points == points
    assert result.reordered is False


@pytest.mark.parametrize("count", [2, 3, 9, 12])
def test_optimize_outside_window_keeps_order(offline_client, count):
    points = scattered(count)
    result = run(optimize_route(points, RouteOptions(), offline_client))
    assert result.optimized_points == points


def test_optimize_delegates_to_directions_client(offline_client):
    points = scattered(4)
    with mock.patch.object(offline_client, "build_route", wraps=offline_client.build_route) as spy:
        run(optimize_route(points, RouteOptions(transport_mode="cycling"), offline_client))

    spy.assert_called_once()
    sent_points, sent_options = spy.call_args.args
    assert sent_points == greedy_reorder(points)
    assert sent_options.transport_mode == "cycling"


def test_optimize_propagates_insufficient_waypoints(offline_client):
    with pytest.raises(InsufficientWaypointsError):
        run(optimize_route([Waypoint(lat=1.0, lon=1.0)], RouteOptions(), offline_client))
