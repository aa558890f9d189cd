import pytest

from app.models.map_models import MapBounds, MapFilterOptions, RouteStop, UserPreferences
from app.services.route_ranking import (
    FEATURED_BONUS,
    ROUTE_PRIORITIES,
    default_priority_score,
    proximity_bonus,
    score_route,
    select_for_map,
)
from conftest import line, make_route

USER = (52.52, 13.405)
# roughly 0.5 km and 15 km north of USER
NEAR = (13.405, 52.5245)
FAR = (13.405, 52.655)


def test_featured_scores_at_least_30_more():
    plain = make_route("a")
    featured = make_route("b", visibility="featured")
    assert score_route(featured).relevance_score - score_route(plain).relevance_score == FEATURED_BONUS


def test_proximity_tiers_near_vs_far():
    near = make_route("near", route_geometry=line(NEAR, (13.41, 52.53)))
    far = make_route("far", route_geometry=line(FAR, (13.41, 52.66)))
    options = MapFilterOptions(user_location=USER)

    ranked = {r.id: r for r in select_for_map([far, near], options)}
    assert ranked["near"].relevance_score - ranked["far"].relevance_score == 20
    assert ranked["near"].distance_from_user_m == pytest.approx(500, abs=20)
    assert ranked["far"].distance_from_user_m == pytest.approx(15_000, rel=0.02)


@pytest.mark.parametrize(
    "meters,bonus",
    [(0, 20), (999, 20), (1000, 15), (2999, 15), (4999, 10), (9999, 5), (10_000, 0), (50_000, 0)],
)
def test_proximity_bonus_boundaries(meters, bonus):
    assert proximity_bonus(meters) == bonus


def test_featured_routes_lead_the_berlin_map():
    pool = [make_route(str(i), priority_score=15 + i) for i in range(8)]
    pool.insert(3, make_route("f1", visibility="featured", priority_score=15))
    pool.insert(7, make_route("f2", visibility="featured", priority_score=20))
    assert len(pool) == 10

    result = select_for_map(pool, MapFilterOptions(city="Berlin", max_routes=5))
    assert len(result) == 5
    assert {r.id for r in result[:2]} == {"f1", "f2"}
    assert [r.relevance_score for r in result] == sorted((r.relevance_score for r in result), reverse=True)


def test_transport_preference_is_a_hard_filter_plus_bonus():
    pool = [
        make_route("walk", transport_mode="walking"),
        make_route("bike", transport_mode="cycling"),
        make_route("car", transport_mode="driving"),
    ]
    prefs = UserPreferences(transport_modes=["walking", "cycling"])
    result = select_for_map(pool, MapFilterOptions(user_preferences=prefs))

    assert {r.id for r in result} == {"walk", "bike"}
    assert all(r.relevance_score == 15 + 10 for r in result)


def test_difficulty_preference_filters_unknown_levels():
    pool = [
        make_route("easy", difficulty_level="easy"),
        make_route("hard", difficulty_level="hard"),
        make_route("unset"),
    ]
    prefs = UserPreferences(difficulty_levels=["easy"])
    result = select_for_map(pool, MapFilterOptions(user_preferences=prefs))
    assert [r.id for r in result] == ["easy"]


def test_empty_preferences_do_not_filter():
    pool = [make_route("a", transport_mode="driving"), make_route("b", transport_mode=None)]
    result = select_for_map(pool, MapFilterOptions(user_preferences=UserPreferences()))
    assert len(result) == 2


def test_map_bounds_filter():
    bounds = MapBounds(north=52.55, south=52.45, east=13.45, west=13.35)
    inside = make_route("inside", route_geometry=line((13.0, 52.0), (13.40, 52.50)))
    outside = make_route("outside", route_geometry=line((13.0, 52.0), (13.1, 52.1)))
    no_geometry = make_route("none")

    result = select_for_map([inside, outside, no_geometry], MapFilterOptions(map_bounds=bounds))
    assert {r.id for r in result} == {"inside", "none"}


def test_distance_uses_first_stop_without_geometry():
    stops = [
        RouteStop(order_index=1, title="second", latitude=52.9, longitude=13.405),
        RouteStop(order_index=0, title="first", latitude=NEAR[1], longitude=NEAR[0]),
    ]
    scored = score_route(make_route("stops", points=stops), user_location=USER)
    assert scored.distance_from_user_m == pytest.approx(500, abs=20)
    assert scored.relevance_score == 15 + 20


def test_route_without_location_gets_no_distance():
    scored = score_route(make_route("bare"), user_location=USER)
    assert scored.distance_from_user_m is None
    assert scored.relevance_score == 15


def test_max_routes_truncates_and_ties_keep_pool_order():
    pool = [make_route(str(i)) for i in range(40)]
    result = select_for_map(pool, MapFilterOptions())
    assert len(result) == 30
    assert [r.id for r in result] == [str(i) for i in range(30)]


def test_input_pool_is_not_mutated():
    route = make_route("a", visibility="featured")
    select_for_map([route], MapFilterOptions(user_location=USER))
    assert route.priority_score == 15
    assert not hasattr(route, "relevance_score")


def test_rescoring_a_scored_route():
    once = score_route(make_route("a"))
    twice = score_route(once)
    assert twice.relevance_score == once.relevance_score


def test_default_priority_score_tiers():
    assert default_priority_score("ai_generated") == ROUTE_PRIORITIES["ai_generated"] == 5
    assert default_priority_score("corporate") == 30
    assert default_priority_score("editorial") == 25
    assert default_priority_score("institutional") == 20
    assert default_priority_score("user") == 15
    assert default_priority_score("user", "featured") == 50
