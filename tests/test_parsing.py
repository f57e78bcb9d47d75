from indie_coffee.places_client import build_text_search_params, parse_places_response


def test_parse_places_missing_fields():
    response = {
        "results": [
            {"place_id": "p1"},
            {"place_id": "p2", "name": "Name", "vicinity": "12 Main St"},
            {"place_id": "p3", "geometry": {"location": {"lat": 1.0, "lng": 2.0}}},
            {"name": "no-id"},
        ]
    }

    parsed = parse_places_response(response)
    assert [p.place_id for p in parsed] == ["p1", "p2", "p3"]
    assert parsed[0].name is None
    assert parsed[0].rating is None
    assert parsed[0].lat is None
    assert parsed[0].lon is None
    assert parsed[0].open_now is None
    assert parsed[1].address == "12 Main St"
    assert parsed[2].lat == 1.0
    assert parsed[2].lon == 2.0
    assert parsed[2].has_location


def test_parse_prefers_formatted_address_and_checks_types():
    response = {
        "results": [
            {
                "place_id": "p1",
                "name": "Cafe",
                "rating": "4.5",
                "user_ratings_total": 88,
                "formatted_address": "1 Full Address, City",
                "vicinity": "Short",
                "opening_hours": {"open_now": False},
            },
            {
                "place_id": "p2",
                "name": "Cafe 2",
                "rating": 4.1,
                "user_ratings_total": True,
                "opening_hours": {"open_now": "yes"},
            },
        ]
    }

    first, second = parse_places_response(response)
    assert first.address == "1 Full Address, City"
    assert first.rating is None
    assert first.user_rating_count == 88
    assert first.open_now is False
    assert second.rating == 4.1
    assert second.user_rating_count is None
    assert second.open_now is None


def test_parse_empty_response():
    assert parse_places_response({}) == []
    assert parse_places_response({"status": "ZERO_RESULTS", "results": []}) == []


def test_text_search_params():
    params = build_text_search_params("coffee shop", 52.2, 21.0, 5000, "k")
    assert params == {
        "query": "coffee shop",
        "location": "52.2,21.0",
        "radius": "5000",
        "key": "k",
    }
    with_token = build_text_search_params("coffee shop", 52.2, 21.0, 5000, "k", page_token="tok")
    assert with_token["pagetoken"] == "tok"


def test_parse_rejects_non_finite_numbers():
    response = {
        "results": [
            {
                "place_id": "p1",
                "rating": float("nan"),
                "user_ratings_total": float("inf"),
                "geometry": {"location": {"lat": float("nan"), "lng": 2.0}},
            }
        ]
    }

    (place,) = parse_places_response(response)
    assert place.rating is None
    assert place.user_rating_count is None
    assert place.lat is None
    assert not place.has_location
