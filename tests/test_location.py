from garden_engine.location import LocationInfo, frost_anchor_for, normalize_location


def test_normalize_location_full():
    info = normalize_location(
        {
            "zip": " 02134 ",
            "locationName": "Boston, MA",
            "stationId": "USW00014739",
            "stationName": "Boston Logan",
            "alternateStationIds": ["USC00190770", "", 7],
            "springFrostDay": 105,
            "winterFrostDay": "301.5",
            "fetchedAt": "2025-01-01T00:00:00.000Z",
            "hardinessZone": "6b",
        }
    )
    assert info.zip == "02134"
    assert info.alternate_station_ids == ("USC00190770",)
    assert info.spring_frost_day == 105
    assert info.winter_frost_day == 301.5
    assert info.latitude is None
    assert frost_anchor_for(info) == 105


def test_normalize_location_requires_identifier():
    assert normalize_location({"locationName": "Nowhere"}) is None
    assert normalize_location({"zip": "  ", "stationId": ""}) is None
    assert normalize_location("02134") is None
    assert normalize_location(None) is None


def test_bad_frost_day_defaults():
    info = normalize_location({"stationId": "X", "springFrostDay": None})
    assert info.spring_frost_day == 120
    assert info.fetched_at.endswith("Z")
    for raw in (10_000_000, -40, 1e12, "400"):
        assert normalize_location({"zip": "12345", "springFrostDay": raw}).spring_frost_day == 120


def test_frost_anchor_without_location():
    assert frost_anchor_for(None) == 120


def test_location_as_dict_round_trip():
    info = normalize_location({"zip": "97201", "springFrostDay": 90, "fetchedAt": "2025-02-02"})
    assert isinstance(info, LocationInfo)
    assert normalize_location(info.as_dict()) == info
