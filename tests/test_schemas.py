from box_estimator.boxes import PackingIntensity, PropertyType
from box_estimator.schemas import validate_estimation_request


def _valid_request() -> dict:
    return {
        "config": {"minutesPerBoxPack": 6, "minutesPerBoxUnpack": 5},
        "input": {
            "propertyType": "apartment",
            "rooms": {"bedroom": 2, "kitchen": 1, "livingRoom": 1, "misc": 2},
            "packingIntensity": "normal",
            "workers": 3,
        },
    }


def _paths(result) -> list[str]:
    return [error.path for error in result.errors]


def test_parses_valid_request():
    result = validate_estimation_request(_valid_request())
    assert result.success
    assert result.errors == []
    assert result.data.input.property_type is PropertyType.APARTMENT
    assert result.data.input.rooms.living_room == 1
    assert result.data.input.rooms.garage is None


def test_coerces_numeric_strings():
    raw = {
        "config": {"minutesPerBoxPack": "6", "minutesPerBoxUnpack": "5"},
        "input": {
            "propertyType": "apartment",
            "rooms": {"bedroom": "2"},
            "packingIntensity": "lessThanNormal",
            "workers": "2",
        },
    }
    result = validate_estimation_request(raw)
    assert result.success
    assert result.data.config.minutes_per_box_pack == 6
    assert result.data.config.minutes_per_box_unpack == 5
    assert result.data.input.workers == 2
    assert result.data.input.rooms.bedroom == 2
    assert result.data.input.packing_intensity is PackingIntensity.LESS_THAN_NORMAL


def test_empty_request_reports_both_sections():
    result = validate_estimation_request({})
    assert not result.success
    assert result.data is None
    paths = _paths(result)
    assert "config" in paths
    assert "input" in paths


def test_reports_every_invalid_field():
    raw = _valid_request()
    raw["config"]["minutesPerBoxPack"] = "abc"
    raw["input"]["propertyType"] = "castle"
    raw["input"]["packingIntensity"] = "extreme"
    raw["input"]["workers"] = 0
    raw["input"]["rooms"]["bedroom"] = -1
    result = validate_estimation_request(raw)
    assert not result.success
    paths = _paths(result)
    for expected in (
        "config.minutesPerBoxPack",
        "input.propertyType",
        "input.packingIntensity",
        "input.workers",
        "input.rooms.bedroom",
    ):
        assert expected in paths
    assert all(error.message for error in result.errors)


def test_missing_rooms_and_negative_minutes():
    raw = _valid_request()
    del raw["input"]["rooms"]
    raw["config"]["minutesPerBoxUnpack"] = -1
    result = validate_estimation_request(raw)
    assert set(_paths(result)) == {"input.rooms", "config.minutesPerBoxUnpack"}


def test_non_object_never_raises():
    result = validate_estimation_request("not a request")
    assert not result.success
    assert result.errors


def test_validation_result_serializes_wire_names():
    result = validate_estimation_request(_valid_request())
    dumped = result.model_dump(by_alias=True, mode="json")
    assert dumped["data"]["config"]["minutesPerBoxPack"] == 6
    assert dumped["data"]["input"]["rooms"]["livingRoom"] == 1
