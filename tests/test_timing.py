import pytest

from box_estimator.boxes import estimate_boxes
from box_estimator.counts import BoxCounts, round_half_up
from box_estimator.timing import ServiceType, estimate_time

TEN_SMALL = BoxCounts(small=10)


def test_small_boxes_only():
    result = estimate_time(TEN_SMALL, 0)
    assert result.pack_minutes == 50
    assert result.unpack_minutes == 40


def test_white_glove_adds_twenty_percent():
    result = estimate_time(TEN_SMALL, 0, service_type="White Glove")
    assert result.pack_minutes == 60
    assert result.unpack_minutes == 48
    assert estimate_time(TEN_SMALL, 0, service_type=ServiceType.WHITE_GLOVE) == result


@pytest.mark.parametrize("service_type", [None, "Full Service", "Grab-n-Go", "Labor Only", "white glove", "VIP"])
def test_other_service_types_leave_minutes_unchanged(service_type):
    assert estimate_time(TEN_SMALL, 3, service_type=service_type) == estimate_time(TEN_SMALL, 3)


def test_room_overhead_applied_before_white_glove():
    counts = estimate_boxes("apartment", 0, "normal").counts
    base = estimate_time(counts, 2)
    assert base.pack_minutes == 259
    assert base.unpack_minutes == 225
    uplifted = estimate_time(counts, 2, service_type="White Glove")
    assert uplifted.pack_minutes == 311
    assert uplifted.unpack_minutes == 270


def test_white_glove_matches_rounded_uplift_without_rooms():
    counts = BoxCounts(small=3, medium=2, large=1, wardrobe=1, dish_pack=2, mattress_bag=1, tv_box=1)
    base = estimate_time(counts, 0)
    uplifted = estimate_time(counts, 0, service_type="White Glove")
    assert uplifted.pack_minutes == round_half_up(base.pack_minutes * 1.2)
    assert uplifted.unpack_minutes == round_half_up(base.unpack_minutes * 1.2)


def test_box_weighted_minutes_are_linear():
    counts = BoxCounts(small=4, medium=3, large=2, wardrobe=1, dish_pack=2, mattress_bag=1, tv_box=1)
    doubled = counts.add(counts)
    rooms = 4
    overhead = rooms * 15
    single = estimate_time(counts, rooms)
    double = estimate_time(doubled, rooms)
    assert double.pack_minutes - overhead == 2 * (single.pack_minutes - overhead)
    assert double.unpack_minutes - overhead == 2 * (single.unpack_minutes - overhead)


def test_each_room_adds_fifteen_minutes():
    assert estimate_time(BoxCounts(), 5).pack_minutes == 75
    assert estimate_time(BoxCounts(), 5).unpack_minutes == 75


def test_one_box_of_each_type():
    counts = BoxCounts(small=1, medium=1, large=1, wardrobe=1, dish_pack=1, mattress_bag=1, tv_box=1)
    result = estimate_time(counts, 0)
    assert result.pack_minutes == 56
    assert result.unpack_minutes == 47


def test_mattress_bag_minutes():
    result = estimate_time(BoxCounts(mattress_bag=3), 1)
    assert result.pack_minutes == 30
    assert result.unpack_minutes == 27
