from __future__ import annotations

import hashlib
import json
from dataclasses import dataclass
from types import MappingProxyType
from typing import Mapping, Tuple

from .counts import BoxCounts

ROOM_ALLOCATION: Mapping[str, BoxCounts] = MappingProxyType(
    {
        "bedroom": BoxCounts(small=4, medium=6, large=2, wardrobe=2, dish_pack=1, mattress_bag=1, tv_box=1),
        "livingRoom": BoxCounts(small=3, medium=5, large=3, wardrobe=1, dish_pack=1, mattress_bag=0, tv_box=1),
        "kitchen": BoxCounts(small=4, medium=6, large=2, wardrobe=0, dish_pack=3, mattress_bag=0, tv_box=0),
        "diningRoom": BoxCounts(small=2, medium=3, large=2, wardrobe=0, dish_pack=1, mattress_bag=0, tv_box=0),
        "garage": BoxCounts(small=5, medium=7, large=3, wardrobe=0, dish_pack=1, mattress_bag=0, tv_box=0),
        "office": BoxCounts(small=3, medium=4, large=2, wardrobe=0, dish_pack=1, mattress_bag=0, tv_box=1),
        "patioShed": BoxCounts(small=2, medium=3, large=3, wardrobe=0, dish_pack=1, mattress_bag=0, tv_box=0),
        "atticBasement": BoxCounts(small=3, medium=5, large=3, wardrobe=0, dish_pack=1, mattress_bag=0, tv_box=0),
    }
)

PACKING_INTENSITY_MULTIPLIER: Mapping[str, float] = MappingProxyType(
    {
        "lessThanNormal": 0.75,
        "normal": 1.0,
        "moreThanNormal": 1.5,
    }
)


@dataclass(frozen=True)
class MinuteTable:
    """Minutes per box of each type, plus a flat setup overhead per room."""

    per_box: BoxCounts
    extra_per_room: int

    def weighted_minutes(self, counts: BoxCounts, total_rooms: int) -> int:
        return counts.dot(self.per_box) + total_rooms * self.extra_per_room


PACKING_TIME_MIN_PER_BOX = MinuteTable(
    per_box=BoxCounts(small=5, medium=7, large=9, wardrobe=10, dish_pack=14, mattress_bag=5, tv_box=6),
    extra_per_room=15,
)
UNPACKING_TIME_MIN_PER_BOX = MinuteTable(
    per_box=BoxCounts(small=4, medium=6, large=8, wardrobe=8, dish_pack=12, mattress_bag=4, tv_box=5),
    extra_per_room=15,
)

WHITE_GLOVE_MULTIPLIER = 1.2


@dataclass(frozen=True)
class PropertyLayout:
    base_rooms: Tuple[str, ...]
    min_bedrooms: int
    max_bedrooms: int
    description: str


PROPERTY_LAYOUTS: Mapping[str, PropertyLayout] = MappingProxyType(
    {
        "apartment": PropertyLayout(
            base_rooms=("livingRoom", "kitchen"),
            min_bedrooms=0,
            max_bedrooms=5,
            description="Living room and kitchen plus bedrooms; zero bedrooms is a studio",
        ),
        "normalHome": PropertyLayout(
            base_rooms=("livingRoom", "kitchen", "diningRoom", "garage"),
            min_bedrooms=1,
            max_bedrooms=5,
            description="Standard house with common areas and garage plus bedrooms",
        ),
        "largeHome": PropertyLayout(
            base_rooms=(
                "livingRoom",
                "kitchen",
                "diningRoom",
                "garage",
                "office",
                "patioShed",
                "atticBasement",
            ),
            min_bedrooms=1,
            max_bedrooms=5,
            description="Large house with every common and utility space plus bedrooms",
        ),
    }
)

# Spaces that are estimated from a fixed template instead of room by room.
FIXED_ESTIMATES: Mapping[str, BoxCounts] = MappingProxyType(
    {
        "Studio Apartment": BoxCounts(small=8, medium=12, large=6, wardrobe=2, dish_pack=2, mattress_bag=1, tv_box=1),
        "Office (Small)": BoxCounts(small=10, medium=15, large=8, wardrobe=0, dish_pack=2, mattress_bag=0, tv_box=2),
        "Office (Medium)": BoxCounts(small=20, medium=30, large=15, wardrobe=0, dish_pack=4, mattress_bag=0, tv_box=4),
        "Office (Large)": BoxCounts(small=35, medium=50, large=25, wardrobe=0, dish_pack=8, mattress_bag=0, tv_box=6),
        "5 x 10 Storage Unit": BoxCounts(small=6, medium=8, large=4, wardrobe=1, dish_pack=1, mattress_bag=0, tv_box=1),
        "5 x 15 Storage Unit": BoxCounts(small=9, medium=12, large=6, wardrobe=2, dish_pack=2, mattress_bag=0, tv_box=1),
        "10 x 10 Storage Unit": BoxCounts(small=12, medium=16, large=8, wardrobe=2, dish_pack=2, mattress_bag=1, tv_box=2),
        "10 x 15 Storage Unit": BoxCounts(small=18, medium=24, large=12, wardrobe=3, dish_pack=3, mattress_bag=1, tv_box=2),
        "10 x 20 Storage Unit": BoxCounts(small=24, medium=32, large=16, wardrobe=4, dish_pack=4, mattress_bag=2, tv_box=3),
    }
)

# (max boxes inclusive, crew size); anything larger gets MAX_CREW_SIZE.
CREW_SIZE_BY_BOX_COUNT: Tuple[Tuple[int, int], ...] = (
    (30, 2),
    (60, 3),
    (90, 4),
    (120, 5),
)
MAX_CREW_SIZE = 6


def tables_fingerprint() -> str:
    payload = {
        "room_allocation": {room: counts.as_dict() for room, counts in ROOM_ALLOCATION.items()},
        "intensity": dict(PACKING_INTENSITY_MULTIPLIER),
        "pack": {**PACKING_TIME_MIN_PER_BOX.per_box.as_dict(), "extraPerRoom": PACKING_TIME_MIN_PER_BOX.extra_per_room},
        "unpack": {
            **UNPACKING_TIME_MIN_PER_BOX.per_box.as_dict(),
            "extraPerRoom": UNPACKING_TIME_MIN_PER_BOX.extra_per_room,
        },
        "white_glove": WHITE_GLOVE_MULTIPLIER,
        "fixed": {name: counts.as_dict() for name, counts in FIXED_ESTIMATES.items()},
        "crew": [list(rule) for rule in CREW_SIZE_BY_BOX_COUNT] + [[None, MAX_CREW_SIZE]],
    }
    data = json.dumps(payload, sort_keys=True).encode("utf-8")
    return hashlib.sha256(data).hexdigest()
