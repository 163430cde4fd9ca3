from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from typing import Dict, Union

from .counts import BoxCounts
from .tables import (
    CREW_SIZE_BY_BOX_COUNT,
    FIXED_ESTIMATES,
    MAX_CREW_SIZE,
    PACKING_INTENSITY_MULTIPLIER,
    PROPERTY_LAYOUTS,
    ROOM_ALLOCATION,
    PropertyLayout,
)


class PropertyType(str, Enum):
    APARTMENT = "apartment"
    NORMAL_HOME = "normalHome"
    LARGE_HOME = "largeHome"

    def layout(self) -> PropertyLayout:
        return PROPERTY_LAYOUTS[self.value]


class PackingIntensity(str, Enum):
    LESS_THAN_NORMAL = "lessThanNormal"
    NORMAL = "normal"
    MORE_THAN_NORMAL = "moreThanNormal"

    @property
    def multiplier(self) -> float:
        return PACKING_INTENSITY_MULTIPLIER[self.value]


class RoomType(str, Enum):
    BEDROOM = "bedroom"
    LIVING_ROOM = "livingRoom"
    KITCHEN = "kitchen"
    DINING_ROOM = "diningRoom"
    GARAGE = "garage"
    OFFICE = "office"
    PATIO_SHED = "patioShed"
    ATTIC_BASEMENT = "atticBasement"

    @property
    def allocation(self) -> BoxCounts:
        return ROOM_ALLOCATION[self.value]


class FixedEstimateType(str, Enum):
    STUDIO_APARTMENT = "Studio Apartment"
    OFFICE_SMALL = "Office (Small)"
    OFFICE_MEDIUM = "Office (Medium)"
    OFFICE_LARGE = "Office (Large)"
    STORAGE_5X10 = "5 x 10 Storage Unit"
    STORAGE_5X15 = "5 x 15 Storage Unit"
    STORAGE_10X10 = "10 x 10 Storage Unit"
    STORAGE_10X15 = "10 x 15 Storage Unit"
    STORAGE_10X20 = "10 x 20 Storage Unit"

    @property
    def template(self) -> BoxCounts:
        return FIXED_ESTIMATES[self.value]


@dataclass(frozen=True)
class EstimateBoxesResult:
    counts: BoxCounts
    total_rooms: int

    def as_dict(self) -> Dict[str, object]:
        return {"counts": self.counts.as_dict(), "totalRooms": self.total_rooms}


def clamp_bedrooms(property_type: Union[PropertyType, str], bedrooms: float) -> int:
    """Floor ``bedrooms`` and clamp it into the range the property type allows.

    Out-of-range input is never rejected here; houses always count at least
    one bedroom while apartments may be studios. Positive infinity maps to
    the maximum, negative infinity and NaN to the minimum.
    """

    layout = PropertyType(property_type).layout()
    if math.isnan(bedrooms):
        return layout.min_bedrooms
    if math.isinf(bedrooms):
        return layout.max_bedrooms if bedrooms > 0 else layout.min_bedrooms
    return max(layout.min_bedrooms, min(layout.max_bedrooms, math.floor(bedrooms)))


def room_plan(property_type: Union[PropertyType, str], bedrooms: float) -> Dict[RoomType, int]:
    prop = PropertyType(property_type)
    rooms: Dict[RoomType, int] = {RoomType(room): 1 for room in prop.layout().base_rooms}
    rooms[RoomType.BEDROOM] = clamp_bedrooms(prop, bedrooms)
    return rooms


def estimate_boxes(
    property_type: Union[PropertyType, str],
    bedrooms: float,
    packing_intensity: Union[PackingIntensity, str],
) -> EstimateBoxesResult:
    intensity = PackingIntensity(packing_intensity)
    counts = BoxCounts()
    total_rooms = 0
    for room, quantity in room_plan(property_type, bedrooms).items():
        for _ in range(quantity):
            counts = counts.add(room.allocation)
            total_rooms += 1
    return EstimateBoxesResult(counts=counts.scale(intensity.multiplier), total_rooms=total_rooms)


def estimate_fixed_boxes(
    fixed_type: Union[FixedEstimateType, str],
    packing_intensity: Union[PackingIntensity, str] = PackingIntensity.NORMAL,
) -> EstimateBoxesResult:
    """Box counts for studios, offices and storage units, which have no room breakdown."""

    template = FixedEstimateType(fixed_type).template
    intensity = PackingIntensity(packing_intensity)
    return EstimateBoxesResult(counts=template.scale(intensity.multiplier), total_rooms=0)


def recommend_crew_size(counts: BoxCounts) -> int:
    total = counts.total
    for max_boxes, crew in CREW_SIZE_BY_BOX_COUNT:
        if total <= max_boxes:
            return crew
    return MAX_CREW_SIZE
