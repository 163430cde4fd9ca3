from __future__ import annotations

from dataclasses import dataclass
from typing import Dict, Optional, Union

from .boxes import EstimateBoxesResult, PackingIntensity, PropertyType, estimate_boxes
from .counts import BoxCounts
from .timing import EstimateTimeResult, estimate_time


@dataclass(frozen=True)
class EstimateAllResult:
    counts: BoxCounts
    total_rooms: int
    pack_minutes: int
    unpack_minutes: int

    @classmethod
    def combine(cls, boxes: EstimateBoxesResult, time: EstimateTimeResult) -> "EstimateAllResult":
        return cls(
            counts=boxes.counts,
            total_rooms=boxes.total_rooms,
            pack_minutes=time.pack_minutes,
            unpack_minutes=time.unpack_minutes,
        )

    def as_dict(self) -> Dict[str, object]:
        return {
            "counts": self.counts.as_dict(),
            "totalRooms": self.total_rooms,
            "packMinutes": self.pack_minutes,
            "unpackMinutes": self.unpack_minutes,
        }


def estimate_all(
    property_type: Union[PropertyType, str],
    bedrooms: float,
    packing_intensity: Union[PackingIntensity, str],
    service_type: Optional[str] = None,
) -> EstimateAllResult:
    boxes = estimate_boxes(property_type, bedrooms, packing_intensity)
    time = estimate_time(boxes.counts, boxes.total_rooms, service_type=service_type)
    return EstimateAllResult.combine(boxes, time)
