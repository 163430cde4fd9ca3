from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional

from .counts import BoxCounts, round_half_up
from .tables import PACKING_TIME_MIN_PER_BOX, UNPACKING_TIME_MIN_PER_BOX, WHITE_GLOVE_MULTIPLIER


class ServiceType(str, Enum):
    GRAB_N_GO = "Grab-n-Go"
    FULL_SERVICE = "Full Service"
    WHITE_GLOVE = "White Glove"
    LABOR_ONLY = "Labor Only"


@dataclass(frozen=True)
class EstimateTimeResult:
    pack_minutes: int
    unpack_minutes: int

    def as_dict(self) -> Dict[str, int]:
        return {"packMinutes": self.pack_minutes, "unpackMinutes": self.unpack_minutes}


def service_multiplier(service_type: Optional[str]) -> float:
    if service_type == ServiceType.WHITE_GLOVE.value:
        return WHITE_GLOVE_MULTIPLIER
    return 1.0


def estimate_time(
    counts: BoxCounts,
    total_rooms: int,
    service_type: Optional[str] = None,
) -> EstimateTimeResult:
    """Packing and unpacking minutes for a box breakdown.

    The per-room overhead is added before the White Glove uplift, and each
    total is rounded separately. Service types other than White Glove,
    including unknown ones, leave the minutes unchanged.
    """

    multiplier = service_multiplier(service_type)
    pack = PACKING_TIME_MIN_PER_BOX.weighted_minutes(counts, total_rooms)
    unpack = UNPACKING_TIME_MIN_PER_BOX.weighted_minutes(counts, total_rooms)
    return EstimateTimeResult(
        pack_minutes=round_half_up(pack * multiplier),
        unpack_minutes=round_half_up(unpack * multiplier),
    )
