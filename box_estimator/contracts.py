"""Configurable-rate estimation contract.

This path multiplies box totals by flat, caller-supplied minute rates. It is
deliberately separate from :func:`box_estimator.timing.estimate_time`, which
uses the fixed per-box-type tables.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Union

from .boxes import PackingIntensity
from .counts import BoxCounts, round_half_up
from .schemas import EstimationConfig, EstimationRequest


@dataclass(frozen=True)
class BoxSummary:
    total_boxes: int
    pack_minutes: int
    unpack_minutes: int


@dataclass(frozen=True)
class RequestSummary:
    total_boxes: int
    pack_minutes: int
    unpack_minutes: int
    workers: int
    crew_pack_minutes: int
    crew_unpack_minutes: int


def summarize_boxes(
    counts: Union[BoxCounts, Mapping[str, Any], None],
    config: Optional[EstimationConfig] = None,
) -> BoxSummary:
    """Total the boxes, treating absent and negative counts as zero.

    Minutes stay at zero unless flat per-box rates are supplied.
    """

    if not isinstance(counts, BoxCounts):
        counts = BoxCounts.from_mapping(counts)
    total_boxes = counts.clamped().total
    if config is None:
        return BoxSummary(total_boxes=total_boxes, pack_minutes=0, unpack_minutes=0)
    return BoxSummary(
        total_boxes=total_boxes,
        pack_minutes=total_boxes * config.minutes_per_box_pack,
        unpack_minutes=total_boxes * config.minutes_per_box_unpack,
    )


def summarize_request(request: EstimationRequest) -> RequestSummary:
    raw_boxes = sum(request.input.rooms.present().values())
    intensity = PackingIntensity(request.input.packing_intensity)
    total_boxes = round_half_up(raw_boxes * intensity.multiplier)
    pack_minutes = total_boxes * request.config.minutes_per_box_pack
    unpack_minutes = total_boxes * request.config.minutes_per_box_unpack
    workers = request.input.workers
    return RequestSummary(
        total_boxes=total_boxes,
        pack_minutes=pack_minutes,
        unpack_minutes=unpack_minutes,
        workers=workers,
        crew_pack_minutes=math.ceil(pack_minutes / workers),
        crew_unpack_minutes=math.ceil(unpack_minutes / workers),
    )
