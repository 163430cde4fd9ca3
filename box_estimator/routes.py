from __future__ import annotations

import time
from typing import Any

from fastapi import APIRouter, Body, HTTPException
from pydantic import ValidationError

from .boxes import PropertyType, clamp_bedrooms, estimate_boxes, estimate_fixed_boxes, recommend_crew_size
from .contracts import summarize_request
from .engine import EstimateAllResult
from .observability import (
    record_bedrooms_clamped,
    record_estimate_error,
    record_estimate_success,
    record_validation_failure,
    record_white_glove,
    span,
    structured_log,
)
from .schemas import (
    BoxesRequest,
    EstimateAllResponse,
    EstimateBoxesResponse,
    EstimateTimeResponse,
    EstimationRequest,
    FixedEstimateRequest,
    SummaryResponse,
    TimeRequest,
    ValidationResult,
    field_errors,
    validate_estimation_request,
)
from .timing import ServiceType, estimate_time

router = APIRouter(prefix="/estimate")


def _elapsed_ms(started: float) -> float:
    return (time.perf_counter() - started) * 1000


def note_bedrooms(property_type: PropertyType, bedrooms: float) -> int:
    used = clamp_bedrooms(property_type, bedrooms)
    if used != bedrooms:
        record_bedrooms_clamped(PropertyType(property_type).value)
    return used


def note_service(service_type: str | None) -> None:
    if service_type == ServiceType.WHITE_GLOVE.value:
        record_white_glove()


@router.post("/boxes", response_model=EstimateBoxesResponse)
async def boxes_estimate(payload: BoxesRequest) -> EstimateBoxesResponse:
    started = time.perf_counter()
    bedrooms_used = note_bedrooms(payload.property_type, payload.bedrooms)
    with span("estimate_boxes", property_type=payload.property_type.value, bedrooms=bedrooms_used):
        result = estimate_boxes(payload.property_type, payload.bedrooms, payload.packing_intensity)
    record_estimate_success("boxes", _elapsed_ms(started))
    return EstimateBoxesResponse.from_result(result)


@router.post("/time", response_model=EstimateTimeResponse)
async def time_estimate(payload: TimeRequest) -> EstimateTimeResponse:
    started = time.perf_counter()
    note_service(payload.service_type)
    with span("estimate_time", total_rooms=payload.total_rooms):
        result = estimate_time(payload.counts.to_counts(), payload.total_rooms, service_type=payload.service_type)
    record_estimate_success("time", _elapsed_ms(started))
    return EstimateTimeResponse.from_result(result)


@router.post("/fixed", response_model=EstimateAllResponse)
async def fixed_estimate(payload: FixedEstimateRequest) -> EstimateAllResponse:
    started = time.perf_counter()
    note_service(payload.service_type)
    with span("estimate_fixed", fixed_type=payload.fixed_type.value):
        boxes = estimate_fixed_boxes(payload.fixed_type, payload.packing_intensity)
        timing = estimate_time(boxes.counts, boxes.total_rooms, service_type=payload.service_type)
    result = EstimateAllResult.combine(boxes, timing)
    record_estimate_success("fixed", _elapsed_ms(started))
    return EstimateAllResponse.from_result(result, recommended_crew=recommend_crew_size(result.counts))


@router.post("/validate", response_model=ValidationResult)
async def validate_request(payload: Any = Body(...)) -> ValidationResult:
    result = validate_estimation_request(payload)
    if not result.success:
        record_validation_failure()
        structured_log("estimate.validation_failed", paths=[error.path for error in result.errors])
    return result


@router.post("/summary", response_model=SummaryResponse)
async def summary_estimate(payload: Any = Body(...)) -> SummaryResponse:
    started = time.perf_counter()
    try:
        request = EstimationRequest.model_validate(payload)
    except ValidationError as exc:
        record_validation_failure()
        record_estimate_error("summary")
        detail = [error.model_dump() for error in field_errors(exc)]
        raise HTTPException(status_code=422, detail=detail) from exc
    summary = summarize_request(request)
    record_estimate_success("summary", _elapsed_ms(started))
    structured_log(
        "estimate.summary",
        property_type=request.input.property_type.value,
        total_boxes=summary.total_boxes,
        workers=summary.workers,
    )
    return SummaryResponse(
        total_boxes=summary.total_boxes,
        pack_minutes=summary.pack_minutes,
        unpack_minutes=summary.unpack_minutes,
        workers=summary.workers,
        crew_pack_minutes=summary.crew_pack_minutes,
        crew_unpack_minutes=summary.crew_unpack_minutes,
    )
