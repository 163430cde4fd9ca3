from __future__ import annotations

import time
import uuid
from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import FastAPI, HTTPException, Request, Response
from pydantic import ValidationError

from box_estimator.boxes import recommend_crew_size, room_plan
from box_estimator.engine import estimate_all
from box_estimator.metrics import CONTENT_TYPE_LATEST, generate_latest
from box_estimator.observability import (
    configure_logging,
    record_estimate_error,
    record_estimate_success,
    record_validation_failure,
    span,
    structured_log,
)
from box_estimator.routes import note_bedrooms, note_service, router as estimate_router
from box_estimator.schemas import EstimateAllRequest, EstimateAllResponse, EstimateResponse, field_errors
from box_estimator.security import IdempotencyStore, SignatureVerifier
from box_estimator.settings import Settings
from box_estimator.tables import PACKING_TIME_MIN_PER_BOX, UNPACKING_TIME_MIN_PER_BOX, tables_fingerprint
from box_estimator.timing import service_multiplier

APP_VERSION = datetime.now(timezone.utc).strftime("%Y-%m-%d")

settings = Settings.from_env()
configure_logging(settings.log_level)
verifier = SignatureVerifier(settings.hmac_secret)
idempotency_store = IdempotencyStore(settings.redis_url, ttl_seconds=settings.idempotency_ttl_seconds)

api = FastAPI(title="Moving Box Estimator", version=APP_VERSION)
api.include_router(estimate_router)


@api.get("/healthz", include_in_schema=False)
def healthz():
    return {
        "status": "ok",
        "tables_hash": tables_fingerprint(),
        "version": APP_VERSION,
    }


@api.get("/metrics", include_in_schema=False)
def metrics():
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)


def _calculation_trace(payload: EstimateAllRequest, bedrooms_used: int) -> Dict[str, Any]:
    rooms = room_plan(payload.property_type, payload.bedrooms)
    return {
        "rooms": {room.value: quantity for room, quantity in rooms.items()},
        "bedrooms_requested": payload.bedrooms,
        "bedrooms_used": bedrooms_used,
        "packing_intensity_multiplier": payload.packing_intensity.multiplier,
        "service_multiplier": service_multiplier(payload.service_type),
        "extra_minutes_per_room": {
            "pack": PACKING_TIME_MIN_PER_BOX.extra_per_room,
            "unpack": UNPACKING_TIME_MIN_PER_BOX.extra_per_room,
        },
    }


@api.post("/estimate", response_model=EstimateResponse)
async def estimate(request: Request):
    raw_body = await request.body()
    verifier.verify(request.headers.get("X-Signature"), raw_body)
    started = time.perf_counter()
    with span("parse_request"):
        try:
            payload = EstimateAllRequest.model_validate_json(raw_body)
        except ValidationError as exc:
            record_validation_failure()
            record_estimate_error("all")
            detail = [error.model_dump() for error in field_errors(exc)]
            raise HTTPException(status_code=422, detail=detail) from exc
    idempotency_key = request.headers.get("Idempotency-Key") or payload.idempotency_key
    debug_header = (request.headers.get("X-Debug") or "").lower() == "true"
    include_trace = settings.allow_internal_debug and debug_header

    def compute() -> Dict[str, Any]:
        bedrooms_used = note_bedrooms(payload.property_type, payload.bedrooms)
        note_service(payload.service_type)
        with span("estimate_all", property_type=payload.property_type.value, bedrooms=bedrooms_used):
            result = estimate_all(
                payload.property_type,
                payload.bedrooms,
                payload.packing_intensity,
                service_type=payload.service_type,
            )
        body = EstimateAllResponse.from_result(result, recommended_crew=recommend_crew_size(result.counts))
        response_payload = {
            **body.model_dump(by_alias=True),
            "estimateId": f"e_{uuid.uuid4().hex[:10]}",
            "version": APP_VERSION,
        }
        if include_trace:
            response_payload["calculationLogic"] = _calculation_trace(payload, bedrooms_used)
        structured_log(
            "estimate.generated",
            estimate_id=response_payload["estimateId"],
            property_type=payload.property_type.value,
            bedrooms=bedrooms_used,
            packing_intensity=payload.packing_intensity.value,
            service_type=payload.service_type,
            total_boxes=response_payload["totalBoxes"],
            pack_minutes=result.pack_minutes,
            unpack_minutes=result.unpack_minutes,
        )
        return response_payload

    try:
        response = idempotency_store.get_or_set(idempotency_key, raw_body, compute)
    except HTTPException:
        record_estimate_error("all")
        raise
    record_estimate_success("all", (time.perf_counter() - started) * 1000)
    return EstimateResponse.model_validate(response)
