from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from .boxes import EstimateBoxesResult, FixedEstimateType, PackingIntensity, PropertyType
from .counts import BoxCounts
from .engine import EstimateAllResult
from .timing import EstimateTimeResult


class WireModel(BaseModel):
    """camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


# --- configurable-rate request contract -------------------------------------------


class RoomBoxCounts(WireModel):
    bedroom: Optional[int] = Field(default=None, ge=0)
    living_room: Optional[int] = Field(default=None, ge=0)
    kitchen: Optional[int] = Field(default=None, ge=0)
    bathroom: Optional[int] = Field(default=None, ge=0)
    dining_room: Optional[int] = Field(default=None, ge=0)
    office: Optional[int] = Field(default=None, ge=0)
    garage: Optional[int] = Field(default=None, ge=0)
    misc: Optional[int] = Field(default=None, ge=0)

    def present(self) -> Dict[str, int]:
        return self.model_dump(by_alias=True, exclude_none=True)


class EstimationConfig(WireModel):
    minutes_per_box_pack: int = Field(..., ge=0)
    minutes_per_box_unpack: int = Field(..., ge=0)


class EstimationInput(WireModel):
    property_type: PropertyType
    rooms: RoomBoxCounts
    packing_intensity: PackingIntensity
    workers: int = Field(..., ge=1)


class EstimationRequest(WireModel):
    config: EstimationConfig
    input: EstimationInput


class FieldError(BaseModel):
    path: str
    message: str


class ValidationResult(BaseModel):
    success: bool
    data: Optional[EstimationRequest] = None
    errors: List[FieldError] = Field(default_factory=list)


def field_errors(exc: ValidationError) -> List[FieldError]:
    return [
        FieldError(path=".".join(str(part) for part in error["loc"]), message=error["msg"])
        for error in exc.errors()
    ]


def validate_estimation_request(raw: Any) -> ValidationResult:
    """Validate and coerce a raw estimation request without raising.

    Every invalid or missing field is reported, each with its dotted wire path.
    """

    try:
        request = EstimationRequest.model_validate(raw)
    except ValidationError as exc:
        return ValidationResult(success=False, errors=field_errors(exc))
    return ValidationResult(success=True, data=request)


# --- engine endpoints -------------------------------------------------------------


class BoxCountsModel(WireModel):
    small: int = Field(default=0, ge=0)
    medium: int = Field(default=0, ge=0)
    large: int = Field(default=0, ge=0)
    wardrobe: int = Field(default=0, ge=0)
    dish_pack: int = Field(default=0, ge=0)
    mattress_bag: int = Field(default=0, ge=0)
    tv_box: int = Field(default=0, ge=0)

    def to_counts(self) -> BoxCounts:
        return BoxCounts(**self.model_dump())

    @classmethod
    def from_counts(cls, counts: BoxCounts) -> "BoxCountsModel":
        return cls.model_validate(counts.as_dict())


class BoxesRequest(WireModel):
    property_type: PropertyType
    bedrooms: float = Field(default=0, allow_inf_nan=False)
    packing_intensity: PackingIntensity = PackingIntensity.NORMAL


class TimeRequest(WireModel):
    counts: BoxCountsModel = Field(default_factory=BoxCountsModel)
    total_rooms: int = Field(default=0, ge=0)
    service_type: Optional[str] = None


class EstimateAllRequest(BoxesRequest):
    service_type: Optional[str] = None
    idempotency_key: Optional[str] = None


class FixedEstimateRequest(WireModel):
    fixed_type: FixedEstimateType
    packing_intensity: PackingIntensity = PackingIntensity.NORMAL
    service_type: Optional[str] = None


class EstimateBoxesResponse(WireModel):
    counts: BoxCountsModel
    total_rooms: int

    @classmethod
    def from_result(cls, result: EstimateBoxesResult) -> "EstimateBoxesResponse":
        return cls(counts=BoxCountsModel.from_counts(result.counts), total_rooms=result.total_rooms)


class EstimateTimeResponse(WireModel):
    pack_minutes: int
    unpack_minutes: int

    @classmethod
    def from_result(cls, result: EstimateTimeResult) -> "EstimateTimeResponse":
        return cls(pack_minutes=result.pack_minutes, unpack_minutes=result.unpack_minutes)


class EstimateAllResponse(WireModel):
    counts: BoxCountsModel
    total_rooms: int
    pack_minutes: int
    unpack_minutes: int
    total_boxes: int
    recommended_crew: int

    @classmethod
    def from_result(cls, result: EstimateAllResult, *, recommended_crew: int) -> "EstimateAllResponse":
        return cls(
            counts=BoxCountsModel.from_counts(result.counts),
            total_rooms=result.total_rooms,
            pack_minutes=result.pack_minutes,
            unpack_minutes=result.unpack_minutes,
            total_boxes=result.counts.total,
            recommended_crew=recommended_crew,
        )


class EstimateResponse(EstimateAllResponse):
    estimate_id: str
    version: str
    calculation_logic: Optional[Dict[str, Any]] = None


class SummaryResponse(WireModel):
    total_boxes: int
    pack_minutes: int
    unpack_minutes: int
    workers: int
    crew_pack_minutes: int
    crew_unpack_minutes: int
