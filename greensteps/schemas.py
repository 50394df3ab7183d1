# greensteps/schemas.py — quiz contract, estimate and submission result models
from __future__ import annotations
from typing import Any, Dict, List, Literal, Mapping, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic.alias_generators import to_camel

Diet = Literal["omnivore", "vegetarian", "vegan", "pescatarian"]
HomeHeating = Literal["gas", "electric", "heat_pump", "other"]
RecyclingHabit = Literal["rarely", "sometimes", "often", "always"]
TransportMode = Literal["car", "public_transit", "bike_walk", "mixed"]

INVALID_INPUT = "Invalid input"


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)


class QuizAnswers(_CamelModel):
    diet: Diet
    weekly_miles_driven: float = Field(ge=0, le=5000)       # miles per week
    electricity_kwh_per_month: float = Field(ge=0, le=20000)
    home_heating: HomeHeating
    flights_short_haul_per_year: int = Field(ge=0, le=100)
    recycling_habit: RecyclingHabit
    transport_mode: TransportMode

    @field_validator("weekly_miles_driven", "electricity_kwh_per_month", "flights_short_haul_per_year", mode="before")
    @classmethod
    def _no_booleans(cls, v: Any) -> Any:
        # lax mode would read true/false as 1/0
        if isinstance(v, bool):
            raise ValueError("Expected a number, got a boolean")
        return v


class CarbonEstimateInput(_CamelModel):
    weekly_miles_driven: float = Field(ge=0)
    electricity_kwh_per_month: float = Field(ge=0)
    home_heating: HomeHeating
    flights_short_haul_per_year: int = Field(ge=0)

    @classmethod
    def from_quiz(cls, quiz: QuizAnswers) -> "CarbonEstimateInput":
        return cls(
            weekly_miles_driven=quiz.weekly_miles_driven,
            electricity_kwh_per_month=quiz.electricity_kwh_per_month,
            home_heating=quiz.home_heating,
            flights_short_haul_per_year=quiz.flights_short_haul_per_year,
        )


class GeoLocation(BaseModel):
    model_config = ConfigDict(frozen=True)

    ip: Optional[str] = None
    city: Optional[str] = None
    region: Optional[str] = None
    country: Optional[str] = None

    def summary(self) -> str:
        return ", ".join(p for p in (self.city, self.region, self.country) if p)


class CarbonEstimate(_CamelModel):
    kg_co2e_per_year: int = Field(ge=0, alias="kgCO2ePerYear")
    breakdown: Dict[str, float]


class EstimateSummary(BaseModel):
    kg: int
    breakdown: Dict[str, float]


class SubmissionData(BaseModel):
    quiz: QuizAnswers
    location: GeoLocation
    estimate: Optional[EstimateSummary] = None
    tips: str


class SubmissionSuccess(BaseModel):
    ok: Literal[True] = True
    data: SubmissionData


class SubmissionFailure(BaseModel):
    ok: Literal[False] = False
    error: str = INVALID_INPUT
    issues: Dict[str, List[str]]


SubmissionResult = Union[SubmissionSuccess, SubmissionFailure]


def _field_issues(err: ValidationError) -> Dict[str, List[str]]:
    issues: Dict[str, List[str]] = {}
    for e in err.errors():
        loc = e.get("loc") or ("__root__",)
        issues.setdefault(str(loc[0]), []).append(e.get("msg", "Invalid value"))
    return issues


def validate_quiz(raw: Mapping[str, Any]) -> Union[QuizAnswers, SubmissionFailure]:
    """
    Validate raw quiz fields (camelCase keys, strings or numbers).
    Returns the typed answers, or a failure carrying every violation keyed by field.
    """
    try:
        return QuizAnswers.model_validate(dict(raw))
    except ValidationError as err:
        return SubmissionFailure(issues=_field_issues(err))


def dump_result(result: SubmissionResult) -> Dict[str, Any]:
    """JSON-ready dict with camelCase quiz keys and absent location fields dropped."""
    if isinstance(result, SubmissionFailure):
        return result.model_dump()
    data = result.data
    return {
        "ok": True,
        "data": {
            "quiz": data.quiz.model_dump(by_alias=True),
            "location": data.location.model_dump(exclude_none=True),
            "estimate": data.estimate.model_dump() if data.estimate is not None else None,
            "tips": data.tips,
        },
    }
