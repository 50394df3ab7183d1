# greensteps/main.py
from dotenv import load_dotenv
load_dotenv()  # load .env before anything else

import logging
from functools import lru_cache
from typing import Any, Dict, List, Optional

from fastapi import Body, Depends, FastAPI, Form, Query
from fastapi.responses import JSONResponse, PlainTextResponse

from .calculator import estimate_carbon, round_half_up
from .config import Settings, get_settings, missing_credentials
from .integrations.carbon_interface import CarbonInterfaceClient
from .integrations.geo import GeoLocator
from .pipeline import SubmissionPipeline
from .schemas import (
    CarbonEstimateInput,
    HomeHeating,
    SubmissionFailure,
    SubmissionResult,
    dump_result,
)

logging.basicConfig(
    level=get_settings().log_level,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


# ---- Report missing env (never fatal: formulas + local tips cover it) -------
def warn_missing_env(settings: Settings) -> None:
    missing = missing_credentials(settings)
    if missing:
        logger.warning(
            "Missing env vars: %s. Estimates fall back to fixed factors and tips are generated locally.",
            ", ".join(missing),
        )


warn_missing_env(get_settings())


# ---- FastAPI app ------------------------------------------------------------
app = FastAPI(title="GreenSteps")


@lru_cache
def get_pipeline() -> SubmissionPipeline:
    return SubmissionPipeline.from_settings(get_settings())


def render_text(result: SubmissionResult) -> str:
    """Plain-text results page: total, breakdown bullets, then tips."""
    if isinstance(result, SubmissionFailure):
        lines = [f"{result.error}. Please check your answers and try again."]
        lines += [f"• {field}: {'; '.join(msgs)}" for field, msgs in result.issues.items()]
        return "\n".join(lines)

    data = result.data
    lines: List[str] = []
    if data.estimate is not None:
        lines.append(f"Total: {data.estimate.kg:,} kg CO2e/yr")
        lines += [f"• {k}: {round_half_up(v):,} kg" for k, v in data.estimate.breakdown.items()]
    else:
        lines.append("Could not retrieve carbon estimate. Showing tips only.")
    lines.append("Tips:\n" + data.tips)
    return "\n".join(lines)


def _respond(result: SubmissionResult, fmt: str):
    status = 422 if isinstance(result, SubmissionFailure) else 200
    if fmt == "text":
        return PlainTextResponse(render_text(result), status_code=status)
    return JSONResponse(dump_result(result), status_code=status)


@app.get("/health")
def health():
    return {"ok": True}


# ---- Quiz submission --------------------------------------------------------
@app.post("/quiz")
def submit_quiz_form(
    diet: Optional[str] = Form(None),
    weeklyMilesDriven: Optional[str] = Form(None),
    electricityKwhPerMonth: Optional[str] = Form(None),
    homeHeating: Optional[str] = Form(None),
    flightsShortHaulPerYear: Optional[str] = Form(None),
    recyclingHabit: Optional[str] = Form(None),
    transportMode: Optional[str] = Form(None),
    fmt: str = Query("json", alias="format"),
    pipeline: SubmissionPipeline = Depends(get_pipeline),
):
    raw = {
        "diet": diet,
        "weeklyMilesDriven": weeklyMilesDriven,
        "electricityKwhPerMonth": electricityKwhPerMonth,
        "homeHeating": homeHeating,
        "flightsShortHaulPerYear": flightsShortHaulPerYear,
        "recyclingHabit": recyclingHabit,
        "transportMode": transportMode,
    }
    # absent form fields must read as missing, not as null values
    raw = {k: v for k, v in raw.items() if v is not None}
    return _respond(pipeline.process(raw), fmt)


@app.post("/api/quiz")
def submit_quiz_json(
    payload: Dict[str, Any] = Body(...),
    fmt: str = Query("json", alias="format"),
    pipeline: SubmissionPipeline = Depends(get_pipeline),
):
    return _respond(pipeline.process(payload), fmt)


# ---- Debug endpoints --------------------------------------------------------
@app.get("/debug/geo")
def debug_geo(settings: Settings = Depends(get_settings)):
    loc = GeoLocator(settings).lookup()
    return {"provider": settings.geo_provider, "location": loc.model_dump(exclude_none=True)}


@app.get("/debug/estimate")
def debug_estimate(
    weeklyMilesDriven: float = Query(50, ge=0),
    electricityKwhPerMonth: float = Query(400, ge=0),
    homeHeating: HomeHeating = "electric",
    flightsShortHaulPerYear: int = Query(0, ge=0),
    settings: Settings = Depends(get_settings),
):
    """Run the estimator alone to check provider replies quickly."""
    inputs = CarbonEstimateInput(
        weekly_miles_driven=weeklyMilesDriven,
        electricity_kwh_per_month=electricityKwhPerMonth,
        home_heating=homeHeating,
        flights_short_haul_per_year=flightsShortHaulPerYear,
    )
    est = estimate_carbon(inputs, CarbonInterfaceClient(settings))
    return est.model_dump(by_alias=True)
