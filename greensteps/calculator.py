# greensteps/calculator.py
from __future__ import annotations
import logging
import math
from typing import Dict, Optional

from .integrations.carbon_interface import CarbonInterfaceClient
from .schemas import CarbonEstimate, CarbonEstimateInput

logger = logging.getLogger(__name__)

WEEKS_PER_YEAR = 52
MONTHS_PER_YEAR = 12

# fallback factors when the provider has no answer
KG_PER_MILE = 0.404     # ~404 g/mi passenger car
KG_PER_KWH = 0.4        # average grid mix

# flat yearly heating figures; "other" contributes nothing
HEATING_KG = {
    "gas": 1000,
    "electric": 700,
    "heat_pump": 300,
}
KG_PER_SHORT_HAUL_FLIGHT = 250


def round_half_up(kg: float) -> int:
    """Nearest whole kg, halves going up (2.5 -> 3)."""
    return math.floor(kg + 0.5)


def _remote_or_fallback(category: str, remote_kg: Optional[float], fallback_kg: float) -> float:
    if remote_kg is None:
        logger.info("[calc] %s: using fallback factor (%.1f kg)", category, fallback_kg)
        return fallback_kg
    return remote_kg


def estimate_carbon(inputs: CarbonEstimateInput, provider: CarbonInterfaceClient) -> CarbonEstimate:
    breakdown: Dict[str, float] = {}

    if inputs.weekly_miles_driven > 0:
        annual_miles = inputs.weekly_miles_driven * WEEKS_PER_YEAR
        breakdown["driving"] = _remote_or_fallback(
            "driving", provider.vehicle_kg(annual_miles), annual_miles * KG_PER_MILE
        )

    if inputs.electricity_kwh_per_month > 0:
        annual_kwh = inputs.electricity_kwh_per_month * MONTHS_PER_YEAR
        breakdown["electricity"] = _remote_or_fallback(
            "electricity", provider.electricity_kg(annual_kwh), annual_kwh * KG_PER_KWH
        )

    heating = HEATING_KG.get(inputs.home_heating)
    if heating:
        breakdown["heating"] = heating

    if inputs.flights_short_haul_per_year > 0:
        breakdown["flights"] = inputs.flights_short_haul_per_year * KG_PER_SHORT_HAUL_FLIGHT

    total = max(0, round_half_up(sum(breakdown.values())))
    return CarbonEstimate(kg_co2e_per_year=total, breakdown=breakdown)
