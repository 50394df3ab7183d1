# greensteps/suggestions.py — answer-aware, quantified tips ranked by yearly impact
from __future__ import annotations
from typing import Callable, List, Optional, Tuple

from .calculator import (
    KG_PER_KWH,
    KG_PER_MILE,
    KG_PER_SHORT_HAUL_FLIGHT,
    WEEKS_PER_YEAR,
    round_half_up,
)
from .schemas import QuizAnswers

MAX_TIPS = 3

# weekly car miles a realistic mode shift can replace
SHIFTABLE_MILES = 50
ELECTRICITY_SAVING = 0.15   # LEDs, standby, efficient appliances
RAIL_SAVING = 0.8           # rail vs short-haul flight

DIET_IMPACT = {"omnivore": 800, "pescatarian": 500, "vegetarian": 250}
HEATING_IMPACT = {"gas": 700, "electric": 400, "heat_pump": 30}
RECYCLING_IMPACT = {"rarely": 150, "sometimes": 80, "often": 30}

Tip = Tuple[int, str]


def _transport(q: QuizAnswers) -> Optional[Tip]:
    if q.weekly_miles_driven <= 0 or q.transport_mode == "bike_walk":
        return None
    miles = min(q.weekly_miles_driven, SHIFTABLE_MILES)
    kg = round_half_up(miles * WEEKS_PER_YEAR * KG_PER_MILE)
    return kg, f"Swap up to {miles:g} car miles a week for transit, cycling or car-sharing: save ~{kg} kg CO2e/yr."


def _diet(q: QuizAnswers) -> Optional[Tip]:
    kg = DIET_IMPACT.get(q.diet)
    if not kg:
        return None
    if q.diet == "omnivore":
        text = "Replace red meat with poultry, beans or lentils on most days"
    elif q.diet == "pescatarian":
        text = "Try a few fully plant-based days each week"
    else:
        text = "Cut back on cheese and dairy, swap in plant-based alternatives"
    return kg, f"{text}: save ~{kg} kg CO2e/yr."


def _electricity(q: QuizAnswers) -> Optional[Tip]:
    if q.electricity_kwh_per_month <= 0:
        return None
    kg = round_half_up(q.electricity_kwh_per_month * 12 * KG_PER_KWH * ELECTRICITY_SAVING)
    return kg, f"Switch to LEDs, kill standby power and pick efficient appliances (~15% less power): save ~{kg} kg CO2e/yr."


def _heating(q: QuizAnswers) -> Optional[Tip]:
    kg = HEATING_IMPACT.get(q.home_heating)
    if not kg:
        return None
    if q.home_heating == "heat_pump":
        text = "Your heat pump is already efficient; a smart thermostat trims a little more"
    else:
        text = f"Replace {q.home_heating} heating with a heat pump and seal drafts"
    return kg, f"{text}: save ~{kg} kg CO2e/yr."


def _flights(q: QuizAnswers) -> Optional[Tip]:
    if q.flights_short_haul_per_year <= 0:
        return None
    kg = round_half_up(q.flights_short_haul_per_year * KG_PER_SHORT_HAUL_FLIGHT * RAIL_SAVING)
    return kg, f"Take the train instead of your {q.flights_short_haul_per_year} short-haul flight(s): save ~{kg} kg CO2e/yr."


def _recycling(q: QuizAnswers) -> Optional[Tip]:
    kg = RECYCLING_IMPACT.get(q.recycling_habit)
    if not kg:
        return None
    return kg, f"Recycle and compost consistently (you said '{q.recycling_habit}'): save ~{kg} kg CO2e/yr."


# order matters: earlier entries win ties
CATALOGUE: List[Callable[[QuizAnswers], Optional[Tip]]] = [
    _transport, _diet, _electricity, _heating, _flights, _recycling,
]


def rank_tips(quiz: QuizAnswers, limit: int = MAX_TIPS) -> List[Tip]:
    applicable = [t for t in (pick(quiz) for pick in CATALOGUE) if t]
    return sorted(applicable, key=lambda t: t[0], reverse=True)[:limit]


def _header(location_summary: Optional[str], carbon_kg_per_year: Optional[int]) -> str:
    where = location_summary or "Unknown"
    total = f"{carbon_kg_per_year} kg CO2e/yr" if carbon_kg_per_year is not None else "N/A"
    return f"Location: {where} · Estimated footprint: {total}"


def local_tips(
    quiz: QuizAnswers,
    location_summary: Optional[str] = None,
    carbon_kg_per_year: Optional[int] = None,
) -> str:
    lines = [_header(location_summary, carbon_kg_per_year)]
    ranked = rank_tips(quiz)
    if ranked:
        lines += [f"• {text}" for _, text in ranked]
    else:
        lines.append("• Nice, your answers are already low-impact. Keep it up! 🎉")
    return "\n".join(lines)
