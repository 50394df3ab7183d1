# greensteps/ai_router.py
from __future__ import annotations
import logging
from typing import Any, Optional

from openai import OpenAI

from .config import Settings
from .schemas import QuizAnswers
from .suggestions import local_tips

logger = logging.getLogger(__name__)

TEMPERATURE = 0.7

SYSTEM_PROMPT = (
    "You are GreenSteps, a sustainability coach. Provide concise, practical, "
    "location-aware advice with estimated impact. Use bullet points; 5-7 tips."
)


def _num(v: float) -> str:
    return f"{v:g}"


def build_user_prompt(
    quiz: QuizAnswers,
    location_summary: Optional[str] = None,
    carbon_kg_per_year: Optional[int] = None,
) -> str:
    footprint = f"{carbon_kg_per_year} kg CO2e" if carbon_kg_per_year is not None else "N/A"
    return (
        f"Location: {location_summary or 'Unknown'}\n"
        f"Estimated Annual Footprint: {footprint}\n"
        f"Diet: {quiz.diet}\n"
        f"Transport mode: {quiz.transport_mode}; weekly miles: {_num(quiz.weekly_miles_driven)}\n"
        f"Electricity: {_num(quiz.electricity_kwh_per_month)} kWh/month; Heating: {quiz.home_heating}\n"
        f"Flights (short-haul/yr): {quiz.flights_short_haul_per_year}\n"
        f"Recycling: {quiz.recycling_habit}\n"
        "\n"
        "Return actionable tips, ordered by potential impact in this context."
    )


class AdviceGenerator:
    """
    Produces the tips text. Remote mode asks the chat model; local mode (and any
    remote failure) uses the ranked tip catalogue in suggestions.py.
    """

    def __init__(self, settings: Settings, client: Any = None):
        self.settings = settings
        self._client_obj = client

    @property
    def remote(self) -> bool:
        return self.settings.remote_advice_enabled

    def _client(self):
        if self._client_obj is None:
            self._client_obj = OpenAI(api_key=self.settings.openai_api_key, timeout=self.settings.http_timeout)
        return self._client_obj

    def _remote_tips(self, user_prompt: str) -> Optional[str]:
        try:
            rsp = self._client().chat.completions.create(
                model=self.settings.openai_model,
                messages=[
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": user_prompt},
                ],
                temperature=TEMPERATURE,
            )
            text = rsp.choices[0].message.content or ""
        except Exception as e:
            logger.warning("[ai] completion failed: %s", e)
            return None
        if not text.strip():
            logger.warning("[ai] completion returned empty text")
            return None
        return text

    def generate(
        self,
        quiz: QuizAnswers,
        location_summary: Optional[str] = None,
        carbon_kg_per_year: Optional[int] = None,
    ) -> str:
        if self.remote:
            text = self._remote_tips(build_user_prompt(quiz, location_summary, carbon_kg_per_year))
            if text is not None:
                return text
            logger.info("[ai] falling back to local tips")
        return local_tips(quiz, location_summary, carbon_kg_per_year)
