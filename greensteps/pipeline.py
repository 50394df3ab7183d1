# greensteps/pipeline.py
from __future__ import annotations
import logging
from typing import Any, Mapping, Optional

from .ai_router import AdviceGenerator
from .calculator import estimate_carbon
from .config import Settings
from .integrations.carbon_interface import CarbonInterfaceClient
from .integrations.geo import GeoLocator
from .schemas import (
    CarbonEstimateInput,
    EstimateSummary,
    SubmissionData,
    SubmissionFailure,
    SubmissionResult,
    SubmissionSuccess,
    validate_quiz,
)

logger = logging.getLogger(__name__)

APOLOGY = "Unable to generate AI tips at this time."


class SubmissionPipeline:
    """validate → locate → estimate → advise → assemble; each call attempted once."""

    def __init__(
        self,
        geo: GeoLocator,
        carbon: CarbonInterfaceClient,
        advice: AdviceGenerator,
    ):
        self.geo = geo
        self.carbon = carbon
        self.advice = advice

    @classmethod
    def from_settings(cls, settings: Settings) -> "SubmissionPipeline":
        return cls(
            geo=GeoLocator(settings),
            carbon=CarbonInterfaceClient(settings),
            advice=AdviceGenerator(settings),
        )

    def process(self, raw: Mapping[str, Any]) -> SubmissionResult:
        # 1) Validate; nothing remote happens for bad input
        quiz = validate_quiz(raw)
        if isinstance(quiz, SubmissionFailure):
            logger.info("[pipeline] invalid input: %s", sorted(quiz.issues))
            return quiz

        # 2) Location (never fails, at worst empty)
        location = self.geo.lookup()
        summary = location.summary()

        # 3) Estimate
        estimate: Optional[EstimateSummary] = None
        try:
            result = estimate_carbon(CarbonEstimateInput.from_quiz(quiz), self.carbon)
            estimate = EstimateSummary(kg=result.kg_co2e_per_year, breakdown=result.breakdown)
        except Exception:
            logger.exception("[pipeline] carbon estimate failed; continuing without it")

        # 4) Tips
        try:
            tips = self.advice.generate(
                quiz,
                location_summary=summary or None,
                carbon_kg_per_year=estimate.kg if estimate is not None else None,
            )
        except Exception:
            logger.exception("[pipeline] advice generation failed")
            tips = APOLOGY

        return SubmissionSuccess(
            data=SubmissionData(quiz=quiz, location=location, estimate=estimate, tips=tips)
        )
