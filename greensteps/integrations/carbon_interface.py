# greensteps/integrations/carbon_interface.py
from __future__ import annotations
import logging
from typing import Any, Dict, Optional

import requests

from ..config import Settings

logger = logging.getLogger(__name__)

API = "https://www.carboninterface.com/api/v1"


class CarbonInterfaceClient:
    """
    Thin wrapper over the Carbon Interface estimates endpoint.

    Every failure (no credential, transport error, bad status, odd body) comes
    back as None, so callers only ever check one thing before using their
    local formula.
    """

    def __init__(self, settings: Settings):
        self.api_key = settings.carbon_interface_api_key
        self.country = settings.carbon_country
        self.timeout = settings.http_timeout

    # --- auth headers -------------------------------------------------------
    def _headers(self) -> Optional[Dict[str, str]]:
        if not self.api_key:
            return None
        return {"Authorization": f"Bearer {self.api_key}"}

    # --- raw call -----------------------------------------------------------
    def estimate(self, payload: Dict[str, Any]) -> Optional[float]:
        headers = self._headers()
        if headers is None:
            logger.warning("[carbon] CARBON_INTERFACE_API_KEY missing; skipping %s estimate", payload.get("type"))
            return None
        try:
            r = requests.post(f"{API}/estimates", json=payload, headers=headers, timeout=self.timeout)
            r.raise_for_status()
            data = r.json()
        except (requests.RequestException, ValueError) as e:
            logger.warning("[carbon] %s estimate failed: %s", payload.get("type"), e)
            return None
        return _carbon_kg(data)

    # --- typed helpers ------------------------------------------------------
    def vehicle_kg(self, annual_miles: float) -> Optional[float]:
        return self.estimate({
            "type": "vehicle",
            "distance_unit": "mi",
            "distance_value": annual_miles,
            "vehicle_model_id": "passenger_car",
        })

    def electricity_kg(self, annual_kwh: float) -> Optional[float]:
        return self.estimate({
            "type": "electricity",
            "electricity_unit": "kwh",
            "electricity_value": annual_kwh,
            "country": self.country,
            "state": None,
        })


def _carbon_kg(data: Any) -> Optional[float]:
    """Pull data.attributes.carbon_kg out of a reply; None if absent or unusable."""
    try:
        kg = data["data"]["attributes"]["carbon_kg"]
    except (KeyError, TypeError):
        logger.warning("[carbon] reply has no carbon_kg: %r", data)
        return None
    if isinstance(kg, bool) or not isinstance(kg, (int, float)) or kg < 0:
        logger.warning("[carbon] unusable carbon_kg: %r", kg)
        return None
    return float(kg)
