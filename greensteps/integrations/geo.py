# greensteps/integrations/geo.py
from __future__ import annotations
import logging

import requests

from ..config import GEO_PROVIDERS, Settings
from ..schemas import GeoLocation

logger = logging.getLogger(__name__)

ENDPOINTS = {
    "geojs": "https://get.geojs.io/v1/ip/geo.json",
    "ipinfo": "https://ipinfo.io/json",
}
FIELDS = ("ip", "city", "region", "country")


class GeoLocator:
    def __init__(self, settings: Settings):
        provider = (settings.geo_provider or "").strip().lower()
        if provider not in GEO_PROVIDERS:
            logger.warning("[geo] unknown provider %r, using geojs", settings.geo_provider)
            provider = "geojs"
        self.provider = provider
        self.timeout = settings.http_timeout

    @property
    def url(self) -> str:
        return ENDPOINTS[self.provider]

    def lookup(self) -> GeoLocation:
        """One GET against the configured provider. Any failure gives an empty location."""
        try:
            r = requests.get(self.url, timeout=self.timeout)
            r.raise_for_status()
            data = r.json()
        except (requests.RequestException, ValueError) as e:
            logger.warning("[geo] %s lookup failed: %s", self.provider, e)
            return GeoLocation()
        if not isinstance(data, dict):
            logger.warning("[geo] %s returned non-object body", self.provider)
            return GeoLocation()
        # keep only string fields; absent ones stay unset
        return GeoLocation(**{k: data[k] for k in FIELDS if isinstance(data.get(k), str)})
