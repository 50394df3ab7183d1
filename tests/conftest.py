from types import SimpleNamespace

import pytest
import requests

from greensteps.config import Settings
from greensteps.schemas import QuizAnswers


class FakeResponse:
    def __init__(self, status_code=200, payload=None, json_error=False):
        self.status_code = status_code
        self._payload = payload
        self._json_error = json_error
        self.text = str(payload)

    def json(self):
        if self._json_error:
            raise ValueError("Invalid JSON")
        return self._payload

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")


class Recorder:
    """Callable stand-in for requests.get / requests.post that logs calls."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.calls = []

    def __call__(self, url, **kwargs):
        self.calls.append(SimpleNamespace(url=url, **kwargs))
        nxt = self.responses.pop(0) if len(self.responses) > 1 else self.responses[0]
        if isinstance(nxt, Exception):
            raise nxt
        return nxt


def carbon_reply(kg):
    return FakeResponse(payload={"data": {"attributes": {"carbon_kg": kg}}})


def fake_openai(content=None, error=None, choices=None):
    calls = []

    def create(**kwargs):
        calls.append(kwargs)
        if error:
            raise error
        if choices is not None:
            return SimpleNamespace(choices=choices)
        return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])

    client = SimpleNamespace(chat=SimpleNamespace(completions=SimpleNamespace(create=create)))
    return client, calls


@pytest.fixture
def make_settings():
    def _make(**overrides):
        values = dict(
            carbon_interface_api_key="test-carbon-key",
            carbon_country="US",
            openai_api_key=None,
            openai_model="gpt-4o-mini",
            geo_provider="geojs",
            local_advice_only=False,
            http_timeout=20.0,
            log_level="INFO",
        )
        values.update(overrides)
        return Settings(_env_file=None, **values)
    return _make


@pytest.fixture
def settings(make_settings):
    return make_settings()


@pytest.fixture
def raw_quiz():
    return {
        "diet": "omnivore",
        "weeklyMilesDriven": 50,
        "electricityKwhPerMonth": 400,
        "homeHeating": "electric",
        "flightsShortHaulPerYear": 2,
        "recyclingHabit": "often",
        "transportMode": "mixed",
    }


@pytest.fixture
def quiz(raw_quiz):
    return QuizAnswers.model_validate(raw_quiz)
