"""
Shared fixtures for the FarmBot test suite.

No test touches the network: LLM calls go through StubLLM and every
`requests` call is monkeypatched with FakeResponse objects.
"""

import os

import pytest
import requests

os.environ.setdefault("FARMBOT_SCHEDULER", "0")

from farmbot.llm_manager import LLMError
from farmbot.schemas import FarmerCreate
from farmbot.storage import FarmStorage


class FakeResponse:

    def __init__(self, payload=None, status_code=200):
        self._payload = payload
        self.status_code = status_code
        self.text = str(payload)

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")


class StubLLM:
    """Stands in for LLMManager; records prompts and replays canned answers."""

    mode = "cloud"
    available = True

    def __init__(self, reply="Use neem oil spray 🌿", suggestions=None, fail=False):
        self.reply = reply
        self.suggestions = suggestions if suggestions is not None else [
            {"title": "Apply compost", "description": "Add 5 kg per plant", "priority": "high", "category": "fertilizer"},
            {"title": "Check drainage", "description": "Clear field channels", "priority": "URGENT", "category": "care"},
            {"title": "Scout for pests", "description": "Look under leaves", "priority": "low"},
        ]
        self.fail = fail
        self.prompts = []

    def query(self, prompt, system_prompt=None, temperature=0.3, max_tokens=500):
        self.prompts.append(prompt)
        if self.fail:
            raise LLMError("stub failure")
        return self.reply

    def query_json(self, prompt, system_prompt=None, temperature=0.3, max_tokens=800):
        self.prompts.append(prompt)
        if self.fail:
            raise LLMError("stub failure")
        return {"suggestions": self.suggestions}


OPEN_METEO_PAYLOAD = {
    "current": {
        "temperature_2m": 36.4,
        "relative_humidity_2m": 55,
        "precipitation": 0,
        "weather_code": 0,
    },
    "daily": {
        "time": ["2026-10-19", "2026-10-20", "2026-10-21"],
        "weather_code": [0, 61, 3],
        "temperature_2m_max": [36.4, 31.2, 30.0],
        "temperature_2m_min": [25.1, 24.0, 23.6],
        "precipitation_sum": [0, 4.2, 0.5],
        "precipitation_probability_max": [10, 65, 20],
    },
}


@pytest.fixture
def storage():
    return FarmStorage()


@pytest.fixture
def farmer(storage):
    return storage.create_farmer(FarmerCreate(
        name="Raman",
        district="Thrissur",
        land_size="2 acres",
        land_type="paddy",
        crops=["Rice", "Coconut"],
        experience="experienced",
    ))


@pytest.fixture
def weather_offline(monkeypatch):
    """Every outbound HTTP GET fails, so weather falls back to sample data."""
    def boom(*args, **kwargs):
        raise requests.exceptions.ConnectionError("offline")
    monkeypatch.setattr("farmbot.weather.requests.get", boom)


@pytest.fixture
def weather_online(monkeypatch):
    calls = []

    def fake_get(url, params=None, **kwargs):
        calls.append((url, params))
        return FakeResponse(OPEN_METEO_PAYLOAD)
    monkeypatch.setattr("farmbot.weather.requests.get", fake_get)
    return calls
