"""
Pytest Configuration and Fixtures.

This file configures pytest and provides shared fixtures for all tests.
No test talks to the real Gemini API: the generator is given a fake client
through its client_factory.
"""
import asyncio
import json
import sys
from pathlib import Path

import pytest

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from config import Settings  # noqa: E402
from src.generation.prompts import IMAGE_PROMPT_PREFIX  # noqa: E402

TEST_API_KEY = "test-key-abcdef123456"


def pytest_configure(config):
    """Configure pytest markers."""
    config.addinivalue_line("markers", "unit: Unit tests")
    config.addinivalue_line("markers", "smoke: Smoke tests for CLI commands")
    config.addinivalue_line("markers", "slow: Slow tests")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their location."""
    for item in items:
        # Mark based on test file location
        if "unit" in str(item.fspath):
            item.add_marker(pytest.mark.unit)
        elif "smoke" in str(item.fspath):
            item.add_marker(pytest.mark.smoke)


# =============================================================================
# Fakes
# =============================================================================


class FakeGeminiClient:
    """Stands in for GeminiClient; records every call."""

    def __init__(self, text: str | None = None):
        self.text = text
        self.text_error: Exception | None = None
        self.image_error: Exception | None = None
        self.image_error_at: int | None = None
        self.image_delays: dict[int, float] = {}
        self.text_calls: list[dict] = []
        self.image_calls: list[tuple[int, str]] = []
        self.completed_images: list[int] = []
        self.close_calls = 0

    async def generate_lesson_json(self, prompt, system_instruction, response_schema):
        self.text_calls.append(
            {"prompt": prompt, "system_instruction": system_instruction, "response_schema": response_schema}
        )
        if self.text_error is not None:
            raise self.text_error
        return self.text

    async def generate_panel_image(self, prompt, panel_index=None):
        self.image_calls.append((panel_index, prompt))
        await asyncio.sleep(self.image_delays.get(panel_index, 0))
        if self.image_error is not None and panel_index == self.image_error_at:
            raise self.image_error
        self.completed_images.append(panel_index)
        return f"data:image/png;base64,cGFuZWwt{panel_index}"

    async def close(self):
        self.close_calls += 1


class FakeClientFactory:
    """client_factory replacement that counts how often a client was built."""

    def __init__(self, client: FakeGeminiClient):
        self.client = client
        self.calls = 0
        self.kwargs: dict = {}

    def __call__(self, **kwargs):
        self.calls += 1
        self.kwargs = kwargs
        return self.client


# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture(scope="session")
def project_root():
    """Return the project root directory."""
    return PROJECT_ROOT


@pytest.fixture
def settings(monkeypatch):
    """Settings with a fake credential, isolated from any local .env file."""
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.delenv("API_KEY", raising=False)
    return Settings(_env_file=None, gemini_api_key=TEST_API_KEY)


@pytest.fixture
def unconfigured_settings(monkeypatch):
    """Settings with no credential at all."""
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.delenv("API_KEY", raising=False)
    return Settings(_env_file=None)


def make_lesson_payload(panel_count: int = 4) -> dict:
    """A valid lesson response as the text model would return it."""
    return {
        "quote": {
            "text": "The nation that destroys its soil destroys itself.",
            "author": "Franklin D. Roosevelt",
        },
        "explanation": (
            "[Photosynthesis](https://en.wikipedia.org/wiki/Photosynthesis) is how plants "
            "turn light into **chemical energy**.\n\n"
            "It takes place in the [chloroplast](https://en.wikipedia.org/wiki/Chloroplast)."
        ),
        "recommended_reading": [
            "Taiz, L., & Zeiger, E. (2010). Plant physiology (5th ed.). Sinauer Associates.",
        ],
        "comic_script": [
            {
                "narrative": f"Professor Owl explains step {i + 1}.",
                "image_prompt": f"{IMAGE_PROMPT_PREFIX} an owl in a gown pointing at a leaf, scene {i + 1}",
            }
            for i in range(panel_count)
        ],
        "flashcards": [
            {"term": "Chlorophyll", "definition": "The **green pigment** that absorbs light."},
            {"term": "Stomata", "definition": "Pores that let **carbon dioxide** in."},
        ],
        "mind_map": {
            "title": "Photosynthesis",
            "children": [
                {
                    "title": "Light reactions",
                    "children": [{"title": "Thylakoid", "children": []}],
                },
                {"title": "Calvin cycle", "children": []},
            ],
        },
    }


@pytest.fixture
def lesson_payload():
    """A valid lesson response dict (4 panels)."""
    return make_lesson_payload()


@pytest.fixture
def lesson_json(lesson_payload):
    """The valid lesson response serialized as the model's raw text."""
    return json.dumps(lesson_payload)


@pytest.fixture
def fake_client(lesson_json):
    """Fake model client returning the valid lesson."""
    return FakeGeminiClient(text=lesson_json)


@pytest.fixture
def client_factory(fake_client):
    """Factory handing out fake_client and counting constructions."""
    return FakeClientFactory(fake_client)


@pytest.fixture
def payload_factory():
    """Build lesson response dicts with a chosen panel count."""
    return make_lesson_payload
