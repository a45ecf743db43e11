"""Pytest configuration and fixtures for integration tests.

Loads .env and skips the live Gemini tests when no API key is configured.
"""

import os
from pathlib import Path

import pytest
from dotenv import load_dotenv


def pytest_configure(config):
    """Load environment variables from .env in the project root before collection."""
    env_path = Path(__file__).parent.parent.parent / ".env"
    load_dotenv(env_path)

    print("\n" + "=" * 70)
    print("Note: These tests call the live Gemini API and require GEMINI_API_KEY")
    print(f"Environment loaded from: {env_path}")
    print("=" * 70 + "\n")


@pytest.fixture(scope="session", autouse=True)
def check_api_keys():
    """Skip all integration tests if GEMINI_API_KEY is not configured."""
    if not os.getenv("GEMINI_API_KEY"):
        pytest.skip("Missing API key: GEMINI_API_KEY. Set it in .env to run integration tests.")


@pytest.fixture
def service():
    """Gemini service built from the environment (config validated on construction)."""
    from pantry_chef.services.gemini import GeminiGenerationService
    from pantry_chef.utils.config import Config

    return GeminiGenerationService(settings=Config())
