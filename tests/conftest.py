# tests/conftest.py

import sys
from pathlib import Path

import pytest

# Add src to path
sys.path.append(str(Path(__file__).parent.parent / 'src'))

from config import config
from nlp import llm_client


@pytest.fixture(autouse=True)
def isolate_settings(monkeypatch):
    """No test may reach the hosted model or leak config overrides"""
    monkeypatch.delenv('OPENAI_API_KEY', raising=False)
    llm_client.set_api_key(None)
    config.reset()
    yield
    llm_client.set_api_key(None)
    config.reset()
