# src/nlp/llm_client.py
import os
import logging
from typing import Dict, List, Optional

import requests

from config import config
from data.variables import OCEANOGRAPHIC_VARIABLES, OceanographicVariable

logger = logging.getLogger(__name__)

_session_api_key: Optional[str] = None


class LLMUnavailableError(Exception):
    """Raised when the hosted chat model cannot produce an answer"""


def set_api_key(api_key: Optional[str]):
    """Set (or clear) a process-wide key, e.g. one pasted into the dashboard sidebar"""
    global _session_api_key
    _session_api_key = api_key.strip() if api_key and api_key.strip() else None


def get_api_key() -> Optional[str]:
    """Look up the OpenAI key: explicit key, then settings file, then environment"""
    if _session_api_key:
        return _session_api_key

    configured = config.get('llm.openai_api_key')
    if configured:
        return str(configured)

    return os.getenv('OPENAI_API_KEY') or None


def build_system_prompt(variable: Optional[OceanographicVariable] = None) -> str:
    catalogue = '\n'.join(
        f"- {v.name} ({v.unit.strip() or 'unitless'}): {v.description}"
        for v in OCEANOGRAPHIC_VARIABLES.values()
    )
    focus = f"{variable.name} ({variable.parameter})" if variable else 'Multiple variables'
    units = f"{variable.unit.strip()} for {variable.parameter}" if variable else 'appropriate units'
    return (
        "You are FloatChat AI, an expert oceanographic data analyst specializing in ARGO float data.\n\n"
        "- Always provide exact numerical values, not approximations\n"
        "- Extract precise parameters from user queries (region, time, depth, variable)\n"
        "- Return data in this format: **Direct Answer: [Parameter] in [Region] ([Time]): [VALUE][UNIT]**\n"
        "- Include data source attribution: ARGO Global Data Assembly Centre (GDAC)\n"
        f"- Use measurement units correctly: {units}\n\n"
        f"Available oceanographic variables:\n{catalogue}\n\n"
        f"Current focus variable: {focus}"
    )


class OpenAIChatClient:
    """Thin wrapper around the chat-completions endpoint"""

    def __init__(self, api_key: Optional[str] = None, session: Optional[requests.Session] = None):
        self.api_key = api_key
        self.session = session or requests.Session()
        self.api_url = config.get('llm.api_url', 'https://api.openai.com/v1/chat/completions')
        self.model = config.get('llm.model', 'gpt-4')
        self.temperature = config.get_float('llm.temperature', 0.7)
        self.max_tokens = int(config.get_float('llm.max_tokens', 800))
        self.timeout = config.get_float('llm.timeout', 30)

    @property
    def enabled(self) -> bool:
        flag = config.get('llm.enabled', True)
        if isinstance(flag, str):
            flag = flag.lower() in ('1', 'true', 'yes')
        return bool(flag) and bool(self.api_key or get_api_key())

    def complete(self, messages: List[Dict[str, str]],
                 variable: Optional[OceanographicVariable] = None) -> str:
        api_key = self.api_key or get_api_key()
        if not api_key or not self.enabled:
            raise LLMUnavailableError("No OpenAI credential configured")

        payload = {
            'model': self.model,
            'messages': [{'role': 'system', 'content': build_system_prompt(variable)}] + list(messages),
            'temperature': self.temperature,
            'max_tokens': self.max_tokens
        }
        headers = {
            'Content-Type': 'application/json',
            'Authorization': f'Bearer {api_key}'
        }

        try:
            response = self.session.post(self.api_url, json=payload, headers=headers, timeout=self.timeout)
            response.raise_for_status()
            content = response.json()['choices'][0]['message']['content']
        except requests.RequestException as e:
            raise LLMUnavailableError(f"OpenAI request failed: {e}") from e
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise LLMUnavailableError(f"Unexpected OpenAI response: {e}") from e

        if not isinstance(content, str) or not content.strip():
            raise LLMUnavailableError("OpenAI returned an empty answer")

        logger.info(f"OpenAI answered with {len(content)} characters")
        return content.strip()
