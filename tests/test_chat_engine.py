# tests/test_chat_engine.py

import pytest
from pathlib import Path
import sys

import numpy as np
import requests

# Add src to path
sys.path.append(str(Path(__file__).parent.parent / 'src'))

from config import config
from data.models import ChatMessage, QueryEntity
from nlp import llm_client
from nlp.chat_engine import ChatEngine
from nlp.llm_client import LLMUnavailableError, OpenAIChatClient, build_system_prompt, get_api_key

ARABIAN_SEA_QUERY = "What was the average temperature in the Arabian Sea in 2023?"


class FakeResponse:
    def __init__(self, status_code=200, body=None):
        self.status_code = status_code
        self.body = body

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Server Error")

    def json(self):
        if self.body is None:
            raise ValueError("No JSON object could be decoded")
        return self.body


class FakeSession:
    def __init__(self, response=None, error=None):
        self.response = response
        self.error = error
        self.calls = []

    def post(self, url, json=None, headers=None, timeout=None):
        self.calls.append({'url': url, 'json': json, 'headers': headers, 'timeout': timeout})
        if self.error is not None:
            raise self.error
        return self.response


def answer(text):
    return FakeResponse(body={'choices': [{'message': {'content': text}}]})


class TestProcessQuery:
    @pytest.fixture(autouse=True)
    def setup(self):
        self.engine = ChatEngine(rng=np.random.default_rng(7))

    def test_payload_without_credentials_uses_local_templates(self):
        result = self.engine.process_query(ARABIAN_SEA_QUERY)

        assert result['response_source'] == 'local'
        assert result['response'].startswith("**Direct Answer:**")
        assert result['intent'] == 'statistical_analysis'
        assert result['query_type'] == 'specific'
        assert result['confidence'] == 98
        assert result['data_quality'] == 'high'
        assert result['source_info']['float_count'] == 45
        assert result['source_info']['data_quality'] == 'QC Level 3 (Adjusted)'
        assert result['language'] == 'en'
        assert [e['type'] for e in result['entities']] == ['region', 'time', 'parameter']

    def test_statistical_query_suggests_chart_map_and_table(self):
        result = self.engine.process_query(ARABIAN_SEA_QUERY)
        kinds = [v['type'] for v in result['visualizations']]
        assert kinds == ['chart', 'map', 'table']

    def test_data_request_has_no_visualizations(self):
        result = self.engine.process_query("what is the salinity value")
        assert result['intent'] == 'data_request'
        assert result['visualizations'] == []

    def test_empty_query_never_raises(self):
        result = self.engine.process_query('')
        assert result['intent'] == 'data_request'
        assert result['entities'] == []
        assert 'Incomplete Query' in result['response']

    def test_unknown_language_falls_back_to_english(self):
        result = self.engine.process_query(ARABIAN_SEA_QUERY, language='fr')
        assert result['language'] == 'en'


class TestLLMFallback:
    def make_engine(self, session, api_key='sk-test'):
        client = OpenAIChatClient(api_key=api_key, session=session)
        return ChatEngine(llm_client=client, rng=np.random.default_rng(1))

    def test_llm_answer_is_used_when_available(self):
        session = FakeSession(answer("The average temperature is 28.4°C"))
        result = self.make_engine(session).process_query(ARABIAN_SEA_QUERY)

        assert result['response_source'] == 'openai'
        assert result['response'] == "The average temperature is 28.4°C"
        call = session.calls[0]
        assert call['headers']['Authorization'] == 'Bearer sk-test'
        assert call['json']['messages'][0]['role'] == 'system'
        assert call['json']['messages'][-1] == {'role': 'user', 'content': ARABIAN_SEA_QUERY}
        assert call['json']['model'] == config.get('llm.model')

    @pytest.mark.parametrize('session', [
        FakeSession(error=requests.Timeout("timed out")),
        FakeSession(error=requests.ConnectionError("refused")),
        FakeSession(FakeResponse(status_code=500, body={})),
        FakeSession(FakeResponse(body={'unexpected': True})),
        FakeSession(FakeResponse(body=None)),
        FakeSession(answer("   ")),
        FakeSession(answer(123)),
        FakeSession(answer(["not", "text"])),
    ])
    def test_failures_fall_back_to_local_response(self, session):
        result = self.make_engine(session).process_query(ARABIAN_SEA_QUERY)

        assert result['response_source'] == 'local'
        assert result['response'].startswith("**Direct Answer:**")
        assert len(session.calls) == 1

    def test_disabled_llm_is_never_called(self):
        config.set('llm.enabled', False)
        session = FakeSession(answer("should not be used"))
        result = self.make_engine(session).process_query(ARABIAN_SEA_QUERY)

        assert result['response_source'] == 'local'
        assert session.calls == []

    def test_disabled_flag_from_environment_string(self, monkeypatch):
        monkeypatch.setenv('FLOATCHAT_LLM_ENABLED', 'false')
        assert not OpenAIChatClient(api_key='sk-test', session=FakeSession()).enabled

    def test_complete_raises_without_credentials(self):
        client = OpenAIChatClient(session=FakeSession())
        with pytest.raises(LLMUnavailableError):
            client.complete([{'role': 'user', 'content': 'hi'}])


class TestCredentials:
    def test_session_key_wins(self, monkeypatch):
        monkeypatch.setenv('OPENAI_API_KEY', 'sk-env')
        config.set('llm.openai_api_key', 'sk-config')
        llm_client.set_api_key('sk-session')
        assert get_api_key() == 'sk-session'

    def test_config_key_before_environment(self, monkeypatch):
        monkeypatch.setenv('OPENAI_API_KEY', 'sk-env')
        config.set('llm.openai_api_key', 'sk-config')
        assert get_api_key() == 'sk-config'

    def test_environment_key_last(self, monkeypatch):
        monkeypatch.setenv('OPENAI_API_KEY', 'sk-env')
        assert get_api_key() == 'sk-env'

    def test_blank_session_key_is_ignored(self):
        llm_client.set_api_key('   ')
        assert get_api_key() is None

    def test_system_prompt_names_focus_variable(self):
        from data.variables import get_variable
        prompt = build_system_prompt(get_variable('salinity'))
        assert 'Current focus variable: Salinity' in prompt
        assert 'GDAC' in prompt


class TestSendMessage:
    @pytest.fixture(autouse=True)
    def setup(self):
        self.engine = ChatEngine(rng=np.random.default_rng(3))

    def test_history_is_not_mutated(self):
        history = [ChatMessage(role='assistant', content='Hello')]
        updated = self.engine.send_message(history, ARABIAN_SEA_QUERY)

        assert len(history) == 1
        assert len(updated) == 3
        assert updated[0] is history[0]
        assert updated[1].role == 'user'
        assert updated[1].content == ARABIAN_SEA_QUERY
        assert updated[2].role == 'assistant'
        assert updated[2].metadata['intent'] == 'statistical_analysis'
        assert updated[2].metadata['confidence'] == 98

    def test_blank_message_is_ignored(self):
        history = [ChatMessage(role='assistant', content='Hello')]
        updated = self.engine.send_message(history, '   ')
        assert updated == history
        assert updated is not history

    def test_language_is_passed_through(self):
        updated = self.engine.send_message([], ARABIAN_SEA_QUERY, language='hi')
        assert 'प्रत्यक्ष उत्तर' in updated[-1].content


class TestVisualizations:
    @pytest.fixture(autouse=True)
    def setup(self):
        self.engine = ChatEngine(rng=np.random.default_rng(11))
        self.region = QueryEntity(type='region', value='Bay of Bengal', confidence=0.98,
                                  bounds={'lat': [5, 25], 'lon': [80, 100]})
        self.parameter = QueryEntity(type='parameter', value='salinity', confidence=0.95, depth='any')

    def test_chart_has_twelve_monthly_points(self):
        chart = self.engine.generate_visualizations([self.parameter], 'trend_analysis')[0]

        assert chart['type'] == 'chart'
        assert chart['unit'] == 'PSU'
        assert len(chart['data']) == 12
        assert chart['data'][0]['date'] == '2024-01-01'
        assert chart['data'][-1]['date'] == '2024-12-01'

    def test_map_points_stay_inside_region(self):
        specs = self.engine.generate_visualizations([self.region, self.parameter], 'visualization_request')
        floats = next(v for v in specs if v['type'] == 'map')['data']['floats']

        assert len(floats) == 50
        assert all(5 <= f['lat'] <= 25 and 80 <= f['lon'] <= 100 for f in floats)

    def test_map_point_count_is_configurable(self):
        config.set('chat.map_points', 5)
        specs = self.engine.generate_visualizations([self.region], 'comparison')
        assert len(next(v for v in specs if v['type'] == 'map')['data']['floats']) == 5

    def test_table_for_comparison(self):
        specs = self.engine.generate_visualizations([self.parameter], 'comparison')
        table = next(v for v in specs if v['type'] == 'table')

        assert table['data']['headers'][0] == 'Parameter'
        assert table['data']['rows'][0][0] == 'salinity'


class TestGeneralReply:
    @pytest.fixture(autouse=True)
    def setup(self):
        self.engine = ChatEngine(rng=np.random.default_rng(5))

    @pytest.mark.parametrize('text, marker', [
        ("How is the thermal structure?", 'thermocline'),
        ("Tell me about salt levels", 'Halocline'),
        ("Analyze the patterns please", 'Temperature Trends'),
        ("Any climate signals here?", 'Climate Indicators'),
        ("How many ARGO floats are deployed?", 'Float Coverage'),
        ("hi", "I'm FloatChat"),
        ("Could you help me out with this", "I'm FloatChat"),
        ("Tell me something interesting about oceans", 'ocean data analysis'),
    ])
    def test_keyword_branches(self, text, marker):
        assert marker in self.engine.general_reply(text)

    def test_none_is_treated_as_greeting(self):
        assert "I'm FloatChat" in self.engine.general_reply(None)
