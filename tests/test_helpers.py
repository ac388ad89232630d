# tests/test_helpers.py

import pytest
from pathlib import Path
import sys
import json
from datetime import date, datetime

import numpy as np
import pandas as pd
from io import StringIO

# Add src to path
sys.path.append(str(Path(__file__).parent.parent / 'src'))

from data.float_generator import DataFilters
from data.models import ChatMessage, FloatReading
from utils.helpers import ColorScale, DataExporter, FileHandler, OceanHelpers

FLOATS = [
    FloatReading(id='ARGO_3901000', latitude=12.5, longitude=65.25, depth=150.0, temperature=27.1,
                 salinity=36.0, date='2024-02-01', status='active'),
    FloatReading(id='ARGO_3901001', latitude=-5.0, longitude=-120.0, depth=900.0, temperature=8.4,
                 salinity=34.6, date='2024-02-03', status='inactive'),
]


class TestOceanHelpers:
    def test_format_coordinates(self):
        assert OceanHelpers.format_coordinates(15.5, 65.25) == '15.50°N, 65.25°E'
        assert OceanHelpers.format_coordinates(-33.9, -70.1, precision=1) == '33.9°S, 70.1°W'


class TestColorScale:
    @pytest.mark.parametrize('temperature, color', [
        (28, 'red'), (21, 'orange'), (12, 'green'), (6, 'blue'), (-1, 'darkblue'), (None, 'gray')
    ])
    def test_temperature_color(self, temperature, color):
        assert ColorScale.temperature_color(temperature) == color

    def test_salinity_color(self):
        assert ColorScale.salinity_color(37) == 'darkred'
        assert ColorScale.salinity_color(35) == 'cadetblue'
        assert ColorScale.salinity_color(float('nan')) == 'gray'


class TestDataExporter:
    def test_csv_export(self):
        df = pd.read_csv(StringIO(DataExporter.floats_to_csv(FLOATS).decode('utf-8')))
        assert list(df['id']) == ['ARGO_3901000', 'ARGO_3901001']
        assert df.loc[1, 'status'] == 'inactive'

    def test_empty_csv_export_has_header(self):
        assert DataExporter.floats_to_csv([]).decode('utf-8').startswith('id,latitude,longitude')

    def test_json_export_includes_filters(self):
        payload = json.loads(DataExporter.floats_to_json(FLOATS, DataFilters(region='Indian Ocean')))
        assert payload['filters']['region'] == 'Indian Ocean'
        assert len(payload['floats']) == 2
        assert payload['floats'][0]['temperature'] == 27.1

    def test_transcript(self):
        messages = [
            ChatMessage(role='user', content='average temperature?', timestamp='2024-01-01T00:00:00'),
            ChatMessage(role='assistant', content='It is 27.1°C', timestamp='2024-01-01T00:00:01',
                        metadata={'confidence': 98}),
        ]
        text = DataExporter.transcript_to_text(messages)
        assert '[2024-01-01T00:00:00] You:' in text
        assert 'FloatChat AI:' in text
        assert 'Confidence: 98%' in text

    def test_filters_json(self):
        data = json.loads(DataExporter.filters_to_json(DataFilters(temp_min=5, temp_max=25)))
        assert data['temperature'] == {'min': 5, 'max': 25}
        assert data['start_date'] == '2024-01-01'


class TestFileHandler:
    def test_safe_json_serialize_numpy_and_dates(self):
        text = FileHandler.safe_json_serialize({
            'count': np.int64(3),
            'mean': np.float32(1.5),
            'values': np.array([1, 2]),
            'day': date(2024, 1, 2),
            'at': datetime(2024, 1, 2, 3, 4, 5),
            'path': Path('logs')
        })
        assert json.loads(text) == {
            'count': 3, 'mean': 1.5, 'values': [1, 2], 'day': '2024-01-02',
            'at': '2024-01-02T03:04:05', 'path': 'logs'
        }

    def test_safe_json_serialize_rejects_unknown(self):
        with pytest.raises(TypeError):
            FileHandler.safe_json_serialize({'obj': object()})

    def test_write_bytes_creates_parents(self, tmp_path):
        target = FileHandler.write_bytes(b'abc', tmp_path / 'nested' / 'out.csv')
        assert target.read_bytes() == b'abc'
