# tests/test_insights.py

import pytest
from pathlib import Path
import sys
from datetime import datetime

import numpy as np

# Add src to path
sys.path.append(str(Path(__file__).parent.parent / 'src'))

from data.float_generator import DataFilters, FloatGenerator, empty_ocean_data
from data.models import FloatReading
from nlp.insights import generate_insight_report, generate_trend_series, summarize_floats


def reading(id, temperature, salinity, depth, status='active'):
    return FloatReading(id=id, latitude=10.0, longitude=60.0, depth=depth, temperature=temperature,
                        salinity=salinity, date='2024-03-01', status=status)


class TestInsights:
    def test_report_describes_dataset(self):
        data = FloatGenerator().get_argo_data(DataFilters(region='Caribbean Sea'),
                                              now=datetime(2024, 6, 1), rng=np.random.default_rng(0))
        report = generate_insight_report("temperature trends", data, np.random.default_rng(0))

        assert 'Advanced Oceanographic Analysis for Caribbean Sea' in report
        assert f"{data.summary.total_floats} total floats" in report
        assert 'Recommended Next Steps' in report

    def test_report_on_empty_data_uses_typical_values(self):
        report = generate_insight_report("anything", empty_ocean_data(), np.random.default_rng(1))
        assert '0 total floats (0 active)' in report
        assert 'avg: 15.0°C' in report
        assert 'Temperate/subpolar waters' in report
        assert 'adequate spatial coverage' in report

    def test_summarize_floats_cards(self):
        floats = [
            reading('a', 20.0, 35.5, 100),
            reading('b', 22.0, 36.5, 300),
            reading('c', 18.0, 35.0, 200, status='inactive'),
        ]
        cards = {card['type']: card for card in summarize_floats(floats)}

        assert cards['temperature']['value'] == '20.0°C'
        assert cards['temperature']['change'] == 'up'
        assert cards['temperature']['description'] == 'Range: 18.0°C to 22.0°C'
        assert cards['salinity']['value'] == '35.67 PSU'
        assert cards['depth']['description'] == 'Max depth: 300m'
        assert cards['activity']['value'] == '2/3'
        assert cards['activity']['change'] == 'neutral'

    def test_summarize_no_floats(self):
        assert summarize_floats([]) == []

    def test_trend_series_shape_and_band(self):
        trend = generate_trend_series(np.random.default_rng(2))

        assert list(trend['month']) == ['Jan', 'Feb', 'Mar', 'Apr', 'May', 'Jun',
                                        'Jul', 'Aug', 'Sep', 'Oct', 'Nov', 'Dec']
        assert ((trend['temp_upper'] - trend['temp_lower']).round(2) == 3.0).all()
        assert trend['temperature'].between(11.8, 16.8).all()
        assert trend['quality'].between(90, 100).all()
