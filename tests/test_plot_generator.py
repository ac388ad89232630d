# tests/test_plot_generator.py

import pytest
from pathlib import Path
import sys
from datetime import datetime

import folium
import numpy as np
import plotly.graph_objects as go

# Add src to path
sys.path.append(str(Path(__file__).parent.parent / 'src'))

from data.float_generator import DataFilters, FloatGenerator
from nlp.insights import generate_trend_series
from visualization.plot_generator import OceanPlotGenerator


class TestPlotGenerator:
    @pytest.fixture(autouse=True)
    def setup(self):
        self.plots = OceanPlotGenerator()
        self.floats = FloatGenerator().get_argo_data(
            DataFilters(region='Mediterranean Sea'), now=datetime(2024, 6, 1)).floats

    @pytest.mark.parametrize('map_type', ['marker', 'cluster', 'heatmap', 'bogus'])
    def test_float_map_modes(self, map_type):
        m = self.plots.create_float_map(self.floats, map_type)
        assert isinstance(m, folium.Map)
        assert 'ARGO_3901000' in m.get_root().render() or map_type == 'heatmap'

    def test_empty_map(self):
        m = self.plots.create_float_map([])
        assert 'No data available' in m.get_root().render()

    def test_figures_from_floats(self):
        for fig in (self.plots.create_temperature_depth_plot(self.floats),
                    self.plots.create_ts_diagram(self.floats),
                    self.plots.create_status_breakdown(self.floats),
                    self.plots.create_overview_dashboard(self.floats)):
            assert isinstance(fig, go.Figure)
            assert len(fig.data) > 0

    def test_depth_axis_is_reversed(self):
        fig = self.plots.create_temperature_depth_plot(self.floats)
        assert fig.layout.yaxis.autorange == 'reversed'

    def test_empty_inputs_give_annotated_figure(self):
        fig = self.plots.create_ts_diagram([])
        assert len(fig.data) == 0
        assert fig.layout.annotations[0].text == 'No float data available'

    def test_trend_chart_has_band_and_secondary_axis(self):
        fig = self.plots.create_trend_chart(generate_trend_series(np.random.default_rng(0)))
        assert len(fig.data) == 4
        assert fig.data[1].fill == 'tonexty'
        assert fig.data[3].yaxis == 'y2'

    def test_chat_visualizations(self):
        chart = {'type': 'chart', 'title': 'T', 'variable': 'temperature', 'unit': '°C',
                 'data': [{'date': '2024-01-01', 'value': 20.1, 'quality': 'good'},
                          {'date': '2024-02-01', 'value': 20.4, 'quality': 'fair'}]}
        table = {'type': 'table', 'title': 'Stats',
                 'data': {'headers': ['Parameter', 'Mean'], 'rows': [['temperature', 20.2]]}}
        geo = {'type': 'map', 'title': 'Map',
               'data': {'floats': [{'id': 'argo_1', 'lat': 10, 'lon': 60, 'temperature': 25,
                                    'salinity': 35, 'status': 'active'}]}}

        assert isinstance(self.plots.create_chat_visualization(chart).data[0], go.Scatter)
        assert isinstance(self.plots.create_chat_visualization(table).data[0], go.Table)
        assert isinstance(self.plots.create_chat_visualization(geo).data[0], go.Scattergeo)
        assert len(self.plots.create_chat_visualization({'type': 'table', 'data': {'rows': []}}).data) == 0

    def test_export_plot(self, tmp_path):
        fig = self.plots.create_status_breakdown(self.floats)
        assert self.plots.export_plot(fig, str(tmp_path / 'status'), 'json')
        assert (tmp_path / 'status.json').exists()
        assert self.plots.export_plot(fig, str(tmp_path / 'status'), 'html')
        assert not self.plots.export_plot(fig, str(tmp_path / 'status'), 'bmp')
