# tests/test_float_generator.py

import pytest
from pathlib import Path
import sys
from datetime import date, datetime

import numpy as np

# Add src to path
sys.path.append(str(Path(__file__).parent.parent / 'src'))

from data.float_generator import (
    DataFilters, FloatGenerator, empty_ocean_data, floats_to_dataframe, hash_code, seeded_random
)
from data.regions import REGION_PROFILES, get_region_profile

NOW = datetime(2024, 6, 15, 12, 0, 0)


class TestSeeding:
    def test_hash_code_matches_31_multiplier_hash(self):
        assert hash_code('') == 0
        assert hash_code('a') == 97
        assert hash_code('ab') == 97 * 31 + 98

    def test_hash_code_counts_utf16_code_units(self):
        high, low = 0xD83C, 0xDF0A
        assert hash_code('\U0001F30A') == high * 31 + low

    def test_hash_code_is_non_negative_for_overflowing_strings(self):
        assert hash_code('Global Ocean' * 20) >= 0

    def test_seeded_random_is_deterministic_and_in_unit_interval(self):
        values = [seeded_random(seed) for seed in range(1, 200)]
        assert values == [seeded_random(seed) for seed in range(1, 200)]
        assert all(0 <= v < 1 for v in values)


class TestFloatGenerator:
    @pytest.fixture(autouse=True)
    def setup(self):
        self.generator = FloatGenerator()
        yield
        self.generator.clear_cache()

    def test_same_region_yields_identical_base_floats(self):
        first = self.generator.generate_base_floats('Indian Ocean')
        second = FloatGenerator().generate_base_floats('Indian Ocean')
        assert first == second

    def test_float_count_follows_region_profile(self):
        assert len(self.generator.generate_base_floats('Caribbean Sea')) == 15
        assert len(self.generator.generate_base_floats('Atlantis')) == REGION_PROFILES['Global Ocean'].float_count
        assert len(self.generator.generate_base_floats('Indian Ocean', count=7)) == 7

    def test_ids_are_sequential(self):
        floats = self.generator.generate_base_floats('Mediterranean Sea')
        assert [f.id for f in floats[:3]] == ['ARGO_3901000', 'ARGO_3901001', 'ARGO_3901002']

    @pytest.mark.parametrize('region', list(REGION_PROFILES))
    def test_positions_stay_inside_region_bounds(self, region):
        bounds = get_region_profile(region).bounds
        for f in self.generator.generate_base_floats(region):
            assert bounds.contains(f.base_latitude, f.base_longitude), (region, f)
            assert -180 <= f.base_longitude <= 180
            assert 10 <= f.base_depth <= 2000

    def test_pacific_floats_straddle_the_antimeridian(self):
        floats = self.generator.generate_base_floats('Pacific Ocean')
        assert get_region_profile('Pacific Ocean').bounds.crosses_antimeridian
        assert any(f.base_longitude > 120 for f in floats)
        assert any(f.base_longitude < -70 for f in floats)
        assert not any(-70 < f.base_longitude < 120 for f in floats)

    def test_base_set_is_cached_per_region(self):
        first = self.generator.generate_base_floats('Arctic Ocean')
        assert self.generator.generate_base_floats('Arctic Ocean') is first
        assert self.generator.cached_regions == ['Arctic Ocean']

        self.generator.clear_cache()
        assert self.generator.cached_regions == []
        assert self.generator.generate_base_floats('Arctic Ocean') is not first

    def test_readings_are_clamped_to_filters(self):
        filters = DataFilters(region='Caribbean Sea', temp_min=20, temp_max=22,
                              salinity_min=35.5, salinity_max=35.6)
        data = self.generator.get_argo_data(filters, now=NOW)
        assert data.floats
        for reading in data.floats:
            assert 20 <= reading.temperature <= 22
            assert 35.5 <= reading.salinity <= 35.6

    def test_reading_dates_fall_inside_range(self):
        filters = DataFilters(region='Indian Ocean', start_date='2023-03-01', end_date='2023-03-31')
        data = self.generator.get_argo_data(filters, now=NOW)
        for reading in data.floats:
            assert '2023-03-01' <= reading.date <= '2023-03-31'

    def test_positions_do_not_depend_on_filters(self):
        narrow = DataFilters(region='Atlantic Ocean', temp_min=0, temp_max=1)
        wide = DataFilters(region='Atlantic Ocean')
        a = self.generator.get_argo_data(narrow, now=NOW).floats
        b = self.generator.get_argo_data(wide, now=NOW).floats
        assert [(r.id, r.latitude, r.longitude) for r in a] == [(r.id, r.latitude, r.longitude) for r in b]

    def test_summary_counts_and_averages(self):
        data = self.generator.get_argo_data(DataFilters(region='Southern Ocean'), now=NOW,
                                            rng=np.random.default_rng(0))
        active = [r for r in data.floats if r.is_active]
        summary = data.summary
        assert summary.total_floats == len(data.floats) == 80
        assert summary.active_floats == len(active)
        assert summary.avg_temperature == pytest.approx(np.mean([r.temperature for r in active]), abs=0.01)
        assert 30 * len(active) <= summary.data_points <= 229 * len(active)

    def test_status_filter_drops_inactive_floats(self):
        data = self.generator.get_argo_data(DataFilters(region='Pacific Ocean', statuses=('Active',)), now=NOW)
        assert data.floats
        assert all(r.status == 'active' for r in data.floats)
        assert data.summary.total_floats == data.summary.active_floats

    def test_depth_filter_can_empty_the_result(self):
        data = self.generator.get_argo_data(DataFilters(region='Arctic Ocean', depth_min=3000), now=NOW)
        assert data.is_empty
        assert data.summary.total_floats == 0
        assert data.summary.avg_temperature == 0


class TestDataFilters:
    def test_from_params_parses_strings(self):
        filters = DataFilters.from_params({
            'region': 'Indian Ocean',
            'startDate': '2023-01-01',
            'endDate': '2023-06-30',
            'tempMin': '5',
            'tempMax': '25.5',
            'status': 'active, inactive'
        })
        assert filters.region == 'Indian Ocean'
        assert filters.start_date == date(2023, 1, 1)
        assert filters.temp_max == 25.5
        assert filters.statuses == ('active', 'inactive')

    def test_from_params_falls_back_on_garbage(self):
        filters = DataFilters.from_params({'tempMin': 'cold', 'startDate': 'yesterday'})
        assert filters.temp_min == -2.0
        assert filters.start_date == date(2024, 1, 1)
        assert filters.region == 'Global Ocean'

    def test_inverted_ranges_are_swapped(self):
        filters = DataFilters(start_date='2024-12-01', end_date='2024-01-01', temp_min=30, temp_max=10)
        assert filters.start_date < filters.end_date
        assert (filters.temp_min, filters.temp_max) == (10, 30)

    def test_from_settings_applies_overrides(self):
        filters = DataFilters.from_settings(region='Arctic Ocean', temp_min=None)
        assert filters.region == 'Arctic Ocean'
        assert filters.temp_min == -2.0


class TestEmptyData:
    def test_empty_ocean_data_is_zeroed(self):
        data = empty_ocean_data(DataFilters(region='Caribbean Sea'))
        assert data.region == 'Caribbean Sea'
        assert data.is_empty
        assert data.to_dict()['summary'] == {
            'total_floats': 0, 'active_floats': 0, 'avg_temperature': 0.0,
            'avg_salinity': 0.0, 'data_points': 0
        }

    def test_empty_dataframe_keeps_columns(self):
        df = floats_to_dataframe([])
        assert df.empty
        assert list(df.columns) == ['id', 'latitude', 'longitude', 'depth', 'temperature',
                                    'salinity', 'date', 'status']
