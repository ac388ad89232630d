# src/data/float_generator.py
"""Seeded mock ARGO float generator.

Float positions and baseline values are derived from a hash of the region
name, so the same region always yields the same floats. The base set is
cached per region; filter changes only recompute the derived readings.
"""

import math
import logging
from dataclasses import dataclass, field
from datetime import date, datetime, timedelta, timezone
from typing import Dict, Iterable, List, Mapping, Optional, Tuple

import numpy as np
import pandas as pd

from config import config
from .models import BaseFloat, FloatReading, FloatStatus, OceanData, OceanSummary
from .regions import DEFAULT_REGION, get_region_profile

logger = logging.getLogger(__name__)

FLOAT_ID_BASE = 3901000
SEED_STRIDE = 7919  # prime, spreads consecutive floats apart
SECONDS_PER_YEAR = 60 * 60 * 24 * 365
ACTIVE_THRESHOLD = 0.85


def hash_code(text: str) -> int:
    """31-multiplier hash over UTF-16 code units, folded to a signed 32-bit int, returned as its absolute value"""
    value = 0
    units = text.encode('utf-16-le')
    for i in range(0, len(units), 2):
        unit = int.from_bytes(units[i:i + 2], 'little')
        value = ((value << 5) - value + unit) & 0xFFFFFFFF
    if value >= 0x80000000:
        value -= 0x100000000
    return abs(value)


def seeded_random(seed: float) -> float:
    """Deterministic pseudo-random number in [0, 1) for a given seed"""
    x = math.sin(seed) * 10000
    return x - math.floor(x)


def _parse_date(value, fallback: str) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return datetime.strptime(str(value)[:10], '%Y-%m-%d').date()
    except (TypeError, ValueError):
        return datetime.strptime(fallback, '%Y-%m-%d').date()


def _parse_float(value, fallback: float) -> float:
    try:
        result = float(value)
    except (TypeError, ValueError):
        return fallback
    return fallback if math.isnan(result) else result


def _clamp(value: float, low: float, high: float) -> float:
    return max(low, min(high, value))


@dataclass
class DataFilters:
    """User-facing filter set applied on top of the cached base floats"""
    region: str = DEFAULT_REGION
    start_date: date = date(2024, 1, 1)
    end_date: date = date(2024, 12, 31)
    temp_min: float = -2.0
    temp_max: float = 35.0
    salinity_min: float = 0.0
    salinity_max: float = 40.0
    depth_min: float = 0.0
    depth_max: float = 6000.0
    statuses: Tuple[str, ...] = field(
        default_factory=lambda: (FloatStatus.ACTIVE.value, FloatStatus.INACTIVE.value))

    def __post_init__(self):
        self.start_date = _parse_date(self.start_date, '2024-01-01')
        self.end_date = _parse_date(self.end_date, '2024-12-31')
        if self.end_date < self.start_date:
            self.start_date, self.end_date = self.end_date, self.start_date
        if self.temp_max < self.temp_min:
            self.temp_min, self.temp_max = self.temp_max, self.temp_min
        if self.salinity_max < self.salinity_min:
            self.salinity_min, self.salinity_max = self.salinity_max, self.salinity_min
        self.statuses = tuple(s.lower() for s in self.statuses)

    @classmethod
    def from_params(cls, params: Mapping[str, str]) -> 'DataFilters':
        """Build filters from string parameters, ignoring anything unparsable"""
        defaults = cls()
        statuses = params.get('status')
        return cls(
            region=params.get('region') or defaults.region,
            start_date=_parse_date(params.get('startDate'), defaults.start_date.isoformat()),
            end_date=_parse_date(params.get('endDate'), defaults.end_date.isoformat()),
            temp_min=_parse_float(params.get('tempMin'), defaults.temp_min),
            temp_max=_parse_float(params.get('tempMax'), defaults.temp_max),
            salinity_min=_parse_float(params.get('salinityMin'), defaults.salinity_min),
            salinity_max=_parse_float(params.get('salinityMax'), defaults.salinity_max),
            depth_min=_parse_float(params.get('depthMin'), defaults.depth_min),
            depth_max=_parse_float(params.get('depthMax'), defaults.depth_max),
            statuses=tuple(s.strip() for s in statuses.split(',') if s.strip()) if statuses else defaults.statuses
        )

    @classmethod
    def from_settings(cls, **overrides) -> 'DataFilters':
        """Defaults from the ``generator`` settings section, with keyword overrides"""
        temp_min, temp_max = config.get_range('generator.temperature_range', [-2, 35])
        salinity_min, salinity_max = config.get_range('generator.salinity_range', [0, 40])
        depth_min, depth_max = config.get_range('generator.depth_range', [0, 6000])
        values = dict(
            region=config.get('generator.default_region', DEFAULT_REGION),
            start_date=config.get('generator.start_date', '2024-01-01'),
            end_date=config.get('generator.end_date', '2024-12-31'),
            temp_min=temp_min, temp_max=temp_max,
            salinity_min=salinity_min, salinity_max=salinity_max,
            depth_min=depth_min, depth_max=depth_max
        )
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)

    def to_dict(self) -> Dict[str, object]:
        return {
            'region': self.region,
            'start_date': self.start_date.isoformat(),
            'end_date': self.end_date.isoformat(),
            'temperature': {'min': self.temp_min, 'max': self.temp_max},
            'salinity': {'min': self.salinity_min, 'max': self.salinity_max},
            'depth': {'min': self.depth_min, 'max': self.depth_max},
            'statuses': list(self.statuses)
        }


class FloatGenerator:
    """Region-seeded float generator with an in-memory base-float cache"""

    def __init__(self):
        self._cache: Dict[Tuple[str, int], List[BaseFloat]] = {}

    def clear_cache(self):
        self._cache.clear()

    @property
    def cached_regions(self) -> List[str]:
        return sorted({region for region, _ in self._cache})

    def generate_base_floats(self, region: str, count: Optional[int] = None) -> List[BaseFloat]:
        profile = get_region_profile(region)
        if count is None:
            count = profile.float_count
        count = max(0, int(count))

        cache_key = (region or DEFAULT_REGION, count)
        cached = self._cache.get(cache_key)
        if cached is not None:
            return cached

        seed = hash_code(region or DEFAULT_REGION)
        bounds = profile.bounds
        base_floats = []
        for i in range(count):
            offset = seed + i * SEED_STRIDE
            r1 = seeded_random(offset)
            r2 = seeded_random(offset + 31)
            r3 = seeded_random(offset + 97)
            r4 = seeded_random(offset + 199)

            base_floats.append(BaseFloat(
                id=f"ARGO_{FLOAT_ID_BASE + i}",
                base_latitude=round(bounds.lat_min + r1 * bounds.lat_span, 4),
                base_longitude=round(bounds.longitude_at(r2), 4),
                base_depth=round(10 + r3 * 1990, 1),
                base_temperature=profile.base_temperature + (r4 - 0.5) * 8,
                base_salinity=profile.base_salinity + (r1 - 0.5) * 4,
                status=FloatStatus.ACTIVE.value if r2 < ACTIVE_THRESHOLD else FloatStatus.INACTIVE.value
            ))

        logger.info(f"Generated {count} base floats for {profile.name} (seed {seed})")
        self._cache[cache_key] = base_floats
        return base_floats

    def get_argo_data(self, filters: Optional[DataFilters] = None, count: Optional[int] = None,
                      now: Optional[datetime] = None,
                      rng: Optional[np.random.Generator] = None) -> OceanData:
        """Readings and summary for the filtered region"""
        filters = filters or DataFilters()
        rng = rng or np.random.default_rng()

        readings = [
            apply_environmental_effects(base, filters, now)
            for base in self.generate_base_floats(filters.region, count)
        ]
        readings = [
            r for r in readings
            if filters.depth_min <= r.depth <= filters.depth_max and r.status in filters.statuses
        ]

        return OceanData(
            region=filters.region,
            start_date=filters.start_date.isoformat(),
            end_date=filters.end_date.isoformat(),
            floats=readings,
            summary=summarize_readings(readings, rng)
        )


def apply_environmental_effects(base: BaseFloat, filters: DataFilters,
                                now: Optional[datetime] = None) -> FloatReading:
    """Perturb a base float with latitude, seasonal and depth effects, then clamp to the filters"""
    now = now or datetime.now(timezone.utc)

    lat_effect = math.cos(math.radians(base.base_latitude)) * 10
    seasonal_effect = math.sin((now.timestamp() / SECONDS_PER_YEAR) * 2 * math.pi) * 3
    depth_effect = max(0.0, (2000 - base.base_depth) / 2000) * 15

    temperature = base.base_temperature + lat_effect + seasonal_effect + depth_effect
    temperature = _clamp(temperature, filters.temp_min, filters.temp_max)
    salinity = _clamp(base.base_salinity, filters.salinity_min, filters.salinity_max)

    span_days = (filters.end_date - filters.start_date).days
    offset_days = int(seeded_random(hash_code(base.id)) * span_days)
    reading_date = filters.start_date + timedelta(days=offset_days)

    return FloatReading(
        id=base.id,
        latitude=base.base_latitude,
        longitude=base.base_longitude,
        depth=base.base_depth,
        temperature=round(temperature, 2),
        salinity=round(salinity, 2),
        date=reading_date.isoformat(),
        status=base.status
    )


def summarize_readings(readings: Iterable[FloatReading],
                       rng: Optional[np.random.Generator] = None) -> OceanSummary:
    readings = list(readings)
    rng = rng or np.random.default_rng()
    active = [r for r in readings if r.is_active]
    if not active:
        return OceanSummary(total_floats=len(readings))

    return OceanSummary(
        total_floats=len(readings),
        active_floats=len(active),
        avg_temperature=round(float(np.mean([r.temperature for r in active])), 2),
        avg_salinity=round(float(np.mean([r.salinity for r in active])), 2),
        data_points=len(active) * (30 + int(rng.integers(0, 200)))
    )


def empty_ocean_data(filters: Optional[DataFilters] = None) -> OceanData:
    """Zeroed-out result used whenever data generation fails"""
    filters = filters or DataFilters()
    return OceanData(
        region=filters.region,
        start_date=filters.start_date.isoformat(),
        end_date=filters.end_date.isoformat()
    )


def floats_to_dataframe(floats: Iterable[FloatReading]) -> pd.DataFrame:
    columns = ['id', 'latitude', 'longitude', 'depth', 'temperature', 'salinity', 'date', 'status']
    records = [f.to_dict() for f in floats]
    if not records:
        return pd.DataFrame(columns=columns)
    return pd.DataFrame(records, columns=columns)


# Process-wide generator so cached floats survive dashboard reruns
float_generator = FloatGenerator()
