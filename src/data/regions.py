# src/data/regions.py
from dataclasses import dataclass
from typing import Dict, List, Optional

DEFAULT_REGION = 'Global Ocean'


@dataclass(frozen=True)
class RegionBounds:
    """Lat/lon bounding box; lon_max < lon_min means the box crosses the antimeridian"""
    lat_min: float
    lat_max: float
    lon_min: float
    lon_max: float

    @property
    def crosses_antimeridian(self) -> bool:
        return self.lon_max < self.lon_min

    @property
    def lat_span(self) -> float:
        return self.lat_max - self.lat_min

    @property
    def lon_span(self) -> float:
        if self.crosses_antimeridian:
            return self.lon_max + 360 - self.lon_min
        return self.lon_max - self.lon_min

    def longitude_at(self, fraction: float) -> float:
        """Longitude ``fraction`` of the way across the box, wrapped into [-180, 180]"""
        lon = self.lon_min + fraction * self.lon_span
        if lon > 180:
            lon -= 360
        return lon

    def contains(self, latitude: float, longitude: float) -> bool:
        if not self.lat_min <= latitude <= self.lat_max:
            return False
        if self.crosses_antimeridian:
            return longitude >= self.lon_min or longitude <= self.lon_max
        return self.lon_min <= longitude <= self.lon_max


@dataclass(frozen=True)
class RegionProfile:
    name: str
    bounds: RegionBounds
    base_temperature: float
    base_salinity: float
    float_count: int


REGION_PROFILES: Dict[str, RegionProfile] = {
    'Global Ocean': RegionProfile(
        'Global Ocean', RegionBounds(-60, 60, -180, 180), 15, 35, 120),
    'Pacific Ocean': RegionProfile(
        'Pacific Ocean', RegionBounds(-60, 60, 120, -70), 18, 34.5, 180),
    'Atlantic Ocean': RegionProfile(
        'Atlantic Ocean', RegionBounds(-60, 60, -70, 20), 16, 35.5, 150),
    'Indian Ocean': RegionProfile(
        'Indian Ocean', RegionBounds(-60, 30, 20, 120), 20, 35.2, 100),
    'Arctic Ocean': RegionProfile(
        'Arctic Ocean', RegionBounds(60, 90, -180, 180), -1, 32, 30),
    'Southern Ocean': RegionProfile(
        'Southern Ocean', RegionBounds(-90, -60, -180, 180), 2, 34.8, 80),
    'Mediterranean Sea': RegionProfile(
        'Mediterranean Sea', RegionBounds(30, 46, -6, 36), 18, 38.5, 25),
    'Caribbean Sea': RegionProfile(
        'Caribbean Sea', RegionBounds(10, 25, -90, -60), 26, 36, 15),
}


def get_region_profile(region: Optional[str]) -> RegionProfile:
    """Region defaults, falling back to the global ocean for unknown names"""
    return REGION_PROFILES.get(region or DEFAULT_REGION, REGION_PROFILES[DEFAULT_REGION])


def list_regions() -> List[str]:
    return list(REGION_PROFILES.keys())
