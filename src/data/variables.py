# src/data/variables.py
from dataclasses import dataclass
from typing import Dict, Optional, Tuple


@dataclass(frozen=True)
class OceanographicVariable:
    name: str
    parameter: str
    unit: str
    color: str
    description: str
    typical_range: Tuple[float, float]
    depth_dependent: bool


OCEANOGRAPHIC_VARIABLES: Dict[str, OceanographicVariable] = {
    'temperature': OceanographicVariable(
        'Temperature', 'temperature', '°C', '#DC2626',
        'Sea water temperature at various depths', (-2, 35), True),
    'salinity': OceanographicVariable(
        'Salinity', 'salinity', ' PSU', '#2563EB',
        'Practical Salinity Units - dissolved salt content', (30, 40), True),
    'oxygen': OceanographicVariable(
        'Dissolved Oxygen', 'oxygen', ' μmol/kg', '#059669',
        'Dissolved oxygen concentration', (0, 400), True),
    'pressure': OceanographicVariable(
        'Pressure', 'pressure', ' dbar', '#7C3AED',
        'Water pressure, roughly equivalent to depth in meters', (0, 2000), True),
    'density': OceanographicVariable(
        'Density', 'density', ' kg/m³', '#D97706',
        'Sea water density from temperature, salinity and pressure', (1020, 1030), True),
    'ph': OceanographicVariable(
        'pH', 'ph', '', '#DB2777',
        'Acidity or alkalinity of sea water', (7.5, 8.5), False),
    'chlorophyll': OceanographicVariable(
        'Chlorophyll-a', 'chlorophyll', ' mg/m³', '#16A34A',
        'Phytoplankton pigment, an indicator of primary productivity', (0, 20), False),
    'currents': OceanographicVariable(
        'Ocean Currents', 'currents', ' m/s', '#0891B2',
        'Water movement velocity and direction', (0, 2), True),
}


def get_variable(parameter: Optional[str]) -> OceanographicVariable:
    return OCEANOGRAPHIC_VARIABLES.get(parameter or '', OCEANOGRAPHIC_VARIABLES['temperature'])
