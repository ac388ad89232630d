# src/utils/helpers.py
import numpy as np
import pandas as pd
import json
from datetime import date, datetime, timezone
from typing import List, Dict, Any, Iterable, Optional
import logging
from pathlib import Path

from data.models import ChatMessage, FloatReading
from data.float_generator import DataFilters, floats_to_dataframe

logger = logging.getLogger(__name__)


class OceanHelpers:
    """Helper functions for float positions and values"""

    @staticmethod
    def format_coordinates(latitude: float, longitude: float, precision: int = 2) -> str:
        """Format a position as e.g. 15.50°N, 65.25°E"""
        lat_hemisphere = 'N' if latitude >= 0 else 'S'
        lon_hemisphere = 'E' if longitude >= 0 else 'W'
        return (f"{abs(latitude):.{precision}f}°{lat_hemisphere}, "
                f"{abs(longitude):.{precision}f}°{lon_hemisphere}")


class ColorScale:
    """Marker colours (folium icon palette) for float values"""

    @staticmethod
    def temperature_color(temperature: Optional[float]) -> str:
        if temperature is None or pd.isna(temperature):
            return 'gray'
        if temperature >= 25: return 'red'
        elif temperature >= 20: return 'orange'
        elif temperature >= 10: return 'green'
        elif temperature >= 5: return 'blue'
        else: return 'darkblue'

    @staticmethod
    def salinity_color(salinity: Optional[float]) -> str:
        if salinity is None or pd.isna(salinity):
            return 'gray'
        if salinity >= 36: return 'darkred'
        elif salinity >= 34.5: return 'cadetblue'
        elif salinity >= 33: return 'lightblue'
        else: return 'white'


class DataExporter:
    """Serialise the current dashboard state for download buttons"""

    @staticmethod
    def floats_to_csv(floats: Iterable[FloatReading]) -> bytes:
        return floats_to_dataframe(floats).to_csv(index=False).encode('utf-8')

    @staticmethod
    def floats_to_json(floats: Iterable[FloatReading], filters: Optional[DataFilters] = None) -> bytes:
        payload = {
            'exported_at': datetime.now(timezone.utc).isoformat(),
            'filters': filters.to_dict() if filters else None,
            'floats': [f.to_dict() for f in floats]
        }
        return FileHandler.safe_json_serialize(payload, indent=2).encode('utf-8')

    @staticmethod
    def transcript_to_text(messages: List[ChatMessage]) -> str:
        """Plain-text chat transcript, one block per message"""
        lines = ['FloatChat AI Conversation Export', '']
        for message in messages:
            speaker = 'You' if message.role == 'user' else 'FloatChat AI'
            lines.append(f"[{message.timestamp}] {speaker}:")
            lines.append(message.content)
            confidence = message.metadata.get('confidence') if message.metadata else None
            if confidence is not None:
                lines.append(f"Confidence: {confidence}%")
            lines.append('')
        return '\n'.join(lines)

    @staticmethod
    def filters_to_json(filters: DataFilters) -> str:
        return FileHandler.safe_json_serialize(filters.to_dict(), indent=2)


class FileHandler:
    """File handling utilities"""

    @staticmethod
    def safe_json_serialize(data: Any, indent: Optional[int] = None) -> str:
        """Safely serialize data to JSON handling numpy types"""
        def default_serializer(obj):
            if isinstance(obj, np.integer):
                return int(obj)
            elif isinstance(obj, np.floating):
                return float(obj)
            elif isinstance(obj, np.ndarray):
                return obj.tolist()
            elif isinstance(obj, (datetime, date)):
                return obj.isoformat()
            elif isinstance(obj, Path):
                return str(obj)
            raise TypeError(f"Object of type {type(obj)} is not JSON serializable")

        return json.dumps(data, default=default_serializer, indent=indent, ensure_ascii=False)

    @staticmethod
    def write_bytes(content: bytes, path: Path) -> Path:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_bytes(content)
        logger.info(f"Wrote {len(content)} bytes to {path}")
        return path
