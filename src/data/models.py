# src/data/models.py
from dataclasses import dataclass, field, asdict
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
import enum
import uuid


class FloatStatus(str, enum.Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"


class EntityType(str, enum.Enum):
    REGION = "region"
    PARAMETER = "parameter"
    TIME = "time"
    DEPTH = "depth"


class MessageRole(str, enum.Enum):
    USER = "user"
    ASSISTANT = "assistant"


@dataclass(frozen=True)
class BaseFloat:
    """Cached, region-seeded float position and baseline values"""
    id: str
    base_latitude: float
    base_longitude: float
    base_depth: float
    base_temperature: float
    base_salinity: float
    status: str


@dataclass(frozen=True)
class FloatReading:
    id: str
    latitude: float
    longitude: float
    depth: float
    temperature: float
    salinity: float
    date: str
    status: str

    @property
    def is_active(self) -> bool:
        return self.status == FloatStatus.ACTIVE.value

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class OceanSummary:
    total_floats: int = 0
    active_floats: int = 0
    avg_temperature: float = 0.0
    avg_salinity: float = 0.0
    data_points: int = 0

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass
class OceanData:
    region: str
    start_date: str
    end_date: str
    floats: List[FloatReading] = field(default_factory=list)
    summary: OceanSummary = field(default_factory=OceanSummary)

    @property
    def is_empty(self) -> bool:
        return not self.floats

    def to_dict(self) -> Dict[str, Any]:
        return {
            'region': self.region,
            'date_range': {'start_date': self.start_date, 'end_date': self.end_date},
            'floats': [f.to_dict() for f in self.floats],
            'summary': self.summary.to_dict()
        }


@dataclass
class QueryEntity:
    type: str
    value: str
    confidence: float
    subtype: Optional[str] = None
    bounds: Optional[Dict[str, List[float]]] = None
    depth: Optional[str] = None
    range: Optional[List[int]] = None

    def to_dict(self) -> Dict[str, Any]:
        return {k: v for k, v in asdict(self).items() if v is not None}


@dataclass
class ChatMessage:
    role: str
    content: str
    id: str = field(default_factory=lambda: uuid.uuid4().hex)
    timestamp: str = field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    metadata: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
