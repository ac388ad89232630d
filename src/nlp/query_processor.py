# src/nlp/query_processor.py
"""Rule-based entity and intent extraction for ocean-data chat queries.

Regions and parameters are matched as substrings of the lower-cased query,
keeping only the longest matching phrase. Time and depth expressions are
matched with regular expressions and every match is kept. The intent is the
first keyword bucket with a hit.
"""

import re
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Tuple

from data.models import EntityType, QueryEntity

logger = logging.getLogger(__name__)

DEFAULT_INTENT = 'data_request'

REGION_PHRASES: Dict[str, Dict[str, Any]] = {
    'pacific ocean': {'name': 'Pacific Ocean', 'lat': [0, 60], 'lon': [120, 180], 'confidence': 0.98},
    'pacific': {'name': 'Pacific Ocean', 'lat': [0, 60], 'lon': [120, 180], 'confidence': 0.95},
    'atlantic ocean': {'name': 'Atlantic Ocean', 'lat': [0, 60], 'lon': [-80, 0], 'confidence': 0.98},
    'atlantic': {'name': 'Atlantic Ocean', 'lat': [0, 60], 'lon': [-80, 0], 'confidence': 0.95},
    'indian ocean': {'name': 'Indian Ocean', 'lat': [-40, 30], 'lon': [20, 120], 'confidence': 0.98},
    'indian': {'name': 'Indian Ocean', 'lat': [-40, 30], 'lon': [20, 120], 'confidence': 0.95},
    'arctic ocean': {'name': 'Arctic Ocean', 'lat': [66, 90], 'lon': [-180, 180], 'confidence': 0.98},
    'arctic': {'name': 'Arctic Ocean', 'lat': [66, 90], 'lon': [-180, 180], 'confidence': 0.95},
    'southern ocean': {'name': 'Southern Ocean', 'lat': [-90, -60], 'lon': [-180, 180], 'confidence': 0.98},
    'southern': {'name': 'Southern Ocean', 'lat': [-90, -60], 'lon': [-180, 180], 'confidence': 0.90},
    'mediterranean sea': {'name': 'Mediterranean Sea', 'lat': [30, 46], 'lon': [-6, 37], 'confidence': 0.98},
    'mediterranean': {'name': 'Mediterranean Sea', 'lat': [30, 46], 'lon': [-6, 37], 'confidence': 0.95},
    'arabian sea': {'name': 'Arabian Sea', 'lat': [10, 30], 'lon': [50, 80], 'confidence': 0.98},
    'bay of bengal': {'name': 'Bay of Bengal', 'lat': [5, 25], 'lon': [80, 100], 'confidence': 0.98},
    'gulf of mexico': {'name': 'Gulf of Mexico', 'lat': [18, 31], 'lon': [-98, -80], 'confidence': 0.98},
    'north sea': {'name': 'North Sea', 'lat': [51, 62], 'lon': [-4, 9], 'confidence': 0.95},
    'caribbean sea': {'name': 'Caribbean Sea', 'lat': [9, 25], 'lon': [-90, -60], 'confidence': 0.98},
    'caribbean': {'name': 'Caribbean Sea', 'lat': [9, 25], 'lon': [-90, -60], 'confidence': 0.95},
}

PARAMETER_PHRASES: Dict[str, Dict[str, Any]] = {
    'sea surface temperature': {'param': 'temperature', 'depth': 'surface', 'confidence': 0.98},
    'surface temperature': {'param': 'temperature', 'depth': 'surface', 'confidence': 0.95},
    'temperature': {'param': 'temperature', 'depth': 'any', 'confidence': 0.90},
    'sea surface salinity': {'param': 'salinity', 'depth': 'surface', 'confidence': 0.98},
    'salinity': {'param': 'salinity', 'depth': 'any', 'confidence': 0.95},
    'depth': {'param': 'depth', 'depth': 'any', 'confidence': 0.95},
    'pressure': {'param': 'pressure', 'depth': 'any', 'confidence': 0.90},
    'dissolved oxygen': {'param': 'oxygen', 'depth': 'any', 'confidence': 0.95},
    'oxygen': {'param': 'oxygen', 'depth': 'any', 'confidence': 0.85},
    'ph level': {'param': 'ph', 'depth': 'any', 'confidence': 0.95},
    'ph': {'param': 'ph', 'depth': 'any', 'confidence': 0.90},
    'acidity': {'param': 'ph', 'depth': 'any', 'confidence': 0.85},
    'water density': {'param': 'density', 'depth': 'any', 'confidence': 0.90},
    'density': {'param': 'density', 'depth': 'any', 'confidence': 0.85},
    'chlorophyll-a': {'param': 'chlorophyll', 'depth': 'surface', 'confidence': 0.98},
    'chlorophyll': {'param': 'chlorophyll', 'depth': 'surface', 'confidence': 0.95},
    'chl-a': {'param': 'chlorophyll', 'depth': 'surface', 'confidence': 0.90},
    'phytoplankton': {'param': 'chlorophyll', 'depth': 'surface', 'confidence': 0.85},
    'currents': {'param': 'currents', 'depth': 'any', 'confidence': 0.95},
    'current': {'param': 'currents', 'depth': 'any', 'confidence': 0.90},
    'velocity': {'param': 'currents', 'depth': 'any', 'confidence': 0.85},
    'flow': {'param': 'currents', 'depth': 'any', 'confidence': 0.80},
}

_MONTHS = 'january|february|march|april|may|june|july|august|september|october|november|december'

TIME_PATTERNS: List[Tuple[re.Pattern, str]] = [
    (re.compile(r'\b(20\d{2})\b'), 'year'),
    (re.compile(r'\b(19\d{2})\b'), 'year'),
    (re.compile(r'\b(last|past)\s+(year|month|week|decade)\b', re.IGNORECASE), 'relative_time'),
    (re.compile(r'\b(winter|spring|summer|fall|autumn)\s*(20\d{2})?\b', re.IGNORECASE), 'season'),
    (re.compile(rf'\b({_MONTHS})\s*(20\d{{2}})?\b', re.IGNORECASE), 'month'),
    (re.compile(r'\b(\d{1,2})/(\d{1,2})/(\d{4})\b'), 'date'),
    (re.compile(r'\b(\d{4})-(\d{1,2})-(\d{1,2})\b'), 'date'),
]

DEPTH_PATTERNS: List[re.Pattern] = [
    re.compile(r'(\d+)\s*(?:to|-)\s*(\d+)\s*(?:m|meter|metre)', re.IGNORECASE),
    re.compile(r'(\d+)\s*(?:m|meter|metre)\s*depth', re.IGNORECASE),
    re.compile(r'at\s*(\d+)\s*(?:m|meter|metre)', re.IGNORECASE),
]

# Order matters: the first bucket with a keyword hit wins
INTENT_KEYWORDS: List[Tuple[str, List[str]]] = [
    ('statistical_analysis', ['average', 'mean', 'median', 'standard deviation', 'std dev', 'variance']),
    ('extremes_analysis', ['highest', 'lowest', 'maximum', 'minimum', 'max', 'min', 'peak', 'record']),
    ('trend_analysis', ['trend', 'change', 'over time', 'increasing', 'decreasing', 'warming', 'cooling']),
    ('comparison', ['compare', 'versus', 'vs', 'between', 'difference', 'higher than', 'lower than']),
    ('visualization_request', ['show', 'display', 'plot', 'chart', 'graph', 'map', 'visualize']),
    ('data_request', ['what', 'value', 'measurement', 'data', 'reading']),
]

INTENT_CONFIDENCE_BONUS = {
    'statistical_analysis': 10,
    'data_request': 10,
    'extremes_analysis': 8,
    'comparison': 6,
    'visualization_request': 4
}

REGIONAL_FLOAT_COUNTS = {
    'Arabian Sea': 45,
    'Pacific Ocean': 1200,
    'Atlantic Ocean': 800,
    'Indian Ocean': 400,
    'Mediterranean Sea': 85,
    'Southern Ocean': 250
}


@dataclass
class QueryAnalysis:
    entities: List[QueryEntity] = field(default_factory=list)
    intent: str = DEFAULT_INTENT
    original_query: str = ''
    query_type: str = 'general'

    def first(self, entity_type: str) -> Optional[QueryEntity]:
        return next((e for e in self.entities if e.type == entity_type), None)

    def of_type(self, entity_type: str) -> List[QueryEntity]:
        return [e for e in self.entities if e.type == entity_type]

    @property
    def region(self) -> Optional[QueryEntity]:
        return self.first(EntityType.REGION.value)

    @property
    def parameter(self) -> Optional[QueryEntity]:
        return self.first(EntityType.PARAMETER.value)

    @property
    def time(self) -> Optional[QueryEntity]:
        return self.first(EntityType.TIME.value)

    @property
    def depth(self) -> Optional[QueryEntity]:
        return self.first(EntityType.DEPTH.value)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'entities': [e.to_dict() for e in self.entities],
            'intent': self.intent,
            'original_query': self.original_query,
            'query_type': self.query_type
        }


def _longest_match(text: str, phrases: Dict[str, Dict[str, Any]]) -> Optional[Tuple[str, Dict[str, Any]]]:
    best = None
    for phrase, info in phrases.items():
        if phrase in text and (best is None or len(phrase) > len(best[0])):
            best = (phrase, info)
    return best


class ArgoQueryProcessor:
    """Extracts regions, parameters, time and depth expressions and classifies intent"""

    def extract_entities(self, query: Optional[str]) -> List[QueryEntity]:
        query = query or ''
        lower_query = query.lower()
        entities: List[QueryEntity] = []

        region_match = _longest_match(lower_query, REGION_PHRASES)
        if region_match:
            _, region = region_match
            entities.append(QueryEntity(
                type=EntityType.REGION.value,
                value=region['name'],
                confidence=region['confidence'],
                bounds={'lat': list(region['lat']), 'lon': list(region['lon'])}
            ))

        for pattern, subtype in TIME_PATTERNS:
            for match in pattern.finditer(query):
                entities.append(QueryEntity(
                    type=EntityType.TIME.value,
                    value=match.group(0),
                    confidence=0.95,
                    subtype=subtype
                ))

        param_match = _longest_match(lower_query, PARAMETER_PHRASES)
        if param_match:
            _, param = param_match
            entities.append(QueryEntity(
                type=EntityType.PARAMETER.value,
                value=param['param'],
                confidence=param['confidence'],
                depth=param['depth']
            ))

        for pattern in DEPTH_PATTERNS:
            for match in pattern.finditer(query):
                numbers = [int(g) for g in match.groups() if g is not None]
                entities.append(QueryEntity(
                    type=EntityType.DEPTH.value,
                    value=match.group(0),
                    confidence=0.90,
                    range=numbers
                ))

        return entities

    def classify_intent(self, query: Optional[str]) -> str:
        lower_query = (query or '').lower()
        for intent, keywords in INTENT_KEYWORDS:
            if any(keyword in lower_query for keyword in keywords):
                return intent
        return DEFAULT_INTENT

    def analyze(self, query: Optional[str]) -> QueryAnalysis:
        query = query if isinstance(query, str) else ''
        entities = self.extract_entities(query)
        intent = self.classify_intent(query)
        logger.debug(f"Query '{query}' -> intent={intent}, entities={[e.type for e in entities]}")
        return QueryAnalysis(
            entities=entities,
            intent=intent,
            original_query=query,
            query_type='specific' if entities else 'general'
        )


def calculate_confidence(entities: List[QueryEntity], intent: str) -> int:
    """Precision confidence from entity coverage and intent, capped at 98"""
    types = {e.type for e in entities}
    confidence = 60
    if EntityType.REGION.value in types:
        confidence += 15
    if EntityType.PARAMETER.value in types:
        confidence += 15
    if EntityType.TIME.value in types:
        confidence += 10
    if EntityType.DEPTH.value in types:
        confidence += 5
    confidence += INTENT_CONFIDENCE_BONUS.get(intent, 0)
    return min(confidence, 98)


def data_quality_label(confidence: float) -> str:
    if confidence > 90:
        return 'high'
    if confidence > 70:
        return 'medium'
    return 'low'


def estimate_float_count(entities: List[QueryEntity]) -> int:
    region = next((e for e in entities if e.type == EntityType.REGION.value), None)
    if region is None:
        return 3000
    return REGIONAL_FLOAT_COUNTS.get(region.value, 150)
