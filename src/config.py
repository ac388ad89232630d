# src/config.py
import os
import copy
import yaml
from pathlib import Path
from typing import Dict, Any, Optional
import logging

from dotenv import load_dotenv

load_dotenv()

DEFAULT_SETTINGS: Dict[str, Any] = {
    'generator': {
        'default_region': 'Global Ocean',
        'start_date': '2024-01-01',
        'end_date': '2024-12-31',
        'temperature_range': [-2, 35],
        'salinity_range': [0, 40],
        'depth_range': [0, 6000]
    },
    'chat': {
        'default_language': 'en',
        'supported_languages': ['en', 'hi', 'ta'],
        'time_series_points': 12,
        'map_points': 50
    },
    'llm': {
        'enabled': True,
        'provider': 'openai',
        'api_url': 'https://api.openai.com/v1/chat/completions',
        'model': 'gpt-4',
        'temperature': 0.7,
        'max_tokens': 800,
        'timeout': 30,
        'openai_api_key': None
    },
    'visualization': {
        'default_theme': 'plotly_white',
        'color_palette': 'Viridis',
        'map_tiles': 'OpenStreetMap',
        'max_markers': 500
    },
    'logging': {
        'level': 'INFO',
        'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        'file': None
    }
}


class Config:
    """Configuration manager for the FloatChat dashboard"""

    ENV_PREFIX = 'FLOATCHAT_'

    def __init__(self, config_path: Optional[str] = None):
        self.config_path = Path(config_path) if config_path else self._find_config_file()
        self.settings = self._load_settings()
        self._overrides: Dict[str, Any] = {}
        self._setup_logging()

    def _find_config_file(self) -> Optional[Path]:
        """Find the configuration file in various locations"""
        possible_paths = [
            Path('config/settings.yaml'),
            Path('../config/settings.yaml'),
            Path(__file__).parent.parent / 'config' / 'settings.yaml',
            Path('./settings.yaml')
        ]

        for path in possible_paths:
            if path.exists():
                return path

        return None

    def _load_settings(self) -> Dict[str, Any]:
        """Load settings from YAML file on top of the built-in defaults"""
        settings = copy.deepcopy(DEFAULT_SETTINGS)
        if self.config_path is None:
            return settings

        try:
            with open(self.config_path, 'r', encoding='utf-8') as f:
                loaded = yaml.safe_load(f) or {}
        except (OSError, yaml.YAMLError) as e:
            logging.error(f"Error loading config {self.config_path}: {e}")
            return settings

        return _deep_merge(settings, loaded)

    def load_config(self, config_path: str):
        """Reload settings from another YAML file"""
        self.config_path = Path(config_path)
        self.settings = self._load_settings()
        self._setup_logging()

    def _setup_logging(self):
        """Setup logging configuration"""
        log_level = getattr(logging, str(self.get('logging.level', 'INFO')).upper(), logging.INFO)
        log_format = self.get('logging.format', DEFAULT_SETTINGS['logging']['format'])

        handlers = [logging.StreamHandler()]
        log_file = self.get('logging.file')
        if log_file:
            Path(log_file).parent.mkdir(parents=True, exist_ok=True)
            handlers.append(logging.FileHandler(log_file, encoding='utf-8'))

        logging.basicConfig(level=log_level, format=log_format, handlers=handlers)

    def get(self, key: str, default: Any = None) -> Any:
        """Get configuration value using dot notation"""
        if key in self._overrides:
            return self._overrides[key]

        env_key = f"{self.ENV_PREFIX}{key.replace('.', '_').upper()}"
        if env_key in os.environ:
            return os.environ[env_key]

        value = self.settings
        for k in key.split('.'):
            if isinstance(value, dict) and k in value:
                value = value[k]
            else:
                return default

        return value

    def set(self, key: str, value: Any):
        """Override a configuration value for the running process"""
        self._overrides[key] = value

    def reset(self, key: Optional[str] = None):
        """Drop one override, or all of them"""
        if key is None:
            self._overrides.clear()
        else:
            self._overrides.pop(key, None)

    def get_float(self, key: str, default: float) -> float:
        try:
            return float(self.get(key, default))
        except (TypeError, ValueError):
            return default

    def get_range(self, key: str, default: list) -> tuple:
        """Get a two-element numeric range such as ``generator.temperature_range``"""
        value = self.get(key, default)
        if isinstance(value, str):
            value = [part.strip() for part in value.split(',')]
        try:
            low, high = float(value[0]), float(value[1])
        except (TypeError, ValueError, IndexError):
            low, high = float(default[0]), float(default[1])
        return low, high


def _deep_merge(base: Dict[str, Any], extra: Dict[str, Any]) -> Dict[str, Any]:
    for key, value in extra.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            base[key] = _deep_merge(base[key], value)
        else:
            base[key] = value
    return base


# Global configuration instance
config = Config()
