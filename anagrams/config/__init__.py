"""
Configuration Package

Contains all configuration-related files and settings.

This package separates two types of configuration:
- app_config.py: Flask and client configuration (environment-based)
- game_settings.py: Game rules, constants and dictionary loading
"""

from .app_config import Config, DevelopmentConfig, ProductionConfig, TestingConfig, config
from .game_settings import (
    BASE_WORD_LENGTH, MIN_WORD_LENGTH, POINT_VALUES, CLAIMED_MARKER,
    load_dictionary, validate_dictionary, get_dictionary_statistics
)

__all__ = [
    # App configuration
    'Config', 'DevelopmentConfig', 'ProductionConfig', 'TestingConfig', 'config',
    # Game rules
    'BASE_WORD_LENGTH', 'MIN_WORD_LENGTH', 'POINT_VALUES', 'CLAIMED_MARKER',
    'load_dictionary', 'validate_dictionary', 'get_dictionary_statistics'
]
