# Core module initialization
# Configuration, error taxonomy and logging shared by the scorers

from .config import Settings, get_settings, settings
from .exceptions import (
    AppException,
    ValidationError,
    MatchingCancelledError,
)
from .logging import JSONFormatter, PerformanceLogger, setup_logging, setup_logging_from_settings

__all__ = [
    # Config
    'Settings',
    'get_settings',
    'settings',

    # Exceptions
    'AppException',
    'ValidationError',
    'MatchingCancelledError',

    # Logging
    'JSONFormatter',
    'setup_logging',
    'setup_logging_from_settings',
    'PerformanceLogger',
]
