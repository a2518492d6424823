# dexmetrics/core/__init__.py

from .logging import (
    EngineLogger,
    EngineFormatter,
    LoggingMixin,
    log_with_context,
    get_class_logger,
    DEBUG,
    INFO,
    ERROR,
)
from .config import EngineConfig
from .container import EngineContainer

__all__ = [
    'EngineLogger',
    'EngineFormatter',
    'LoggingMixin',
    'log_with_context',
    'get_class_logger',
    'DEBUG',
    'INFO',
    'ERROR',
    'EngineConfig',
    'EngineContainer',
]
