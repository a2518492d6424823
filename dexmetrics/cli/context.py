# dexmetrics/cli/context.py

"""
CLI context: builds the engine container on first use and shuts it down at exit.
"""

from typing import Optional, Type, TypeVar
import logging

import msgspec

from .. import EngineContainer, create_metrics_engine, shutdown_metrics_engine
from ..core.logging import EngineLogger, log_with_context

T = TypeVar('T')

_encoder = msgspec.json.Encoder(decimal_format="number")


class CLIContext:
    def __init__(self):
        self.logger = EngineLogger.get_logger('cli.context')
        self._container: Optional[EngineContainer] = None

    @property
    def container(self) -> EngineContainer:
        if self._container is None:
            log_with_context(self.logger, logging.DEBUG, "Creating engine container for CLI")
            self._container = create_metrics_engine()
        return self._container

    def get(self, service_type: Type[T]) -> T:
        return self.container.get(service_type)

    def shutdown(self) -> None:
        if self._container is not None:
            shutdown_metrics_engine(self._container)
            self._container = None


def to_json(obj) -> str:
    return msgspec.json.format(_encoder.encode(obj), indent=2).decode()
