# api/dependencies.py

from typing import Any, Optional
import logging

import msgspec
from fastapi import HTTPException, Response

from dexmetrics import EngineContainer
from dexmetrics.core.logging import EngineLogger, log_with_context, ERROR
from dexmetrics.services import (
    ActivityService,
    BalanceHistoryService,
    PriceHistoryService,
    TokenService,
    TransactionRecorder,
    VolumeService,
)
from dexmetrics.types.errors import InvalidRequestError, NotFoundError

# Global variables - these get set during app startup
_container: EngineContainer = None
_logger = None

_encoder = msgspec.json.Encoder(decimal_format="number")


def set_dependencies(container: Optional[EngineContainer]):
    """Called during app startup (and with None at shutdown)"""
    global _container, _logger
    _container = container
    _logger = EngineLogger.get_logger('api.dependencies')


def get_container() -> EngineContainer:
    if _container is None:
        raise HTTPException(status_code=500, detail="Metrics engine not initialized")
    return _container


def get_token_service() -> TokenService:
    return get_container().get(TokenService)


def get_volume_service() -> VolumeService:
    return get_container().get(VolumeService)


def get_price_history_service() -> PriceHistoryService:
    return get_container().get(PriceHistoryService)


def get_balance_history_service() -> BalanceHistoryService:
    return get_container().get(BalanceHistoryService)


def get_activity_service() -> ActivityService:
    return get_container().get(ActivityService)


def get_transaction_recorder() -> TransactionRecorder:
    return get_container().get(TransactionRecorder)


def get_logger():
    if _logger is None:
        return EngineLogger.get_logger('api.default')
    return _logger


def json_response(obj: Any, status_code: int = 200) -> Response:
    """Encode msgspec structs (camelCase, decimals as JSON numbers)"""
    return Response(content=_encoder.encode(obj), status_code=status_code, media_type="application/json")


def parse_int(value: Optional[str]) -> Optional[int]:
    """Lenient integer query parameter: anything unparseable counts as absent"""
    if value is None:
        return None
    try:
        return int(value.strip())
    except ValueError:
        return None


def http_error(e: Exception, logger: logging.Logger, message: str, **context) -> HTTPException:
    if isinstance(e, InvalidRequestError):
        return HTTPException(status_code=400, detail=str(e))
    if isinstance(e, NotFoundError):
        return HTTPException(status_code=404, detail=str(e))

    log_with_context(logger, ERROR, message, error=str(e), **context)
    return HTTPException(status_code=500, detail=str(e) or message)
