# dexmetrics/types/errors.py


class MetricsEngineError(Exception):
    """Base class for errors raised deliberately by the engine"""


class InvalidRequestError(MetricsEngineError, ValueError):
    """Missing or malformed input, raised before any source is read"""


class NotFoundError(MetricsEngineError, LookupError):
    """The requested entity has no backing source data"""


def require_text(value, field_name: str) -> str:
    if value is None or not isinstance(value, str) or value.strip() == "":
        raise InvalidRequestError(f"{field_name} is required")
    return value.strip()
