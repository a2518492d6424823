# dexmetrics/clients/balance_client.py

import msgspec
import requests

from .interfaces import BalanceReader
from ..core.logging import LoggingMixin
from ..types.config import BalanceApiConfig
from ..types.errors import MetricsEngineError
from ..types.model import LiveBalance


class HttpBalanceReader(BalanceReader, LoggingMixin):
    """
    Reads live address balances from the wallet backend's balance endpoint.

    Expects ``GET {base_url}/balances/{address}`` to answer with
    ``{"bch": ..., "tokens": [{"category": ..., "amount": ...}]}``.
    Amounts may be JSON numbers or decimal strings.
    """

    def __init__(self, config: BalanceApiConfig, session: requests.Session = None):
        self.base_url = config.base_url.rstrip('/')
        self.timeout = config.timeout
        self.session = session or requests.Session()

    def balances_for(self, address: str) -> LiveBalance:
        url = f"{self.base_url}/balances/{address}"
        try:
            resp = self.session.get(url, timeout=self.timeout)
            resp.raise_for_status()
            return msgspec.json.decode(resp.content, type=LiveBalance)
        except (requests.RequestException, msgspec.ValidationError, msgspec.DecodeError) as e:
            self.log_error("Live balance lookup failed", address=address, error=str(e))
            raise


class UnconfiguredBalanceReader(BalanceReader):
    """Stands in when DEXMETRICS_BALANCE_API_URL is unset; every lookup fails"""

    def balances_for(self, address: str) -> LiveBalance:
        raise MetricsEngineError("Live balance source is not configured")
