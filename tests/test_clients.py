# tests/test_clients.py

import msgspec
import pytest
import requests

from dexmetrics.clients import HttpBalanceReader, HttpNotificationPublisher, UnconfiguredBalanceReader
from dexmetrics.types.config import BalanceApiConfig, NotificationConfig
from dexmetrics.types.errors import MetricsEngineError

from conftest import TOKEN_A, D


class FakeResponse:
    def __init__(self, content: bytes, status_code: int = 200):
        self.content = content
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")


class FakeSession:
    def __init__(self, response: FakeResponse):
        self.response = response
        self.requests = []

    def get(self, url, timeout=None):
        self.requests.append(("GET", url, None))
        return self.response

    def post(self, url, data=None, headers=None, timeout=None):
        self.requests.append(("POST", url, data))
        return self.response


def test_balance_reader_decodes_numbers_and_strings():
    session = FakeSession(FakeResponse(
        b'{"bch": "1.50000000", "tokens": [{"category": "' + TOKEN_A.encode() + b'", "amount": 42}]}'
    ))
    reader = HttpBalanceReader(BalanceApiConfig(base_url="http://wallet/api/"), session=session)

    balance = reader.balances_for("bitcoincash:qalice")

    assert session.requests == [("GET", "http://wallet/api/balances/bitcoincash:qalice", None)]
    assert balance.bch == D("1.5")
    assert balance.tokens[0].category == TOKEN_A
    assert balance.tokens[0].amount == D(42)


def test_balance_reader_propagates_http_errors():
    reader = HttpBalanceReader(BalanceApiConfig(base_url="http://wallet"),
                               session=FakeSession(FakeResponse(b"", status_code=503)))

    with pytest.raises(requests.HTTPError):
        reader.balances_for("bitcoincash:qalice")


def test_balance_reader_rejects_malformed_payload():
    reader = HttpBalanceReader(BalanceApiConfig(base_url="http://wallet"),
                               session=FakeSession(FakeResponse(b'{"tokens": []}')))

    with pytest.raises(msgspec.ValidationError):
        reader.balances_for("bitcoincash:qalice")


def test_unconfigured_balance_reader():
    with pytest.raises(MetricsEngineError, match="not configured"):
        UnconfiguredBalanceReader().balances_for("bitcoincash:qalice")


def test_notification_publisher_posts_channel_and_payload():
    session = FakeSession(FakeResponse(b"{}"))
    publisher = HttpNotificationPublisher(NotificationConfig(url="http://socket/emit"), session=session)

    publisher.publish("transaction", {"txid": "t1"})

    [(method, url, body)] = session.requests
    assert (method, url) == ("POST", "http://socket/emit")
    assert msgspec.json.decode(body) == {"channel": "transaction", "payload": {"txid": "t1"}}


def test_notification_publisher_needs_url():
    with pytest.raises(ValueError):
        HttpNotificationPublisher(NotificationConfig(url=None))
