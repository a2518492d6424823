# dexmetrics/services/invalidation.py

from concurrent.futures import Future, ThreadPoolExecutor, wait
import threading
from typing import Callable, Optional, Set

import msgspec

from .cache import AggregateCache
from ..clients.interfaces import NotificationPublisher, TransactionLogStore
from ..core.logging import LoggingMixin
from ..types.config import NotificationConfig
from ..types.errors import InvalidRequestError, require_text
from ..types.model import RecordTransactionRequest, StoredTransaction, TransactionType
from ..utils.time import now_ms

ALLOWED_TYPES = ", ".join(t.value for t in TransactionType)


def _parse_type(value) -> TransactionType:
    try:
        return TransactionType(value)
    except ValueError:
        raise InvalidRequestError(f"type is required and must be one of: {ALLOWED_TYPES}")


class InvalidationGate(LoggingMixin):
    """Runs after every successful log write.

    The aggregate cache is always cleared first, so no request that starts
    after the write can be served an aggregate computed before it. The
    notification is handed to a single background worker, so the write never
    waits on the relay; a failed publish is logged and dropped.
    """

    def __init__(self, cache: AggregateCache, publisher: NotificationPublisher,
                 notifications: NotificationConfig, clock: Callable[[], int] = now_ms):
        self.cache = cache
        self.publisher = publisher
        self.channel = notifications.channel
        self.enabled = notifications.enabled
        self.clock = clock

        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="dexmetrics-publish")
        self._pending: Set[Future] = set()
        self._lock = threading.Lock()

    def on_transaction_written(self, entry: StoredTransaction) -> None:
        self.cache.invalidate_all()

        if not self.enabled:
            return

        payload = msgspec.to_builtins(entry)
        payload["emittedAt"] = self.clock()

        future = self._executor.submit(self.publisher.publish, self.channel, payload)
        with self._lock:
            self._pending.add(future)
        future.add_done_callback(lambda done: self._publish_finished(done, entry.txid))

    def _publish_finished(self, future: Future, txid: str) -> None:
        with self._lock:
            self._pending.discard(future)

        if future.cancelled():
            self.log_error("Transaction event was never published", txid=txid, channel=self.channel)
            return

        error = future.exception()
        if error is not None:
            self.log_error("Failed to publish transaction event",
                           txid=txid, channel=self.channel, error=str(error))

    def drain(self, timeout: Optional[float] = None) -> bool:
        """Wait for queued notifications; False if some are still running after ``timeout``"""
        with self._lock:
            pending = list(self._pending)
        _, not_done = wait(pending, timeout=timeout)
        return not not_done

    def shutdown(self, wait_for_pending: bool = True) -> None:
        self._executor.shutdown(wait=wait_for_pending)


class TransactionRecorder(LoggingMixin):
    """Validates and appends client-reported transactions to the log"""

    def __init__(self, log_store: TransactionLogStore, gate: InvalidationGate,
                 clock: Callable[[], int] = now_ms):
        self.log_store = log_store
        self.gate = gate
        self.clock = clock

    def record(self, request: RecordTransactionRequest) -> StoredTransaction:
        txid = require_text(request.txid, "txid")
        tx_type = _parse_type(request.type)
        address = require_text(request.address, "address")

        category = request.token_category.strip().lower() if request.token_category else None
        entry = StoredTransaction(
            txid=txid,
            address=address,
            type=tx_type,
            created_at=self.clock(),
            direction=request.direction,
            token_category=category or None,
            amounts=request.amounts,
        )

        self.log_store.insert(entry)
        self.gate.on_transaction_written(entry)

        self.log_debug("Transaction accepted", txid=txid, address=address)
        return entry
