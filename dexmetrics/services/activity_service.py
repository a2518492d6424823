# dexmetrics/services/activity_service.py

from typing import Dict, Iterable, List, Optional

from .pricing import PricingService, aggregate_by_category
from .transaction_queries import TransactionQueries
from ..core.logging import LoggingMixin
from ..types.errors import require_text
from ..types.model import (
    ActivityPage,
    SortOrder,
    StoredTransaction,
    TokenMeta,
    TransactionFilter,
    TvlConvention,
)

DEFAULT_TRADES_LIMIT = 50
DEFAULT_HISTORY_LIMIT = 10


class ActivityService(LoggingMixin):
    """Latest log entries, decorated with token metadata from the pool registry"""

    def __init__(self, queries: TransactionQueries, pricing: PricingService):
        self.queries = queries
        self.pricing = pricing

    def recent_trades(self, limit: Optional[int] = None, token_category: Optional[str] = None,
                      force: bool = False) -> ActivityPage:
        limit = limit if limit and limit > 0 else DEFAULT_TRADES_LIMIT
        categories = [token_category.strip().lower()] if token_category and token_category.strip() else None

        trades = self.queries.swaps(token_categories=categories, sort=SortOrder.DESC, limit=limit)
        return self._page(trades, force)

    def address_activity(self, address: str, limit: Optional[int] = None, force: bool = False) -> ActivityPage:
        address = require_text(address, "address")
        limit = limit if limit and limit > 0 else DEFAULT_HISTORY_LIMIT

        entries = self.queries.find(TransactionFilter(address=address, sort=SortOrder.DESC, limit=limit))
        return self._page(entries, force)

    def _page(self, entries: List[StoredTransaction], force: bool) -> ActivityPage:
        return ActivityPage(
            transactions=entries,
            total=len(entries),
            token_meta=self._token_meta((entry.token_category for entry in entries), force),
        )

    def _token_meta(self, categories: Iterable[Optional[str]], force: bool) -> Dict[str, TokenMeta]:
        wanted = {category for category in categories if category}
        if not wanted:
            return {}

        aggregates = aggregate_by_category(self.pricing.all_pools(force=force), TvlConvention.BCH_SIDE)
        meta = {}
        for category in sorted(wanted):
            aggregate = aggregates.get(category)
            if aggregate is not None:
                meta[category] = TokenMeta(symbol=aggregate.symbol, name=aggregate.name,
                                           icon_url=aggregate.icon_url)
        return meta
