"""Mini README: Concurrent loader producing the transaction aggregate.

Structure:
    * TransactionAggregator - fetches every registered record kind at once
      and merges the results once all of them have arrived.

Join semantics: fetches run concurrently under ``asyncio.gather``. If any
of them fails the whole load fails and the error propagates; no partial
aggregate is ever returned or stored. Because merging happens after the
join and orders by record date only, the result does not depend on which
response arrived first.
"""

from __future__ import annotations

import asyncio
from typing import Dict, List, Sequence, Tuple

from ..errors import BackendError
from ..logging_utils import get_logger
from ..records import Record, RecordKind
from ..sources import SourceRegistry
from .transactions import Transaction, aggregate

LOGGER = get_logger(__name__)


class TransactionAggregator:
    """Sole producer of the transaction aggregate."""

    def __init__(self, sources: SourceRegistry) -> None:
        self.sources = sources

    async def fetch_records(self) -> Dict[RecordKind, Sequence[Record]]:
        """Fetch every kind concurrently; all-or-nothing."""

        pairs = list(self.sources.items())
        kinds = [kind for kind, _ in pairs]
        tasks = [asyncio.ensure_future(source.fetch_all()) for _, source in pairs]
        try:
            results: List[Sequence[Record]] = await asyncio.gather(*tasks)
        except BackendError:
            for task in tasks:
                task.cancel()
            LOGGER.error("Transaction load aborted; keeping previous aggregate")
            raise
        return dict(zip(kinds, results))

    async def fetch(self) -> Tuple[Transaction, ...]:
        """Fetch all sources and return the merged aggregate."""

        return aggregate(await self.fetch_records())

    async def load_into(self, state) -> bool:
        """Fetch and publish the aggregate into ``state``.

        Returns ``False`` when a newer load was started while this one was in
        flight; its result is dropped in favour of the newer request.
        """

        token = state.begin_aggregate_load()
        result = await self.fetch()
        return state.publish_aggregate(token, result)
