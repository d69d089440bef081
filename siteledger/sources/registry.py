"""Mini README: Registry mapping record kinds to their source adapters.

Structure:
    * SourceRegistry - holds one ``RecordSource`` per ``RecordKind``.

The aggregator iterates the registry in ``RecordKind`` order, so the
registry, not the caller, fixes the concatenation order of the merge.
"""

from __future__ import annotations

from typing import Dict, Iterable, Iterator, Mapping, Optional, Tuple

from ..logging_utils import get_logger
from ..records import RecordKind
from .base import RecordSource
from .client import BackendClient
from .http_source import HttpRecordSource

LOGGER = get_logger(__name__)


class SourceRegistry:
    """Map record kinds to adapter instances."""

    def __init__(self, sources: Optional[Mapping[RecordKind, RecordSource]] = None) -> None:
        self._sources: Dict[RecordKind, RecordSource] = {}
        for source in (sources or {}).values():
            self.register(source)

    @classmethod
    def over_http(cls, client: BackendClient) -> "SourceRegistry":
        """Build HTTP adapters for every known record kind."""

        return cls({kind: HttpRecordSource(kind, client) for kind in RecordKind})

    def register(self, source: RecordSource) -> None:
        LOGGER.debug("Registering %s source", source.kind.value)
        self._sources[source.kind] = source

    def available_kinds(self) -> Iterable[RecordKind]:
        return [kind for kind in RecordKind if kind in self._sources]

    def get(self, kind: RecordKind) -> RecordSource:
        source = self._sources.get(kind)
        if source is None:
            raise KeyError(f"No source registered for '{kind.value}' records")
        return source

    def items(self) -> Iterator[Tuple[RecordKind, RecordSource]]:
        for kind in self.available_kinds():
            yield kind, self._sources[kind]
