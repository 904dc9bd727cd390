"""Fan-out discovery across providers and merge the results."""

from __future__ import annotations

import logging
import threading
from collections.abc import Sequence
from concurrent.futures import ThreadPoolExecutor

from ..models import WorkspaceReference
from ..providers.base import WorkspaceProvider

logger = logging.getLogger(__name__)


class DiscoveryAggregator:
    """Run every provider concurrently and return one deduplicated list.

    The output keeps provider blocks in registration order, each block in the
    provider's own recency order.  There is no global re-sort: providers
    report different kinds of entries (folders, solution files) and their
    timestamps are not compared.
    """

    def __init__(
        self,
        providers: Sequence[WorkspaceProvider],
        max_workers: int | None = None,
        log: logging.Logger | None = None,
    ) -> None:
        self.providers = list(providers)
        self.max_workers = max_workers
        self._logger = log or logger

    def discover(self, cancel_event: threading.Event | None = None) -> list[WorkspaceReference]:
        """Return the merged workspaces of all providers.

        Waits for every provider before merging.  A provider that raises is
        logged and contributes nothing; its siblings are unaffected.
        """
        if not self.providers:
            return []
        if cancel_event is not None and cancel_event.is_set():
            return []

        workers = self.max_workers or len(self.providers)
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="discovery") as pool:
            futures = [pool.submit(provider.discover, cancel_event) for provider in self.providers]
            batches: list[list[WorkspaceReference]] = []
            for provider, future in zip(self.providers, futures):
                try:
                    batches.append(future.result())
                except Exception:
                    self._logger.exception("Provider %s failed", provider.name)
                    batches.append([])

        if cancel_event is not None and cancel_event.is_set():
            return []

        merged = merge_results(batches)
        self._logger.info("Combined workspaces: %d", len(merged))
        for ref in merged:
            self._logger.debug("[%s] %s", ref.provider, ref.path)
        return merged


def merge_results(batches: Sequence[Sequence[WorkspaceReference]]) -> list[WorkspaceReference]:
    """Concatenate ``batches`` in order, keeping the first entry for each path.

    Paths are compared case-insensitively.
    """
    seen: set[str] = set()
    merged: list[WorkspaceReference] = []
    for batch in batches:
        for ref in batch:
            if not ref.path or not ref.path.strip():
                continue
            key = ref.path.casefold()
            if key in seen:
                continue
            seen.add(key)
            merged.append(ref)
    return merged
