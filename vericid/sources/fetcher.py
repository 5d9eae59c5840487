"""Concurrent fan-out of CID lookups over provenance sources.

Every (source, identifier) pair is an independent request. A failed request
becomes a ``SourceResult`` carrying the error, never an exception, so the
remaining sources still contribute. Results come back in plan order, not
completion order, to keep aggregation deterministic.
"""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Sequence
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from typing import Any, Protocol

import httpx

from vericid.config import VericidSettings
from vericid.provenance.models import SourceResult
from vericid.sources.api_clients import WorkerSourceClient
from vericid.sources.index import InMemoryOriginIndex
from vericid.utils import SourceLookupError

logger = logging.getLogger(__name__)

_POLL_INTERVAL = 0.05


class ProvenanceSource(Protocol):
    """Anything that can report origins for a CID string."""

    name: str

    def lookup(self, identifier: str) -> list[dict[str, Any]]:
        ...


def _source_name(source: Any) -> str:
    return getattr(source, "name", None) or type(source).__name__


class ProvenanceFetcher:
    """Query every source with every identifier form, concurrently."""

    def __init__(
        self,
        sources: Sequence[ProvenanceSource],
        max_workers: int = 4,
        poll_interval: float = _POLL_INTERVAL,
    ) -> None:
        self._sources = list(sources)
        self.max_workers = max(1, max_workers)
        self.poll_interval = poll_interval

    @classmethod
    def from_config(
        cls,
        config: VericidSettings,
        index: InMemoryOriginIndex | None = None,
    ) -> "ProvenanceFetcher":
        """Build a fetcher from settings: the local index first, then remote workers."""
        sources: list[ProvenanceSource] = []
        if index is None and config.origin_index_path:
            index = InMemoryOriginIndex.from_json(config.origin_index_path)
        if index is not None:
            sources.append(index)
        for url in config.source_url_list:
            sources.append(WorkerSourceClient(
                url,
                timeout=config.source_timeout,
                max_retries=config.source_max_retries,
                retry_delay=config.source_retry_delay,
            ))
        return cls(sources, max_workers=config.fetch_max_workers)

    @property
    def sources(self) -> list[ProvenanceSource]:
        return list(self._sources)

    def fetch(
        self,
        identifiers: Sequence[str],
        cancel_event: threading.Event | None = None,
        deadline: float | None = None,
    ) -> list[SourceResult]:
        """Run all lookups and return one ``SourceResult`` per request.

        ``deadline`` is in seconds from the start of the call. When it passes,
        or ``cancel_event`` is set, lookups still running are abandoned and
        reported as failed; finished ones are kept.
        """
        plan = [
            (source, identifier)
            for source in self._sources
            for identifier in dict.fromkeys(i for i in identifiers if i)
        ]
        if not plan:
            return []

        results: list[SourceResult | None] = [None] * len(plan)
        executor = ThreadPoolExecutor(
            max_workers=min(self.max_workers, len(plan)),
            thread_name_prefix="vericid-fetch",
        )
        futures: dict[Future, int] = {
            executor.submit(self._lookup, source, identifier): i
            for i, (source, identifier) in enumerate(plan)
        }
        pending = set(futures)
        stop_reason: str | None = None
        started = time.monotonic()

        try:
            while pending:
                timeout = self.poll_interval
                if deadline is not None:
                    timeout = max(0.0, min(timeout, deadline - (time.monotonic() - started)))
                done, pending = wait(pending, timeout=timeout, return_when=FIRST_COMPLETED)
                for future in done:
                    results[futures[future]] = future.result()
                if not pending:
                    break
                if cancel_event is not None and cancel_event.is_set():
                    stop_reason = "cancelled"
                    break
                if deadline is not None and time.monotonic() - started >= deadline:
                    stop_reason = "timed out"
                    break
        finally:
            executor.shutdown(wait=False, cancel_futures=True)

        if pending:
            logger.warning("Stopped awaiting %d lookup(s): %s", len(pending), stop_reason)
        for future in pending:
            i = futures[future]
            source, identifier = plan[i]
            results[i] = SourceResult(
                source=_source_name(source),
                identifier=identifier,
                error=stop_reason,
            )

        return [r for r in results if r is not None]

    @staticmethod
    def _lookup(source: ProvenanceSource, identifier: str) -> SourceResult:
        name = _source_name(source)
        try:
            origins = source.lookup(identifier)
        except SourceLookupError as exc:
            logger.warning("Source %s failed for %s: %s", name, identifier, exc)
            return SourceResult(source=name, identifier=identifier, error=str(exc), attempts=exc.attempts)
        except (OSError, ValueError, httpx.HTTPError) as exc:
            logger.warning("Source %s failed for %s: %s", name, identifier, exc)
            return SourceResult(
                source=name,
                identifier=identifier,
                error=f"{type(exc).__name__}: {exc}",
            )
        except Exception as exc:
            logger.warning("Source %s raised unexpectedly for %s: %r", name, identifier, exc)
            return SourceResult(
                source=name,
                identifier=identifier,
                error=f"{type(exc).__name__}: {exc}",
            )

        if not isinstance(origins, (list, tuple)):
            logger.warning("Source %s returned %s for %s", name, type(origins).__name__, identifier)
            return SourceResult(source=name, identifier=identifier, error="invalid response")
        logger.debug("Source %s returned %d origin(s) for %s", name, len(origins), identifier)
        return SourceResult(source=name, identifier=identifier, origins=tuple(origins))
