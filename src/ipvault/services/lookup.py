"""Lookup orchestration.

The orchestrator decides, for every lookup, whether the answer comes from
the reserved-range rule, the cache, or the network:

1. A supplied address inside a reserved range gets a local bogon result;
   neither the cache nor the network is touched.
2. Otherwise the versioned cache key is consulted.
3. On a miss the network collaborator is asked, and a successful payload
   is cached before it is returned. Failures are never cached.

Batched lookups split the requested keys into cache hits and misses and
send the misses in fixed-size chunks. A rate limit on any chunk fails the
whole batch: a caller never receives a result map that is silently
missing keys.
"""

from __future__ import annotations

import logging
import time
from typing import Iterator, Sequence

from ipvault.core.address_classifier import AddressClassifier
from ipvault.shared.cache_utils import cache_key
from ipvault.shared.constants import NetworkConfig
from ipvault.shared.errors import (
    ErrorContext,
    IPVaultError,
    RateLimitError,
    create_validation_error,
)
from ipvault.shared.logging import (
    log_operation_error,
    log_operation_start,
    log_operation_success,
)
from ipvault.shared.models import BatchEntry, BatchResult, LookupResult, LookupSource
from ipvault.shared.protocols import CacheProtocol, NetworkClientProtocol

logger = logging.getLogger(__name__)


def chunked(items: Sequence[str], size: int) -> Iterator[Sequence[str]]:
    """Yield consecutive slices of at most ``size`` items."""
    for start in range(0, len(items), size):
        yield items[start : start + size]


class LookupOrchestrator:
    """Coordinates the classifier, the cache and the network collaborator.

    Args:
        cache: Cache satisfying CacheProtocol
        network: Network collaborator satisfying NetworkClientProtocol
        classifier: Reserved-range classifier (default: standard table)
        batch_chunk_size: Maximum number of keys per batch request
    """

    def __init__(
        self,
        cache: CacheProtocol,
        network: NetworkClientProtocol,
        classifier: AddressClassifier | None = None,
        batch_chunk_size: int = NetworkConfig.BATCH_CHUNK_SIZE,
    ) -> None:
        if batch_chunk_size <= 0:
            msg = f"batch_chunk_size must be positive, got: {batch_chunk_size}"
            raise create_validation_error(
                msg, field="batch_chunk_size", operation="orchestrator_init"
            )
        self.cache = cache
        self.network = network
        self.classifier = classifier or AddressClassifier()
        self.batch_chunk_size = batch_chunk_size

    def lookup(self, ip: str | None = None) -> LookupResult:
        """Resolve a single address, or the caller's own when ``ip`` is None.

        Raises:
            InvalidAddressError: If ``ip`` is not a valid IP literal
            RateLimitError: If the upstream quota is exhausted
            TransportError: On any other upstream failure
        """
        if ip and self.classifier.classify(ip):
            logger.debug("Bogon address answered locally: %s", ip)
            return LookupResult.bogon(ip)

        key = cache_key(ip)
        cached = self.cache.get(key)
        if cached is not None:
            return LookupResult(payload=cached, source=LookupSource.CACHE)

        start = time.perf_counter()
        try:
            payload = self.network.fetch(ip)
        except RateLimitError as e:
            log_operation_error(
                logger,
                e,
                operation="lookup",
                additional_context=ErrorContext(operation="lookup", ip=ip),
            )
            raise

        self.cache.set(key, payload)
        log_operation_success(
            logger,
            operation="lookup",
            duration_ms=(time.perf_counter() - start) * 1000,
            context={"ip": ip or "self"},
        )
        return LookupResult(payload=payload, source=LookupSource.NETWORK)

    def batch_requests(self, keys: Sequence[str], token: str | None = None) -> BatchResult:
        """Resolve many batch keys, going to the network only for misses.

        Keys are passed through to the upstream batch endpoint unchanged,
        so both addresses (``"8.8.8.8"``) and field selectors
        (``"8.8.8.8/country"``) are accepted. Duplicate keys are looked up
        once.

        Returns:
            BatchResult mapping every requested key to its BatchEntry

        Raises:
            RateLimitError: If any chunk hits the upstream quota; results
                gathered so far are discarded
            TransportError: On any other upstream failure
        """
        unique_keys = list(dict.fromkeys(keys))
        log_operation_start(logger, "batch_requests", {"key_count": len(unique_keys)})

        found: dict[str, BatchEntry] = {}
        misses: list[str] = []
        for key in unique_keys:
            cached = self.cache.get(cache_key(key))
            if cached is None:
                misses.append(key)
            else:
                found[key] = BatchEntry.from_payload(key, cached, from_cache=True)

        if not misses:
            return BatchResult(entries=found)

        start = time.perf_counter()
        requests_made = 0
        for chunk_index, chunk in enumerate(chunked(misses, self.batch_chunk_size)):
            try:
                data = self.network.fetch_batch(chunk, token)
            except IPVaultError as e:
                log_operation_error(
                    logger,
                    e,
                    operation="batch_requests",
                    additional_context={
                        "chunk_index": chunk_index,
                        "chunks_completed": requests_made,
                        "miss_count": len(misses),
                    },
                )
                raise
            requests_made += 1

            for key, value in data.items():
                entry = BatchEntry.from_payload(key, value)
                # Upstream errors for a single key are reported, not cached
                if entry.ok:
                    self.cache.set(cache_key(key), value)
                found[key] = entry

        missing = [key for key in misses if key not in found]
        if missing:
            logger.warning(
                "Batch response omitted %d of %d requested keys",
                len(missing),
                len(misses),
            )
            for key in missing:
                found[key] = BatchEntry(key=key, error="missing from upstream response")

        log_operation_success(
            logger,
            operation="batch_requests",
            duration_ms=(time.perf_counter() - start) * 1000,
            result_info={
                "cache_hits": len(unique_keys) - len(misses),
                "fetched": len(misses),
                "requests": requests_made,
            },
        )
        # Caller's key order, whatever order the upstream answered in
        ordered = {key: found[key] for key in unique_keys if key in found}
        extra = {key: entry for key, entry in found.items() if key not in ordered}
        return BatchResult(entries={**ordered, **extra}, requests_made=requests_made)

