"""Tests for LookupOrchestrator single and batched lookups."""

import pytest

from ipvault.core.cache import BoundedExpiringCache
from ipvault.services.lookup import LookupOrchestrator, chunked
from ipvault.shared.cache_utils import cache_key
from ipvault.shared.errors import (
    ApplicationError,
    ErrorCode,
    InvalidAddressError,
    RateLimitError,
    TransportError,
    create_rate_limit_error,
    create_transport_error,
)
from ipvault.shared.models import LookupSource


class TestChunked:
    """Test cases for the chunked helper."""

    def test_even_and_remainder_chunks(self):
        """Test slicing into full chunks plus a remainder."""
        chunks = list(chunked(["a", "b", "c", "d", "e"], 2))

        assert chunks == [["a", "b"], ["c", "d"], ["e"]]

    def test_empty_input(self):
        """Test that no chunks are produced for an empty list."""
        assert list(chunked([], 3)) == []


class TestLookupOrchestratorInit:
    """Test cases for orchestrator construction."""

    def test_rejects_non_positive_chunk_size(self, cache, network):
        """Test that batch_chunk_size must be positive."""
        with pytest.raises(ApplicationError) as exc_info:
            LookupOrchestrator(cache, network, batch_chunk_size=0)

        assert exc_info.value.code == ErrorCode.VALIDATION_ERROR


class TestSingleLookup:
    """Test cases for LookupOrchestrator.lookup."""

    @pytest.fixture
    def orchestrator(self, cache, network):
        return LookupOrchestrator(cache, network)

    def test_bogon_short_circuit(self, network, mocker):
        """Test that a private address never reaches the cache or network."""
        mock_cache = mocker.Mock()
        orchestrator = LookupOrchestrator(mock_cache, network)

        result = orchestrator.lookup("10.0.0.5")

        assert result.is_bogon
        assert result.source is LookupSource.BOGON
        assert result.payload == {"ip": "10.0.0.5", "bogon": True}
        network.fetch.assert_not_called()
        mock_cache.get.assert_not_called()
        mock_cache.set.assert_not_called()

    @pytest.mark.parametrize("address", ["127.0.0.1", "192.168.0.1", "::1", "fe80::1"])
    def test_bogons_never_touch_collaborators(self, network, mocker, address):
        """Test the short-circuit across reserved ranges of both families."""
        mock_cache = mocker.Mock()
        orchestrator = LookupOrchestrator(mock_cache, network)

        orchestrator.lookup(address)

        network.fetch.assert_not_called()
        assert mock_cache.method_calls == []

    def test_miss_fetches_and_caches(self, orchestrator, cache, network):
        """Test that a miss goes to the network and stores the payload."""
        result = orchestrator.lookup("8.8.8.8")

        assert result.source is LookupSource.NETWORK
        assert result.payload["ip"] == "8.8.8.8"
        network.fetch.assert_called_once_with("8.8.8.8")
        assert cache.get(cache_key("8.8.8.8")) == result.payload

    def test_hit_skips_network(self, orchestrator, network):
        """Test that a second lookup is served from the cache."""
        orchestrator.lookup("8.8.8.8")
        result = orchestrator.lookup("8.8.8.8")

        assert result.source is LookupSource.CACHE
        assert network.fetch.call_count == 1

    def test_self_lookup_cached_under_sentinel(self, orchestrator, cache, network):
        """Test that a lookup without an address is cached under its own key."""
        first = orchestrator.lookup()
        second = orchestrator.lookup()

        network.fetch.assert_called_once_with(None)
        assert second.source is LookupSource.CACHE
        assert cache.get("1:<self>") == first.payload

    def test_expired_entry_refetched(self, orchestrator, clock, network):
        """Test that an entry past its ttl is fetched again."""
        orchestrator.lookup("8.8.8.8")
        clock.advance(100)

        result = orchestrator.lookup("8.8.8.8")

        assert result.source is LookupSource.NETWORK
        assert network.fetch.call_count == 2

    def test_rate_limit_not_cached(self, orchestrator, cache, network):
        """Test that a RateLimitError propagates and leaves the cache empty."""
        network.fetch.side_effect = create_rate_limit_error("quota", operation="fetch")

        with pytest.raises(RateLimitError):
            orchestrator.lookup("8.8.8.8")

        assert cache.get(cache_key("8.8.8.8")) is None

    def test_transport_error_not_cached(self, orchestrator, cache, network):
        """Test that a TransportError propagates and leaves the cache empty."""
        network.fetch.side_effect = create_transport_error(
            "boom", code=ErrorCode.API_SERVER_ERROR, status_code=503
        )

        with pytest.raises(TransportError) as exc_info:
            orchestrator.lookup("8.8.8.8")

        assert exc_info.value.status_code == 503
        assert cache.get(cache_key("8.8.8.8")) is None

    def test_invalid_address_surfaced(self, orchestrator, network):
        """Test that a malformed address raises before any network call."""
        with pytest.raises(InvalidAddressError):
            orchestrator.lookup("not-an-ip")

        network.fetch.assert_not_called()


class TestBatchLookup:
    """Test cases for LookupOrchestrator.batch_requests."""

    @pytest.fixture
    def big_cache(self, clock):
        return BoundedExpiringCache(max_size=4096, ttl=100, clock=clock)

    def test_all_hits_skip_network(self, cache, network):
        """Test that a fully cached batch makes no request."""
        cache.set(cache_key("8.8.8.8"), {"ip": "8.8.8.8"})
        cache.set(cache_key("1.1.1.1"), {"ip": "1.1.1.1"})
        orchestrator = LookupOrchestrator(cache, network)

        result = orchestrator.batch_requests(["8.8.8.8", "1.1.1.1"], "tok")

        network.fetch_batch.assert_not_called()
        assert result.requests_made == 0
        assert result.cache_hits == 2
        assert result["8.8.8.8"].payload == {"ip": "8.8.8.8"}

    def test_mixed_hits_and_misses(self, cache, network):
        """Test that only misses are sent and order follows the caller."""
        cache.set(cache_key("1.1.1.1"), {"ip": "1.1.1.1", "cached": True})
        orchestrator = LookupOrchestrator(cache, network)

        result = orchestrator.batch_requests(["8.8.8.8", "1.1.1.1", "9.9.9.9"], "tok")

        network.fetch_batch.assert_called_once_with(["8.8.8.8", "9.9.9.9"], "tok")
        assert list(result) == ["8.8.8.8", "1.1.1.1", "9.9.9.9"]
        assert result["1.1.1.1"].from_cache
        assert not result["9.9.9.9"].from_cache

    def test_chunking_and_caching(self, big_cache, network):
        """Test 1500 misses with chunk size 1000: two calls, 1500 entries."""
        keys = [f"8.8.{i // 256}.{i % 256}" for i in range(1500)]
        orchestrator = LookupOrchestrator(big_cache, network, batch_chunk_size=1000)

        result = orchestrator.batch_requests(keys, "tok")

        assert network.fetch_batch.call_count == 2
        first_chunk = network.fetch_batch.call_args_list[0].args[0]
        second_chunk = network.fetch_batch.call_args_list[1].args[0]
        assert len(first_chunk) == 1000
        assert len(second_chunk) == 500
        assert len(result) == 1500
        assert result.requests_made == 2
        assert all(big_cache.get(cache_key(key)) is not None for key in keys)

    def test_completeness_with_no_hits(self, big_cache, network):
        """Test that N distinct misses produce exactly N entries."""
        keys = [f"9.9.9.{i}" for i in range(37)]
        orchestrator = LookupOrchestrator(big_cache, network, batch_chunk_size=10)

        result = orchestrator.batch_requests(keys)

        assert set(result) == set(keys)
        assert len(result.payloads()) == 37

    def test_quota_error_on_second_chunk(self, big_cache, network):
        """Test that a rate limit on chunk 2 of 2 fails the whole call."""
        quota_error = create_rate_limit_error("Request Quota Exceeded")
        network.fetch_batch.side_effect = [
            {f"key{i}": {"ip": f"key{i}"} for i in range(1000)},
            quota_error,
        ]
        orchestrator = LookupOrchestrator(big_cache, network, batch_chunk_size=1000)
        keys = [f"key{i}" for i in range(1500)]

        with pytest.raises(RateLimitError) as exc_info:
            orchestrator.batch_requests(keys, "tok")

        assert exc_info.value is quota_error
        assert network.fetch_batch.call_count == 2

    def test_remaining_chunks_skipped_after_quota_error(self, big_cache, network):
        """Test that no chunk is sent after a rate-limited one."""
        network.fetch_batch.side_effect = create_rate_limit_error("quota")
        orchestrator = LookupOrchestrator(big_cache, network, batch_chunk_size=2)

        with pytest.raises(RateLimitError):
            orchestrator.batch_requests(["a", "b", "c", "d", "e"])

        assert network.fetch_batch.call_count == 1

    def test_transport_error_propagates(self, cache, network):
        """Test that a generic transport failure aborts the batch."""
        network.fetch_batch.side_effect = create_transport_error("timeout")
        orchestrator = LookupOrchestrator(cache, network)

        with pytest.raises(TransportError):
            orchestrator.batch_requests(["8.8.8.8"])

    def test_per_key_upstream_error(self, cache, network):
        """Test that an upstream error object becomes an uncached error entry."""
        network.fetch_batch.side_effect = None
        network.fetch_batch.return_value = {
            "8.8.8.8": {"ip": "8.8.8.8"},
            "bad": {"error": {"title": "Wrong ip", "message": "Please provide a valid IP"}},
        }
        orchestrator = LookupOrchestrator(cache, network)

        result = orchestrator.batch_requests(["8.8.8.8", "bad"])

        assert result["8.8.8.8"].ok
        assert not result["bad"].ok
        assert result.errors() == {"bad": "Please provide a valid IP"}
        assert cache.get(cache_key("bad")) is None

    def test_missing_keys_become_error_entries(self, cache, network):
        """Test that keys omitted by the upstream are reported explicitly."""
        network.fetch_batch.side_effect = None
        network.fetch_batch.return_value = {"8.8.8.8": {"ip": "8.8.8.8"}}
        orchestrator = LookupOrchestrator(cache, network)

        result = orchestrator.batch_requests(["8.8.8.8", "1.1.1.1"])

        assert len(result) == 2
        assert result["1.1.1.1"].error == "missing from upstream response"

    def test_duplicate_keys_fetched_once(self, cache, network):
        """Test that repeated keys are sent once."""
        orchestrator = LookupOrchestrator(cache, network)

        result = orchestrator.batch_requests(["8.8.8.8", "8.8.8.8", "1.1.1.1"])

        network.fetch_batch.assert_called_once_with(["8.8.8.8", "1.1.1.1"], None)
        assert len(result) == 2

    def test_field_selector_keys_pass_through(self, cache, network):
        """Test that keys such as 8.8.8.8/country are cached as-is."""
        network.fetch_batch.side_effect = None
        network.fetch_batch.return_value = {"8.8.8.8/country": "US"}
        orchestrator = LookupOrchestrator(cache, network)

        result = orchestrator.batch_requests(["8.8.8.8/country"])

        assert result["8.8.8.8/country"].payload == "US"
        assert cache.get("1:8.8.8.8/country") == "US"
