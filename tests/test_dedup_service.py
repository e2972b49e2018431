"""Tests for the deduplication resolver."""

import asyncio
from unittest.mock import patch

import httpx
import pytest

from common.checksum import compute_checksum
from archiver.arweave_client import ArweaveClient
from archiver.services.content_fetcher import ContentFetcher
from archiver.services.dedup_service import DeduplicationResolver
from conftest import FakeIpfsClient


@pytest.fixture
def resolver(fake_ipfs, fake_arweave):
    return DeduplicationResolver(fake_arweave, ContentFetcher(fake_ipfs))


@pytest.mark.asyncio
async def test_no_candidates_returns_none_without_fetching(resolver, fake_ipfs):
    content_id = fake_ipfs.put(b"fresh content")

    assert await resolver.find_existing(content_id) is None
    assert fake_ipfs.cat_calls == []


@pytest.mark.asyncio
async def test_single_matching_candidate(resolver, fake_ipfs, fake_arweave):
    data = b"already archived"
    content_id = fake_ipfs.put(data)
    fake_arweave.seed("tx-1", data, content_id)

    assert await resolver.find_existing(content_id) == "tx-1"


@pytest.mark.asyncio
async def test_third_oldest_match_among_decoys(resolver, fake_ipfs, fake_arweave):
    """Candidates are checked oldest first and decoys never match."""
    data = b"the real payload"
    content_id = fake_ipfs.put(data)
    fake_arweave.seed("decoy-oldest", b"tampered 1", content_id)
    fake_arweave.seed("decoy-second", b"tampered 2", content_id)
    fake_arweave.seed("match", data, content_id)
    fake_arweave.seed("decoy-fourth", b"tampered 4", content_id)
    fake_arweave.seed("decoy-fifth", b"tampered 5", content_id)
    fake_arweave.seed("decoy-newest", b"tampered 6", content_id)

    assert await resolver.find_existing(content_id) == "match"
    assert fake_arweave.fetch_calls == ["decoy-oldest", "decoy-second", "match"]


@pytest.mark.asyncio
async def test_source_fetched_once_for_all_candidates(resolver, fake_ipfs, fake_arweave):
    data = b"payload"
    content_id = fake_ipfs.put(data)
    for index in range(4):
        fake_arweave.seed(f"decoy-{index}", b"not it %d" % index, content_id)
    fake_arweave.seed("match", data, content_id)

    assert await resolver.find_existing(content_id) == "match"
    assert fake_ipfs.cat_calls == [content_id]


@pytest.mark.asyncio
async def test_oldest_of_several_matches_wins(resolver, fake_ipfs, fake_arweave):
    data = b"duplicated twice"
    content_id = fake_ipfs.put(data)
    fake_arweave.seed("first-copy", data, content_id)
    fake_arweave.seed("second-copy", data, content_id)

    assert await resolver.find_existing(content_id) == "first-copy"


@pytest.mark.asyncio
async def test_candidate_cap_limits_checks(resolver, fake_ipfs, fake_arweave):
    """Only the five oldest candidates are examined."""
    data = b"buried too deep"
    content_id = fake_ipfs.put(data)
    for index in range(5):
        fake_arweave.seed(f"decoy-{index}", b"wrong %d" % index, content_id)
    fake_arweave.seed("match-sixth", data, content_id)

    assert await resolver.find_existing(content_id) is None
    assert fake_arweave.fetch_calls == [f"decoy-{index}" for index in range(5)]


@pytest.mark.asyncio
async def test_custom_candidate_cap(fake_ipfs, fake_arweave):
    resolver = DeduplicationResolver(fake_arweave, ContentFetcher(fake_ipfs), max_candidates=2)
    data = b"third"
    content_id = fake_ipfs.put(data)
    fake_arweave.seed("a", b"x", content_id)
    fake_arweave.seed("b", b"y", content_id)
    fake_arweave.seed("c", data, content_id)

    assert await resolver.find_existing(content_id) is None
    assert len(fake_arweave.fetch_calls) == 2


@pytest.mark.asyncio
async def test_all_decoys_returns_none(resolver, fake_ipfs, fake_arweave):
    content_id = fake_ipfs.put(b"original")
    fake_arweave.seed("decoy-1", b"forged", content_id)
    fake_arweave.seed("decoy-2", b"also forged", content_id)

    assert await resolver.find_existing(content_id) is None


@pytest.mark.asyncio
async def test_source_fetch_failure_returns_none(resolver, fake_ipfs, fake_arweave):
    """Unavailable IPFS data never produces a match, even when ledger data exists."""
    data = b"unreachable on ipfs"
    content_id = fake_ipfs.put(data)
    fake_ipfs.unavailable.add(content_id)
    fake_arweave.seed("would-match", data, content_id)
    fake_arweave.seed("other", b"something", content_id)

    assert await resolver.find_existing(content_id) is None
    assert fake_arweave.fetch_calls == ["would-match"]


@pytest.mark.asyncio
async def test_failure_for_one_cid_does_not_affect_another(resolver, fake_ipfs, fake_arweave):
    good = b"good payload"
    bad = b"bad payload"
    good_id = fake_ipfs.put(good)
    bad_id = fake_ipfs.put(bad)
    fake_ipfs.unavailable.add(bad_id)
    fake_arweave.seed("bad-tx", bad, bad_id)
    fake_arweave.seed("decoy", b"nope", good_id)
    fake_arweave.seed("decoy-2", b"nope again", good_id)
    fake_arweave.seed("good-tx", good, good_id)

    assert await resolver.find_existing(bad_id) is None
    assert await resolver.find_existing(good_id) == "good-tx"


@pytest.mark.asyncio
async def test_unreadable_candidate_is_skipped(resolver, fake_ipfs, fake_arweave):
    """A pending or unseeded copy does not block the check of newer copies."""
    data = b"payload behind a pending copy"
    content_id = fake_ipfs.put(data)
    fake_arweave.seed("pending", data, content_id)
    fake_arweave.unreadable.add("pending")
    fake_arweave.seed("good", data, content_id)

    assert await resolver.find_existing(content_id) == "good"
    assert fake_arweave.fetch_calls == ["pending", "good"]
    assert fake_ipfs.cat_calls == [content_id]


@pytest.mark.asyncio
async def test_all_candidates_unreadable_returns_none(resolver, fake_ipfs, fake_arweave):
    content_id = fake_ipfs.put(b"never readable")
    for tx_id in ("pending-1", "pending-2"):
        fake_arweave.seed(tx_id, b"never readable", content_id)
        fake_arweave.unreadable.add(tx_id)

    assert await resolver.find_existing(content_id) is None
    assert fake_arweave.fetch_calls == ["pending-1", "pending-2"]


@pytest.mark.asyncio
async def test_unreadable_candidate_over_http(fake_ipfs):
    """Gateway 404 for the oldest copy, matching bytes for the newer one."""
    data = b"served by the gateway"
    content_id = fake_ipfs.put(data)

    def handler(request):
        if request.url.path == '/graphql':
            return httpx.Response(200, json={'data': {'transactions': {
                'pageInfo': {'hasNextPage': False},
                'edges': [{'cursor': 'c1', 'node': {'id': 'good'}}, {'cursor': 'c2', 'node': {'id': 'pending'}}],
            }}})
        if request.url.path == '/good':
            return httpx.Response(200, content=data)
        return httpx.Response(404)

    gateway = ArweaveClient(
        'http://arweave.test',
        client=httpx.AsyncClient(transport=httpx.MockTransport(handler), base_url='http://arweave.test'),
    )
    resolver = DeduplicationResolver(gateway, ContentFetcher(fake_ipfs))

    assert await resolver.find_existing(content_id) == "good"


@pytest.mark.asyncio
async def test_source_digest_computed_once(resolver, fake_ipfs, fake_arweave):
    data = b"hash me once"
    content_id = fake_ipfs.put(data)
    for index in range(3):
        fake_arweave.seed(f"decoy-{index}", b"other %d" % index, content_id)
    fake_arweave.seed("match", data, content_id)

    with patch("archiver.services.dedup_service.compute_checksum", wraps=compute_checksum) as digest:
        assert await resolver.find_existing(content_id) == "match"

    source_hashes = [c for c in digest.call_args_list if c.args[0] == data]
    assert len(source_hashes) == 1


@pytest.mark.asyncio
async def test_pending_source_fetch_cancelled_when_no_candidate_readable(fake_arweave):
    """The shared IPFS fetch does not outlive the lookup."""
    slow_ipfs = FakeIpfsClient(latency=10)
    content_id = slow_ipfs.put(b"slow content")
    fake_arweave.seed("pending", b"slow content", content_id)
    fake_arweave.unreadable.add("pending")
    resolver = DeduplicationResolver(fake_arweave, ContentFetcher(slow_ipfs))

    assert await resolver.find_existing(content_id) is None
    for _ in range(3):
        await asyncio.sleep(0)
    assert slow_ipfs.in_flight == 0
