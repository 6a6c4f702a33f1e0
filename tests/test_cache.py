"""Tests for ResolutionCache claiming and cycle-safe waiting."""

import asyncio

import pytest
from bundle_resolver.cache import ResolutionCache


class TestClaim:
    """Physical file claiming."""

    @pytest.mark.asyncio
    async def test_first_claim_wins(self):
        cache = ResolutionCache()
        assert cache.claim_filename("/p/a.js", "/p/entry.js") is True
        assert cache.claim_filename("/p/a.js", "/p/other.js") is False
        assert cache.is_in_filename_cache("/p/a.js")

    @pytest.mark.asyncio
    async def test_lookup_records_are_shared(self):
        cache = ResolutionCache()
        assert cache.get_lookup("/p/a") is None

        async def resolve():
            return "/p/a.js", True

        task = asyncio.ensure_future(resolve())
        cache.record_lookup("/p/a", task)
        assert cache.get_lookup("/p/a") is task
        assert await task == ("/p/a.js", True)


class TestWaitFor:
    """Waiting on in-flight files."""

    @pytest.mark.asyncio
    async def test_unknown_file_does_not_wait(self):
        cache = ResolutionCache()
        assert await cache.wait_for("/p/a.js", "/p/unknown.js") is True

    @pytest.mark.asyncio
    async def test_waits_until_done(self):
        cache = ResolutionCache()
        cache.claim_filename("/p/shared.js", "/p/a.js")

        waiter = asyncio.ensure_future(cache.wait_for("/p/b.js", "/p/shared.js"))
        await asyncio.sleep(0)
        assert not waiter.done()

        cache.mark_done("/p/shared.js")
        assert await asyncio.wait_for(waiter, timeout=1) is True

    @pytest.mark.asyncio
    async def test_finished_file_does_not_wait(self):
        cache = ResolutionCache()
        cache.claim_filename("/p/a.js", "/p/entry.js")
        cache.mark_done("/p/a.js")
        assert await cache.wait_for("/p/b.js", "/p/a.js") is True

    @pytest.mark.asyncio
    async def test_self_edge_returns_immediately(self):
        cache = ResolutionCache()
        cache.claim_filename("/p/a.js", "/p/entry.js")
        assert await cache.wait_for("/p/a.js", "/p/a.js") is False

    @pytest.mark.asyncio
    async def test_cycle_returns_immediately(self):
        """a loads b, b requires a: b must not wait on a."""
        cache = ResolutionCache()
        cache.claim_filename("/p/a.js", "/p/entry.js")
        cache.claim_filename("/p/b.js", "/p/a.js")

        assert await asyncio.wait_for(cache.wait_for("/p/b.js", "/p/a.js"), timeout=1) is False

    @pytest.mark.asyncio
    async def test_transitive_cycle_returns_immediately(self):
        """a -> b -> c, then c requires a."""
        cache = ResolutionCache()
        cache.claim_filename("/p/a.js", "/p/entry.js")
        cache.claim_filename("/p/b.js", "/p/a.js")
        cache.claim_filename("/p/c.js", "/p/b.js")

        assert await asyncio.wait_for(cache.wait_for("/p/c.js", "/p/a.js"), timeout=1) is False

    @pytest.mark.asyncio
    async def test_finished_edges_do_not_count_as_cycles(self):
        cache = ResolutionCache()
        cache.claim_filename("/p/a.js", "/p/entry.js")
        cache.claim_filename("/p/b.js", "/p/a.js")
        cache.mark_done("/p/b.js")

        # b is finished, so a is no longer waiting on anything that reaches c
        cache.claim_filename("/p/c.js", "/p/b.js")
        waiter = asyncio.ensure_future(cache.wait_for("/p/c.js", "/p/a.js"))
        await asyncio.sleep(0)
        assert not waiter.done()

        cache.mark_done("/p/a.js")
        assert await asyncio.wait_for(waiter, timeout=1) is True


def test_repr_counts_entries():
    cache = ResolutionCache()
    assert repr(cache) == "ResolutionCache(lookup_names=0, filenames=0)"
