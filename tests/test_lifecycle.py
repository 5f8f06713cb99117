"""
Tests for lifecycle-bound requests and debounced saving.
"""

import asyncio

import pytest

from core.autosave import Debouncer
from core.lifecycle import LifecycleScope, ScopeClosedError


class TestLifecycleScope:
    """Test cancelling in-flight work when a view closes."""

    @pytest.mark.asyncio
    async def test_run_returns_result(self):
        async def fetch():
            return 42

        scope = LifecycleScope("test")
        assert await scope.run(fetch()) == 42
        assert scope.pending == 0

    @pytest.mark.asyncio
    async def test_close_cancels_in_flight(self):
        scope = LifecycleScope("test")
        started = asyncio.Event()

        async def slow():
            started.set()
            await asyncio.sleep(10)
            return "late"

        task = asyncio.create_task(scope.run(slow()))
        await started.wait()
        assert scope.pending == 1

        await scope.close()
        with pytest.raises(ScopeClosedError):
            await task
        assert scope.closed

    @pytest.mark.asyncio
    async def test_run_on_closed_scope(self):
        async def fetch():
            return 1

        async with LifecycleScope("test") as scope:
            pass
        with pytest.raises(ScopeClosedError):
            await scope.run(fetch())

    @pytest.mark.asyncio
    async def test_close_is_idempotent(self):
        scope = LifecycleScope("test")
        await scope.close()
        await scope.close()
        assert scope.closed

    @pytest.mark.asyncio
    async def test_errors_propagate(self):
        async def broken():
            raise RuntimeError("boom")

        scope = LifecycleScope("test")
        with pytest.raises(RuntimeError):
            await scope.run(broken())


class TestDebouncer:
    """Test coalescing rapid edits into one save."""

    @pytest.mark.asyncio
    async def test_only_latest_value_is_saved(self):
        saved = []

        async def save(value):
            saved.append(value)

        debouncer = Debouncer(save, delay=0.05)
        debouncer.schedule("a")
        debouncer.schedule("ab")
        debouncer.schedule("abc")
        await asyncio.sleep(0.15)

        assert saved == ["abc"]
        assert not debouncer.pending

    @pytest.mark.asyncio
    async def test_cancel_drops_pending_save(self):
        saved = []

        async def save(value):
            saved.append(value)

        debouncer = Debouncer(save, delay=0.05)
        debouncer.schedule("draft")
        debouncer.cancel()
        await asyncio.sleep(0.1)

        assert saved == []

    @pytest.mark.asyncio
    async def test_flush_saves_immediately(self):
        saved = []

        async def save(value):
            saved.append(value)

        debouncer = Debouncer(save, delay=10)
        debouncer.schedule("now")
        await debouncer.flush()

        assert saved == ["now"]
        await debouncer.flush()
        assert saved == ["now"]

    @pytest.mark.asyncio
    async def test_failed_save_is_logged(self, caplog):
        async def save(value):
            raise OSError("disk full")

        debouncer = Debouncer(save, delay=0)
        debouncer.schedule("x")
        await debouncer.flush()

        assert "Autosave failed" in caplog.text
