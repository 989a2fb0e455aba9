"""Tests for the periodic session sweeper."""

import asyncio

import pytest

from sms_agent.conversation.sweeper import SessionSweeper


class TestSessionSweeper:
    def test_rejects_non_positive_interval(self, store):
        with pytest.raises(ValueError):
            SessionSweeper(store, 0)

    @pytest.mark.asyncio
    async def test_sweeps_on_interval(self, store, clock):
        store.record_turn("+14155550134", "Hi", "Hello")
        clock.advance(hours=30)
        sweeper = SessionSweeper(store, interval_sec=0.01)
        sweeper.start()
        for _ in range(100):
            if len(store) == 0:
                break
            await asyncio.sleep(0.01)
        await sweeper.stop()
        assert len(store) == 0
        assert sweeper.total_removed == 1
        assert sweeper.running is False

    @pytest.mark.asyncio
    async def test_stop_before_first_interval(self, store):
        store.record_turn("+14155550134", "Hi", "Hello")
        sweeper = SessionSweeper(store, interval_sec=60)
        sweeper.start()
        await sweeper.stop()
        assert len(store) == 1
