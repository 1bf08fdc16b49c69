import asyncio

import pytest

from vocabdeck.service.debounce import Debouncer


def test_superseded_values_never_fire():
    applied = []

    async def scenario():
        d = Debouncer(0.02, applied.append)
        for text in ("1", "1-", "1-5"):
            d.schedule(text)
            await asyncio.sleep(0.005)
        assert applied == []
        await asyncio.sleep(0.1)
        assert not d.pending

    asyncio.run(scenario())
    assert applied == ["1-5"]


def test_separate_pauses_fire_separately():
    applied = []

    async def scenario():
        d = Debouncer(0.01, applied.append)
        d.schedule("a")
        await asyncio.sleep(0.05)
        d.schedule("b")
        await asyncio.sleep(0.05)

    asyncio.run(scenario())
    assert applied == ["a", "b"]


def test_cancel_drops_pending_value():
    applied = []

    async def scenario():
        d = Debouncer(0.01, applied.append)
        d.schedule("x")
        assert d.pending
        d.cancel()
        assert not d.pending
        await asyncio.sleep(0.05)

    asyncio.run(scenario())
    assert applied == []


def test_schedule_needs_running_loop():
    with pytest.raises(RuntimeError):
        Debouncer(0.01, print).schedule("x")
