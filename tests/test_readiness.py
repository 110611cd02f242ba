import asyncio

import pytest

from autoapply.errors import AutomationStopped, ReadinessTimeout
from autoapply.readiness import wait_for
from tests.fakes import FakePage


def test_resolves_once_anchor_appears():
    page = FakePage(anchor_after=4)
    attempts = asyncio.run(wait_for(page, "#anchor", 0))
    assert attempts == 4
    assert page.exists_calls == 4


def test_gives_up_after_max_attempts():
    page = FakePage(anchor_after=None)
    with pytest.raises(ReadinessTimeout) as err:
        asyncio.run(wait_for(page, "#anchor", 0, max_attempts=3))
    assert err.value.attempts == 3
    assert page.exists_calls == 3


def test_stop_interrupts_waiting():
    page = FakePage(anchor_after=None)

    async def scenario():
        stop = asyncio.Event()
        task = asyncio.create_task(wait_for(page, "#anchor", 0.01, stop=stop))
        await asyncio.sleep(0.05)
        stop.set()
        await task

    with pytest.raises(AutomationStopped):
        asyncio.run(scenario())


def test_already_stopped_does_not_poll():
    page = FakePage(anchor_after=1)

    async def scenario():
        stop = asyncio.Event()
        stop.set()
        await wait_for(page, "#anchor", 0, stop=stop)

    with pytest.raises(AutomationStopped):
        asyncio.run(scenario())
    assert page.exists_calls == 0
