import asyncio

from autoapply.pagination import scroll_to_end
from tests.fakes import FakePage


def test_stops_near_bottom():
    page = FakePage(document_height=2000, viewport_height=500)
    steps = asyncio.run(scroll_to_end(page, 400, 0))
    assert steps == 4
    assert page.scroll_y == 1500


def test_tolerance_counts_as_bottom():
    page = FakePage(document_height=1303, viewport_height=500)
    assert asyncio.run(scroll_to_end(page, 400, 0, tolerance=5)) == 2


def test_stalled_position_terminates():
    page = FakePage(document_height=100_000, viewport_height=500, max_scroll=800)
    steps = asyncio.run(scroll_to_end(page, 400, 0))
    assert steps == 3
    assert page.scroll_y == 800


def test_max_steps_caps_scrolling():
    page = FakePage(document_height=100_000, viewport_height=500)
    assert asyncio.run(scroll_to_end(page, 400, 0, max_steps=5)) == 5


def test_stop_ends_scrolling():
    page = FakePage(document_height=100_000, viewport_height=500)

    async def scenario():
        stop = asyncio.Event()
        task = asyncio.create_task(scroll_to_end(page, 100, 0.01, stop=stop))
        await asyncio.sleep(0.05)
        stop.set()
        return await task

    steps = asyncio.run(scenario())
    assert 0 < steps < 100
    assert page.scroll_calls == steps
