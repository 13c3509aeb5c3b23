from __future__ import annotations

import asyncio

import pytest
from builders import AMSTERDAM, UTRECHT, fix, motion_events
from roadrough_core.geodesy import haversine_m

from roadrough.dispatcher import EventDispatcher
from roadrough.processing.recorder import RoadRoughnessRecorder


def _dispatcher(sink, fixed_clock, **kwargs) -> EventDispatcher:
    recorder = RoadRoughnessRecorder(device_id="dev-1", sinks=[sink], clock=fixed_clock)
    return EventDispatcher(recorder, **kwargs)


def test_both_channels_processed_sequentially(sink, fixed_clock) -> None:
    async def _run() -> None:
        dispatcher = _dispatcher(sink, fixed_clock)
        dispatcher.run()
        await dispatcher.start()
        dispatcher.put_position(fix(*AMSTERDAM, t_ms=0.0, speed=5.0))
        dispatcher.put_position(fix(*UTRECHT, t_ms=1000.0, speed=7.0))
        await dispatcher.drain()
        for event in motion_events([1.0] * 50):
            assert dispatcher.put_motion(event)
        await dispatcher.drain()
        await dispatcher.close()

    asyncio.run(_run())
    assert len(sink.records) == 1
    record = sink.records[0]
    assert record.distance_m == haversine_m(*AMSTERDAM, *UTRECHT)
    assert record.avg_speed_mps == 6.0


@pytest.mark.parametrize("consumers_running", [True, False])
def test_events_queued_while_idle_stay_ignored_after_start(
    sink, fixed_clock, consumers_running: bool
) -> None:
    async def _run() -> EventDispatcher:
        dispatcher = _dispatcher(sink, fixed_clock)
        if consumers_running:
            dispatcher.run()
        dispatcher.put_position(fix(*AMSTERDAM, t_ms=0.0))
        dispatcher.put_position(fix(*UTRECHT, t_ms=1000.0))
        for event in motion_events([1.0] * 50):
            dispatcher.put_motion(event)
        # No await between queuing and start: nothing has been consumed yet.
        assert await dispatcher.start() is True
        await dispatcher.settle()
        await dispatcher.close()
        return dispatcher

    dispatcher = asyncio.run(_run())
    assert sink.records == []
    session = dispatcher.recorder.session
    assert session is not None
    assert session.samples_seen == 0
    assert session.geo.distance_m == 0.0


@pytest.mark.parametrize("consumers_running", [True, False])
def test_events_queued_while_recording_count_before_stop(
    sink, fixed_clock, consumers_running: bool
) -> None:
    async def _run() -> EventDispatcher:
        dispatcher = _dispatcher(sink, fixed_clock)
        if consumers_running:
            dispatcher.run()
        await dispatcher.start()
        for event in motion_events([1.0] * 80):
            dispatcher.put_motion(event)
        assert await dispatcher.stop() is True
        await dispatcher.close()
        return dispatcher

    dispatcher = asyncio.run(_run())
    assert len(sink.records) == 1
    assert dispatcher.recorder.samples_discarded == 30
    assert dispatcher.stats()["motion_queued"] == 0


def test_full_queue_drops_and_counts(sink, fixed_clock) -> None:
    async def _run() -> EventDispatcher:
        dispatcher = _dispatcher(sink, fixed_clock, motion_queue_maxsize=3)
        accepted = [dispatcher.put_motion(e) for e in motion_events([0.0] * 5)]
        assert accepted == [True, True, True, False, False]
        return dispatcher

    dispatcher = asyncio.run(_run())
    assert dispatcher.dropped_motion == 2
    assert dispatcher.stats()["motion_queued"] == 3


def test_close_is_safe_without_run(sink, fixed_clock) -> None:
    async def _run() -> None:
        dispatcher = _dispatcher(sink, fixed_clock)
        await dispatcher.close()

    asyncio.run(_run())
