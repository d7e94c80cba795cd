import asyncio

from neontype.client.scheduler import AsyncioScheduler, ManualScheduler
from neontype.client.session import GameSession, SessionState


def test_manual_scheduler_fires_per_interval():
    scheduler = ManualScheduler()
    calls = []
    scheduler.every(1.0, lambda: calls.append(1))
    assert scheduler.advance(0.5) == 0
    assert scheduler.advance(2.5) == 3
    assert len(calls) == 3


def test_manual_scheduler_stops_after_cancel_inside_callback():
    scheduler = ManualScheduler()
    calls = []

    def callback():
        calls.append(1)
        handle.cancel()

    handle = scheduler.every(1.0, callback)
    scheduler.advance(5)
    assert calls == [1]
    assert scheduler.active == 0


def test_asyncio_scheduler_drives_countdown():
    async def scenario():
        timed_out = asyncio.get_running_loop().create_future()
        game = GameSession(scheduler=AsyncioScheduler(), on_finish=timed_out.set_result)
        game.start("hello", 1)
        attempt = await asyncio.wait_for(timed_out, timeout=3)
        return game, attempt

    game, attempt = asyncio.run(scenario())
    assert game.state is SessionState.FINISHED
    assert game.time_left_seconds == 0
    assert attempt.end_time >= attempt.start_time


def test_asyncio_cancelled_handle_never_fires():
    async def scenario():
        calls = []
        handle = AsyncioScheduler().every(0.01, lambda: calls.append(1))
        handle.cancel()
        await asyncio.sleep(0.05)
        return calls, handle

    calls, handle = asyncio.run(scenario())
    assert calls == []
    assert handle.cancelled
