"""Headless smoke tests for the terminal host."""

import asyncio

from textual.widgets import OptionList

from stopwatch_sync.UI import UI
from stopwatch_sync.persistent import PersistentState, StateStore
from stopwatch_sync.store_file import FileStore
from stopwatch_sync.store_memory import MemoryStore


def test_keys_drive_the_stopwatch():
    space = MemoryStore()

    async def scenario():
        app = UI(StateStore(space.observer()))
        async with app.run_test() as pilot:
            await pilot.press("s")
            await pilot.pause(0.35)
            assert app.controller.running
            await pilot.press("l")
            await pilot.press("s")
            await pilot.pause()
            assert not app.controller.running
            assert len(app.controller.state.laps) == 1
            assert app.query_one("#laps", OptionList).option_count == 1
            await pilot.press("q")
        return app

    app = asyncio.run(scenario())
    stored = StateStore(space.observer()).load()
    assert stored == app.controller.state
    assert stored.accumulated_elapsed > 0


def test_remove_and_reset_keys():
    space = MemoryStore()
    StateStore(space.observer()).save(PersistentState.model_validate({
        "timerOn": False,
        "startTime": None,
        "elapsedTime": 4321,
        "lapTimes": [
            {"elapsed": 4000, "minutes": "00", "seconds": "40", "millis": "01"},
            {"elapsed": 1234, "minutes": "00", "seconds": "12", "millis": "34"},
        ],
    }))

    async def scenario():
        app = UI(StateStore(space.observer()))
        async with app.run_test() as pilot:
            lapList = app.query_one("#laps", OptionList)
            assert lapList.option_count == 2
            lapList.highlighted = 0
            await pilot.press("d")
            await pilot.pause()
            assert [lap.elapsed for lap in app.controller.state.laps] == [1234]
            await pilot.press("r")
            await pilot.pause()
            assert app.controller.state == PersistentState.Reset()
            assert lapList.option_count == 0
            await pilot.press("q")

    asyncio.run(scenario())


def test_file_store_changes_are_picked_up(tmp_path):
    path = tmp_path / "store.json"

    async def scenario():
        app = UI(StateStore(FileStore(path)), poll_interval=0.05)
        async with app.run_test() as pilot:
            StateStore(FileStore(path)).save(PersistentState(accumulated_elapsed=6123))
            await pilot.pause(0.3)
            assert app.controller.display.render() == "01:01.23"
            await pilot.press("q")

    asyncio.run(scenario())
