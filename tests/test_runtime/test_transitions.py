import asyncio

import pytest

from runtime.core.events import TransitionEvent
from runtime.transitions import ScreenFader, TimedTransition


@pytest.mark.asyncio
async def test_timed_transition_waits(monkeypatch):
    waits = []

    async def fake_sleep(seconds):
        waits.append(seconds)

    monkeypatch.setattr(asyncio, "sleep", fake_sleep)
    transition = TimedTransition(fade_out_seconds=0.2, fade_in_seconds=0.05)

    await transition.fade_out()
    await transition.fade_in()

    assert waits == [0.2, 0.05]


def test_fader_steps():
    fader = ScreenFader(duration=1.0)

    assert fader.step_out(0.5) is False
    assert fader.progress == pytest.approx(0.5)
    assert fader.step_out(0.6) is True
    assert fader.progress == 1.0
    assert fader.is_black

    assert fader.step_in(0.25) is False
    assert fader.step_in(1.0) is True
    assert fader.progress == 0.0


def test_fader_zero_duration_is_instant():
    fader = ScreenFader(duration=0)

    assert fader.step_out(0.001) is True
    assert fader.step_in(0.001) is True


def test_fader_rejects_bad_tick():
    with pytest.raises(ValueError):
        ScreenFader(tick=0)


@pytest.mark.asyncio
async def test_fader_runs_to_completion_and_publishes(event_bus):
    seen = []
    for event_type in TransitionEvent:
        event_bus.subscribe(event_type, lambda e: seen.append(e.type), weak=False)

    fader = ScreenFader(duration=0.02, tick=0.005, event_bus=event_bus)

    await fader.fade_out()
    assert fader.progress == 1.0
    await fader.fade_in()
    assert fader.progress == 0.0

    assert seen == [
        TransitionEvent.FADE_OUT_STARTED,
        TransitionEvent.FADE_OUT_FINISHED,
        TransitionEvent.FADE_IN_STARTED,
        TransitionEvent.FADE_IN_FINISHED,
    ]
