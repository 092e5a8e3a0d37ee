"""Tests for run control (cancel / pause / resume)."""

import threading

from shiftplanner.genetic import RunControl


def test_fresh_control_continues():
    control = RunControl()

    assert not control.cancelled
    assert not control.paused
    assert control.checkpoint() is True


def test_cancel_stops_at_checkpoint():
    control = RunControl()
    control.cancel()

    assert control.checkpoint() is False


def test_pause_blocks_until_resume():
    control = RunControl()
    control.pause()
    results = []

    worker = threading.Thread(target=lambda: results.append(control.checkpoint(0.01)))
    worker.start()
    worker.join(timeout=0.1)
    assert worker.is_alive()

    control.resume()
    worker.join(timeout=2)
    assert not worker.is_alive()
    assert results == [True]


def test_cancel_wakes_paused_run():
    control = RunControl()
    control.pause()
    results = []

    worker = threading.Thread(target=lambda: results.append(control.checkpoint(0.01)))
    worker.start()
    control.cancel()
    worker.join(timeout=2)

    assert results == [False]


def test_pause_after_cancel_is_ignored():
    control = RunControl()
    control.cancel()
    control.pause()

    assert not control.paused
