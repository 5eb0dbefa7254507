"""Tests for lap recording: deltas, ordering, clearing, and the sum invariant."""

import pytest

from lapdown.timer.engine import TimerState
from lapdown.timer.errors import PreconditionError
from lapdown.timer.laps import Lap

from helpers import run_for


class TestRecordLap:

    def test_first_lap_measures_from_start(self, engine, clock):
        engine.start(10_000)
        clock.advance(1500)
        lap = engine.record_lap()
        assert lap == Lap(index=1, duration_ms=1500, remaining_at_lap_ms=8500)

    def test_subsequent_laps_measure_from_previous(self, engine, clock):
        engine.start(10_000)
        clock.advance(1000)
        engine.record_lap()
        clock.advance(2500)
        lap = engine.record_lap()
        assert lap.index == 2
        assert lap.duration_ms == 2500
        assert lap.remaining_at_lap_ms == 6500

    def test_immediate_lap_has_zero_duration(self, engine):
        engine.start(10_000)
        lap = engine.record_lap()
        assert lap.duration_ms == 0
        assert lap.remaining_at_lap_ms == 10_000

    def test_paused_time_is_excluded(self, engine, clock):
        engine.start(10_000)
        clock.advance(1000)
        engine.pause()
        clock.advance(30_000)
        engine.start()
        clock.advance(1000)
        lap = engine.record_lap()
        assert lap.duration_ms == 2000

    def test_lap_returns_are_recorded_in_order(self, engine, clock):
        engine.start(10_000)
        recorded = []
        for _ in range(4):
            clock.advance(700)
            recorded.append(engine.record_lap())
        assert engine.laps == tuple(recorded)
        assert [lap.index for lap in engine.laps] == [1, 2, 3, 4]

    def test_clock_anomaly_gives_zero_not_negative(self, engine, clock):
        engine.start(10_000)
        clock.advance(2000)
        engine.record_lap()
        clock.set(clock.now_ms() - 500)   # clock stepped backwards
        lap = engine.record_lap()
        assert lap.duration_ms == 0


class TestLapPreconditions:

    def test_lap_while_idle_is_rejected(self, engine):
        engine.reset(5000)
        with pytest.raises(PreconditionError):
            engine.record_lap()
        assert engine.laps == ()

    def test_lap_while_paused_is_rejected(self, engine, clock):
        engine.start(5000)
        clock.advance(1000)
        engine.record_lap()
        engine.pause()
        with pytest.raises(PreconditionError):
            engine.record_lap()
        assert len(engine.laps) == 1

    def test_lap_while_finished_is_rejected(self, engine, clock):
        engine.start(1000)
        run_for(engine, clock, 1000)
        assert engine.state == TimerState.FINISHED
        with pytest.raises(PreconditionError):
            engine.record_lap()

    def test_rejected_lap_leaves_cursor_alone(self, engine, clock):
        engine.start(5000)
        clock.advance(1000)
        engine.record_lap()
        engine.pause()
        cursor = engine.lap_tracker.cursor_ms
        with pytest.raises(PreconditionError):
            engine.record_lap()
        assert engine.lap_tracker.cursor_ms == cursor


class TestClearLaps:

    def test_clear_while_running_reanchors(self, engine, clock):
        engine.start(10_000)
        clock.advance(1000)
        engine.record_lap()
        clock.advance(1000)
        engine.clear_laps()
        assert engine.laps == ()
        assert engine.lap_tracker.cursor_ms == 8000

        clock.advance(500)
        lap = engine.record_lap()
        assert lap.index == 1
        assert lap.duration_ms == 500

    def test_clear_while_paused_unsets_cursor(self, engine, clock):
        engine.start(10_000)
        clock.advance(1000)
        engine.record_lap()
        engine.pause()
        engine.clear_laps()
        assert engine.lap_tracker.cursor_ms is None

    def test_lap_after_clear_while_paused_anchors_at_resume(self, engine, clock):
        engine.start(10_000)
        clock.advance(1000)
        engine.record_lap()
        engine.pause()
        engine.clear_laps()
        engine.start()
        clock.advance(400)
        lap = engine.record_lap()
        assert lap.duration_ms == 400
        assert lap.remaining_at_lap_ms == 8600


class TestLapInvariants:

    def test_laps_partition_elapsed_time(self, engine, clock):
        engine.start(60_000)
        start_remaining = engine.current_remaining()
        for step in (1234, 800, 4321, 15, 9999):
            run_for(engine, clock, step, poll_ms=170)
            engine.record_lap()
        tracker = engine.lap_tracker
        assert tracker.total_ms + engine.current_remaining() == start_remaining

    def test_remaining_at_lap_is_non_increasing(self, engine, clock):
        engine.start(30_000)
        for step in (100, 0, 2500, 1, 700):
            clock.advance(step)
            engine.record_lap()
        remains = [lap.remaining_at_lap_ms for lap in engine.laps]
        assert remains == sorted(remains, reverse=True)
        assert remains[0] <= 30_000

    def test_invariant_holds_across_pauses(self, engine, clock):
        engine.start(20_000)
        clock.advance(3000)
        engine.record_lap()
        engine.pause()
        clock.advance(99_000)
        engine.start()
        clock.advance(2000)
        engine.record_lap()
        assert engine.lap_tracker.total_ms + engine.current_remaining() == 20_000

    def test_new_run_after_finish_measures_from_its_own_start(self, engine, clock):
        engine.start(1000)
        clock.advance(600)
        engine.record_lap()
        run_for(engine, clock, 1000)
        engine.start(5000)
        clock.advance(1500)
        lap = engine.record_lap()
        assert lap.duration_ms == 1500
        assert lap.index == 2

    def test_tracker_iteration_and_len(self, engine, clock):
        engine.start(5000)
        clock.advance(100)
        engine.record_lap()
        clock.advance(100)
        engine.record_lap()
        tracker = engine.lap_tracker
        assert len(tracker) == 2
        assert [lap.index for lap in tracker] == [1, 2]
