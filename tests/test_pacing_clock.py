"""Tests for PacingClock: cursor advance, terminal wrap, scheduling and the live ramp."""

import pytest

from pacing import RampConfig
from pacing_clock import FRAME_MS, RateCell, TextBuffer


RAMP = RampConfig(enabled=True, target_wpm=600, duration_seconds=30)


def words(n):
    return " ".join(f"w{i}" for i in range(n))


class TestTextBuffer:

    def test_splits_on_whitespace_runs(self):
        buffer = TextBuffer("  The quick\tbrown \n\n fox  ")
        assert buffer.words == ("The", "quick", "brown", "fox")
        assert len(buffer) == 4

    def test_word_at_out_of_range_is_empty(self):
        buffer = TextBuffer("one two")
        assert buffer.word_at(1) == "two"
        assert buffer.word_at(2) == ""
        assert buffer.word_at(-1) == ""

    def test_whitespace_only_text_has_no_words(self):
        assert len(TextBuffer(" \n\t ")) == 0


class TestRateCell:

    def test_reads_latest_value(self):
        cell = RateCell(300)
        cell.set(450)
        assert cell.get() == 450


class TestStartStop:

    def test_initially_paused_at_first_word(self, make_clock):
        clock = make_clock("alpha beta gamma")
        assert not clock.is_playing
        assert clock.position == 0
        assert clock.current_word == "alpha"
        assert not clock.ramp_state.captured

    def test_start_captures_ramp_state(self, make_clock, fake_time):
        clock = make_clock(words(10), base_wpm=320)
        fake_time.ms = 2500
        clock.start()
        assert clock.is_playing
        assert clock.ramp_state.start_wpm == 320
        assert clock.ramp_state.start_time == pytest.approx(2.5)

    def test_second_start_is_noop(self, make_clock, fake_time):
        clock = make_clock(words(10))
        clock.start()
        fake_time.ms = 1000
        clock.start()
        assert clock.ramp_state.start_time == 0.0

    def test_stop_clears_ramp_start_and_is_idempotent(self, make_clock, scheduler):
        states = []
        clock = make_clock(words(10), on_state_change=states.append)
        clock.start()
        clock.stop()
        clock.stop()
        assert not clock.is_playing
        assert not clock.ramp_state.captured
        assert states == [True, False]
        assert scheduler.pending() == 0

    def test_toggle(self, make_clock):
        clock = make_clock(words(3))
        clock.toggle()
        assert clock.is_playing
        clock.toggle()
        assert not clock.is_playing


class TestTick:

    def test_advances_once_interval_elapsed(self, make_clock):
        clock = make_clock(words(5), base_wpm=240)  # 0.25 s per word
        clock.start()
        assert clock.tick(0.1) is False
        assert clock.tick(0.25) is True
        assert clock.position == 1
        assert clock.tick(0.4) is False
        assert clock.tick(0.5) is True
        assert clock.position == 2

    def test_tick_while_paused_does_nothing(self, make_clock):
        clock = make_clock(words(5), base_wpm=240)
        assert clock.tick(10.0) is False
        assert clock.position == 0

    def test_last_word_wraps_to_start_and_stops(self, make_clock):
        clock = make_clock("one two three", base_wpm=240)
        clock.start()
        clock.tick(0.25)
        clock.tick(0.5)
        assert clock.position == 2
        assert clock.tick(0.75) is True
        assert clock.position == 0
        assert clock.current_word == "one"
        assert not clock.is_playing
        assert not clock.ramp_state.captured

    def test_empty_text_stops_on_first_tick(self, make_clock):
        clock = make_clock("   ", base_wpm=240)
        assert clock.current_word == ""
        clock.start()
        clock.tick(0.25)
        assert not clock.is_playing
        assert clock.position == 0
        assert clock.estimate_seconds_remaining() == 0.0

    def test_rate_change_only_changes_future_gaps(self, make_clock):
        clock = make_clock(words(10), base_wpm=240)
        clock.start()
        clock.tick(0.25)
        assert clock.position == 1
        clock.set_base_wpm(120)  # 0.5 s per word from the last advance on
        assert clock.position == 1
        assert clock.tick(0.5) is False
        assert clock.position == 1
        assert clock.tick(0.75) is True
        assert clock.position == 2

    def test_faster_rate_does_not_skip_words(self, make_clock):
        clock = make_clock(words(10), base_wpm=60)
        clock.start()
        clock.set_base_wpm(1500)
        assert clock.tick(5.0) is True
        assert clock.position == 1

    def test_out_of_range_rate_is_clamped(self, make_clock):
        clock = make_clock(words(10), base_wpm=0)
        assert clock.current_wpm == 1
        clock.set_base_wpm(99999)
        assert clock.current_wpm == 1500

    def test_on_advance_reports_index_and_word(self, make_clock):
        seen = []
        clock = make_clock("one two three", base_wpm=240, on_advance=lambda i, w: seen.append((i, w)))
        clock.start()
        clock.tick(0.25)
        assert seen[-1] == (1, "two")


class TestScheduling:

    def test_single_frame_job_while_playing(self, make_clock, scheduler):
        clock = make_clock(words(100))
        clock.start()
        assert scheduler.pending("_on_frame") == 1
        scheduler.run_until(1000)
        assert scheduler.pending("_on_frame") == 1
        assert scheduler.pending("_on_ramp_sample") == 0

    def test_frame_loop_advances_words(self, make_clock, scheduler):
        clock = make_clock(words(100), base_wpm=600)  # 100 ms per word
        clock.start()
        scheduler.run_until(1000)
        # Frames land on multiples of FRAME_MS, so each gap is 112 ms
        assert FRAME_MS == 16
        assert clock.position == 8

    def test_stop_cancels_all_work(self, make_clock, scheduler):
        clock = make_clock(words(100), base_wpm=600, ramp_config=RAMP)
        clock.start()
        scheduler.run_until(500)
        clock.stop()
        assert scheduler.pending() == 0
        position, calls = clock.position, scheduler.calls
        scheduler.run_until(5000)
        assert clock.position == position
        assert scheduler.calls == calls

    def test_reaching_end_leaves_nothing_scheduled(self, make_clock, scheduler):
        clock = make_clock("one two", base_wpm=600, ramp_config=RAMP)
        clock.start()
        scheduler.run_until(2000)
        assert not clock.is_playing
        assert clock.position == 0
        assert scheduler.pending() == 0

    def test_restart_rewinds_and_pauses(self, make_clock, scheduler):
        clock = make_clock(words(100), base_wpm=600)
        clock.start()
        scheduler.run_until(1000)
        clock.restart()
        assert clock.position == 0
        assert not clock.is_playing
        assert scheduler.pending() == 0


class TestLiveRamp:

    def test_sampler_ramps_rate(self, make_clock, scheduler):
        clock = make_clock(words(1000), base_wpm=300, ramp_config=RAMP)
        clock.start()
        assert clock.current_wpm == 300
        assert scheduler.pending("_on_ramp_sample") == 1
        scheduler.run_until(15000)
        assert clock.current_wpm == 450
        scheduler.run_until(31000)
        assert clock.current_wpm == 600
        assert scheduler.pending("_on_ramp_sample") == 0

    def test_rate_changes_reported(self, make_clock, scheduler):
        rates = []
        clock = make_clock(words(1000), base_wpm=300, on_rate_change=rates.append,
                           ramp_config=RampConfig(enabled=True, target_wpm=540, duration_seconds=60))
        clock.start()
        scheduler.run_until(1000)
        # 4 WPM per second, sampled every 250 ms
        assert rates == [301, 302, 303, 304]

    def test_target_below_start_never_slows_down(self, make_clock, scheduler):
        clock = make_clock(words(1000), base_wpm=600,
                           ramp_config=RampConfig(enabled=True, target_wpm=300, duration_seconds=30))
        clock.start()
        scheduler.run_until(10000)
        assert clock.current_wpm == 600

    def test_reconfigure_keeps_live_ramp_start(self, make_clock, scheduler):
        clock = make_clock(words(1000), base_wpm=300, ramp_config=RAMP)
        clock.start()
        scheduler.run_until(15000)
        clock.set_ramp_config(RampConfig(enabled=True, target_wpm=900, duration_seconds=30))
        assert clock.ramp_state.start_time == 0.0
        assert clock.ramp_state.start_wpm == 300
        assert clock.current_wpm == 600
        assert scheduler.pending("_on_ramp_sample") == 1

    def test_disabling_ramp_falls_back_to_base(self, make_clock, scheduler):
        clock = make_clock(words(1000), base_wpm=300, ramp_config=RAMP)
        clock.start()
        scheduler.run_until(15000)
        clock.set_ramp_config(RampConfig(enabled=False, target_wpm=600, duration_seconds=30))
        assert clock.current_wpm == 300
        assert scheduler.pending("_on_ramp_sample") == 0
        assert scheduler.pending("_on_frame") == 1

    def test_base_change_during_ramp_applies_after_stop(self, make_clock, scheduler):
        clock = make_clock(words(1000), base_wpm=300, ramp_config=RAMP)
        clock.start()
        scheduler.run_until(15000)
        clock.set_base_wpm(200)
        assert clock.current_wpm == 450
        clock.stop()
        assert clock.current_wpm == 200

    def test_stop_resets_rate_to_base(self, make_clock, scheduler):
        clock = make_clock(words(1000), base_wpm=300, ramp_config=RAMP)
        clock.start()
        scheduler.run_until(15000)
        clock.stop()
        assert clock.current_wpm == 300


class TestTextAndEstimate:

    def test_set_text_stops_and_rewinds(self, make_clock, scheduler):
        clock = make_clock(words(100), base_wpm=600)
        clock.start()
        scheduler.run_until(1000)
        clock.set_text("brand new text")
        assert not clock.is_playing
        assert clock.position == 0
        assert clock.word_count == 3
        assert clock.current_word == "brand"
        assert scheduler.pending() == 0

    def test_seek_is_clamped(self, make_clock):
        clock = make_clock(words(5))
        clock.seek(3)
        assert clock.position == 3
        clock.seek(99)
        assert clock.position == 4
        clock.seek(-2)
        assert clock.position == 0

    def test_estimate_counts_current_word(self, make_clock):
        clock = make_clock(words(120), base_wpm=300)
        assert clock.words_remaining == 120
        assert clock.estimate_seconds_remaining() == pytest.approx(24.0)
        clock.seek(60)
        assert clock.estimate_seconds_remaining() == pytest.approx(12.0)

    def test_estimate_preview_with_ramp(self, make_clock):
        clock = make_clock(words(1000), base_wpm=300, ramp_config=RAMP)
        assert clock.estimate_seconds_remaining() == pytest.approx(107.5)

    def test_empty_text_clears_playing_reader(self, make_clock, scheduler):
        clock = make_clock(words(100), base_wpm=600)
        clock.start()
        scheduler.run_until(1000)
        clock.set_text("")
        assert not clock.is_playing
        assert clock.word_count == 0
        assert clock.position == 0
        assert clock.current_word == ""
        assert clock.estimate_seconds_remaining() == 0.0
        assert scheduler.pending() == 0
