# -*- coding: utf-8 -*-

import time

from pacing import (RampConfig, RampState, RAMP_SAMPLE_MS, clamp, clamp_wpm,
                    effective_rate, estimate_seconds_remaining, ramp_progress)
from utils import split_words, calculate_delay

# --- Constants ---
FRAME_MS = 16 # ~60 fps, finer than the gap between words at MAX_WPM (40 ms)


class RateCell:
    """
    Shared holder for the current effective rate.

    The frame loop keeps a reference to the cell and reads it on every
    tick, so a rate change never needs the loop to be re-registered.
    """
    def __init__(self, value):
        self.value = value

    def get(self): return self.value
    def set(self, value): self.value = value


class TextBuffer:
    """Immutable word list derived from one raw text."""
    def __init__(self, raw_text=""):
        self.raw_text = raw_text if isinstance(raw_text, str) else ""
        self.words = tuple(split_words(self.raw_text))

    def __len__(self): return len(self.words)

    def word_at(self, index):
        if 0 <= index < len(self.words): return self.words[index]
        return ""


class PacingClock:
    """
    Advances a word cursor through a text in real time.

    The clock runs on a single-threaded scheduler: any object offering
    `after(ms, func) -> job_id` and `after_cancel(job_id)`, such as a Tk
    widget. Two jobs run while playing:

    - the frame job (every FRAME_MS), which advances the cursor once the
      time since the last advance reaches 60 / current rate;
    - the ramp sampler (every RAMP_SAMPLE_MS, only with an active ramp),
      which writes the ramp's effective rate into the shared RateCell.

    Base rate and ramp settings belong to the caller and are handed in by
    value through set_base_wpm() and set_ramp_config().
    """
    def __init__(self, scheduler, base_wpm=300, ramp_config=None, time_source=time.monotonic,
                 on_advance=None, on_state_change=None, on_rate_change=None):
        self.scheduler = scheduler
        self.time_source = time_source
        self.on_advance = on_advance
        self.on_state_change = on_state_change
        self.on_rate_change = on_rate_change

        self.base_wpm = clamp_wpm(base_wpm)
        self.ramp_config = ramp_config or RampConfig()
        self.ramp_state = RampState(self.base_wpm)
        self.rate = RateCell(self.base_wpm)
        self.buffer = TextBuffer()
        self.index = 0
        self.playing = False
        self.last_advance_time = None
        self.frame_job = None
        self.sample_job = None

    # --- Read-only views ---
    @property
    def is_playing(self): return self.playing

    @property
    def current_wpm(self): return self.rate.get()

    @property
    def word_count(self): return len(self.buffer)

    @property
    def position(self): return self.index

    @property
    def current_word(self): return self.buffer.word_at(self.index)

    @property
    def words_remaining(self):
        """Words still to be shown, the current one included."""
        return max(0, len(self.buffer) - self.index)

    def estimate_seconds_remaining(self, now=None):
        if now is None: now = self.time_source()
        return estimate_seconds_remaining(self.words_remaining, self.base_wpm, self.rate.get(),
                                          self.ramp_config, self.playing, self.ramp_state, now)

    # --- Inputs from the caller ---
    def set_text(self, raw_text):
        """Replaces the text. Stops playback and rewinds to the first word."""
        self.stop()
        self.buffer = TextBuffer(raw_text)
        self.index = 0
        print(f"Text loaded: {len(self.buffer)} words.")
        self._notify_advance()

    def set_base_wpm(self, wpm):
        """New base rate. Takes effect on the next tick unless a ramp is running."""
        self.base_wpm = clamp_wpm(wpm)
        self._refresh_rate()

    def set_ramp_config(self, ramp_config):
        """
        New ramp settings. While playing the sampler is re-established from
        the live ramp state; the ramp's start time and start rate stay as
        they were captured at start().
        """
        self.ramp_config = ramp_config
        self._cancel_sample_job()
        self._refresh_rate()
        if self.playing and self.ramp_config.active:
            self._schedule_sample()

    def seek(self, index):
        """Moves the cursor, clamped to the text. Anchors the next gap at now."""
        self.index = int(clamp(index, 0, max(0, len(self.buffer) - 1)))
        if self.playing: self.last_advance_time = self.time_source()
        self._notify_advance()

    def restart(self):
        self.stop()
        self.seek(0)

    # --- Playback ---
    def start(self):
        if self.playing: return
        now = self.time_source()
        self.playing = True
        self.ramp_state.capture(self.base_wpm, now)
        self.last_advance_time = now
        print(f"Playback started at word {self.index + 1}/{len(self.buffer)}, {self.base_wpm} WPM.")
        self._refresh_rate()
        self._schedule_frame()
        if self.ramp_config.active:
            self._schedule_sample()
        self._notify_state()

    def stop(self):
        if not self.playing: return
        self.playing = False
        self._cancel_frame_job()
        self._cancel_sample_job()
        self.ramp_state.clear()
        self.last_advance_time = None
        print(f"Playback stopped at word {self.index + 1}/{len(self.buffer)}.")
        self._refresh_rate()
        self._notify_state()

    def toggle(self):
        if self.playing: self.stop()
        else: self.start()

    def tick(self, now):
        """
        Advances the cursor by one word if the current gap has elapsed.

        Returns:
            bool: True if the cursor moved (or wrapped and stopped).
        """
        if not self.playing: return False
        interval = calculate_delay(clamp_wpm(self.rate.get()))
        if now - self.last_advance_time < interval: return False

        self.last_advance_time = now
        index = self.index
        if index >= len(self.buffer) - 1:
            # End of text: rewind and stop
            self.index = 0
            self.stop()
        else:
            self.index = index + 1
        self._notify_advance()
        return True

    # --- Scheduled jobs ---
    def _schedule_frame(self):
        self._cancel_frame_job()
        self.frame_job = self.scheduler.after(FRAME_MS, self._on_frame)

    def _on_frame(self):
        self.frame_job = None
        if not self.playing: return
        self.tick(self.time_source())
        if self.playing: self._schedule_frame()

    def _schedule_sample(self):
        self._cancel_sample_job()
        self.sample_job = self.scheduler.after(RAMP_SAMPLE_MS, self._on_ramp_sample)

    def _on_ramp_sample(self):
        self.sample_job = None
        if not self.playing or not self.ramp_config.active: return
        now = self.time_source()
        self._refresh_rate(now)
        if ramp_progress(self.ramp_config, self.ramp_state, now) < 1.0:
            self._schedule_sample()

    def _cancel_frame_job(self):
        if self.frame_job is not None:
            self.scheduler.after_cancel(self.frame_job); self.frame_job = None

    def _cancel_sample_job(self):
        if self.sample_job is not None:
            self.scheduler.after_cancel(self.sample_job); self.sample_job = None

    # --- Internals ---
    def _refresh_rate(self, now=None):
        if now is None: now = self.time_source()
        wpm = effective_rate(self.base_wpm, self.ramp_config, self.ramp_state, self.playing, now)
        if wpm != self.rate.get():
            self.rate.set(wpm)
            if self.on_rate_change: self.on_rate_change(wpm)

    def _notify_advance(self):
        if self.on_advance: self.on_advance(self.index, self.current_word)

    def _notify_state(self):
        if self.on_state_change: self.on_state_change(self.playing)
