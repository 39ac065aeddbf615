# -*- coding: utf-8 -*-

"""
Rate ramp and remaining-time math for the reader.

Everything in here is a pure function of its arguments: no clock is read,
no state is kept. Times are in seconds (whatever the caller's monotonic
clock returns), rates are in words per minute.

Ramp policy: a ramp only ever accelerates. If the configured target is
below the rate playback started at, the ramp holds the start rate instead
of slowing down. `ramp_target` is the one place that decides this.
"""

import math
from dataclasses import dataclass

# --- Rate limits ---
MIN_WPM = 1
MAX_WPM = 1500
WPM_STEP = 50

# --- Ramp sampling ---
RAMP_SAMPLE_MS = 250 # Sampling period of the live ramp


@dataclass(frozen=True)
class RampConfig:
    """Ramp settings as chosen by the user. Passed around by value."""
    enabled: bool = False
    target_wpm: int = 600
    duration_seconds: float = 30

    @property
    def active(self):
        """A ramp only exists if it is switched on and has a duration."""
        return self.enabled and self.duration_seconds > 0


class RampState:
    """Start rate and start time of the ramp belonging to the current playback."""
    def __init__(self, start_wpm=MIN_WPM, start_time=None):
        self.start_wpm = start_wpm
        self.start_time = start_time

    def capture(self, start_wpm, now):
        self.start_wpm = start_wpm
        self.start_time = now

    def clear(self):
        self.start_time = None

    @property
    def captured(self):
        return self.start_time is not None

    def __repr__(self):
        return f"RampState(start_wpm={self.start_wpm!r}, start_time={self.start_time!r})"


# --- Clamping ---

def clamp(value, low, high):
    return max(low, min(high, value))

def clamp_wpm(wpm):
    """Pulls a rate into [MIN_WPM, MAX_WPM]."""
    return clamp(wpm, MIN_WPM, MAX_WPM)

def ramp_target(start_wpm, target_wpm):
    """End point of a ramp starting at start_wpm. Never below the start."""
    return max(clamp_wpm(start_wpm), clamp_wpm(target_wpm))

def step_wpm(wpm, delta):
    """
    Applies a +/- step to the base rate.

    Stepping up from the minimum of 1 lands on 50 instead of 51 so the
    rate stays on the step grid.
    """
    if wpm == MIN_WPM and delta > 0:
        delta -= MIN_WPM
    return clamp_wpm(wpm + delta)

def _round_half_up(value):
    return int(math.floor(value + 0.5))


# --- Ramp ---

def ramp_progress(ramp_config, ramp_state, now):
    """Fraction of the ramp that has elapsed at `now`, in [0, 1]."""
    if not ramp_config.active or not ramp_state.captured:
        return 0.0
    elapsed = now - ramp_state.start_time
    return clamp(elapsed / ramp_config.duration_seconds, 0.0, 1.0)

def effective_rate(base_wpm, ramp_config, ramp_state, is_playing, now):
    """
    Rate that governs word advance right now.

    Args:
        base_wpm: The user's rate.
        ramp_config (RampConfig): Current ramp settings.
        ramp_state (RampState): Start of the running ramp.
        is_playing (bool): Whether playback is running.
        now (float): Current time on the same clock as ramp_state.start_time.

    Returns:
        int: The clamped base rate when no ramp is running, otherwise the
        linearly interpolated ramp rate, rounded half up.
    """
    if not is_playing or not ramp_config.active or not ramp_state.captured:
        return clamp_wpm(base_wpm)
    start = clamp_wpm(ramp_state.start_wpm)
    target = ramp_target(start, ramp_config.target_wpm)
    progress = ramp_progress(ramp_config, ramp_state, now)
    return _round_half_up(start + (target - start) * progress)


# --- Remaining time ---

def solve_ramp_time(remaining_words, start_wpm, end_wpm, duration_seconds):
    """
    Seconds into a linear ramp at which `remaining_words` have been read.

    Words read after t seconds are (start*t + (end-start)*t^2/(2*duration))/60,
    so t is the positive root of a*t^2 + b*t + c = 0 with
    a = (end-start)/(2*duration), b = start, c = -60*words.
    """
    a = (end_wpm - start_wpm) / (2.0 * duration_seconds)
    b = float(start_wpm)
    c = -remaining_words * 60.0
    if a == 0:
        return -c / b
    discriminant = max(0.0, b * b - 4.0 * a * c)
    return max(0.0, (-b + math.sqrt(discriminant)) / (2.0 * a))

def ramp_seconds(remaining_words, start_wpm, end_wpm, duration_seconds):
    """
    Time to read `remaining_words` when the rate climbs linearly from
    start_wpm to end_wpm over duration_seconds and then stays at end_wpm.
    """
    if remaining_words <= 0:
        return 0.0
    start = clamp_wpm(start_wpm)
    end = clamp_wpm(end_wpm)
    if duration_seconds <= 0 or start == end:
        return remaining_words / (end / 60.0)

    ramp_words = ((start + end) / 2.0) * (duration_seconds / 60.0)
    if remaining_words >= ramp_words:
        return duration_seconds + (remaining_words - ramp_words) / (end / 60.0)
    return solve_ramp_time(remaining_words, start, end, duration_seconds)

def estimate_seconds_remaining(words_remaining, base_wpm, current_wpm, ramp_config,
                               is_playing, ramp_state, now):
    """Estimated seconds until the text is exhausted at the current pace."""
    if words_remaining <= 0:
        return 0.0

    if not ramp_config.active:
        wpm = current_wpm if is_playing else base_wpm
        return words_remaining / (clamp_wpm(wpm) / 60.0)

    if not is_playing or not ramp_state.captured:
        # Preview: a fresh ramp would start from the base rate
        start = clamp_wpm(base_wpm)
        target = ramp_target(start, ramp_config.target_wpm)
        return ramp_seconds(words_remaining, start, target, ramp_config.duration_seconds)

    start = clamp_wpm(ramp_state.start_wpm)
    target = ramp_target(start, ramp_config.target_wpm)
    duration = ramp_config.duration_seconds
    elapsed = max(0.0, now - ramp_state.start_time)
    if elapsed >= duration:
        return words_remaining / (target / 60.0)

    rate_now = start + (target - start) * (elapsed / duration)
    return ramp_seconds(words_remaining, rate_now, target, duration - elapsed)
