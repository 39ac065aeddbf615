"""Shared fixtures: a controllable clock and an `after`/`after_cancel` scheduler.

The scheduler mimics the part of the Tk widget API the pacing clock uses.
Time is kept in integer milliseconds so due times never drift.
"""

import pytest

from pacing_clock import PacingClock


class FakeTime:
    def __init__(self, ms=0):
        self.ms = ms

    def __call__(self):
        return self.ms / 1000.0


class FakeScheduler:
    def __init__(self, fake_time):
        self.time = fake_time
        self.jobs = {}
        self.next_id = 0
        self.calls = 0

    def after(self, ms, func):
        self.next_id += 1
        job_id = f"after#{self.next_id}"
        self.jobs[job_id] = (self.time.ms + ms, self.next_id, func)
        return job_id

    def after_cancel(self, job_id):
        self.jobs.pop(job_id, None)

    def pending(self, func_name=None):
        funcs = [func for _, _, func in self.jobs.values()]
        if func_name is None:
            return len(funcs)
        return sum(1 for f in funcs if f.__name__ == func_name)

    def run_until(self, target_ms):
        """Runs due jobs in order, jumping the clock to each due time."""
        while self.jobs:
            job_id, (due, _, func) = min(self.jobs.items(), key=lambda item: item[1][:2])
            if due > target_ms:
                break
            del self.jobs[job_id]
            self.time.ms = due
            self.calls += 1
            func()
        self.time.ms = target_ms


@pytest.fixture
def fake_time():
    return FakeTime()


@pytest.fixture
def scheduler(fake_time):
    return FakeScheduler(fake_time)


@pytest.fixture
def make_clock(scheduler, fake_time):
    def _make(text="", base_wpm=300, ramp_config=None, **kwargs):
        clock = PacingClock(scheduler, base_wpm=base_wpm, ramp_config=ramp_config,
                            time_source=fake_time, **kwargs)
        clock.set_text(text)
        return clock
    return _make
