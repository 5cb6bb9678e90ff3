"""Fold raw readings into uncertainty scores."""

from __future__ import annotations

from dataclasses import dataclass

MIN_SCROLL_SAMPLES = 3
CLOCK_WEIGHT = 0.7
SCROLL_WEIGHT = 0.3


@dataclass(frozen=True)
class ClockScore:
    score: float
    icon: str
    message: str


NEUTRAL_CLOCK = ClockScore(50, 'clock', '')

# (start, end, weekend, score) - weekend None matches either; first row wins
CLOCK_TABLE = (
    (2, 6, None, ClockScore(270, 'moon', 'You are here when the world is asleep')),
    (23, 24, None, ClockScore(130, 'night-city', 'Late night exploration')),
    (0, 2, None, ClockScore(130, 'night-city', 'Late night exploration')),
    (6, 9, None, ClockScore(90, 'sunrise', 'Early riser')),
    (9, 17, False, ClockScore(30, 'briefcase', 'Standard browsing hours')),
    (9, 17, True, ClockScore(70, 'sun', 'Weekend browsing')),
    (17, 23, False, ClockScore(70, 'dusk', 'After work exploration')),
    (17, 23, True, ClockScore(60, 'dusk', 'Weekend evening')),
)


def clock_uncertainty(reading):
    for start, end, weekend, score in CLOCK_TABLE:
        if start <= reading.hour < end and (weekend is None or weekend == reading.is_weekend):
            return score
    return NEUTRAL_CLOCK


def scroll_volatility(samples):
    """Score 0-100 for how erratic recent scrolling was.

    Speed variance contributes up to 50, direction flips up to 50. Fewer than
    three samples is not enough to judge and scores 0.
    """
    n = len(samples)
    if n < MIN_SCROLL_SAMPLES:
        return 0
    speeds = [s.speed for s in samples]
    mean = sum(speeds) / n
    variance = sum((v - mean) ** 2 for v in speeds) / n
    flips = sum(1 for a, b in zip(samples, samples[1:]) if a.direction != b.direction)
    speed_volatility = min(variance * 10, 50)
    direction_volatility = (flips / n) * 50
    return min(speed_volatility + direction_volatility, 100)


def combine(clock_score, scroll_score):
    # clock dominates, scroll perturbs; can exceed 100 late at night
    return clock_score * CLOCK_WEIGHT + scroll_score * SCROLL_WEIGHT
