"""Signal sources: clock, scroll behaviour and simulated weather.

Each source exposes ``current_reading()`` and returns an immutable record.
The live weather source lives in ``driftplay.weather`` because it talks to
the network.
"""

from __future__ import annotations

import time
from dataclasses import dataclass
from datetime import datetime

SCROLL_WINDOW = 10


@dataclass(frozen=True)
class ClockReading:
    hour: int
    is_weekend: bool


@dataclass(frozen=True)
class ScrollSample:
    speed: float  # px per ms
    direction: int  # +1 down, -1 up
    timestamp: float  # seconds


@dataclass(frozen=True)
class WeatherReading:
    wind_dir: float = 0.0
    wind_speed: float = 0.0
    temp: float = 12.0
    clouds: float = 50.0
    rain: float = 0.0


# used whenever the remote fetch fails
FALLBACK_WEATHER = WeatherReading(wind_dir=180, wind_speed=10, temp=12, clouds=50, rain=0)

# (wind_dir, wind_speed, temp, clouds, rain)
PRESETS = {
    'sunny': WeatherReading(90, 8, 22, 10, 0),
    'cloudy': WeatherReading(180, 12, 15, 85, 0),
    'rainy': WeatherReading(270, 20, 10, 95, 8),
    'stormy': WeatherReading(315, 45, 8, 100, 15),
    'cold': WeatherReading(0, 25, -5, 50, 0),
}

# slider ranges for the simulated controls
CONTROL_RANGES = {
    'wind_dir': (0, 360),
    'wind_speed': (0, 100),
    'temp': (-20, 40),
    'clouds': (0, 100),
    'rain': (0, 20),
}


def _clamp(v, a, b):
    return max(a, min(b, v))


class ClockSource:
    """Time-of-day source. ``now`` is any callable returning a datetime."""

    def __init__(self, now=None):
        self._now = now or datetime.now

    def current_reading(self):
        moment = self._now()
        # Saturday=5, Sunday=6
        return ClockReading(hour=moment.hour, is_weekend=moment.weekday() >= 5)


class ScrollSource:
    """Rolling window of the last few scroll samples.

    Speeds are measured in pixels per millisecond. The first event is measured
    against position 0 at the moment the source was created.
    """

    def __init__(self, clock=None, window=SCROLL_WINDOW):
        self._clock = clock or time.monotonic
        self.window = window
        self._samples = []
        self.last_time = self._clock()
        self.last_y = 0.0

    def record(self, y, now=None):
        now = self._clock() if now is None else now
        # a zero interval would divide by zero
        dt_ms = max(1e-6, (now - self.last_time) * 1000.0)
        speed = abs(y - self.last_y) / dt_ms
        direction = 1 if y > self.last_y else -1
        sample = ScrollSample(speed=speed, direction=direction, timestamp=now)
        self._samples.append(sample)
        if len(self._samples) > self.window:
            del self._samples[0]
        self.last_time = now
        self.last_y = y
        return sample

    def current_reading(self):
        return tuple(self._samples)

    def __len__(self):
        return len(self._samples)


class SimulatedWeatherSource:
    """Weather values driven by on-screen controls and presets."""

    def __init__(self, initial=None):
        self.values = {
            'wind_dir': 45.0,
            'wind_speed': 15.0,
            'temp': 12.0,
            'clouds': 60.0,
            'rain': 0.0,
        }
        if initial is not None:
            self.load(initial)

    def set(self, name, value):
        if name not in CONTROL_RANGES:
            raise KeyError(name)
        lo, hi = CONTROL_RANGES[name]
        self.values[name] = float(_clamp(float(value), lo, hi))
        return self.values[name]

    def nudge(self, name, delta):
        return self.set(name, self.values[name] + delta)

    def load(self, reading):
        for name in CONTROL_RANGES:
            self.set(name, getattr(reading, name))

    def load_preset(self, name):
        """Overwrite every control from a named preset."""
        self.load(PRESETS[name])
        return self.current_reading()

    def current_reading(self):
        return WeatherReading(**self.values)
