import pytest

from driftplay.signals import (
    FALLBACK_WEATHER,
    PRESETS,
    ScrollSource,
    SimulatedWeatherSource,
    WeatherReading,
)


def test_scroll_speed_and_direction(fake_clock):
    src = ScrollSource(clock=fake_clock)
    fake_clock.advance(0.1)
    s = src.record(200)
    # 200px over 100ms
    assert s.speed == pytest.approx(2.0)
    assert s.direction == 1
    fake_clock.advance(0.05)
    s = src.record(150)
    assert s.speed == pytest.approx(1.0)
    assert s.direction == -1


def test_unchanged_position_counts_as_up(fake_clock):
    src = ScrollSource(clock=fake_clock)
    fake_clock.advance(0.1)
    assert src.record(0).direction == -1


def test_zero_interval_does_not_divide_by_zero(fake_clock):
    src = ScrollSource(clock=fake_clock)
    s = src.record(10)
    assert s.speed > 0


def test_window_keeps_last_ten(fake_clock):
    src = ScrollSource(clock=fake_clock)
    for i in range(15):
        fake_clock.advance(0.02)
        src.record(i * 10)
    window = src.current_reading()
    assert len(window) == 10
    assert window[0].timestamp == pytest.approx(1000 + 6 * 0.02)
    assert window[-1].timestamp == pytest.approx(fake_clock())


def test_presets_overwrite_all_controls():
    src = SimulatedWeatherSource()
    src.set('temp', 30)
    reading = src.load_preset('stormy')
    assert reading == WeatherReading(315, 45, 8, 100, 15)
    assert src.current_reading() == PRESETS['stormy']


def test_unknown_preset_raises():
    with pytest.raises(KeyError):
        SimulatedWeatherSource().load_preset('hail')


def test_controls_are_clamped():
    src = SimulatedWeatherSource()
    assert src.set('clouds', 140) == 100
    assert src.set('wind_dir', -10) == 0
    assert src.nudge('rain', 3) == 3
    with pytest.raises(KeyError):
        src.set('humidity', 10)


def test_simulated_defaults():
    assert SimulatedWeatherSource().current_reading() == WeatherReading(45, 15, 12, 60, 0)


def test_fallback_tuple():
    assert FALLBACK_WEATHER == WeatherReading(wind_dir=180, wind_speed=10, temp=12, clouds=50, rain=0)
