import pygame
import pytest

from conftest import FakeClock, at
from driftplay.config import Settings
from driftplay.driftplay import (
    DEFAULT_ELEMENTS,
    App,
    background_color,
    build_parser,
    filter_color,
    tile_color,
)
from driftplay.layout import elements_from_records
from driftplay.signals import FALLBACK_WEATHER, PRESETS, WeatherReading
from driftplay.style import PageStyle, uncertainty_style, weather_style
from driftplay.weather import WeatherFetchError


@pytest.fixture
def simulated_app():
    app = App(Settings(), 'simulated', elements_from_records(DEFAULT_ELEMENTS))
    app.setup(pygame.Surface((1200, 800)))
    return app


def key(k):
    return pygame.event.Event(pygame.KEYDOWN, key=k)


def test_neutral_filter_keeps_colour():
    col = tile_color(3)
    assert all(abs(a - b) <= 1 for a, b in zip(filter_color(col, PageStyle()), col))


def test_background_follows_clouds_and_tiers():
    assert background_color(PageStyle()) == (245, 245, 245)
    assert background_color(uncertainty_style(190)) == (26, 22, 34)
    bg = background_color(weather_style(PRESETS['cloudy']))
    assert bg == (207, 207, 207)


def test_simulated_app_renders_on_setup(simulated_app):
    surf = simulated_app.surface
    assert not surf.loading
    assert len(surf.placed) == len(DEFAULT_ELEMENTS)


def test_preset_keys_reload_layout(simulated_app):
    simulated_app.handle(key(pygame.K_F4))
    state = simulated_app.pipeline.state
    assert state.weather == PRESETS['stormy']
    assert state.icon == 'storm'


def test_controls_apply_on_enter(simulated_app):
    simulated_app.handle(key(pygame.K_TAB))
    simulated_app.handle(key(pygame.K_RIGHT))
    # wind speed nudged but not yet applied
    assert simulated_app.source.values['wind_speed'] == 17
    assert simulated_app.pipeline.state.weather.wind_speed == 15
    simulated_app.handle(key(pygame.K_RETURN))
    assert simulated_app.pipeline.state.weather.wind_speed == 17


def test_unknown_mode_rejected():
    with pytest.raises(ValueError):
        App(Settings(), 'sonar', [])


def test_parser_defaults():
    args = build_parser().parse_args([])
    assert args.mode == 'uncertainty'
    assert build_parser().parse_args(['--mode', 'live', '--lat', '1.5']).lat == 1.5


def inline(target):
    target()


def live_app(fetch, clock):
    app = App(Settings(), 'live', elements_from_records(DEFAULT_ELEMENTS),
              clock=clock, fetch=fetch, spawn=inline)
    app.setup(pygame.Surface((1200, 800)))
    return app


def test_live_setup_fetches_and_refreshes_every_ten_minutes():
    clock = FakeClock()
    calls = []
    reading = WeatherReading(120, 18, 9, 70, 0.5)

    def fetch(*a, **kw):
        calls.append(clock())
        return reading

    app = live_app(fetch, clock)
    assert len(calls) == 1
    assert app.surface.loading

    app.update()
    assert not app.surface.loading
    assert app.pipeline.state.weather == reading

    clock.advance(599)
    app.update()
    assert len(calls) == 1
    clock.advance(1)
    app.update()
    assert len(calls) == 2


def test_live_fetch_failure_still_clears_loading():
    def fetch(*a, **kw):
        raise WeatherFetchError('offline')

    app = live_app(fetch, FakeClock())
    app.update()
    assert not app.surface.loading
    assert app.pipeline.state.weather == FALLBACK_WEATHER
    assert len(app.surface.placed) == len(DEFAULT_ELEMENTS)


def test_manual_refresh_key():
    calls = []
    app = live_app(lambda *a, **kw: calls.append(1) or FALLBACK_WEATHER, FakeClock())
    app.update()
    app.handle(key(pygame.K_r))
    assert len(calls) == 2


def test_wheel_recomputes_after_quiet_period():
    clock = FakeClock()
    app = App(Settings(), 'uncertainty', elements_from_records(DEFAULT_ELEMENTS),
              clock=clock, now=lambda: at(10))
    app.setup(pygame.Surface((1200, 800)))
    assert app.pipeline.state.combined == pytest.approx(21.0)

    for i in range(10):
        clock.advance(0.03)
        app.handle(pygame.event.Event(pygame.MOUSEWHEEL, x=0, y=-3 if i % 2 == 0 else 2))
        app.update()
    assert len(app.scroll) == 10
    assert app.debouncer.pending
    assert app.pipeline.state.scroll_score == 0

    clock.advance(0.2)
    app.update()
    assert not app.debouncer.pending
    assert app.pipeline.state.scroll_score > 0
    assert app.pipeline.state.combined > 21.0
