"""Wire sources, reducer, mapper and styler into per-variant pipelines.

A pipeline reads elements from an ``ElementProvider`` and writes everything
it computes to a ``StyleSink``. The pygame window is one implementation of
both; tests use in-memory ones.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field, replace
from typing import Protocol

from .layout import apply_rain, map_uncertainty, map_wind
from .reducer import NEUTRAL_CLOCK, clock_uncertainty, combine, scroll_volatility
from .style import PageStyle, round_half_up, uncertainty_style, weather_status, weather_style

_LOGGER = logging.getLogger('driftplay.pipeline')


class ElementProvider(Protocol):
    def elements(self): ...

    def container_size(self): ...


class StyleSink(Protocol):
    def place(self, element, result): ...

    def apply_page_style(self, style): ...

    def show_status(self, icon, text): ...

    def show_uncertainty(self, value): ...

    def set_loading(self, loading): ...


class StaticElements:
    """Fixed element collection inside a container of known pixel size."""

    def __init__(self, elements, container):
        self._elements = list(elements)
        self.container = container

    def elements(self):
        return list(self._elements)

    def container_size(self):
        return self.container


@dataclass(frozen=True)
class DisplayState:
    loading: bool = True
    icon: str = ''
    text: str = ''
    clock_score: float = 0.0
    scroll_score: float = 0.0
    combined: float = 0.0
    weather: object = None
    layout: tuple = ()
    style: PageStyle = field(default_factory=PageStyle)


def _render(provider, sink, layout_fn):
    elements = provider.elements()
    results = layout_fn(elements, provider.container_size())
    for el, res in zip(elements, results):
        sink.place(el, res)
    return tuple(results)


class UncertaintyPipeline:
    """Clock + scroll variant.

    The clock score is taken once on ``load()`` and kept until
    ``refresh_clock()``; scroll samples accumulate between recomputes.
    """

    def __init__(self, provider, sink, clock, scroll):
        self.provider = provider
        self.sink = sink
        self.clock = clock
        self.scroll = scroll
        self.clock_score = NEUTRAL_CLOCK
        self.state = DisplayState()

    def refresh_clock(self):
        self.clock_score = clock_uncertainty(self.clock.current_reading())
        self.sink.show_status(self.clock_score.icon, self.clock_score.message)
        return self.clock_score

    def load(self):
        self.refresh_clock()
        state = self.recompute()
        self.sink.set_loading(False)
        self.state = replace(state, loading=False)
        return self.state

    def on_scroll(self, y, now=None):
        """Record a scroll position; the caller debounces ``recompute``."""
        return self.scroll.record(y, now)

    def recompute(self):
        scroll_score = scroll_volatility(self.scroll.current_reading())
        combined = combine(self.clock_score.score, scroll_score)
        layout = _render(self.provider, self.sink, lambda els, box: map_uncertainty(els, combined, box))
        style = uncertainty_style(combined)
        self.sink.apply_page_style(style)
        self.sink.show_uncertainty(round_half_up(combined))
        _LOGGER.debug('uncertainty recomputed: clock=%s scroll=%.2f combined=%.2f',
                      self.clock_score.score, scroll_score, combined)
        self.state = DisplayState(
            loading=self.state.loading,
            icon=self.clock_score.icon,
            text=self.clock_score.message,
            clock_score=self.clock_score.score,
            scroll_score=scroll_score,
            combined=combined,
            layout=layout,
            style=style,
        )
        return self.state


class WeatherPipeline:
    """Wind, temperature, clouds and rain variant.

    Works with any source exposing ``current_reading()``: the live Open-Meteo
    source or the simulated controls.
    """

    def __init__(self, provider, sink, source):
        self.provider = provider
        self.sink = sink
        self.source = source
        self.state = DisplayState()

    def render(self, reading=None):
        reading = self.source.current_reading() if reading is None else reading

        def layout_fn(elements, box):
            return apply_rain(map_wind(elements, reading, box), reading.rain)

        layout = _render(self.provider, self.sink, layout_fn)
        style = weather_style(reading)
        self.sink.apply_page_style(style)
        icon, text = weather_status(reading)
        self.sink.show_status(icon, text)
        self.sink.set_loading(False)
        _LOGGER.debug('weather layout applied: %s', reading)
        self.state = DisplayState(
            loading=False,
            icon=icon,
            text=text,
            weather=reading,
            layout=layout,
            style=style,
        )
        return self.state
