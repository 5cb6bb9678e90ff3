"""Shared fixtures: element sets, a recording style sink and a fake clock."""

from __future__ import annotations

import sys
from datetime import datetime
from pathlib import Path

import pytest

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from driftplay.layout import PHOTO, elements_from_records
from driftplay.pipeline import StaticElements

CONTAINER = (1200, 800)


class RecordingSink:
    """In-memory stand-in for the rendering surface."""

    def __init__(self):
        self.placed = {}
        self.style = None
        self.status = None
        self.uncertainty = None
        self.loading = True
        self.calls = []

    def place(self, element, result):
        self.placed[element.index] = result
        self.calls.append('place')

    def apply_page_style(self, style):
        self.style = style
        self.calls.append('style')

    def show_status(self, icon, text):
        self.status = (icon, text)
        self.calls.append('status')

    def show_uncertainty(self, value):
        self.uncertainty = value
        self.calls.append('uncertainty')

    def set_loading(self, loading):
        self.loading = loading
        self.calls.append('loading')


class FakeClock:
    def __init__(self, start=1000.0):
        self.t = start

    def __call__(self):
        return self.t

    def advance(self, seconds):
        self.t += seconds
        return self.t


@pytest.fixture
def elements():
    return elements_from_records([
        {'base_x': 50, 'base_y': 48, 'size': 220, 'kind': PHOTO},
        {'base_x': 18, 'base_y': 20, 'size': 160},
        {'base_x': 78, 'base_y': 18, 'size': 150},
        {'base_x': 30, 'base_y': 70, 'size': 170},
        {'base_x': 72, 'base_y': 72, 'size': 140},
    ])


@pytest.fixture
def provider(elements):
    return StaticElements(elements, CONTAINER)


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def fake_clock():
    return FakeClock()


def at(hour, weekday=0):
    """datetime on a Monday (weekday=0) ... Sunday (weekday=6) of a fixed week."""
    # 2024-01-01 was a Monday
    return datetime(2024, 1, 1 + weekday, hour, 30)
