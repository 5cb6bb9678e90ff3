"""Page-level styling: tiers, colour filters, background and status text."""

from __future__ import annotations

import math
from dataclasses import dataclass

MAX_UNCERTAINTY = 270

# (upper bound, tier) - first bound the score is below wins
UNCERTAINTY_TIERS = ((40, 'low'), (70, 'medium'), (100, 'high'))


@dataclass(frozen=True)
class PageStyle:
    classes: tuple = ()
    hue_rotation: float = 0.0  # degrees
    saturation: float = 1.0
    background: tuple = None  # (r, g, b) or None to keep the default
    image_contrast: float = 100.0  # percent
    image_brightness: float = 100.0  # percent
    name_tilt: float = 0.0  # degrees


def round_half_up(x):
    """Round like a browser does: halves go towards +infinity."""
    return math.floor(x + 0.5)


def uncertainty_tier(combined):
    for bound, tier in UNCERTAINTY_TIERS:
        if combined < bound:
            return tier
    return 'extreme'


def uncertainty_style(combined):
    # tier and filter both follow the same score but are set independently
    return PageStyle(
        classes=('uncertainty-' + uncertainty_tier(combined),),
        hue_rotation=(combined / MAX_UNCERTAINTY) * 180,
        saturation=1 + (combined / MAX_UNCERTAINTY) * 0.5,
    )


def temperature_classes(temp):
    """Hot weather keeps the warm class as well."""
    classes = []
    if temp < 5:
        classes.append('temp-cold')
    elif temp > 20:
        classes.append('temp-warm')
    if temp > 28:
        classes.append('temp-hot')
    return tuple(classes)


def weather_style(reading):
    cover = reading.clouds / 100
    lightness = 250 - reading.clouds * 0.5
    return PageStyle(
        classes=temperature_classes(reading.temp),
        background=(lightness, lightness, lightness),
        image_contrast=100 - cover * 15,
        image_brightness=100 - cover * 10,
        name_tilt=((reading.temp - 12) / 20) * 3,
    )


# (predicate, icon, label) in priority order
WEATHER_CONDITIONS = (
    (lambda w: w.rain > 5, 'storm', 'Stormy'),
    (lambda w: w.rain > 1, 'rain', 'Rainy'),
    (lambda w: w.clouds > 80, 'cloud', 'Cloudy'),
    (lambda w: w.clouds < 20 and w.temp > 18, 'sun', 'Sunny'),
    (lambda w: w.temp < 0, 'snowflake', 'Cold'),
    (lambda w: w.wind_speed > 30, 'wind', 'Windy'),
)
NEUTRAL_WEATHER_ICON = 'sun-behind-cloud'
WIND_NOTE_THRESHOLD = 20


def weather_condition(reading):
    for matches, icon, label in WEATHER_CONDITIONS:
        if matches(reading):
            return icon, label
    return NEUTRAL_WEATHER_ICON, None


def weather_status(reading):
    """Icon name and description, e.g. ('storm', '8°C · Stormy · 45 km/h wind')."""
    icon, label = weather_condition(reading)
    desc = f'{round_half_up(reading.temp)}°C'
    if label:
        desc += f' · {label}'
    if reading.wind_speed > WIND_NOTE_THRESHOLD:
        desc += f' · {round_half_up(reading.wind_speed)} km/h wind'
    return icon, desc
