"""Live weather from Open-Meteo.

The fetch runs on a daemon thread so the render loop never waits on the
network. A failed fetch is never fatal: the source falls back to
``FALLBACK_WEATHER`` and rendering carries on.
"""

from __future__ import annotations

import logging
import math
import threading
from datetime import datetime

import requests

from .config import OPEN_METEO_URL
from .signals import FALLBACK_WEATHER, WeatherReading

_LOGGER = logging.getLogger('driftplay.weather')

CURRENT_FIELDS = 'temperature_2m,cloud_cover,wind_speed_10m,wind_direction_10m'


class WeatherFetchError(RuntimeError):
    """Network error or unexpected response shape."""


def _finite(value, key):
    if isinstance(value, bool):
        raise WeatherFetchError(f'field {key!r} is not numeric: {value!r}')
    try:
        number = float(value)
    except (TypeError, ValueError, OverflowError) as exc:
        raise WeatherFetchError(f'field {key!r} is not numeric: {value!r:.40}') from exc
    if not math.isfinite(number):
        raise WeatherFetchError(f'field {key!r} is not finite: {value!r:.40}')
    return number


def _number(mapping, key):
    try:
        value = mapping[key]
    except (KeyError, TypeError) as exc:
        raise WeatherFetchError(f'missing field {key!r}') from exc
    if isinstance(value, str):
        raise WeatherFetchError(f'field {key!r} is not numeric: {value!r}')
    return _finite(value, key)


def parse_forecast(payload, hour):
    """Turn an Open-Meteo forecast body into a WeatherReading.

    Rain is the hourly precipitation at ``hour``; a short or null series
    counts as no rain.
    """
    if not isinstance(payload, dict):
        raise WeatherFetchError('response is not a JSON object')
    current = payload.get('current')
    if not isinstance(current, dict):
        raise WeatherFetchError('response has no "current" block')

    rain = 0.0
    hourly = payload.get('hourly') or {}
    series = hourly.get('precipitation') if isinstance(hourly, dict) else None
    if isinstance(series, list) and 0 <= hour < len(series):
        value = series[hour]
        if value is not None:
            rain = _finite(value, 'precipitation')

    return WeatherReading(
        wind_dir=_number(current, 'wind_direction_10m'),
        wind_speed=_number(current, 'wind_speed_10m'),
        temp=_number(current, 'temperature_2m'),
        clouds=_number(current, 'cloud_cover'),
        rain=rain,
    )


def fetch_weather(latitude, longitude, url=OPEN_METEO_URL, timeout=8.0, hour=None, session=None):
    """Fetch current conditions; raises WeatherFetchError on any failure."""
    params = {
        'latitude': latitude,
        'longitude': longitude,
        'current': CURRENT_FIELDS,
        'hourly': 'precipitation',
        'timezone': 'auto',
    }
    getter = session.get if session is not None else requests.get
    try:
        r = getter(url, params=params, timeout=timeout)
        r.raise_for_status()
        payload = r.json()
    except requests.RequestException as exc:
        raise WeatherFetchError(f'weather request failed: {exc}') from exc
    except ValueError as exc:
        # body was not JSON
        raise WeatherFetchError(f'weather response is not JSON: {exc}') from exc
    if hour is None:
        hour = datetime.now().hour
    return parse_forecast(payload, hour)


class LiveWeatherSource:
    """Holds the last fetched reading and refreshes it in the background.

    ``refresh()`` starts a fetch thread unless one is already running. The
    main loop calls ``poll()`` each frame; it returns the new reading once,
    when a fetch has finished, and None otherwise.
    """

    def __init__(self, settings, fetch=None, spawn=None):
        self.settings = settings
        self._fetch = fetch or fetch_weather
        # tests pass a spawn that runs the target inline
        self._spawn = spawn or self._spawn_thread
        self.reading = WeatherReading()
        self.status = 'No fetch yet'
        self.fetched = False
        self._in_flight = False
        self._holder = {}

    @staticmethod
    def _spawn_thread(target):
        threading.Thread(target=target, daemon=True).start()

    @property
    def in_flight(self):
        return self._in_flight

    def refresh(self):
        if self._in_flight:
            _LOGGER.debug('weather fetch already running, skipping refresh')
            return False
        self._in_flight = True
        self._spawn(self._run)
        return True

    def _run(self):
        s = self.settings
        try:
            reading = self._fetch(s.latitude, s.longitude, url=s.weather_url, timeout=s.http_timeout)
            status = 'Fetched Open-Meteo snapshot.'
            _LOGGER.info('weather fetched: %s', reading)
        except WeatherFetchError as exc:
            reading = FALLBACK_WEATHER
            status = f'Fetch error: {exc}'
            _LOGGER.warning('error fetching weather, using fallback: %s', exc)
        except Exception as exc:
            # the loop waits on this result, so the thread must always hand one back
            reading = FALLBACK_WEATHER
            status = f'Fetch error: {exc!r:.80}'
            _LOGGER.exception('unexpected error fetching weather, using fallback')
        self._holder['result'] = (reading, status)

    def poll(self):
        result = self._holder.pop('result', None)
        if result is None:
            return None
        self.reading, self.status = result
        self.fetched = True
        self._in_flight = False
        return self.reading

    def current_reading(self):
        return self.reading
