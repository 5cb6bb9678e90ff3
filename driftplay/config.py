"""Runtime configuration and logging setup for driftplay."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, replace

# --- Config
OPEN_METEO_URL = 'https://api.open-meteo.com/v1/forecast'

# Eindhoven
DEFAULT_LATITUDE = 51.4408
DEFAULT_LONGITUDE = 5.4778

_LOG_FORMAT = '%(asctime)s %(levelname)s %(name)s: %(message)s'


@dataclass(frozen=True)
class Settings:
    latitude: float = DEFAULT_LATITUDE
    longitude: float = DEFAULT_LONGITUDE
    weather_url: str = OPEN_METEO_URL
    http_timeout: float = 8.0  # seconds
    refresh_seconds: float = 600.0
    debounce_ms: float = 150.0
    width: int = 1200
    height: int = 800
    fps: int = 60
    log_level: str = 'INFO'

    def with_overrides(self, **changes):
        """Return a copy with every non-None keyword applied."""
        return replace(self, **{k: v for k, v in changes.items() if v is not None})


def _env(environ, name, cast, default):
    raw = environ.get(name)
    if raw is None or raw.strip() == '':
        return default
    try:
        return cast(raw.strip())
    except ValueError as exc:
        raise ValueError(f'{name}={raw!r} is not a valid {cast.__name__}') from exc


def load_settings(environ=None):
    """Build Settings from DRIFTPLAY_* environment variables."""
    env = os.environ if environ is None else environ
    settings = Settings(
        latitude=_env(env, 'DRIFTPLAY_LATITUDE', float, DEFAULT_LATITUDE),
        longitude=_env(env, 'DRIFTPLAY_LONGITUDE', float, DEFAULT_LONGITUDE),
        weather_url=_env(env, 'DRIFTPLAY_WEATHER_URL', str, OPEN_METEO_URL),
        http_timeout=_env(env, 'DRIFTPLAY_HTTP_TIMEOUT', float, 8.0),
        refresh_seconds=_env(env, 'DRIFTPLAY_REFRESH_SECONDS', float, 600.0),
        debounce_ms=_env(env, 'DRIFTPLAY_DEBOUNCE_MS', float, 150.0),
        width=_env(env, 'DRIFTPLAY_WIDTH', int, 1200),
        height=_env(env, 'DRIFTPLAY_HEIGHT', int, 800),
        fps=_env(env, 'DRIFTPLAY_FPS', int, 60),
        log_level=_env(env, 'DRIFTPLAY_LOG_LEVEL', str, 'INFO').upper(),
    )
    if settings.http_timeout <= 0:
        raise ValueError('DRIFTPLAY_HTTP_TIMEOUT must be positive')
    if settings.refresh_seconds <= 0:
        raise ValueError('DRIFTPLAY_REFRESH_SECONDS must be positive')
    if settings.debounce_ms < 0:
        raise ValueError('DRIFTPLAY_DEBOUNCE_MS must not be negative')
    if settings.width <= 0 or settings.height <= 0:
        raise ValueError('window size must be positive')
    return settings


def configure_logging(level='INFO'):
    """Attach a single stream handler to the ``driftplay`` logger."""
    logger = logging.getLogger('driftplay')
    logger.setLevel(level.upper() if isinstance(level, str) else level)
    if not any(h.get_name() == 'driftplay' for h in logger.handlers):
        handler = logging.StreamHandler()
        handler.setFormatter(logging.Formatter(_LOG_FORMAT))
        handler.set_name('driftplay')
        logger.addHandler(handler)
    return logger
