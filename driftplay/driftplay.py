"""
Drift Play — pygame front end for the disorder layouts.

Modes:
- uncertainty: time of day sets a base disorder, mouse-wheel scrolling adds
  to it once scrolling settles (150 ms).
- live: wind/temp/clouds/rain from Open-Meteo, refreshed every 10 minutes
  (press 'r' to refresh now).
- simulated: the same weather layout driven by on-screen controls.
  Tab selects a control, left/right nudges it, Enter applies, F1-F5 load
  the sunny/cloudy/rainy/stormy/cold presets.

Run:
    pip install -e .
    python -m driftplay --mode live
"""
import argparse
import colorsys
import logging
import sys

try:
    import pygame
except Exception:
    print('pygame not installed. Install with: pip install pygame')
    raise

from .config import configure_logging, load_settings
from .layout import PHOTO, elements_from_records, jitter_seed, load_elements
from .pipeline import UncertaintyPipeline, WeatherPipeline
from .scheduler import Debouncer, FrameScheduler
from .signals import CONTROL_RANGES, PRESETS, ClockSource, ScrollSource, SimulatedWeatherSource
from .style import PageStyle
from .weather import LiveWeatherSource

_LOGGER = logging.getLogger('driftplay.app')

MODES = ('uncertainty', 'live', 'simulated')

# base_x/base_y in percent of the window, size in px
DEFAULT_ELEMENTS = [
    {'base_x': 50, 'base_y': 48, 'size': 220, 'kind': PHOTO},
    {'base_x': 18, 'base_y': 20, 'size': 160},
    {'base_x': 78, 'base_y': 18, 'size': 150},
    {'base_x': 30, 'base_y': 70, 'size': 170},
    {'base_x': 72, 'base_y': 72, 'size': 140},
    {'base_x': 12, 'base_y': 52, 'size': 120},
    {'base_x': 88, 'base_y': 46, 'size': 130},
    {'base_x': 45, 'base_y': 14, 'size': 110},
    {'base_x': 55, 'base_y': 86, 'size': 120},
]

PRESET_KEYS = list(PRESETS)
CONTROL_ORDER = ['wind_dir', 'wind_speed', 'temp', 'clouds', 'rain']
CONTROL_STEP = {'wind_dir': 15, 'wind_speed': 2, 'temp': 1, 'clouds': 5, 'rain': 1}

TEMP_TINTS = {
    'temp-cold': (200, 220, 245),
    'temp-warm': (250, 232, 210),
    'temp-hot': (250, 205, 185),
}
TIER_TINTS = {
    'uncertainty-low': (246, 246, 242),
    'uncertainty-medium': (240, 236, 226),
    'uncertainty-high': (232, 222, 214),
    'uncertainty-extreme': (26, 22, 34),
}
DEFAULT_BG = (245, 245, 245)
SCROLL_STEP = 60
SCROLL_MAX = 4000


def _clamp(v, a, b):
    return max(a, min(b, v))


def tile_color(index):
    """Stable pastel colour for an element."""
    hue = jitter_seed(index) / 100.0
    r, g, b = colorsys.hls_to_rgb(hue, 0.62, 0.45)
    return (int(r * 255), int(g * 255), int(b * 255))


def filter_color(color, style):
    """Apply hue-rotate/saturate then contrast/brightness to an RGB colour."""
    r, g, b = (c / 255.0 for c in color)
    h, l, s = colorsys.rgb_to_hls(r, g, b)
    h = (h + style.hue_rotation / 360.0) % 1.0
    s = _clamp(s * style.saturation, 0.0, 1.0)
    r, g, b = colorsys.hls_to_rgb(h, l, s)
    contrast = style.image_contrast / 100.0
    brightness = style.image_brightness / 100.0

    def adjust(c):
        c = (c - 0.5) * contrast + 0.5
        return int(_clamp(c * brightness, 0.0, 1.0) * 255)

    return (adjust(r), adjust(g), adjust(b))


def background_color(style):
    if style.background is not None:
        base = tuple(int(c) for c in style.background)
    else:
        base = DEFAULT_BG
    for cls in style.classes:
        if cls in TIER_TINTS:
            base = TIER_TINTS[cls]
        elif cls in TEMP_TINTS:
            # temperature tints blend into the cloud-driven grey
            base = tuple((a + b) // 2 for a, b in zip(base, TEMP_TINTS[cls]))
    return base


class PygameSurface:
    """Element provider and style sink backed by the pygame window."""

    def __init__(self, screen, elements):
        self.screen = screen
        self._elements = list(elements)
        self.placed = {}
        self.style = None
        self.icon = ''
        self.text = ''
        self.uncertainty = None
        self.loading = True

    # ElementProvider
    def elements(self):
        return list(self._elements)

    def container_size(self):
        return self.screen.get_size()

    # StyleSink
    def place(self, element, result):
        self.placed[element.index] = (element, result)

    def apply_page_style(self, style):
        self.style = style

    def show_status(self, icon, text):
        self.icon = icon
        self.text = text

    def show_uncertainty(self, value):
        self.uncertainty = value

    def set_loading(self, loading):
        self.loading = loading

    def draw(self, font, big_font):
        style = self.style or PageStyle()
        w, h = self.screen.get_size()
        self.screen.fill(background_color(style))

        # lower z first so the centre ends up on top
        for element, res in sorted(self.placed.values(), key=lambda p: p[1].z_index):
            size = int(res.width)
            tile = pygame.Surface((size, int(size * 0.75)), pygame.SRCALPHA)
            col = filter_color(tile_color(element.index), style)
            tile.fill(col + (235,))
            border = (255, 255, 255) if element.kind == PHOTO else (40, 40, 48)
            pygame.draw.rect(tile, border, tile.get_rect(), 3)
            label = font.render(f'#{element.index} z{res.z_index}', True, (20, 20, 24))
            tile.blit(label, (8, 6))
            rsurf = pygame.transform.rotate(tile, -res.rotation)
            cx = res.left / 100.0 * w
            cy = res.top / 100.0 * h
            self.screen.blit(rsurf, rsurf.get_rect(center=(int(cx), int(cy))))

        # floating name box
        name = big_font.render('Drift Play', True, (20, 20, 24))
        box = pygame.Surface((name.get_width() + 32, name.get_height() + 16), pygame.SRCALPHA)
        box.fill((255, 255, 255, 220))
        box.blit(name, (16, 8))
        rbox = pygame.transform.rotate(box, -style.name_tilt)
        self.screen.blit(rbox, rbox.get_rect(center=(w // 2, 40)))

        if self.loading:
            veil = pygame.Surface((w, h), pygame.SRCALPHA)
            veil.fill((250, 250, 250, 230))
            self.screen.blit(veil, (0, 0))
            txt = big_font.render('Loading...', True, (30, 30, 30))
            self.screen.blit(txt, txt.get_rect(center=(w // 2, h // 2)))


class App:
    def __init__(self, settings, mode, elements, clock=None, now=None, fetch=None, spawn=None):
        if mode not in MODES:
            raise ValueError(f'unknown mode {mode!r}')
        self.settings = settings
        self.mode = mode
        self.elements = elements
        self.scheduler = FrameScheduler(clock=clock)
        # wall clock for the time-of-day score; fetch/spawn for the live source
        self._now = now
        self._fetch = fetch
        self._spawn = spawn
        self.selected = 0
        self.scroll_y = 0

    def setup(self, screen):
        self.surface = PygameSurface(screen, self.elements)
        if self.mode == 'uncertainty':
            self.scroll = ScrollSource(clock=self.scheduler.now)
            self.pipeline = UncertaintyPipeline(self.surface, self.surface, ClockSource(now=self._now), self.scroll)
            self.debouncer = Debouncer(self.scheduler, self.settings.debounce_ms / 1000.0, self.pipeline.recompute)
            self.pipeline.load()
        elif self.mode == 'live':
            self.source = LiveWeatherSource(self.settings, fetch=self._fetch, spawn=self._spawn)
            self.pipeline = WeatherPipeline(self.surface, self.surface, self.source)
            self.source.refresh()
            self.scheduler.call_every(self.settings.refresh_seconds, self.source.refresh)
        else:
            self.source = SimulatedWeatherSource()
            self.pipeline = WeatherPipeline(self.surface, self.surface, self.source)
            self.pipeline.render()

    def handle(self, event):
        if event.type == pygame.MOUSEWHEEL and self.mode == 'uncertainty':
            self.scroll_y = _clamp(self.scroll_y - event.y * SCROLL_STEP, 0, SCROLL_MAX)
            self.pipeline.on_scroll(self.scroll_y)
            self.debouncer.trigger()
        elif event.type == pygame.KEYDOWN:
            if self.mode == 'live' and event.key == pygame.K_r:
                self.source.refresh()
            elif self.mode == 'simulated':
                self._handle_controls(event.key)

    def _handle_controls(self, key):
        if key == pygame.K_TAB:
            self.selected = (self.selected + 1) % len(CONTROL_ORDER)
        elif key in (pygame.K_LEFT, pygame.K_RIGHT):
            name = CONTROL_ORDER[self.selected]
            step = CONTROL_STEP[name] * (1 if key == pygame.K_RIGHT else -1)
            self.source.nudge(name, step)
        elif key in (pygame.K_RETURN, pygame.K_KP_ENTER):
            self.pipeline.render()
        elif pygame.K_F1 <= key <= pygame.K_F5:
            preset = PRESET_KEYS[key - pygame.K_F1]
            _LOGGER.info('loading preset %s', preset)
            self.source.load_preset(preset)
            self.pipeline.render()

    def update(self):
        self.scheduler.tick()
        if self.mode == 'live':
            reading = self.source.poll()
            if reading is not None:
                self.pipeline.render(reading)

    def hud_lines(self):
        s = self.surface
        # pygame's default font has no emoji, so icons are shown by name
        lines = [f'[{s.icon}] {s.text}']
        if self.mode == 'uncertainty':
            lines.append(f'Uncertainty: {s.uncertainty}   scroll y: {self.scroll_y}')
        elif self.mode == 'live':
            lines.append(f'Fetch status: {self.source.status} (press r to refresh)')
        else:
            values = self.source.values
            for i, name in enumerate(CONTROL_ORDER):
                lo, hi = CONTROL_RANGES[name]
                mark = '>' if i == self.selected else ' '
                lines.append(f'{mark} {name}: {values[name]:g}  ({lo}..{hi})')
            lines.append('Enter apply • F1-F5 ' + '/'.join(PRESETS))
        return lines


def run(settings, mode, elements):
    pygame.init()
    screen = pygame.display.set_mode((settings.width, settings.height), pygame.RESIZABLE)
    pygame.display.set_caption('Drift Play — ' + mode)
    clock = pygame.time.Clock()
    font = pygame.font.SysFont(None, 20)
    big_font = pygame.font.SysFont(None, 36)

    app = App(settings, mode, elements)
    app.setup(screen)

    running = True
    while running:
        clock.tick(settings.fps)
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE:
                running = False
            elif event.type == pygame.VIDEORESIZE:
                app.surface.screen = pygame.display.set_mode(event.size, pygame.RESIZABLE)
                # container size changed, layout percentages move with it
                if mode == 'uncertainty':
                    app.pipeline.recompute()
                elif mode == 'simulated' or app.source.fetched:
                    app.pipeline.render()
            else:
                app.handle(event)

        app.update()
        app.surface.draw(font, big_font)

        y = 8
        for ln in app.hud_lines():
            txt = font.render(ln, True, (240, 240, 240), (30, 30, 36))
            app.surface.screen.blit(txt, (8, y))
            y += 20

        pygame.display.flip()

    pygame.quit()


def build_parser():
    p = argparse.ArgumentParser(prog='driftplay', description='Signal-driven scatter layouts.')
    p.add_argument('--mode', choices=MODES, default='uncertainty')
    p.add_argument('--elements', help='JSON file with base_x/base_y/size/kind records')
    p.add_argument('--lat', type=float, help='latitude for live weather')
    p.add_argument('--lon', type=float, help='longitude for live weather')
    p.add_argument('--log-level', help='DEBUG, INFO, WARNING...')
    return p


def main(argv=None):
    args = build_parser().parse_args(argv)
    settings = load_settings().with_overrides(latitude=args.lat, longitude=args.lon, log_level=args.log_level)
    configure_logging(settings.log_level)
    if args.elements:
        elements = load_elements(args.elements)
    else:
        elements = elements_from_records(DEFAULT_ELEMENTS)
    _LOGGER.info('starting %s mode with %d elements', args.mode, len(elements))
    run(settings, args.mode, elements)
    return 0


if __name__ == '__main__':
    sys.exit(main())
