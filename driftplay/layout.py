"""Map a disorder signal onto element geometry.

Every element keeps its base position (percent of the container). The signal
scatters it along an index-derived angle, tilts it, and orders it by distance
from the centre. Nothing here is random: the same elements and the same
signal always give the same layout.
"""

from __future__ import annotations

import json
import math
from dataclasses import dataclass

PHOTO = 'photo'
PROJECT = 'project'
KINDS = (PROJECT, PHOTO)

# photos sit in the eye of the storm
PHOTO_DAMPING = 0.3
MAX_SCATTER_PX = 150
RAIN_WEIGHT = 0.5


@dataclass(frozen=True)
class Element:
    base_x: float
    base_y: float
    size: float
    index: int
    kind: str = PROJECT


@dataclass(frozen=True)
class LayoutResult:
    left: float
    top: float
    rotation: float
    z_index: int
    width: float


def jitter_seed(index):
    """Pseudo-random but stable value in 0..99 for an element index."""
    return (index * 73) % 100


def z_index(left, top):
    # nearer the centre stacks higher
    return math.floor(100 - math.hypot(left - 50, top - 50))


def _place(element, angle, scatter, rotation, container):
    width, height = container
    dx = math.cos(angle) * scatter
    dy = math.sin(angle) * scatter
    left = element.base_x + dx / width * 100
    top = element.base_y + dy / height * 100
    if element.kind == PHOTO:
        rotation = rotation * PHOTO_DAMPING
    return LayoutResult(left=left, top=top, rotation=rotation, z_index=z_index(left, top), width=element.size)


def map_uncertainty(elements, combined, container):
    """Layout for the clock + scroll variant."""
    scatter = (combined / 100) * MAX_SCATTER_PX
    base_rotation = (combined / 100) * 30 - 15
    results = []
    for el in elements:
        seed = jitter_seed(el.index)
        angle = (seed / 100) * math.pi * 2
        rotation = base_rotation + ((seed % 20) - 10) * 0.3
        results.append(_place(el, angle, scatter, rotation, container))
    return results


def map_wind(elements, reading, container):
    """Layout for the weather variants, before the rain post-pass.

    The seed is added to the wind angle as raw radians rather than scaled to
    a turn; the resulting spread is what the layout has always looked like.
    """
    scatter = reading.wind_speed * 2
    wind_radians = (reading.wind_dir * math.pi) / 180
    base_rotation = (reading.wind_dir / 360) * 30 - 15
    results = []
    for el in elements:
        seed = jitter_seed(el.index)
        rotation = base_rotation + ((seed % 20) - 10) * (reading.wind_speed / 50)
        results.append(_place(el, wind_radians + seed, scatter, rotation, container))
    return results


def apply_rain(results, rain):
    """Rain weighs everything down; z-order keeps its pre-rain value."""
    shift = rain * RAIN_WEIGHT
    return [
        LayoutResult(left=r.left, top=r.top + shift, rotation=r.rotation, z_index=r.z_index, width=r.width)
        for r in results
    ]


def elements_from_records(records):
    """Build Elements from dicts with base_x/base_y/size and optional kind.

    The index is the record's position in the list.
    """
    out = []
    for i, rec in enumerate(records):
        kind = rec.get('kind', PROJECT)
        if kind not in KINDS:
            raise ValueError(f'element {i}: unknown kind {kind!r}')
        out.append(Element(
            base_x=float(rec['base_x']),
            base_y=float(rec['base_y']),
            size=float(rec['size']),
            index=i,
            kind=kind,
        ))
    return out


def load_elements(path):
    with open(path, 'r', encoding='utf-8') as f:
        return elements_from_records(json.load(f))
