"""Color palettes mapping noise samples in [-1, 1] to RGB.

Each palette works on ``normalized = (value + 1) / 2``. The normalized
value is clamped to [0, 1] first, so noise excursions past +/-1 reuse the
end colors and every channel stays a valid byte.
"""

import math
from collections import namedtuple
from enum import Enum

import numpy as np


class ColorMode(str, Enum):
    GRAYSCALE = "grayscale"
    TERRAIN = "terrain"
    HEAT = "heat"
    NEON = "neon"
    CLOUDS = "clouds"


FALLBACK_COLOR = (128, 128, 128)

ColorStop = namedtuple("ColorStop", ["position", "color"])

# Band: applies from `start` up to the next band's start. Each channel is
# (base, slope) and evaluates to floor(base + t * slope), t = (n - start) / width.
Band = namedtuple("Band", ["start", "width", "channels"])

TERRAIN_BANDS = (
    # Deep to shallow water
    Band(0.0, 0.35, ((20, 40), (60, 80), (120, 80))),
    # Beach
    Band(0.35, 0.1, ((194, 20), (178, 10), (128, -20))),
    # Grass and forest
    Band(0.45, 0.2, ((34, 20), (139, -40), (34, 10))),
    # Rock
    Band(0.65, 0.15, ((90, 40), (80, 40), (70, 40))),
    # Snow
    Band(0.8, 0.2, ((200, 55), (200, 55), (210, 45))),
)

HEAT_BANDS = (
    Band(0.0, 0.25, ((0, 0), (0, 0), (0, 255))),
    Band(0.25, 0.25, ((0, 0), (0, 255), (255, -128))),
    Band(0.5, 0.25, ((0, 255), (255, 0), (127, -127))),
    Band(0.75, 0.25, ((255, 0), (255, -255), (0, 0))),
)

# Sunset clouds: deep purple through orange and pink to cream
CLOUD_STOPS = (
    ColorStop(0.0, (25, 20, 60)),
    ColorStop(0.15, (50, 30, 90)),
    ColorStop(0.3, (100, 50, 140)),
    ColorStop(0.4, (180, 80, 120)),
    ColorStop(0.5, (255, 120, 80)),
    ColorStop(0.6, (255, 160, 100)),
    ColorStop(0.7, (240, 170, 150)),
    ColorStop(0.8, (220, 180, 180)),
    ColorStop(0.9, (210, 190, 200)),
    ColorStop(1.0, (230, 210, 220)),
)

NEON_SATURATION = 1.0


def _mode_key(mode):
    return mode.value if isinstance(mode, ColorMode) else mode


def _normalize(value):
    return min(max((value + 1) / 2, 0.0), 1.0)


def _grayscale(n):
    gray = math.floor(n * 255)
    return (gray, gray, gray)


def _banded(n, bands):
    band = bands[0]
    for candidate in bands[1:]:
        if n < candidate.start:
            break
        band = candidate
    t = (n - band.start) / band.width
    return tuple(math.floor(base + t * slope) for base, slope in band.channels)


def _terrain(n):
    return _banded(n, TERRAIN_BANDS)


def _heat(n):
    return _banded(n, HEAT_BANDS)


def _neon(n):
    """HSL sweep: hue follows n, lightness rises from 0.5 to 0.7."""
    hue = n * 360
    lightness = 0.5 + n * 0.2
    c = (1 - abs(2 * lightness - 1)) * NEON_SATURATION
    x = c * (1 - abs((hue / 60) % 2 - 1))
    m = lightness - c / 2

    if hue < 60:
        r, g, b = c, x, 0
    elif hue < 120:
        r, g, b = x, c, 0
    elif hue < 180:
        r, g, b = 0, c, x
    elif hue < 240:
        r, g, b = 0, x, c
    elif hue < 300:
        r, g, b = x, 0, c
    else:
        r, g, b = c, 0, x

    return (
        math.floor((r + m) * 255),
        math.floor((g + m) * 255),
        math.floor((b + m) * 255),
    )


def _clouds(n):
    """Smoothstep interpolation between the bracketing CLOUD_STOPS."""
    lower_idx = 0
    for i in range(len(CLOUD_STOPS) - 1):
        if CLOUD_STOPS[i].position <= n <= CLOUD_STOPS[i + 1].position:
            lower_idx = i
            break

    lower = CLOUD_STOPS[lower_idx]
    upper = CLOUD_STOPS[min(lower_idx + 1, len(CLOUD_STOPS) - 1)]
    span = upper.position - lower.position
    t = (n - lower.position) / span if span > 0 else 0.0
    smooth = t * t * (3 - 2 * t)

    return tuple(
        math.floor(lo + (hi - lo) * smooth)
        for lo, hi in zip(lower.color, upper.color)
    )


_HANDLERS = {
    ColorMode.GRAYSCALE.value: _grayscale,
    ColorMode.TERRAIN.value: _terrain,
    ColorMode.HEAT.value: _heat,
    ColorMode.NEON.value: _neon,
    ColorMode.CLOUDS.value: _clouds,
}


def map_color(value, mode):
    """Map a noise sample to an (r, g, b) tuple of ints in [0, 255].

    Args:
        value: Noise sample, nominally in [-1, 1].
        mode: A ColorMode or its string value. Unknown modes give
            neutral gray instead of an error.
    """
    handler = _HANDLERS.get(_mode_key(mode))
    if handler is None:
        return FALLBACK_COLOR
    return handler(_normalize(value))


# ---------------------------------------------------------------------------
# Vectorized palettes
# ---------------------------------------------------------------------------

def _grayscale_array(n):
    gray = np.floor(n * 255)
    return np.stack([gray, gray, gray], axis=-1)


def _banded_array(n, bands):
    starts = np.array([band.start for band in bands])
    widths = np.array([band.width for band in bands])
    channels = np.array([band.channels for band in bands], dtype=np.float64)

    idx = np.searchsorted(starts, n, side='right') - 1
    idx = np.clip(idx, 0, len(bands) - 1)
    t = (n - starts[idx]) / widths[idx]
    base = channels[idx, :, 0]
    slope = channels[idx, :, 1]
    return np.floor(base + t[..., np.newaxis] * slope)


def _neon_array(n):
    hue = n * 360
    lightness = 0.5 + n * 0.2
    c = (1 - np.abs(2 * lightness - 1)) * NEON_SATURATION
    x = c * (1 - np.abs((hue / 60) % 2 - 1))
    m = lightness - c / 2
    zero = np.zeros_like(n)

    sectors = [hue < 60, hue < 120, hue < 180, hue < 240, hue < 300]
    r = np.select(sectors, [c, x, zero, zero, x], default=c)
    g = np.select(sectors, [x, c, c, x, zero], default=zero)
    b = np.select(sectors, [zero, zero, x, c, c], default=x)

    return np.floor(np.stack([r + m, g + m, b + m], axis=-1) * 255)


def _clouds_array(n):
    positions = np.array([stop.position for stop in CLOUD_STOPS])
    colors = np.array([stop.color for stop in CLOUD_STOPS], dtype=np.float64)

    # First bracket with positions[i] <= n <= positions[i + 1]
    lower_idx = np.clip(np.searchsorted(positions, n, side='left') - 1,
                        0, len(CLOUD_STOPS) - 2)
    lo_pos = positions[lower_idx]
    span = positions[lower_idx + 1] - lo_pos
    safe_span = np.where(span > 0, span, 1.0)
    t = np.where(span > 0, (n - lo_pos) / safe_span, 0.0)
    smooth = t * t * (3 - 2 * t)

    lo = colors[lower_idx]
    hi = colors[lower_idx + 1]
    return np.floor(lo + (hi - lo) * smooth[..., np.newaxis])


_ARRAY_HANDLERS = {
    ColorMode.GRAYSCALE.value: _grayscale_array,
    ColorMode.TERRAIN.value: lambda n: _banded_array(n, TERRAIN_BANDS),
    ColorMode.HEAT.value: lambda n: _banded_array(n, HEAT_BANDS),
    ColorMode.NEON.value: _neon_array,
    ColorMode.CLOUDS.value: _clouds_array,
}


def map_colors(values, mode):
    """Vectorized map_color.

    Args:
        values: Array of noise samples of any shape.
        mode: A ColorMode or its string value.

    Returns:
        uint8 array of shape values.shape + (3,).
    """
    values = np.asarray(values, dtype=np.float64)
    handler = _ARRAY_HANDLERS.get(_mode_key(mode))
    if handler is None:
        out = np.empty(values.shape + (3,), dtype=np.uint8)
        out[...] = FALLBACK_COLOR
        return out

    n = np.clip((values + 1) / 2, 0.0, 1.0)
    rgb = handler(n)
    return np.clip(rgb, 0, 255).astype(np.uint8)
