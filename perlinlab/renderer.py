"""Raster rendering of colored fbm noise.

Each pixel (x, y) samples fbm at ``(x / scale + z_offset,
y / scale + z_offset * 0.5)`` and is colored by the configured palette.
"""

import logging
import math
import time
from dataclasses import dataclass

import numpy as np
from PIL import Image

from .noise import create_generator
from .palettes import ColorMode, map_colors

logger = logging.getLogger(__name__)


class ConfigError(ValueError):
    """Raised when a RenderConfig cannot be rendered."""


@dataclass
class RenderConfig:
    """Configuration for a noise render."""

    # Raster
    width: int = 640
    height: int = 480

    # Noise
    scale: float = 80.0
    octaves: int = 6
    persistence: float = 0.55
    seed: float = 42

    # Palette
    color_mode: str = ColorMode.CLOUDS.value

    def validate(self):
        """Check the configuration, raising ConfigError on the first problem."""
        if self.width < 1 or self.height < 1:
            raise ConfigError(
                f"raster must be at least 1x1, got {self.width}x{self.height}")
        if not self.scale > 0:
            raise ConfigError(f"scale must be positive, got {self.scale}")
        if isinstance(self.seed, float) and not math.isfinite(self.seed):
            raise ConfigError(f"seed must be finite, got {self.seed}")
        if int(self.octaves) != self.octaves or self.octaves < 1:
            raise ConfigError(
                f"octaves must be an integer >= 1, got {self.octaves}")
        try:
            ColorMode(self.color_mode)
        except ValueError:
            modes = ", ".join(mode.value for mode in ColorMode)
            raise ConfigError(
                f"unknown color mode {self.color_mode!r} (choose from {modes})"
            ) from None


def noise_field(config, z_offset=0.0, generator=None):
    """Sample fbm for every pixel of the raster.

    Returns:
        float64 array of shape (height, width).
    """
    if generator is None:
        generator = create_generator(config.seed)

    xs = np.arange(config.width, dtype=np.float64) / config.scale + z_offset
    ys = (np.arange(config.height, dtype=np.float64) / config.scale
          + z_offset * 0.5)
    ys_m, xs_m = np.meshgrid(ys, xs, indexing='ij')

    return generator.fbm_grid(xs_m, ys_m, int(config.octaves),
                              config.persistence)


def render_array(config, z_offset=0.0, generator=None):
    """Render the configured noise into an RGBA pixel buffer.

    Args:
        config: RenderConfig to render.
        z_offset: Animation phase; shifts the sampled window diagonally.
        generator: Optional PerlinNoise to reuse. It must have been built
            from config.seed.

    Returns:
        uint8 array of shape (height, width, 4) with alpha fixed at 255.
    """
    config.validate()
    if generator is not None and generator.seed != config.seed:
        raise ConfigError(
            f"generator seed {generator.seed!r} does not match "
            f"config seed {config.seed!r}")

    start = time.perf_counter()
    values = noise_field(config, z_offset, generator)

    rgba = np.empty((config.height, config.width, 4), dtype=np.uint8)
    rgba[:, :, :3] = map_colors(values, config.color_mode)
    rgba[:, :, 3] = 255

    logger.debug("rendered %dx%d %s frame at z=%.3f in %.1f ms",
                 config.width, config.height, config.color_mode, z_offset,
                 (time.perf_counter() - start) * 1000)
    return rgba


def render(config=None, z_offset=0.0, generator=None):
    """Render the configured noise as a PIL Image in RGBA mode."""
    if config is None:
        config = RenderConfig()
    return Image.fromarray(render_array(config, z_offset, generator))
