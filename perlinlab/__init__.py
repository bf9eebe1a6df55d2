"""perlinlab - Seeded Perlin noise images with color palettes."""

from .noise import PerlinNoise, create_generator
from .palettes import ColorMode, map_color, map_colors
from .renderer import ConfigError, RenderConfig, render, render_array
from .animation import Animator, save_animation

__version__ = "0.1.0"
__all__ = [
    "generate",
    "render",
    "render_array",
    "RenderConfig",
    "ConfigError",
    "PerlinNoise",
    "create_generator",
    "ColorMode",
    "map_color",
    "map_colors",
    "Animator",
    "save_animation",
]


def generate(seed=42, z_offset=0.0, **kwargs):
    """Generate a colored noise image.

    Args:
        seed: Permutation seed; any real number.
        z_offset: Animation phase offset.
        **kwargs: Additional RenderConfig parameters (width, height,
            scale, octaves, persistence, color_mode).

    Returns:
        PIL Image in RGBA mode.
    """
    config = RenderConfig(seed=seed, **kwargs)
    return render(config, z_offset=z_offset)
