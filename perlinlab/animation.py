"""Frame-by-frame animation of the noise field."""

import dataclasses
import logging
from pathlib import Path

from .noise import create_generator
from .renderer import render

logger = logging.getLogger(__name__)

FRAME_STEP = 0.02


class Animator:
    """Renders successive frames while advancing the z offset.

    Frames are rendered synchronously, one at a time, so a caller driving
    this from a timer never has two renders writing the same frame. The
    generator is reused across frames and rebuilt only when the seed
    changes.
    """

    def __init__(self, config, z_offset=0.0, step=FRAME_STEP):
        config.validate()
        self.config = config
        self.z_offset = z_offset
        self.step = step
        self._generator = create_generator(config.seed)

    def update(self, **changes):
        """Replace configuration fields, e.g. ``update(octaves=3)``."""
        config = dataclasses.replace(self.config, **changes)
        config.validate()
        if config.seed != self.config.seed:
            logger.debug("seed changed %r -> %r, rebuilding permutation",
                         self.config.seed, config.seed)
            self._generator = create_generator(config.seed)
        self.config = config

    def current_frame(self):
        """Render at the current offset without advancing."""
        return render(self.config, self.z_offset, generator=self._generator)

    def next_frame(self):
        """Render at the current offset, then advance by one step."""
        image = self.current_frame()
        self.z_offset += self.step
        return image

    def frames(self, count):
        """Yield `count` successive frames."""
        for _ in range(count):
            yield self.next_frame()


def save_animation(frames, path, fps=30):
    """Write frames to an animated GIF.

    Args:
        frames: Iterable of PIL Images.
        path: Output file path.
        fps: Playback rate.

    Returns:
        Number of frames written.
    """
    if fps <= 0:
        raise ValueError(f"fps must be positive, got {fps}")
    images = [frame.convert('RGB') for frame in frames]
    if not images:
        raise ValueError("no frames to save")

    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    images[0].save(
        str(path),
        save_all=True,
        append_images=images[1:],
        duration=max(1, round(1000 / fps)),
        loop=0,
    )
    logger.debug("wrote %d frames to %s", len(images), path)
    return len(images)
