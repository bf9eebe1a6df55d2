"""Seeded 2D gradient (Perlin) noise and fractal Brownian motion."""

import math

import numpy as np

TABLE_SIZE = 256

# Linear-congruential generator driving the permutation shuffle
LCG_MULTIPLIER = 1103515245
LCG_INCREMENT = 12345
LCG_MASK = 0x7FFFFFFF


def _lcg_next(state):
    """Advance the shuffle generator by one step.

    The product is taken in double precision and truncated to an integer
    before masking, so large states lose their low bits. Tables built from
    the same seed are identical on every platform.
    """
    value = state * float(LCG_MULTIPLIER) + float(LCG_INCREMENT)
    if not math.isfinite(value):
        return 0
    return int(value) & LCG_MASK


def build_permutation(seed):
    """Build the 512-entry permutation table for a seed.

    The identity sequence 0..255 is Fisher-Yates shuffled with the LCG
    above, then repeated once so lookups at index + 1 never wrap.

    Args:
        seed: Any real number. Integers too large for a double behave
            like an infinite seed.

    Returns:
        Tuple of 512 ints in [0, 255].
    """
    perm = list(range(TABLE_SIZE))
    try:
        state = float(seed)
    except OverflowError:
        # The first LCG step maps any infinity to state 0
        state = math.inf
    for i in range(TABLE_SIZE - 1, 0, -1):
        state = _lcg_next(state)
        j = state % (i + 1)
        perm[i], perm[j] = perm[j], perm[i]
    return tuple(perm + perm)


def _fade(t):
    """Perlin fade function: 6t^5 - 15t^4 + 10t^3."""
    return t * t * t * (t * (t * 6 - 15) + 10)


def _lerp(a, b, t):
    return a + t * (b - a)


def _grad(hash_, x, y):
    """Dot product with one of four diagonal gradients picked by hash & 3."""
    h = hash_ & 3
    u = x if h < 2 else y
    v = y if h < 2 else x
    return (u if (h & 1) == 0 else -u) + (v if (h & 2) == 0 else -v)


def _grad_array(hash_, x, y):
    h = hash_ & 3
    u = np.where(h < 2, x, y)
    v = np.where(h < 2, y, x)
    return (np.where((h & 1) == 0, u, -u)
            + np.where((h & 2) == 0, v, -v))


def _check_octaves(octaves):
    if octaves < 1:
        raise ValueError(f"octaves must be >= 1, got {octaves}")


class PerlinNoise:
    """Gradient noise over an immutable, seed-derived permutation table.

    The table is the only state and is fixed at construction; build a new
    instance to change the seed. Instances are safe to share between
    threads rendering different parts of an image.
    """

    def __init__(self, seed=42):
        self._seed = seed
        self._perm = build_permutation(seed)
        self._table = np.array(self._perm, dtype=np.int64)
        self._table.setflags(write=False)

    @property
    def seed(self):
        return self._seed

    @property
    def permutation(self):
        """The 512-entry permutation table as a tuple."""
        return self._perm

    def __repr__(self):
        return f"PerlinNoise(seed={self._seed!r})"

    def noise2d(self, x, y):
        """Sample 2D gradient noise at (x, y).

        Returns a float in roughly [-1, 1]. The result is not clipped.
        Every integer lattice point samples to exactly 0.
        """
        p = self._perm
        fx = math.floor(x)
        fy = math.floor(y)
        xi = fx & 255
        yi = fy & 255
        x -= fx
        y -= fy

        u = _fade(x)
        v = _fade(y)

        a = p[xi] + yi
        b = p[xi + 1] + yi

        return _lerp(
            _lerp(_grad(p[a], x, y), _grad(p[b], x - 1, y), u),
            _lerp(_grad(p[a + 1], x, y - 1), _grad(p[b + 1], x - 1, y - 1), u),
            v,
        )

    def fbm(self, x, y, octaves, persistence):
        """Fractal Brownian motion: summed octaves of noise2d.

        Args:
            x, y: Sample coordinates in noise space.
            octaves: Number of layers, at least 1.
            persistence: Amplitude multiplier between octaves. Values
                outside [0, 1] are accepted.

        Returns:
            Sum normalized by total amplitude, roughly in [-1, 1].
        """
        _check_octaves(octaves)
        total = 0.0
        frequency = 1.0
        amplitude = 1.0
        max_value = 0.0

        for _ in range(octaves):
            total += self.noise2d(x * frequency, y * frequency) * amplitude
            max_value += amplitude
            amplitude *= persistence
            frequency *= 2

        return total / max_value

    def noise2d_grid(self, xs, ys):
        """Vectorized noise2d over broadcastable coordinate arrays."""
        p = self._table
        xs = np.asarray(xs, dtype=np.float64)
        ys = np.asarray(ys, dtype=np.float64)

        fx = np.floor(xs)
        fy = np.floor(ys)
        xi = fx.astype(np.int64) & 255
        yi = fy.astype(np.int64) & 255
        x = xs - fx
        y = ys - fy

        u = _fade(x)
        v = _fade(y)

        a = p[xi] + yi
        b = p[xi + 1] + yi

        return _lerp(
            _lerp(_grad_array(p[a], x, y), _grad_array(p[b], x - 1, y), u),
            _lerp(_grad_array(p[a + 1], x, y - 1),
                  _grad_array(p[b + 1], x - 1, y - 1), u),
            v,
        )

    def fbm_grid(self, xs, ys, octaves, persistence):
        """Vectorized fbm over broadcastable coordinate arrays.

        Returns an array of the broadcast shape of xs and ys.
        """
        _check_octaves(octaves)
        xs = np.asarray(xs, dtype=np.float64)
        ys = np.asarray(ys, dtype=np.float64)

        total = np.zeros(np.broadcast(xs, ys).shape, dtype=np.float64)
        frequency = 1.0
        amplitude = 1.0
        max_value = 0.0

        for _ in range(octaves):
            total += self.noise2d_grid(xs * frequency, ys * frequency) * amplitude
            max_value += amplitude
            amplitude *= persistence
            frequency *= 2

        return total / max_value


def create_generator(seed):
    """Return a PerlinNoise for seed. Equal seeds give identical tables."""
    return PerlinNoise(seed)
