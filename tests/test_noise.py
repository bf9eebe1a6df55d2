"""Tests for the permutation table, noise2d and fbm."""

import numpy as np
import pytest

from perlinlab.noise import PerlinNoise, build_permutation, create_generator

SEEDS = [0, 1, 42, -7, 12345.5, 99999]


def test_permutation_reproducible():
    assert build_permutation(42) == build_permutation(42)
    assert create_generator(42).permutation == create_generator(42).permutation


@pytest.mark.parametrize("seed", SEEDS)
def test_permutation_is_permutation(seed):
    perm = build_permutation(seed)
    assert len(perm) == 512
    assert sorted(perm[:256]) == list(range(256))
    assert perm[256:] == perm[:256]


def test_different_seeds_differ():
    assert build_permutation(1) != build_permutation(2)


def test_non_finite_seed_still_permutation():
    perm = build_permutation(float("nan"))
    assert sorted(perm[:256]) == list(range(256))


def test_permutation_is_immutable():
    gen = PerlinNoise(42)
    assert isinstance(gen.permutation, tuple)
    assert gen.seed == 42


@pytest.mark.parametrize("seed", SEEDS)
@pytest.mark.parametrize("point", [(0, 0), (3, -2), (17, 255), (-40, 300)])
def test_noise_zero_at_lattice_points(seed, point):
    gen = create_generator(seed)
    assert gen.noise2d(*point) == 0.0


def test_noise_golden_origin():
    assert create_generator(42).noise2d(0, 0) == 0.0


@pytest.mark.parametrize("seed, prefix", [
    (42, (50, 130, 35, 7, 197, 19, 41, 21, 11, 76, 141, 43, 145, 45, 89, 208)),
    (12345.5, (204, 228, 141, 160, 215, 131, 214, 234,
               170, 221, 2, 121, 192, 65, 17, 21)),
    (1e12, (97, 227, 1, 151, 69, 85, 196, 50, 11, 33, 123, 13, 217, 199, 191, 23)),
    (-7, (69, 250, 152, 113, 103, 33, 7, 209, 45, 158, 83, 89, 192, 17, 196, 37)),
])
def test_permutation_golden_prefix(seed, prefix):
    assert build_permutation(seed)[:16] == prefix


def test_noise_golden_values():
    gen = create_generator(42)
    assert gen.noise2d(0.37, 1.91) == -0.5294079741200477
    assert gen.fbm(0.37, 1.91, 6, 0.55) == -0.39191198877263994
    assert gen.fbm(5.25, -3.5, 4, 0.5) == 0.10572916666666667


def test_seed_beyond_float_range():
    perm = build_permutation(10 ** 400)
    assert perm == build_permutation(float("inf"))
    assert sorted(perm[:256]) == list(range(256))


@pytest.mark.parametrize("seed", [1, 42, 99])
@pytest.mark.parametrize("y", [0.13, 2.5, 7.77])
def test_noise_continuous_across_lattice(seed, y):
    gen = create_generator(seed)
    eps = 1e-4
    for boundary in (1.0, 2.0, 255.0, 256.0):
        left = gen.noise2d(boundary - eps, y)
        right = gen.noise2d(boundary + eps, y)
        assert abs(left - right) < 1e-3
        below = gen.noise2d(y, boundary - eps)
        above = gen.noise2d(y, boundary + eps)
        assert abs(below - above) < 1e-3


def test_noise_varies_inside_cells():
    gen = create_generator(42)
    samples = {gen.noise2d(x + 0.5, y + 0.5) for x in range(8) for y in range(8)}
    assert len(samples) > 1


@pytest.mark.parametrize("persistence", [0.0, 0.3, 0.55, 1.0, 1.7, -0.5])
def test_single_octave_fbm_is_noise(persistence):
    gen = create_generator(42)
    for x, y in [(0.25, 0.75), (3.3, -1.2), (100.01, 7.5)]:
        assert gen.fbm(x, y, 1, persistence) == gen.noise2d(x, y)


def test_fbm_zero_octaves_rejected():
    gen = create_generator(42)
    with pytest.raises(ValueError):
        gen.fbm(0.5, 0.5, 0, 0.5)
    with pytest.raises(ValueError):
        gen.fbm_grid(np.zeros(3), np.zeros(3), 0, 0.5)


def test_fbm_deterministic():
    a = create_generator(7)
    b = create_generator(7)
    for x, y in [(0.1, 0.2), (5.5, 9.25), (-3.7, 12.0)]:
        assert a.fbm(x, y, 6, 0.55) == b.fbm(x, y, 6, 0.55)


@pytest.mark.parametrize("octaves", range(1, 9))
@pytest.mark.parametrize("persistence", [0.0, 0.25, 0.5, 0.75, 1.0])
def test_fbm_normalization_bound(octaves, persistence):
    gen = create_generator(42)
    coords = np.linspace(-8, 8, 161)
    ys, xs = np.meshgrid(coords, coords + 0.037, indexing='ij')
    values = gen.fbm_grid(xs, ys, octaves, persistence)
    assert values.min() >= -1.05
    assert values.max() <= 1.05


@pytest.mark.parametrize("seed", [3, 42])
def test_grid_matches_scalar(seed):
    gen = create_generator(seed)
    xs = np.array([0.0, 0.3, 1.75, -2.2, 300.9, 255.5])
    ys = np.array([0.0, 4.1, -0.6, 9.99, 1.5, 256.25])

    np.testing.assert_allclose(
        gen.noise2d_grid(xs, ys),
        [gen.noise2d(x, y) for x, y in zip(xs, ys)],
        rtol=0, atol=1e-12,
    )
    np.testing.assert_allclose(
        gen.fbm_grid(xs, ys, 5, 0.6),
        [gen.fbm(x, y, 5, 0.6) for x, y in zip(xs, ys)],
        rtol=0, atol=1e-12,
    )


def test_grid_broadcasts():
    gen = create_generator(42)
    xs = np.linspace(0, 4, 10)[np.newaxis, :]
    ys = np.linspace(0, 3, 6)[:, np.newaxis]
    assert gen.fbm_grid(xs, ys, 3, 0.5).shape == (6, 10)
