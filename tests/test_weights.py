import numpy as np
import pytest

from stencil_bench.errors import ConfigurationError
from stencil_bench.weights import build_weights, flops_per_round, stencil_size, support


SHAPES = ["star", "compact"]
RADII = [1, 2, 3, 4, 7]


@pytest.mark.parametrize("shape", SHAPES)
@pytest.mark.parametrize("radius", RADII)
def test_weights_sum_to_zero(shape, radius):
    w = build_weights(radius, shape)
    assert w.shape == (2 * radius + 1, 2 * radius + 1)
    assert abs(w.sum()) < 1e-14, f"weights do not sum to zero (sum={w.sum():.3e})"


@pytest.mark.parametrize("shape", SHAPES)
@pytest.mark.parametrize("radius", RADII)
def test_weights_antisymmetric_under_rotation(shape, radius):
    w = build_weights(radius, shape)
    np.testing.assert_array_equal(w, -w[::-1, ::-1])


@pytest.mark.parametrize("shape", SHAPES)
@pytest.mark.parametrize("radius", RADII)
def test_weights_reproduce_ramp_gradient(shape, radius):
    # Applied to a*i + b*j every stencil returns a + b.
    a, b = 1.5, -0.25
    r = radius
    di, dj = np.meshgrid(np.arange(-r, r + 1), np.arange(-r, r + 1), indexing="ij")
    w = build_weights(radius, shape)
    assert np.sum(w * (a * di + b * dj)) == pytest.approx(a + b, abs=1e-13)


def test_star_radius_two_values():
    w = build_weights(2, "star")
    c = 2
    assert w[c, c] == 0.0
    assert w[c + 1, c] == pytest.approx(1.0 / 4.0)
    assert w[c + 2, c] == pytest.approx(1.0 / 8.0)
    assert w[c, c - 1] == pytest.approx(-1.0 / 4.0)
    assert w[c, c - 2] == pytest.approx(-1.0 / 8.0)
    # nothing off the axes
    assert np.count_nonzero(w) == 4 * 2


def test_compact_radius_one_values():
    w = build_weights(1, "compact")
    expected = np.array([
        [-0.25, -0.25, 0.0],
        [-0.25, 0.0, 0.25],
        [0.0, 0.25, 0.25],
    ])
    np.testing.assert_allclose(w, expected)


def test_weights_are_read_only_and_typed():
    w = build_weights(3, "compact", np.float32)
    assert w.dtype == np.float32
    with pytest.raises(ValueError):
        w[0, 0] = 1.0


@pytest.mark.parametrize("radius", [0, -1])
def test_nonpositive_radius_rejected(radius):
    with pytest.raises(ConfigurationError):
        build_weights(radius, "star")


def test_unknown_shape_rejected():
    with pytest.raises(ConfigurationError):
        build_weights(2, "hexagon")


def test_support_order_and_size():
    assert support(1, "star") == [(-1, 0), (0, 0), (1, 0), (0, -1), (0, 1)]
    assert len(support(3, "compact")) == 49
    for shape in SHAPES:
        for r in RADII:
            assert len(support(r, shape)) == stencil_size(r, shape)


def test_flops_per_round():
    # star r=2: 9 points -> 17 flops per interior point, 6x6 interior
    assert flops_per_round(10, 2, "star") == 17 * 36
    assert flops_per_round(10, 1, "compact") == 17 * 64
