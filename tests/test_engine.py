import numpy as np
import pytest
from scipy import ndimage

from stencil_bench.engine import StencilEngine
from stencil_bench.grid import GridBuffers
from stencil_bench.weights import build_weights


def _grid(n, radius, dtype=np.float64, seed=0):
    grid = GridBuffers(n, radius, dtype)
    rng = np.random.default_rng(seed)
    grid.inp[:, :] = rng.normal(size=(n, n)).astype(dtype)
    return grid


def _run(n, radius, shape, tile, use_numba, dtype=np.float64, passes=1, seed=0):
    grid = _grid(n, radius, dtype, seed)
    engine = StencilEngine(build_weights(radius, shape, dtype), radius, shape, n, tile, use_numba)
    for _ in range(passes):
        engine.apply_all(grid)
    return engine, grid.out.copy()


@pytest.mark.parametrize("use_numba", [True, False])
@pytest.mark.parametrize("shape", ["star", "compact"])
def test_engine_matches_scipy_correlate(shape, use_numba):
    n, r = 23, 3
    grid = _grid(n, r)
    w = build_weights(r, shape)
    engine = StencilEngine(w, r, shape, n, n, use_numba)
    engine.apply_all(grid)

    ref = ndimage.correlate(grid.inp, w, mode="constant", cval=0.0)
    inner = slice(r, n - r)
    np.testing.assert_allclose(grid.out[inner, inner], ref[inner, inner], rtol=1e-12, atol=1e-12)


@pytest.mark.parametrize("use_numba", [True, False])
@pytest.mark.parametrize("shape", ["star", "compact"])
@pytest.mark.parametrize("dtype", [np.float32, np.float64])
def test_tiled_matches_untiled(shape, dtype, use_numba):
    n, r = 37, 2
    engine_u, out_u = _run(n, r, shape, n, use_numba, dtype, passes=2)
    for tile in (1, 4, 5, 16):
        engine_t, out_t = _run(n, r, shape, tile, use_numba, dtype, passes=2)
        assert engine_t.tiled and not engine_u.tiled
        np.testing.assert_array_max_ulp(out_t, out_u, maxulp=1)


@pytest.mark.parametrize("shape", ["star", "compact"])
def test_tile_not_smaller_than_interior_is_untiled(shape):
    n, r = 20, 2
    _, out_u = _run(n, r, shape, n, True)
    for tile in (n - 2 * r, n - 2 * r + 1, 1000):
        engine, out = _run(n, r, shape, tile, True)
        assert not engine.tiled
        np.testing.assert_array_equal(out, out_u)


@pytest.mark.parametrize("shape", ["star", "compact"])
@pytest.mark.parametrize("dtype", [np.float32, np.float64])
def test_numba_matches_numpy(shape, dtype):
    n, r = 31, 3
    _, out_nb = _run(n, r, shape, 7, True, dtype, passes=3)
    _, out_np = _run(n, r, shape, 7, False, dtype, passes=3)
    rtol = 1e-5 if dtype == np.float32 else 1e-12
    np.testing.assert_allclose(out_nb, out_np, rtol=rtol, atol=rtol)


def test_halo_untouched_and_output_accumulates():
    n, r = 16, 2
    grid = _grid(n, r)
    engine = StencilEngine(build_weights(r, "star"), r, "star", n, n)
    engine.apply_all(grid)
    first = grid.out.copy()
    engine.apply_all(grid)

    inner = slice(r, n - r)
    np.testing.assert_allclose(grid.out[inner, inner], 2.0 * first[inner, inner], rtol=1e-12, atol=1e-12)
    halo = np.ones((n, n), dtype=bool)
    halo[inner, inner] = False
    assert np.all(grid.out[halo] == 0.0)


@pytest.mark.parametrize("tile", [3, 8, 64])
def test_unit_bands_cover_interior_exactly(tile):
    n, r = 29, 2
    engine = StencilEngine(build_weights(r, "star"), r, "star", n, tile)
    rows = []
    for u in range(engine.unit_count):
        start, stop = engine.unit_rows(u, u + 1)
        assert start < stop
        rows.extend(range(start, stop))
    assert rows == list(range(r, n - r))


def test_banded_apply_equals_full_apply():
    n, r = 25, 2
    w = build_weights(r, "compact")
    engine = StencilEngine(w, r, "compact", n, 4)

    full = _grid(n, r, seed=3)
    engine.apply_all(full)

    banded = _grid(n, r, seed=3)
    count = engine.unit_count
    for u0, u1 in ((0, 2), (2, 3), (3, count)):
        engine.apply(banded, *engine.unit_rows(u0, u1))

    np.testing.assert_array_equal(banded.out, full.out)
