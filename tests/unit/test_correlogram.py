from __future__ import annotations

import numpy as np
import pytest

from ecoreg.models.spatial import correlogram, morans_i


def _lattice(n: int) -> np.ndarray:
    xx, yy = np.meshgrid(np.arange(n, dtype=float), np.arange(n, dtype=float))
    return np.column_stack([xx.ravel(), yy.ravel()])


def test_morans_i_positive_for_smooth_surface():
    coords = _lattice(8)
    values = coords[:, 0] + coords[:, 1]
    d = np.hypot(*(coords[:, None, :] - coords[None, :, :]).transpose(2, 0, 1))
    weights = ((d > 0) & (d <= 1.0)).astype(float)

    assert morans_i(values, weights) > 0.5


def test_morans_i_negative_for_checkerboard():
    coords = _lattice(8)
    values = (coords[:, 0] + coords[:, 1]) % 2
    d = np.hypot(*(coords[:, None, :] - coords[None, :, :]).transpose(2, 0, 1))
    weights = ((d > 0) & (d <= 1.0)).astype(float)

    assert morans_i(values, weights) == pytest.approx(-1.0)


def test_morans_i_degenerate_inputs():
    assert np.isnan(morans_i([1.0, 2.0], np.zeros((2, 2))))
    assert np.isnan(morans_i([3.0, 3.0], np.array([[0.0, 1.0], [1.0, 0.0]])))
    with pytest.raises(ValueError, match='weights'):
        morans_i([1.0, 2.0, 3.0], np.zeros((2, 2)))


def test_correlogram_classes_and_pairs():
    coords = _lattice(5)
    values = coords[:, 0]

    table = correlogram(values, coords, increment=1.0, n_classes=3)

    assert table['lower'].tolist() == [0.0, 1.0, 2.0]
    assert table['upper'].tolist() == [1.0, 2.0, 3.0]
    # rook neighbours on a 5x5 lattice: 2 * 5 * 4 pairs
    assert table['n_pairs'].iloc[0] == 40
    assert table['mean_distance'].iloc[0] == pytest.approx(1.0)
    assert table['morans_i'].iloc[0] > 0


def test_correlogram_empty_class_is_nan():
    coords = np.array([[0.0, 0.0], [1.0, 0.0], [10.0, 0.0]])

    table = correlogram([1.0, 2.0, 3.0], coords, increment=2.0, n_classes=3)

    assert table['n_pairs'].tolist() == [1, 0, 0]
    assert np.isnan(table['morans_i'].iloc[1])
    assert np.isnan(table['mean_distance'].iloc[2])


def test_correlogram_rejects_bad_increment():
    with pytest.raises(ValueError, match='increment'):
        correlogram([1.0, 2.0], [[0.0, 0.0], [1.0, 1.0]], increment=0.0)
