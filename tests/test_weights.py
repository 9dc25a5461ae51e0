from __future__ import annotations

import pytest

from jobmate import weights


def test_canonical_weights_sum_to_one():
    assert sum(weights.DIMENSION_WEIGHTS.values()) == pytest.approx(1.0)


def test_canonical_weights_are_read_only():
    with pytest.raises(TypeError):
        weights.DIMENSION_WEIGHTS[weights.SKILLS] = 0.5  # type: ignore[index]


def test_normalized_subset_sums_to_one():
    w = weights.normalized([weights.SKILLS, weights.LOCATION, weights.PRICE, weights.REPUTATION])
    assert sum(w.values()) == pytest.approx(1.0)
    assert w[weights.SKILLS] == pytest.approx(0.30 / 0.80)


def test_normalized_ignores_duplicates():
    assert weights.normalized([weights.PRICE, weights.PRICE]) == {weights.PRICE: 1.0}


def test_normalized_rejects_unknown_dimension():
    with pytest.raises(ValueError, match="vibes"):
        weights.normalized([weights.SKILLS, "vibes"])


def test_normalized_empty():
    assert weights.normalized([]) == {}


@pytest.mark.parametrize("value,expected", [
    (92.5, 93),
    (62.5, 63),
    (0.925 * 100, 93),
    (12.5, 13),
    (92.49, 92),
    (0.0, 0),
])
def test_round_half_up(value, expected):
    assert weights.round_half_up(value) == expected
