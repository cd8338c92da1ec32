import numpy as np
import pytest

from sklnice import RandomContext, select_weighted_index
from sklnice.exceptions import DegenerateInputError


class _FixedDraw:
    """Stand-in context returning a fixed uniform value."""

    def __init__(self, value):
        self.value = value

    def draw(self, size=None):
        return self.value


def test_single_positive_weight_always_selected():
    weights = [0.0, 0.0, 1.0, 0.0]
    for r in [0.0, 0.25, 0.5, 0.999999]:
        assert select_weighted_index(weights, _FixedDraw(r)) == 2
    context = RandomContext.fixed(0)
    assert {select_weighted_index(weights, context) for _ in range(200)} == {2}


def test_first_index_exceeding_draw():
    weights = np.array([1.0, 1.0])
    assert select_weighted_index(weights, _FixedDraw(0.49)) == 0
    assert select_weighted_index(weights, _FixedDraw(0.5)) == 1


def test_original_order_is_kept():
    weights = np.array([3.0, 1.0])
    assert select_weighted_index(weights, _FixedDraw(0.1)) == 0
    assert select_weighted_index(weights, _FixedDraw(0.8)) == 1


def test_rounding_clamps_to_last_weighted_index():
    weights = np.array([1.0, 2.0, 0.0])
    assert select_weighted_index(weights, _FixedDraw(1.0)) == 1


def test_selection_is_proportional():
    context = RandomContext.fixed(0)
    picks = [select_weighted_index([1.0, 3.0], context) for _ in range(20000)]
    assert np.mean(picks) == pytest.approx(0.75, abs=0.02)


@pytest.mark.parametrize(
    "weights",
    [
        [0.0, 0.0, 0.0],
        [],
        [1.0, -1.0],
        [1.0, np.nan],
        [[1.0, 2.0]],
    ],
)
def test_degenerate_weights(weights):
    with pytest.raises(DegenerateInputError):
        select_weighted_index(weights, RandomContext.fixed(0))


def test_fixed_context_is_reproducible():
    a = RandomContext.fixed(7)
    b = RandomContext.fixed(7)
    np.testing.assert_array_equal(a.draw(5), b.draw(5))
    assert a.randint(10) == b.randint(10)


def test_draws_in_unit_interval():
    values = RandomContext.from_time().draw(1000)
    assert np.all(values >= 0.0)
    assert np.all(values < 1.0)
