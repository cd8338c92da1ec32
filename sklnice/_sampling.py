"""Random number context and weighted index sampling.

The clustering estimators never touch the global numpy random state.
Each call to ``fit`` builds a :class:`RandomContext` which is then handed
to the initialisation routines explicitly.
"""

from __future__ import annotations

import time

import numpy as np
from sklearn.utils import check_random_state

from .exceptions import DegenerateInputError

__all__ = ["RandomContext", "select_weighted_index"]


class RandomContext:
    """Source of uniform draws shared by the initialisers of one fit.

    Use :meth:`fixed` for reproducible runs and :meth:`from_time` for runs
    seeded from the wall clock.

    Parameters
    ----------
    random_state : int, RandomState instance or None
        Anything accepted by :func:`sklearn.utils.check_random_state`.

    Examples
    --------
    >>> from sklnice._sampling import RandomContext
    >>> a, b = RandomContext.fixed(0), RandomContext.fixed(0)
    >>> a.draw() == b.draw()
    True
    """

    def __init__(self, random_state=None):
        self.random_state = check_random_state(random_state)

    @classmethod
    def fixed(cls, seed: int = 0) -> "RandomContext":
        """Deterministically seeded context."""
        return cls(int(seed))

    @classmethod
    def from_time(cls) -> "RandomContext":
        """Context seeded from the current wall-clock time."""
        return cls(int(time.time()) % (2**32))

    def draw(self, size=None):
        """Uniform value(s) in ``[0, 1)``."""
        return self.random_state.random_sample(size)

    def randint(self, high: int) -> int:
        """Uniform integer in ``[0, high)``."""
        return int(self.random_state.randint(high))


def select_weighted_index(weights, random_context: RandomContext) -> int:
    """Pick an index with probability proportional to its weight.

    The cumulative sum is built over the weights in their original order,
    and the first index whose cumulative mass exceeds a uniform draw is
    returned.

    Parameters
    ----------
    weights : array-like of shape (n,)
        Non-negative weights, at least one of them positive.
    random_context : RandomContext
        Source of the uniform draw.

    Returns
    -------
    index : int
        Selected position in ``weights``.

    Raises
    ------
    DegenerateInputError
        If ``weights`` is empty, not one-dimensional, contains negative or
        non-finite values, or sums to zero.
    """
    weights = np.asarray(weights, dtype=np.float64)
    if weights.ndim != 1 or weights.size == 0:
        raise DegenerateInputError(
            f"weights must be a non-empty 1-D array, got shape {weights.shape}."
        )
    if not np.all(np.isfinite(weights)) or np.any(weights < 0):
        raise DegenerateInputError("weights must be finite and non-negative.")
    total = weights.sum()
    if total <= 0:
        raise DegenerateInputError(
            "Cannot sample from an all-zero weight vector; every sample "
            "coincides with an already chosen center."
        )

    cumulative = np.cumsum(weights / total)
    r = random_context.draw()
    index = int(np.searchsorted(cumulative, r, side="right"))
    if index >= weights.size:
        # rounding left the cumulative total just under r
        index = int(np.flatnonzero(weights)[-1])
    return index
