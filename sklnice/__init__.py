"""Public API for the :mod:`sklnice` package.

The package exposes a K-Means clustering estimator together with the
dense matrix primitives it builds on:

* :class:`~sklnice.KMeans` – Lloyd's algorithm with random, k-means++ or
    manual initialisation.
* :class:`~sklnice.InitMethod` – names of the initialisation strategies.
* :class:`~sklnice.RandomContext` and :func:`~sklnice.select_weighted_index`
    – explicit random source and proportional index sampling used by
    k-means++.
* :mod:`sklnice.operations` – fail-fast matrix and vector operations.

The estimator follows the scikit-learn estimator API (``fit``, ``predict``,
``transform``) and provides additional diagnostics (``get_points_with_label``,
``closest_cluster``, ``compute_mle_variance``, ...).
"""

from . import operations
from ._kmeans import InitMethod, KMeans
from ._sampling import RandomContext, select_weighted_index

__all__ = [
    "KMeans",
    "InitMethod",
    "RandomContext",
    "select_weighted_index",
    "operations",
]

__version__ = "0.1.0"
