"""K-Means clustering with Lloyd iterations.

This module implements :class:`KMeans`, a hard-assignment clustering
estimator that alternates between assigning every sample to its nearest
center and moving every center to the mean of its members. Iterations
stop once no label changes between two consecutive rounds (or once
``max_iter`` rounds have run).

Three initialisation strategies are available through the ``init``
parameter:

* ``'random'`` : centers drawn uniformly inside the per-feature bounding
  box of the data.
* ``'k-means++'`` : seeding with probability proportional to the squared
  distance to the nearest already chosen center [1]_.
* ndarray : user provided initial centers, used as is.

References
----------

.. [1] D. Arthur and S. Vassilvitskii. *k-means++: The Advantages of
   Careful Seeding*, Proceedings of the Eighteenth Annual ACM-SIAM
   Symposium on Discrete Algorithms, 2007.

Notes
-----
An empty cluster keeps its previous center, so it can win samples back in
later rounds. Distances are always Euclidean.
"""

from __future__ import annotations

import warnings
from enum import Enum
from numbers import Integral

import numpy as np
from sklearn.base import BaseEstimator, ClusterMixin, TransformerMixin, _fit_context
from sklearn.exceptions import ConvergenceWarning
from sklearn.utils.extmath import row_norms
from sklearn.utils._param_validation import Interval, StrOptions
from sklearn.utils.validation import check_is_fitted, validate_data

from ._sampling import RandomContext, select_weighted_index
from .exceptions import ConfigurationError, SizeMismatchError

# Optional numba acceleration (soft dependency)
try:  # pragma: no cover - optional path
    from numba import njit, prange, set_num_threads  # type: ignore

    _NUMBA_AVAILABLE = True
except Exception:  # pragma: no cover - optional path
    _NUMBA_AVAILABLE = False


class InitMethod(str, Enum):
    """Names of the center initialisation strategies.

    ``MANUAL`` corresponds to passing an array of centers as ``init``.
    """

    RANDOM = "random"
    KMEANSPP = "k-means++"
    MANUAL = "manual"


###############################################################################
# Initialisation


def _random_init(X, n_clusters, random_context):
    """Draw centers uniformly inside the bounding box of ``X``."""
    mins = X.min(axis=0)
    span = X.max(axis=0) - mins
    centers = np.empty((n_clusters, X.shape[1]), dtype=X.dtype)
    for k in range(n_clusters):
        centers[k] = mins + random_context.draw(X.shape[1]) * span
    return centers


def _kmeans_plusplus_init(X, n_clusters, random_context):
    """k-means++ seeding.

    The first center is a sample chosen uniformly at random. Every further
    center is a sample drawn with probability proportional to its squared
    distance to the nearest center chosen so far.

    Parameters
    ----------
    X : ndarray of shape (n_samples, n_features)
        Data to pick seeds from.
    n_clusters : int
        Number of centers to produce.
    random_context : RandomContext
        Source of randomness.

    Returns
    -------
    centers : ndarray of shape (n_clusters, n_features)

    Raises
    ------
    DegenerateInputError
        If every sample coincides with an already chosen center before all
        ``n_clusters`` centers are placed.
    """
    n_samples, n_features = X.shape
    centers = np.empty((n_clusters, n_features), dtype=X.dtype)
    centers[0] = X[random_context.randint(n_samples)]
    closest_D2 = row_norms(X - centers[0], squared=True)
    for c in range(1, n_clusters):
        centers[c] = X[select_weighted_index(closest_D2, random_context)]
        np.minimum(
            closest_D2, row_norms(X - centers[c], squared=True), out=closest_D2
        )
    return centers


###############################################################################
# Lloyd steps


def _pairwise_distance(X, centers, squared=False):
    """Distances from every row of ``X`` to every center.

    Differences are formed explicitly, so a sample equal to a center is at
    distance exactly zero and mirrored differences give identical values.
    """
    D = np.empty((X.shape[0], centers.shape[0]), dtype=np.float64)
    for k, center in enumerate(centers):
        D[:, k] = row_norms(X - center, squared=squared)
    return D


def _assign_labels(X, centers):
    # argmin keeps the lowest center index on ties
    return np.argmin(_pairwise_distance(X, centers), axis=1)


if _NUMBA_AVAILABLE:  # pragma: no cover - exercised only when numba present

    @njit(parallel=True)
    def _assign_labels_numba(X, centers):  # type: ignore
        n_samples, n_features = X.shape
        n_clusters = centers.shape[0]
        labels = np.empty(n_samples, dtype=np.int64)
        for i in prange(n_samples):
            best = np.inf
            pos = 0
            for k in range(n_clusters):
                d = 0.0
                for j in range(n_features):
                    diff = X[i, j] - centers[k, j]
                    d += diff * diff
                d = np.sqrt(d)
                if d < best:
                    best = d
                    pos = k
            labels[i] = pos
        return labels


def _update_centers(X, labels, centers):
    """Move each center to the mean of its members.

    ``centers`` is read only; the result is written to a new array so
    that clusters without members keep their previous center.
    """
    new_centers = centers.copy()
    for k in range(centers.shape[0]):
        mask = labels == k
        if np.any(mask):
            new_centers[k] = X[mask].mean(axis=0)
    return new_centers


def _count_changed_labels(labels, old_labels):
    return int(np.count_nonzero(labels != old_labels))


def _closest_index(points, query):
    # first index wins on ties
    return int(np.argmin(row_norms(points - query)))


###############################################################################
# Estimator


class KMeans(TransformerMixin, ClusterMixin, BaseEstimator):
    """K-Means clustering (Lloyd's algorithm).

    Parameters
    ----------
    n_clusters : int, default=8
        The number of clusters to form as well as the number of centroids
        to generate. Must not exceed the number of samples.
    init : {'k-means++', 'random'} or ndarray of shape (n_clusters, n_features), default='k-means++'
        Method for initialization.
        * 'k-means++' : seed centers with probability proportional to the
          squared distance to the nearest already chosen center.
        * 'random' : draw each center uniformly inside the per-feature
          bounding box of the data.
        * ndarray : user provided initial centers.
    max_iter : int or None, default=300
        Maximum number of assign/update rounds. ``None`` iterates until the
        labels stop changing, which may not terminate when a sample keeps
        flipping between two exactly equidistant centers.
    random : bool, default=False
        If ``True`` the random generator is seeded from the wall clock and
        runs are not repeatable. If ``False`` it is seeded from
        ``random_state``.
    random_state : int, RandomState instance or None, default=0
        Seed used when ``random=False``.
    use_numba : bool, default=False
        If ``True`` and :mod:`numba` is installed (see ``[speed]`` extra),
        assign labels with a JIT-compiled kernel parallel over samples.
    numba_threads : int or None, default=None
        If provided sets the number of threads used by numba parallel
        sections. Ignored if numba is unavailable or ``use_numba`` is
        ``False``.
    verbose : int, default=0
        Verbosity level. ``1`` prints the iteration count when fitting
        finishes, ``2`` additionally prints the number of changed labels
        after every round.

    Attributes
    ----------
    cluster_centers_ : ndarray of shape (n_clusters, n_features)
        Final cluster centers.
    labels_ : ndarray of shape (n_samples,)
        Cluster index of every training sample.
    n_iter_ : int
        Number of assign/update rounds run.
    converged_ : bool
        Whether the labels stopped changing before ``max_iter`` was hit.
    n_features_in_ : int
        Number of features seen during :meth:`fit`.

    Examples
    --------
    >>> from sklnice import KMeans
    >>> import numpy as np
    >>> X = np.array([[0, 0], [0, 1], [10, 0], [10, 1]])
    >>> km = KMeans(n_clusters=2, init=np.array([[0., 0.], [10., 0.]])).fit(X)
    >>> km.labels_
    array([0, 0, 1, 1])
    >>> km.cluster_centers_
    array([[ 0. ,  0.5],
           [10. ,  0.5]])
    >>> km.n_iter_
    2
    """

    _parameter_constraints = {
        "n_clusters": [Interval(Integral, 1, None, closed="left")],
        "init": [StrOptions({"k-means++", "random"}), np.ndarray],
        "max_iter": [Interval(Integral, 1, None, closed="left"), None],
        "random": ["boolean"],
        "random_state": ["random_state"],
        "use_numba": ["boolean"],
        "numba_threads": [None, Interval(Integral, 1, None, closed="left")],
        "verbose": ["verbose"],
    }

    def __init__(
        self,
        n_clusters=8,
        *,
        init="k-means++",
        max_iter=300,
        random=False,
        random_state=0,
        use_numba=False,
        numba_threads=None,
        verbose=0,
    ):
        self.n_clusters = n_clusters
        self.init = init
        self.max_iter = max_iter
        self.random = random
        self.random_state = random_state
        self.use_numba = use_numba
        self.numba_threads = numba_threads
        self.verbose = verbose

    # ------------------------------------------------------------------
    def set_random(self, random):
        """Choose between wall-clock seeding and fixed seeding.

        Must be called before :meth:`fit` to take effect.
        """
        return self.set_params(random=bool(random))

    def set_init_method(self, init):
        """Select the initialisation strategy.

        Parameters
        ----------
        init : InitMethod, str or ndarray of shape (n_clusters, n_features)
            Strategy name, or the initial centers themselves for manual
            initialisation.

        Returns
        -------
        self : object

        Raises
        ------
        ConfigurationError
            If ``init`` names no known strategy, or is ``MANUAL`` without
            the centers.
        """
        if isinstance(init, np.ndarray):
            return self.set_params(init=init)
        try:
            method = InitMethod(init)
        except ValueError as exc:
            raise ConfigurationError(
                f"An invalid initialization method has been specified: {init!r}"
            ) from exc
        if method is InitMethod.MANUAL:
            raise ConfigurationError(
                "Manual initialisation needs the initial centers; pass an "
                "array of shape (n_clusters, n_features) instead."
            )
        return self.set_params(init=method.value)

    # ------------------------------------------------------------------
    def _make_random_context(self):
        if self.random:
            return RandomContext.from_time()
        return RandomContext(self.random_state)

    def _init_centers(self, X, random_context):
        """Initialise cluster centers according to the chosen strategy.

        Parameters
        ----------
        X : ndarray of shape (n_samples, n_features)
            Data matrix.
        random_context : RandomContext
            Random generator for this fit.

        Returns
        -------
        centers : ndarray of shape (n_clusters, n_features)
            Initial cluster centers.
        """
        if isinstance(self.init, np.ndarray):
            centers = np.array(self.init, dtype=X.dtype)
            if centers.shape != (self.n_clusters, X.shape[1]):
                raise ConfigurationError(
                    "init array should have shape (n_clusters, n_features) = "
                    f"{(self.n_clusters, X.shape[1])}, got {centers.shape}."
                )
            return centers
        if self.init == InitMethod.KMEANSPP.value:
            return _kmeans_plusplus_init(X, self.n_clusters, random_context)
        if self.init == InitMethod.RANDOM.value:
            return _random_init(X, self.n_clusters, random_context)
        raise ConfigurationError(  # pragma: no cover - guarded by param validation
            f"An invalid initialization method has been specified: {self.init!r}"
        )

    def _assign(self, X, centers):
        if self.use_numba and _NUMBA_AVAILABLE:
            if self.numba_threads is not None:
                set_num_threads(int(self.numba_threads))  # type: ignore
            return _assign_labels_numba(X, centers)  # type: ignore
        return _assign_labels(X, centers)

    def _validate_training_data(self, X):
        X = validate_data(
            self,
            X,
            accept_sparse=False,
            reset=False,
            dtype=[np.float64, np.float32],
            order="C",
        )
        if X.shape[0] != self.labels_.shape[0]:
            raise SizeMismatchError(
                f"X has {X.shape[0]} samples, but the model was fitted on "
                f"{self.labels_.shape[0]} samples."
            )
        return X

    def _validate_point(self, point):
        point = np.asarray(point, dtype=float).ravel()
        if point.shape[0] != self.n_features_in_:
            raise SizeMismatchError(
                f"point has {point.shape[0]} features, but {self.__class__.__name__} "
                f"is expecting {self.n_features_in_} features."
            )
        return point

    # ------------------------------------------------------------------
    @_fit_context(prefer_skip_nested_validation=True)
    def fit(self, X, y=None):
        """Compute k-means clustering.

        Parameters
        ----------
        X : array-like of shape (n_samples, n_features)
            Training instances.
        y : Ignored
            Present for API consistency.

        Returns
        -------
        self : object
            Fitted estimator.

        Raises
        ------
        ConfigurationError
            If ``n_clusters`` exceeds the number of samples or the manual
            initial centers have the wrong shape.
        """
        X = validate_data(
            self,
            X,
            accept_sparse=False,
            reset=True,
            dtype=[np.float64, np.float32],
            order="C",
            accept_large_sparse=False,
        )
        n_samples = X.shape[0]
        K = self.n_clusters
        if n_samples < K:
            raise ConfigurationError(
                f"n_samples={n_samples} should be >= n_clusters={K}."
            )
        verbose = self.verbose

        centers = self._init_centers(X, self._make_random_context())
        if verbose:
            print("Initialization complete")

        # all-zero start forces at least one full round
        old_labels = np.zeros(n_samples, dtype=np.int64)
        n_iter = 0
        converged = False
        while True:
            labels = self._assign(X, centers)
            centers = _update_centers(X, labels, centers)
            n_changed = _count_changed_labels(labels, old_labels)
            old_labels = labels
            n_iter += 1
            if verbose > 1:
                print(f"Iteration {n_iter}, {n_changed} labels changed.")
            if n_changed == 0:
                converged = True
                break
            if self.max_iter is not None and n_iter >= self.max_iter:
                break

        if verbose:
            print(f"KMeans finished in {n_iter} iterations.")
        if not converged:
            # labels must match the centers returned to the caller
            labels = self._assign(X, centers)
            warnings.warn(
                f"KMeans did not converge: labels still changing after "
                f"max_iter={self.max_iter} iterations.",
                ConvergenceWarning,
                stacklevel=2,
            )

        distinct_clusters = len(set(labels))
        if distinct_clusters < K:
            warnings.warn(
                "Number of distinct clusters ({}) found smaller than "
                "n_clusters ({}). Possibly due to duplicate points "
                "in X.".format(distinct_clusters, K),
                ConvergenceWarning,
                stacklevel=2,
            )

        self.cluster_centers_ = centers
        self.labels_ = labels.astype(np.int64, copy=False)
        self.n_iter_ = n_iter
        self.converged_ = converged
        return self

    def predict(self, X):
        """Predict the closest cluster index for each sample in ``X``.

        Parameters
        ----------
        X : array-like of shape (n_samples, n_features)
            New samples.

        Returns
        -------
        labels : ndarray of shape (n_samples,)
            Index of the closest learned cluster center for each sample.
        """
        check_is_fitted(self, "cluster_centers_")
        X = validate_data(
            self,
            X,
            accept_sparse=False,
            reset=False,
            dtype=[np.float64, np.float32],
            order="C",
            accept_large_sparse=False,
        )
        return self._assign(X, self.cluster_centers_).astype(np.int64, copy=False)

    def transform(self, X):
        """Compute Euclidean distances of samples to each cluster center.

        Parameters
        ----------
        X : array-like of shape (n_samples, n_features)
            Samples to transform.

        Returns
        -------
        distances : ndarray of shape (n_samples, n_clusters)
        """
        check_is_fitted(self, "cluster_centers_")
        X = validate_data(
            self,
            X,
            accept_sparse=False,
            reset=False,
            dtype=[np.float64, np.float32],
            order="C",
            accept_large_sparse=False,
        )
        return _pairwise_distance(X, self.cluster_centers_)

    def fit_predict(self, X, y=None):
        """Fit the model to ``X`` and return cluster indices."""
        return self.fit(X, y).labels_

    # ------------------------------------------------------------------
    # Diagnostics

    def get_labels(self):
        """Return a copy of the training labels."""
        check_is_fitted(self, "labels_")
        return self.labels_.copy()

    def get_indices_with_label(self, label):
        """Indices of the training samples assigned to ``label``, ascending."""
        check_is_fitted(self, "labels_")
        return np.flatnonzero(self.labels_ == label)

    def get_points_with_label(self, X, label):
        """Rows of the training data ``X`` assigned to ``label``.

        Parameters
        ----------
        X : array-like of shape (n_samples, n_features)
            The data the model was fitted on.
        label : int
            Cluster index.

        Returns
        -------
        points : ndarray of shape (n_members, n_features)
            Members in ascending sample order; empty when the cluster has
            no members.
        """
        check_is_fitted(self, "labels_")
        X = self._validate_training_data(X)
        return X[self.get_indices_with_label(label)]

    def closest_cluster(self, point, n_clusters=None):
        """Index of the center nearest to ``point``.

        Only the first ``n_clusters`` centers are searched (all of them by
        default). The lowest index wins on ties.
        """
        check_is_fitted(self, "cluster_centers_")
        point = self._validate_point(point)
        if n_clusters is None:
            n_clusters = self.cluster_centers_.shape[0]
        if not 1 <= n_clusters <= self.cluster_centers_.shape[0]:
            raise ValueError(
                f"n_clusters must be in [1, {self.cluster_centers_.shape[0]}], "
                f"got {n_clusters}."
            )
        return _closest_index(self.cluster_centers_[:n_clusters], point)

    def closest_point_index(self, X, point):
        """Index of the row of ``X`` nearest to ``point``."""
        check_is_fitted(self, "cluster_centers_")
        X = validate_data(self, X, reset=False, dtype=[np.float64, np.float32])
        return _closest_index(X, self._validate_point(point))

    def closest_point_distance(self, X, point, exclude=()):
        """Distance from ``point`` to the nearest row of ``X``.

        Rows whose index appears in ``exclude`` are skipped; ids outside
        ``[0, n_samples)`` match no row and are ignored. Returns ``inf``
        when every row is excluded.
        """
        check_is_fitted(self, "cluster_centers_")
        X = validate_data(self, X, reset=False, dtype=[np.float64, np.float32])
        point = self._validate_point(point)
        keep = np.ones(X.shape[0], dtype=bool)
        excluded = np.asarray(list(exclude), dtype=np.intp)
        excluded = excluded[(excluded >= 0) & (excluded < X.shape[0])]
        keep[excluded] = False
        if not np.any(keep):
            return np.inf
        return float(np.min(row_norms(X[keep] - point)))

    def compute_mle_variance(self, X):
        """Sum over clusters of the mean member-to-center distance.

        Distances are not squared. Clusters without members contribute
        zero.

        Parameters
        ----------
        X : array-like of shape (n_samples, n_features)
            The data the model was fitted on.

        Returns
        -------
        variance : float
        """
        check_is_fitted(self, "labels_")
        X = self._validate_training_data(X)
        overall = 0.0
        for k, center in enumerate(self.cluster_centers_):
            members = X[self.labels_ == k]
            if members.shape[0] == 0:
                continue
            overall += float(np.mean(row_norms(members - center)))
        return overall
