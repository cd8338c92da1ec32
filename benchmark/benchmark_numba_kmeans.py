"""Numba acceleration benchmark for KMeans.

Measures wall-clock speed of KMeans with and without ``use_numba`` over
several repeats on a synthetic blob dataset. Both variants start from the
same initial centers so they perform identical Lloyd rounds. If ``numba``
is not installed the script still runs the pure NumPy path and prints an
informational message.

Run:

    python benchmark/benchmark_numba_kmeans.py
"""

import statistics
import time

import numpy as np

from sklnice import KMeans, RandomContext
from sklnice._kmeans import _kmeans_plusplus_init

try:
    from numba import njit  # noqa: F401
    HAVE_NUMBA = True
except Exception:
    HAVE_NUMBA = False


def make_data(n_samples=20000, n_features=16, n_clusters=6, seed=42):
    rng = np.random.RandomState(seed)
    centers_true = rng.uniform(-10, 10, size=(n_clusters, n_features))
    sizes = [n_samples // n_clusters] * n_clusters
    sizes[-1] += n_samples - sum(sizes)
    X = np.vstack([
        rng.normal(loc=centers_true[k], scale=1.5, size=(sz, n_features))
        for k, sz in enumerate(sizes)
    ])
    return X, centers_true


def initial_centers(X, n_clusters, random_state):
    """k-means++ seeds shared by both timing variants."""
    return _kmeans_plusplus_init(X, n_clusters, RandomContext.fixed(random_state))


def time_run(X, init_centers, use_numba, repeats=3):
    durations = []
    n_iter = None
    label_hist = None
    for _ in range(repeats):
        model = KMeans(n_clusters=init_centers.shape[0], init=init_centers,
                       use_numba=use_numba)
        t0 = time.time()
        model.fit(X)
        durations.append(time.time() - t0)
        if n_iter is None:
            n_iter = model.n_iter_
            label_hist = np.bincount(model.labels_, minlength=model.n_clusters)
    return {
        'mean': statistics.mean(durations),
        'std': statistics.pstdev(durations) if len(durations) > 1 else 0.0,
        'n_iter': n_iter,
        'label_hist': label_hist,
        'durations': durations,
    }


def maybe_warmup(X, init_centers):
    if not HAVE_NUMBA:
        return
    print('[Warmup] Running one unmeasured JIT warm-up (numba).')
    KMeans(n_clusters=init_centers.shape[0], init=init_centers, max_iter=2,
           use_numba=True).fit(X[: min(2000, len(X))])


def main():
    X, centers_true = make_data()
    init_centers = initial_centers(X, centers_true.shape[0], random_state=0)

    if HAVE_NUMBA:
        maybe_warmup(X, init_centers)
    else:
        print('[Info] numba not installed; only measuring pure NumPy path.')

    repeats = 5 if HAVE_NUMBA else 3
    res_no = time_run(X, init_centers, use_numba=False, repeats=repeats)
    res_yes = time_run(X, init_centers, use_numba=True, repeats=repeats) if HAVE_NUMBA else None

    print('\n=== KMeans numba Benchmark ===')
    header = f"{'Variant':15s} {'Mean(s)':>10s} {'Std(s)':>9s} {'Iter':>6s} {'Hist':>30s}"
    print(header)
    print('-' * len(header))
    for name, res in [('No numba', res_no), ('With numba', res_yes)]:
        if res is None:
            continue
        print(f"{name:15s} {res['mean']:10.4f} {res['std']:9.4f} {res['n_iter']:6d} "
              f"{str(res['label_hist']):>30s}")

    if res_yes:
        if not np.array_equal(res_no['label_hist'], res_yes['label_hist']):
            print('[Warn] Cluster sizes differ between variants.')
        print(f"\nApprox speedup (No numba / With numba): {res_no['mean'] / res_yes['mean']:.2f}x")

    print('\nDone.')


if __name__ == '__main__':
    main()
